# storefront/services/cart_service.py
import logging
import uuid

from fastapi import HTTPException, status

from storefront.models.cart import CartItem
from storefront.schemas.cart import (
    CartItemCreate,
    CartItemWithProduct,
    CartOwner,
    CustomerOwner,
)
from storefront.schemas.product import ProductRead
from storefront.storage.base import Storage

logger = logging.getLogger(__name__)


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - resolve the cart owner (customer id wins over session id)
      - validate product / customer existence before writing
      - merge repeated adds of one product into a single line
      - enrich cart lines with their product
    """

    # ---- internal helpers ----

    @staticmethod
    def _not_found(detail: str) -> HTTPException:
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

    # ---- public operations ----

    def get_cart(self, storage: Storage, owner: CartOwner) -> list[CartItemWithProduct]:
        """
        Cart lines for the owner, each with its full product.

        A line whose product was deleted comes back with product=None.
        """
        items = storage.list_cart_items(owner)
        products: dict[uuid.UUID, ProductRead | None] = {}

        enriched: list[CartItemWithProduct] = []
        for it in items:
            if it.product_id not in products:
                product = storage.get_product(it.product_id)
                products[it.product_id] = ProductRead.model_validate(product) if product else None

            line = CartItemWithProduct.model_validate(it)
            line.product = products[it.product_id]
            enriched.append(line)

        return enriched

    def add_to_cart(self, storage: Storage, payload: CartItemCreate) -> CartItem:
        """
        Add a product to the owner's cart.

        Rules:
          - product must exist
          - a customer-owned cart needs an existing customer
          - adding a product already in the cart sums the quantities
        """
        owner = payload.owner

        if storage.get_product(payload.product_id) is None:
            raise self._not_found("Product not found")

        if isinstance(owner, CustomerOwner) and storage.get_customer(owner.customer_id) is None:
            raise self._not_found("Customer not found")

        item = storage.add_to_cart(owner, payload.product_id, payload.quantity)
        logger.info(
            "Cart line %s now holds %d x product %s",
            item.id,
            item.quantity,
            item.product_id,
        )
        return item

    def update_quantity(self, storage: Storage, item_id: uuid.UUID, quantity: int) -> CartItem:
        """
        Set a line's quantity. CartItemUpdate already enforces >= 1.
        """
        item = storage.update_cart_item(item_id, quantity)
        if not item:
            raise self._not_found("Cart item not found")
        return item

    def remove_item(self, storage: Storage, item_id: uuid.UUID) -> None:
        if not storage.remove_cart_item(item_id):
            raise self._not_found("Cart item not found")

    def clear_cart(self, storage: Storage, owner: CartOwner) -> int:
        removed = storage.clear_cart(owner)
        logger.info("Cleared %d cart lines for %s", removed, owner)
        return removed
