# storefront/storage/base.py
import uuid
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from storefront.models.cart import CartItem
from storefront.models.catalog import Category, Product, Subscription
from storefront.models.customer import Customer
from storefront.schemas.cart import CartOwner
from storefront.schemas.category import CategoryCreate
from storefront.schemas.customer import CustomerCreate
from storefront.schemas.product import ProductCreate
from storefront.schemas.subscription import SubscriptionCreate


class DuplicateError(Exception):
    """A unique field (category slug, customer email) is already taken."""


class Storage(ABC):
    """
    Data access contract shared by every backend.

    - Pure data operations (CRUD + queries), no FastAPI, no HTTP errors.
    - Reads return None when nothing matches, deletes return whether
      a row was actually removed.
    """

    # ----- Categories -----

    @abstractmethod
    def list_categories(self) -> list[Category]: ...

    @abstractmethod
    def get_category(self, category_id: uuid.UUID) -> Category | None: ...

    @abstractmethod
    def get_category_by_slug(self, slug: str) -> Category | None: ...

    @abstractmethod
    def create_category(self, payload: CategoryCreate) -> Category:
        """Raises DuplicateError when the slug is taken."""

    # ----- Products -----

    @abstractmethod
    def list_products(self) -> list[Product]:
        """All products, newest first."""

    @abstractmethod
    def list_products_by_category(self, category_id: uuid.UUID) -> list[Product]: ...

    @abstractmethod
    def list_featured_products(self) -> list[Product]: ...

    @abstractmethod
    def search_products(self, term: str) -> list[Product]:
        """Case-insensitive substring match over name and description."""

    @abstractmethod
    def get_product(self, product_id: uuid.UUID) -> Product | None: ...

    @abstractmethod
    def create_product(self, payload: ProductCreate) -> Product: ...

    @abstractmethod
    def update_product(self, product_id: uuid.UUID, changes: dict) -> Product | None: ...

    @abstractmethod
    def delete_product(self, product_id: uuid.UUID) -> bool: ...

    # ----- Subscriptions -----

    @abstractmethod
    def list_subscriptions(self, active_only: bool = False) -> list[Subscription]: ...

    @abstractmethod
    def create_subscription(self, payload: SubscriptionCreate) -> Subscription: ...

    # ----- Customers -----

    @abstractmethod
    def get_customer(self, customer_id: uuid.UUID) -> Customer | None: ...

    @abstractmethod
    def get_customer_by_email(self, email: str) -> Customer | None: ...

    @abstractmethod
    def create_customer(self, payload: CustomerCreate) -> Customer:
        """Raises DuplicateError when the email is taken."""

    # ----- Cart -----

    @abstractmethod
    def list_cart_items(self, owner: CartOwner) -> list[CartItem]: ...

    @abstractmethod
    def add_to_cart(
        self,
        owner: CartOwner,
        product_id: uuid.UUID,
        quantity: int,
    ) -> CartItem:
        """
        Insert a cart line, or merge into the owner's existing line for
        the same product (quantities are summed). Never leaves two rows
        for one (owner, product).
        """

    @abstractmethod
    def update_cart_item(self, item_id: uuid.UUID, quantity: int) -> CartItem | None:
        """Raises ValueError when quantity < 1."""

    @abstractmethod
    def remove_cart_item(self, item_id: uuid.UUID) -> bool: ...

    @abstractmethod
    def clear_cart(self, owner: CartOwner) -> int:
        """Delete every line of the owner's cart, returns the number removed."""


class StorageBackend(ABC):
    """
    Owns the resources behind a Storage (engine, in-memory tables) and
    hands out one Storage per request.
    """

    def startup(self) -> None:
        """Prepare the store (create tables, ...). Called once at app start."""

    def shutdown(self) -> None:
        """Release resources. Called once at app stop."""

    @abstractmethod
    def open(self) -> AbstractContextManager[Storage]: ...
