# storefront/storage/memory.py
import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from storefront.models.cart import CartItem
from storefront.models.catalog import Category, Product, Subscription
from storefront.models.customer import Customer
from storefront.schemas.cart import CartOwner, CustomerOwner
from storefront.schemas.category import CategoryCreate
from storefront.schemas.customer import CustomerCreate
from storefront.schemas.product import ProductCreate
from storefront.schemas.subscription import SubscriptionCreate
from storefront.storage.base import DuplicateError, Storage, StorageBackend


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _owned_by(item: CartItem, owner: CartOwner) -> bool:
    if isinstance(owner, CustomerOwner):
        return item.customer_id == owner.customer_id
    return item.session_id == owner.session_id


def _newest_first(products) -> list[Product]:
    return sorted(products, key=lambda p: p.created_at, reverse=True)


class MemoryStorage(Storage):
    """
    In-memory Storage for local development and tests.

    Each instance owns its own tables; build one per app (or per test)
    and pass it down instead of sharing module-level state.
    """

    def __init__(self):
        self.categories: dict[uuid.UUID, Category] = {}
        self.products: dict[uuid.UUID, Product] = {}
        self.subscriptions: dict[uuid.UUID, Subscription] = {}
        self.customers: dict[uuid.UUID, Customer] = {}
        self.cart_items: dict[uuid.UUID, CartItem] = {}
        self._lock = threading.RLock()

    # ----- Categories -----

    def list_categories(self) -> list[Category]:
        with self._lock:
            return sorted(self.categories.values(), key=lambda c: c.name)

    def get_category(self, category_id: uuid.UUID) -> Category | None:
        with self._lock:
            return self.categories.get(category_id)

    def get_category_by_slug(self, slug: str) -> Category | None:
        with self._lock:
            return next((c for c in self.categories.values() if c.slug == slug), None)

    def create_category(self, payload: CategoryCreate) -> Category:
        with self._lock:
            if self.get_category_by_slug(payload.slug) is not None:
                raise DuplicateError(f"Category slug '{payload.slug}' already exists")
            category = Category(**payload.model_dump())
            self.categories[category.id] = category
            return category

    # ----- Products -----

    def list_products(self) -> list[Product]:
        with self._lock:
            return _newest_first(self.products.values())

    def list_products_by_category(self, category_id: uuid.UUID) -> list[Product]:
        with self._lock:
            return _newest_first(p for p in self.products.values() if p.category_id == category_id)

    def list_featured_products(self) -> list[Product]:
        with self._lock:
            return _newest_first(p for p in self.products.values() if p.featured)

    def search_products(self, term: str) -> list[Product]:
        with self._lock:
            needle = term.lower()
            return _newest_first(
                p
                for p in self.products.values()
                if needle in p.name.lower() or needle in p.description.lower()
            )

    def get_product(self, product_id: uuid.UUID) -> Product | None:
        with self._lock:
            return self.products.get(product_id)

    def create_product(self, payload: ProductCreate) -> Product:
        with self._lock:
            product = Product(**payload.model_dump())
            self.products[product.id] = product
            return product

    def update_product(self, product_id: uuid.UUID, changes: dict) -> Product | None:
        with self._lock:
            product = self.products.get(product_id)
            if product is None:
                return None
            for key, value in changes.items():
                setattr(product, key, value)
            return product

    def delete_product(self, product_id: uuid.UUID) -> bool:
        with self._lock:
            return self.products.pop(product_id, None) is not None

    # ----- Subscriptions -----

    def list_subscriptions(self, active_only: bool = False) -> list[Subscription]:
        with self._lock:
            plans = list(self.subscriptions.values())
            if active_only:
                plans = [s for s in plans if s.active]
            return plans

    def create_subscription(self, payload: SubscriptionCreate) -> Subscription:
        with self._lock:
            plan = Subscription(**payload.model_dump())
            self.subscriptions[plan.id] = plan
            return plan

    # ----- Customers -----

    def get_customer(self, customer_id: uuid.UUID) -> Customer | None:
        with self._lock:
            return self.customers.get(customer_id)

    def get_customer_by_email(self, email: str) -> Customer | None:
        with self._lock:
            return next((c for c in self.customers.values() if c.email == email), None)

    def create_customer(self, payload: CustomerCreate) -> Customer:
        with self._lock:
            if self.get_customer_by_email(payload.email) is not None:
                raise DuplicateError(f"Customer '{payload.email}' already exists")
            customer = Customer(**payload.model_dump())
            self.customers[customer.id] = customer
            return customer

    # ----- Cart -----

    def list_cart_items(self, owner: CartOwner) -> list[CartItem]:
        with self._lock:
            items = [it for it in self.cart_items.values() if _owned_by(it, owner)]
            return sorted(items, key=lambda it: it.created_at)

    def add_to_cart(
        self,
        owner: CartOwner,
        product_id: uuid.UUID,
        quantity: int,
    ) -> CartItem:
        with self._lock:
            existing = next(
                (
                    it
                    for it in self.cart_items.values()
                    if _owned_by(it, owner) and it.product_id == product_id
                ),
                None,
            )
            if existing is not None:
                existing.quantity += quantity
                existing.updated_at = _utcnow()
                return existing

            if isinstance(owner, CustomerOwner):
                item = CartItem(customer_id=owner.customer_id, product_id=product_id, quantity=quantity)
            else:
                item = CartItem(session_id=owner.session_id, product_id=product_id, quantity=quantity)
            self.cart_items[item.id] = item
            return item

    def update_cart_item(self, item_id: uuid.UUID, quantity: int) -> CartItem | None:
        if quantity < 1:
            raise ValueError("quantity must be >= 1")
        with self._lock:
            item = self.cart_items.get(item_id)
            if item is None:
                return None
            item.quantity = quantity
            item.updated_at = _utcnow()
            return item

    def remove_cart_item(self, item_id: uuid.UUID) -> bool:
        with self._lock:
            return self.cart_items.pop(item_id, None) is not None

    def clear_cart(self, owner: CartOwner) -> int:
        with self._lock:
            doomed = [item_id for item_id, it in self.cart_items.items() if _owned_by(it, owner)]
            for item_id in doomed:
                del self.cart_items[item_id]
            return len(doomed)


class MemoryBackend(StorageBackend):
    """
    Hands the same MemoryStorage to every request.
    """

    def __init__(self, storage: MemoryStorage | None = None):
        self.storage = storage or MemoryStorage()

    @contextmanager
    def open(self) -> Iterator[MemoryStorage]:
        yield self.storage
