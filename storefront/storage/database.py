# storefront/storage/database.py
import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import delete, or_, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from storefront.database import create_db_and_tables
from storefront.models.cart import CartItem
from storefront.models.catalog import Category, Product, Subscription
from storefront.models.customer import Customer
from storefront.schemas.cart import CartOwner, CustomerOwner
from storefront.schemas.category import CategoryCreate
from storefront.schemas.customer import CustomerCreate
from storefront.schemas.product import ProductCreate
from storefront.schemas.subscription import SubscriptionCreate
from storefront.storage.base import DuplicateError, Storage, StorageBackend

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _owner_clause(owner: CartOwner):
    if isinstance(owner, CustomerOwner):
        return CartItem.customer_id == owner.customer_id
    return CartItem.session_id == owner.session_id


def _owner_columns(owner: CartOwner) -> dict:
    if isinstance(owner, CustomerOwner):
        return {"customer_id": owner.customer_id, "session_id": None}
    return {"session_id": owner.session_id, "customer_id": None}


class DatabaseStorage(Storage):
    """
    Relational Storage on top of one SQLModel session.

    One instance lives for one request; every mutation commits.
    """

    def __init__(self, session: Session):
        self.session = session

    def _save(self, row):
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    # ----- Categories -----

    def list_categories(self) -> list[Category]:
        stmt = select(Category).order_by(Category.name)
        return list(self.session.exec(stmt).all())

    def get_category(self, category_id: uuid.UUID) -> Category | None:
        return self.session.get(Category, category_id)

    def get_category_by_slug(self, slug: str) -> Category | None:
        stmt = select(Category).where(Category.slug == slug)
        return self.session.exec(stmt).first()

    def create_category(self, payload: CategoryCreate) -> Category:
        category = Category(**payload.model_dump())
        try:
            return self._save(category)
        except IntegrityError:
            self.session.rollback()
            raise DuplicateError(f"Category slug '{payload.slug}' already exists")

    # ----- Products -----

    def _products(self, *criteria) -> list[Product]:
        stmt = select(Product).where(*criteria).order_by(col(Product.created_at).desc())
        return list(self.session.exec(stmt).all())

    def list_products(self) -> list[Product]:
        return self._products()

    def list_products_by_category(self, category_id: uuid.UUID) -> list[Product]:
        return self._products(Product.category_id == category_id)

    def list_featured_products(self) -> list[Product]:
        return self._products(Product.featured == True)  # noqa: E712

    def search_products(self, term: str) -> list[Product]:
        return self._products(
            or_(
                col(Product.name).icontains(term, autoescape=True),
                col(Product.description).icontains(term, autoescape=True),
            )
        )

    def get_product(self, product_id: uuid.UUID) -> Product | None:
        return self.session.get(Product, product_id)

    def create_product(self, payload: ProductCreate) -> Product:
        return self._save(Product(**payload.model_dump()))

    def update_product(self, product_id: uuid.UUID, changes: dict) -> Product | None:
        product = self.get_product(product_id)
        if product is None:
            return None
        for key, value in changes.items():
            setattr(product, key, value)
        return self._save(product)

    def delete_product(self, product_id: uuid.UUID) -> bool:
        product = self.get_product(product_id)
        if product is None:
            return False
        self.session.delete(product)
        self.session.commit()
        return True

    # ----- Subscriptions -----

    def list_subscriptions(self, active_only: bool = False) -> list[Subscription]:
        stmt = select(Subscription)
        if active_only:
            stmt = stmt.where(Subscription.active == True)  # noqa: E712
        return list(self.session.exec(stmt).all())

    def create_subscription(self, payload: SubscriptionCreate) -> Subscription:
        return self._save(Subscription(**payload.model_dump()))

    # ----- Customers -----

    def get_customer(self, customer_id: uuid.UUID) -> Customer | None:
        return self.session.get(Customer, customer_id)

    def get_customer_by_email(self, email: str) -> Customer | None:
        stmt = select(Customer).where(Customer.email == email)
        return self.session.exec(stmt).first()

    def create_customer(self, payload: CustomerCreate) -> Customer:
        customer = Customer(**payload.model_dump())
        try:
            return self._save(customer)
        except IntegrityError:
            self.session.rollback()
            raise DuplicateError(f"Customer '{payload.email}' already exists")

    # ----- Cart -----

    def _find_line(self, owner: CartOwner, product_id: uuid.UUID) -> CartItem | None:
        stmt = select(CartItem).where(_owner_clause(owner), CartItem.product_id == product_id)
        return self.session.exec(stmt).first()

    def list_cart_items(self, owner: CartOwner) -> list[CartItem]:
        stmt = select(CartItem).where(_owner_clause(owner)).order_by(col(CartItem.created_at))
        return list(self.session.exec(stmt).all())

    def add_to_cart(
        self,
        owner: CartOwner,
        product_id: uuid.UUID,
        quantity: int,
    ) -> CartItem:
        existing = self._find_line(owner, product_id)

        if existing is None:
            item = CartItem(product_id=product_id, quantity=quantity, **_owner_columns(owner))
            self.session.add(item)
            try:
                self.session.commit()
            except IntegrityError:
                # A concurrent request inserted the same (owner, product)
                # first; the unique constraint rejected ours, merge instead.
                self.session.rollback()
                existing = self._find_line(owner, product_id)
                if existing is None:
                    raise
                logger.info("Cart insert lost a race for product %s, merging", product_id)
            else:
                self.session.refresh(item)
                return item

        # Increment in SQL so concurrent merges do not lose updates
        self.session.execute(
            update(CartItem)
            .where(CartItem.id == existing.id)
            .values(quantity=CartItem.quantity + quantity, updated_at=_utcnow())
        )
        self.session.commit()
        self.session.refresh(existing)
        return existing

    def update_cart_item(self, item_id: uuid.UUID, quantity: int) -> CartItem | None:
        if quantity < 1:
            raise ValueError("quantity must be >= 1")
        item = self.session.get(CartItem, item_id)
        if item is None:
            return None
        item.quantity = quantity
        item.updated_at = _utcnow()
        return self._save(item)

    def remove_cart_item(self, item_id: uuid.UUID) -> bool:
        item = self.session.get(CartItem, item_id)
        if item is None:
            return False
        self.session.delete(item)
        self.session.commit()
        return True

    def clear_cart(self, owner: CartOwner) -> int:
        result = self.session.execute(delete(CartItem).where(_owner_clause(owner)))
        self.session.commit()
        return result.rowcount or 0


class DatabaseBackend(StorageBackend):
    """
    Engine-backed backend: one Session (and DatabaseStorage) per request.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def startup(self) -> None:
        create_db_and_tables(self.engine)

    def shutdown(self) -> None:
        self.engine.dispose()

    @contextmanager
    def open(self) -> Iterator[DatabaseStorage]:
        with Session(self.engine) as session:
            yield DatabaseStorage(session)
