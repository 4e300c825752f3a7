# storefront/models/cart.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class CartItem(SQLModel, table=True):
    """
    Shopping cart line.

    A row is owned either by a guest session (session_id) or by a
    customer (customer_id); only the effective owner key is stored.
    One owner cannot have 2 rows for the same product: adding the
    same product again merges the quantity.
    """

    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("session_id", "product_id", name="uq_cart_session_product"),
        UniqueConstraint("customer_id", "product_id", name="uq_cart_customer_product"),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    session_id: str | None = Field(default=None, index=True)

    customer_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="customers.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        ondelete="CASCADE",
        index=True,
    )

    quantity: int = Field(
        ge=1,
        description="Must be >= 1",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
