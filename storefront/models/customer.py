# storefront/models/customer.py
"""
Customer-side tables.

Only Customer is used by the API today (customer-owned carts); orders,
reviews and customer subscriptions are declared so the schema is
complete for the checkout work that builds on it.
"""
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlmodel import SQLModel, Field


class Customer(SQLModel, table=True):
    __tablename__ = "customers"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    email: str = Field(unique=True, index=True)
    name: str
    phone: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class Order(SQLModel, table=True):
    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    customer_id: uuid.UUID = Field(foreign_key="customers.id", index=True)

    # pending | paid | shipped | delivered | canceled
    status: str = Field(default="pending", index=True)
    payment_status: str = Field(default="pending")
    payment_id: str | None = None

    total_amount: Decimal = Field(max_digits=10, decimal_places=2, ge=0)
    shipping_address: str

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class OrderItem(SQLModel, table=True):
    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(foreign_key="orders.id", index=True)
    product_id: uuid.UUID = Field(foreign_key="products.id", index=True)

    quantity: int = Field(ge=1)
    unit_price: Decimal = Field(max_digits=10, decimal_places=2, ge=0)


class ProductReview(SQLModel, table=True):
    __tablename__ = "product_reviews"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(foreign_key="products.id", index=True)
    customer_id: uuid.UUID = Field(foreign_key="customers.id", index=True)

    rating: int = Field(ge=1, le=5)
    comment: str | None = None
    approved: bool = Field(default=False)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class CustomerSubscription(SQLModel, table=True):
    __tablename__ = "customer_subscriptions"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    customer_id: uuid.UUID = Field(foreign_key="customers.id", index=True)
    subscription_id: uuid.UUID = Field(foreign_key="subscriptions.id", index=True)

    # active | canceled | expired
    status: str = Field(default="active")
    # monthly | yearly
    billing_cycle: str = Field(default="monthly")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
