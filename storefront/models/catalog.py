# storefront/models/catalog.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class Category(SQLModel, table=True):
    """
    Catalog category shown in the storefront sidebar.
    """

    __tablename__ = "categories"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str
    icon: str = Field(description="Icon class rendered next to the name")

    slug: str = Field(
        unique=True,
        index=True,
        description="URL-friendly identifier (unique)",
    )


class Product(SQLModel, table=True):
    """
    A printable figure offered in the catalog.

    print_type is "resin" or "filament" (enforced by the API schemas).
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(index=True)
    description: str

    price: Decimal = Field(
        max_digits=10,
        decimal_places=2,
        ge=0,
    )

    category_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="categories.id",
        index=True,
    )

    image_url: str | None = None
    stl_file_url: str | None = Field(
        default=None,
        description="Path or public URL of the uploaded STL model",
    )

    print_type: str
    featured: bool = Field(default=False, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class Subscription(SQLModel, table=True):
    """
    Premium subscription plan.
    """

    __tablename__ = "subscriptions"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str
    description: str
    monthly_price: Decimal = Field(max_digits=10, decimal_places=2, ge=0)
    yearly_price: Decimal = Field(max_digits=10, decimal_places=2, ge=0)

    # Ordered list of feature bullet points
    features: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    active: bool = Field(default=True, index=True)
