# storefront/schemas/product.py
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict, Field, field_validator

from storefront.schemas.base import CamelModel

PrintType = Literal["resin", "filament"]

# Fields an update may explicitly reset to null
NULLABLE_PRODUCT_FIELDS = frozenset({"category_id", "image_url", "stl_file_url"})

_CENTS = Decimal("0.01")


def _blank_to_none(v):
    # Multipart forms send empty strings for untouched optional inputs
    if isinstance(v, str) and not v.strip():
        return None
    return v


class ProductCreate(CamelModel):
    """
    Payload for creating a product (JSON body or multipart form fields).
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=255)
    description: str
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    category_id: uuid.UUID | None = None
    image_url: str | None = None
    stl_file_url: str | None = None
    print_type: PrintType
    featured: bool = False

    @field_validator("name", "description")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("category_id", "image_url", "stl_file_url", mode="before")
    @classmethod
    def blank_is_missing(cls, v):
        return _blank_to_none(v)

    @field_validator("price")
    @classmethod
    def two_decimals(cls, v: Decimal) -> Decimal:
        return v.quantize(_CENTS)


class ProductUpdate(CamelModel):
    """
    Partial update payload for products.
    All fields are optional; id and createdAt are not updatable.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    category_id: uuid.UUID | None = None
    image_url: str | None = None
    stl_file_url: str | None = None
    print_type: PrintType | None = None
    featured: bool | None = None

    @field_validator("name", "description")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("price")
    @classmethod
    def two_decimals(cls, v: Decimal | None) -> Decimal | None:
        if v is None:
            return v
        return v.quantize(_CENTS)

    def changes(self) -> dict:
        """
        Fields the client actually sent, minus nulls for required columns.
        """
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in NULLABLE_PRODUCT_FIELDS
        }


class ProductRead(CamelModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    description: str
    price: Decimal
    category_id: uuid.UUID | None = None
    image_url: str | None = None
    stl_file_url: str | None = None
    print_type: str
    featured: bool = False
    created_at: datetime | None = None
