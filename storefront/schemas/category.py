# storefront/schemas/category.py
import uuid

from pydantic import ConfigDict, field_validator

from storefront.schemas.base import CamelModel


class CategoryCreate(CamelModel):
    """
    Payload for creating a category.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    icon: str
    slug: str

    @field_validator("name", "icon", "slug")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class CategoryRead(CamelModel):
    id: uuid.UUID
    name: str
    icon: str
    slug: str
