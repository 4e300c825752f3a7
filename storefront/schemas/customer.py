# storefront/schemas/customer.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, EmailStr, field_validator

from storefront.schemas.base import CamelModel


class CustomerCreate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    name: str
    phone: str | None = None

    @field_validator("name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class CustomerRead(CamelModel):
    id: uuid.UUID
    email: str
    name: str
    phone: str | None = None
    created_at: datetime | None = None
