# storefront/schemas/cart.py
import uuid
from dataclasses import dataclass
from datetime import datetime

from pydantic import ConfigDict, Field, model_validator

from storefront.schemas.base import CamelModel
from storefront.schemas.product import ProductRead


# ---- Cart owner ----


@dataclass(frozen=True)
class SessionOwner:
    """Guest cart, keyed by the client-generated session id."""

    session_id: str


@dataclass(frozen=True)
class CustomerOwner:
    """Registered customer cart."""

    customer_id: uuid.UUID


CartOwner = SessionOwner | CustomerOwner


def resolve_owner(
    session_id: str | None,
    customer_id: uuid.UUID | None,
) -> CartOwner | None:
    """
    Pick the effective owner key.

    customer_id wins when both are given; blank session ids count as missing.
    """
    if customer_id is not None:
        return CustomerOwner(customer_id)
    if session_id and session_id.strip():
        return SessionOwner(session_id.strip())
    return None


class CartOwnerPayload(CamelModel):
    """
    Owner keys sent in a request body (clear cart).
    """

    session_id: str | None = None
    customer_id: uuid.UUID | None = None

    @property
    def owner(self) -> CartOwner | None:
        return resolve_owner(self.session_id, self.customer_id)


# ---- Payloads ----


class CartItemCreate(CartOwnerPayload):
    """
    Payload for adding to cart.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    quantity: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def require_owner(self) -> "CartItemCreate":
        if self.owner is None:
            raise ValueError("sessionId or customerId is required")
        return self


class CartItemUpdate(CamelModel):
    """
    Payload for updating quantity of a cart item.
    """

    quantity: int = Field(ge=1)


# ---- Read models ----


class CartItemRead(CamelModel):
    id: uuid.UUID
    session_id: str | None = None
    customer_id: uuid.UUID | None = None
    product_id: uuid.UUID
    quantity: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CartItemWithProduct(CartItemRead):
    """
    Cart line enriched with the product it references.
    product is null when the product has since been deleted.
    """

    product: ProductRead | None = None
