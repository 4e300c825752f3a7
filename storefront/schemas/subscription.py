# storefront/schemas/subscription.py
import uuid
from decimal import Decimal

from pydantic import ConfigDict, Field, field_validator

from storefront.schemas.base import CamelModel


class SubscriptionCreate(CamelModel):
    """
    Payload for creating a subscription plan.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    description: str
    monthly_price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    yearly_price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    features: list[str] = Field(default_factory=list)
    active: bool = True

    @field_validator("features")
    @classmethod
    def drop_blank_features(cls, v: list[str]) -> list[str]:
        return [f.strip() for f in v if f.strip()]


class SubscriptionRead(CamelModel):
    id: uuid.UUID
    name: str
    description: str
    monthly_price: Decimal
    yearly_price: Decimal
    features: list[str]
    active: bool
