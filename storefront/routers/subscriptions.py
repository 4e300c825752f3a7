# storefront/routers/subscriptions.py
from fastapi import APIRouter, Depends, Query, status

from storefront.dependencies import get_storage
from storefront.schemas.subscription import SubscriptionCreate, SubscriptionRead
from storefront.services.subscription_service import SubscriptionService
from storefront.storage.base import Storage

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])

service = SubscriptionService()


@router.get("", response_model=list[SubscriptionRead])
def list_subscriptions(
    storage: Storage = Depends(get_storage),
    include_inactive: bool = Query(default=False, alias="includeInactive"),
):
    """
    List subscription plans.

    - Only active plans by default (premium page).
    - `includeInactive=true` returns every plan (admin).
    """
    return service.list_plans(storage, include_inactive=include_inactive)


@router.post(
    "",
    response_model=SubscriptionRead,
    status_code=status.HTTP_201_CREATED,
)
def create_subscription(
    payload: SubscriptionCreate,
    storage: Storage = Depends(get_storage),
):
    return service.create_plan(storage, payload)
