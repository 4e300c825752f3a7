# storefront/services/subscription_service.py
from storefront.models.catalog import Subscription
from storefront.schemas.subscription import SubscriptionCreate
from storefront.storage.base import Storage


class SubscriptionService:
    def list_plans(self, storage: Storage, include_inactive: bool = False) -> list[Subscription]:
        """
        Plans offered on the premium page; inactive ones only on request.
        """
        return storage.list_subscriptions(active_only=not include_inactive)

    def create_plan(self, storage: Storage, payload: SubscriptionCreate) -> Subscription:
        return storage.create_subscription(payload)
