"""Push subscription registry."""

from dataclasses import dataclass

from meal_coach.domain.errors import ValidationError
from meal_coach.domain.subscriptions import Subscription, subscription_id
from meal_coach.services.storage import DocumentStore


@dataclass
class SubscriptionService:
    """Registers and removes browser push subscriptions."""

    store: DocumentStore

    def subscribe(self, info: dict[str, object] | None) -> Subscription:
        """Insert or refresh a subscription keyed by its endpoint."""
        subscription = Subscription.from_info(_require_endpoint(info))
        self.store.save_subscription(subscription)
        return subscription

    def unsubscribe(self, info: dict[str, object] | None) -> None:
        """Remove the subscription for an endpoint."""
        endpoint = str(_require_endpoint(info)["endpoint"])
        self.store.delete_subscription(subscription_id(endpoint))

    def count(self) -> int:
        return len(self.store.list_subscriptions())


def _require_endpoint(info: dict[str, object] | None) -> dict[str, object]:
    if not isinstance(info, dict):
        raise ValidationError("invalid_subscription")
    endpoint = info.get("endpoint")
    if not isinstance(endpoint, str) or not endpoint.strip():
        raise ValidationError("invalid_subscription")
    return info
