"""Document storage contract shared by the file and Supabase backends."""

from typing import Protocol

from meal_coach.domain.subscriptions import Subscription

SETTINGS_KEY = "settings"
TARGETS_KEY = "targets"


def log_key(date: str) -> str:
    return f"logs:{date}"


def nag_state_key(date: str, slot_id: str) -> str:
    return f"nag_state:{date}:{slot_id}"


class DocumentStore(Protocol):
    """Key-value document persistence plus the subscription set."""

    def get(self, key: str) -> dict[str, object] | None:
        """Return the document stored under key, if any."""

    def set(self, key: str, value: dict[str, object]) -> None:
        """Replace the document stored under key."""

    def list_subscriptions(self) -> list[Subscription]:
        """Return all registered push subscriptions."""

    def save_subscription(self, subscription: Subscription) -> None:
        """Insert or replace a subscription by id."""

    def delete_subscription(self, subscription_id: str) -> None:
        """Remove a subscription; unknown ids are ignored."""
