"""Supabase-backed document store."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from meal_coach.domain.subscriptions import Subscription
from meal_coach.services.storage import DocumentStore


@dataclass
class SupabaseDocumentStore(DocumentStore):
    """Supabase implementation using a documents table and a subscriptions table.

    Expected schema::

        documents(key text primary key, value jsonb, updated_at timestamptz)
        push_subscriptions(id text primary key, endpoint text,
                           subscription jsonb, updated_at timestamptz)
    """

    client: Client

    def get(self, key: str) -> dict[str, object] | None:
        """Return the stored document for key."""
        response = (
            self.client.table("documents")
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        value = response.data[0].get("value")
        return value if isinstance(value, dict) else None

    def set(self, key: str, value: dict[str, object]) -> None:
        """Upsert the document for key."""
        self.client.table("documents").upsert(
            {
                "key": key,
                "value": value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).execute()

    def list_subscriptions(self) -> list[Subscription]:
        """Return all push subscriptions."""
        response = (
            self.client.table("push_subscriptions")
            .select("id, endpoint, subscription")
            .execute()
        )
        return [
            Subscription(
                id=row["id"],
                endpoint=row["endpoint"],
                info=row.get("subscription") or {"endpoint": row["endpoint"]},
            )
            for row in response.data or []
        ]

    def save_subscription(self, subscription: Subscription) -> None:
        """Upsert a subscription by id."""
        self.client.table("push_subscriptions").upsert(
            {
                "id": subscription.id,
                "endpoint": subscription.endpoint,
                "subscription": subscription.info,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).execute()

    def delete_subscription(self, subscription_id: str) -> None:
        """Delete a subscription by id."""
        self.client.table("push_subscriptions").delete().eq(
            "id", subscription_id
        ).execute()
