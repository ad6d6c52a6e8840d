"""Push notification fan-out."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

from meal_coach.domain.errors import ConfigurationMissing, TransportError
from meal_coach.domain.reminders import ReminderPayload
from meal_coach.domain.subscriptions import Subscription
from meal_coach.services.storage import DocumentStore

_logger = logging.getLogger(__name__)


class PushSender(Protocol):
    """Transport delivering one payload to one subscription."""

    async def send(self, subscription: Subscription, payload: str) -> None:
        """Deliver a payload or raise TransportError."""


@dataclass(frozen=True)
class DispatchResult:
    """Delivery outcome across all subscriptions."""

    sent: int = 0
    failed: int = 0
    removed: int = 0


@dataclass
class NotificationService:
    """Best-effort delivery to every registered subscription."""

    store: DocumentStore
    sender: PushSender | None
    timeout_seconds: float = 10.0

    @property
    def is_configured(self) -> bool:
        return self.sender is not None

    async def dispatch(self, payload: ReminderPayload) -> DispatchResult:
        """Send a payload to all subscriptions, pruning gone endpoints."""
        sender = self.sender
        if sender is None:
            raise ConfigurationMissing("push_not_configured")
        subscriptions = self.store.list_subscriptions()
        if not subscriptions:
            return DispatchResult()

        body = payload.to_json()
        outcomes = await asyncio.gather(
            *(self._deliver(sender, sub, body) for sub in subscriptions),
            return_exceptions=True,
        )
        sent = failed = removed = 0
        for subscription, outcome in zip(subscriptions, outcomes, strict=True):
            if outcome is None:
                sent += 1
            elif isinstance(outcome, TransportError) and outcome.gone:
                self.store.delete_subscription(subscription.id)
                removed += 1
                _logger.info(
                    "Removed expired push subscription %s (status=%s)",
                    subscription.id[:12],
                    outcome.status_code,
                )
            else:
                failed += 1
                _logger.warning(
                    "Push delivery failed for %s: %s",
                    subscription.id[:12],
                    outcome,
                )
        return DispatchResult(sent=sent, failed=failed, removed=removed)

    async def _deliver(
        self, sender: PushSender, subscription: Subscription, body: str
    ) -> None:
        try:
            await asyncio.wait_for(
                sender.send(subscription, body), timeout=self.timeout_seconds
            )
        except TimeoutError as exc:
            raise TransportError("Push delivery timed out") from exc
