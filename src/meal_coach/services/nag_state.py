"""Debounce state for reminders, keyed by date and slot."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from meal_coach.services.storage import DocumentStore, nag_state_key


class NagStateStore(Protocol):
    """Last-sent timestamps per (date, slot)."""

    def last_sent(self, date: str, slot_id: str) -> datetime | None:
        """Return when a reminder was last sent, if ever."""

    def mark_sent(self, date: str, slot_id: str, at: datetime) -> None:
        """Record a reminder send."""


@dataclass
class InMemoryNagStateStore(NagStateStore):
    """Process-local state; lost on restart."""

    _sent: dict[tuple[str, str], datetime] = field(default_factory=dict)

    def last_sent(self, date: str, slot_id: str) -> datetime | None:
        return self._sent.get((date, slot_id))

    def mark_sent(self, date: str, slot_id: str, at: datetime) -> None:
        self._sent[(date, slot_id)] = at


@dataclass
class DocumentNagStateStore(NagStateStore):
    """State persisted as one document per key in the document store."""

    store: DocumentStore

    def last_sent(self, date: str, slot_id: str) -> datetime | None:
        document = self.store.get(nag_state_key(date, slot_id))
        if not document or not document.get("last_sent"):
            return None
        return datetime.fromisoformat(str(document["last_sent"]))

    def mark_sent(self, date: str, slot_id: str, at: datetime) -> None:
        self.store.set(nag_state_key(date, slot_id), {"last_sent": at.isoformat()})
