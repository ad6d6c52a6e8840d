"""Domain models for push subscriptions."""

import hashlib
from dataclasses import dataclass


def subscription_id(endpoint: str) -> str:
    """Return the stable identifier for a push endpoint."""
    return hashlib.sha256(endpoint.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class Subscription:
    """A browser push subscription keyed by its endpoint."""

    id: str
    endpoint: str
    info: dict[str, object]

    @classmethod
    def from_info(cls, info: dict[str, object]) -> "Subscription":
        endpoint = str(info["endpoint"])
        return cls(id=subscription_id(endpoint), endpoint=endpoint, info=dict(info))
