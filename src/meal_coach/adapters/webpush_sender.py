"""Web Push transport using pywebpush and VAPID."""

import asyncio
from dataclasses import dataclass

from pywebpush import WebPushException, webpush

from meal_coach.domain.errors import TransportError
from meal_coach.domain.subscriptions import Subscription
from meal_coach.services.notifications import PushSender

_GONE_STATUSES = {404, 410}


@dataclass
class WebPushSender(PushSender):
    """Delivers payloads through the browser vendors' push services."""

    vapid_private_key: str
    vapid_subject: str
    timeout_seconds: float = 10.0

    async def send(self, subscription: Subscription, payload: str) -> None:
        """Send a payload, raising TransportError on failure."""
        await asyncio.to_thread(self._send_blocking, subscription, payload)

    def _send_blocking(self, subscription: Subscription, payload: str) -> None:
        try:
            webpush(
                subscription_info=subscription.info,
                data=payload,
                vapid_private_key=self.vapid_private_key,
                vapid_claims={"sub": self.vapid_subject},
                timeout=self.timeout_seconds,
            )
        except WebPushException as exc:
            status_code = _status_code(exc)
            raise TransportError(
                str(exc),
                gone=status_code in _GONE_STATUSES,
                status_code=status_code,
            ) from exc
        except Exception as exc:
            raise TransportError(str(exc)) from exc


def _status_code(exc: WebPushException) -> int | None:
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    return status_code if isinstance(status_code, int) else None
