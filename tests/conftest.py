"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from meal_coach.config import Settings
from meal_coach.containers import AppContainer
from meal_coach.domain.errors import TransportError
from meal_coach.domain.subscriptions import Subscription
from meal_coach.services.daily_log import DailyLogService
from meal_coach.services.meals import MealLogService
from meal_coach.services.nag_state import InMemoryNagStateStore
from meal_coach.services.notifications import NotificationService, PushSender
from meal_coach.services.preferences import PreferencesService
from meal_coach.services.reminders import NagEngine
from meal_coach.services.scheduler import ReminderScheduler
from meal_coach.services.storage import DocumentStore
from meal_coach.services.subscriptions import SubscriptionService
from meal_coach.services.vision import VisionClient, VisionService

BERLIN = ZoneInfo("Europe/Berlin")


@dataclass
class InMemoryDocumentStore(DocumentStore):
    """In-memory document store for tests."""

    documents: dict[str, dict[str, object]] = field(default_factory=dict)
    subscriptions: dict[str, Subscription] = field(default_factory=dict)
    writes: list[str] = field(default_factory=list)

    def get(self, key: str) -> dict[str, object] | None:
        return self.documents.get(key)

    def set(self, key: str, value: dict[str, object]) -> None:
        self.writes.append(key)
        self.documents[key] = value

    def list_subscriptions(self) -> list[Subscription]:
        return list(self.subscriptions.values())

    def save_subscription(self, subscription: Subscription) -> None:
        self.subscriptions[subscription.id] = subscription

    def delete_subscription(self, subscription_id: str) -> None:
        self.subscriptions.pop(subscription_id, None)


@dataclass
class FakePushSender(PushSender):
    """Records deliveries; endpoints can be set up to fail."""

    deliveries: list[tuple[str, str]] = field(default_factory=list)
    failures: dict[str, TransportError] = field(default_factory=dict)

    async def send(self, subscription: Subscription, payload: str) -> None:
        failure = self.failures.get(subscription.endpoint)
        if failure is not None:
            raise failure
        self.deliveries.append((subscription.endpoint, payload))


@dataclass
class FakeVisionClient(VisionClient):
    """Fake vision client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "items": [
                {
                    "name": "grilled chicken",
                    "category": "protein",
                    "estimated_amount": "150 g",
                    "servings": 1.5,
                },
                {
                    "name": "salad",
                    "category": "veg",
                    "estimated_amount": "1 bowl",
                    "servings": 1,
                },
            ],
            "summary": {
                "protein_servings": 1.5,
                "veg_servings": 1,
                "carb_servings": 0,
                "snack_servings": 0,
                "water_ml": 0,
            },
            "note": "Looks balanced.",
        }
    )
    calls: list[dict[str, object]] = field(default_factory=list)

    async def extract(
        self,
        *,
        model: str,
        image_data_url: str,
        schema_name: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.calls.append(
            {"model": model, "image_data_url": image_data_url, "schema": schema_name}
        )
        return self.payload


@dataclass
class FixedClock:
    """Clock that only moves when told to."""

    now: datetime

    def __call__(self) -> datetime:
        return self.now

    def set(self, hour: int, minute: int) -> None:
        self.now = self.now.replace(hour=hour, minute=minute, second=0)

    def advance(self, minutes: int) -> None:
        self.now = self.now + timedelta(minutes=minutes)


def add_subscription(store: InMemoryDocumentStore, endpoint: str) -> Subscription:
    subscription = Subscription.from_info(
        {"endpoint": endpoint, "keys": {"p256dh": "key", "auth": "secret"}}
    )
    store.save_subscription(subscription)
    return subscription


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        data_dir=str(tmp_path),
        openai_api_key="openai-key",
        vapid_public_key="vapid-public",
        vapid_private_key="vapid-private",
        timezone="Europe/Berlin",
        scheduler_enabled=False,
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 5, 6, 13, 5, tzinfo=BERLIN))


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def push_sender() -> FakePushSender:
    return FakePushSender()


@pytest.fixture
def vision_client() -> FakeVisionClient:
    return FakeVisionClient()


@pytest.fixture
def preferences(store: InMemoryDocumentStore) -> PreferencesService:
    return PreferencesService(store)


@pytest.fixture
def daily_logs(
    store: InMemoryDocumentStore, preferences: PreferencesService, clock: FixedClock
) -> DailyLogService:
    return DailyLogService(store=store, preferences=preferences, clock=clock)


@pytest.fixture
def notifications(
    store: InMemoryDocumentStore, push_sender: FakePushSender
) -> NotificationService:
    return NotificationService(store=store, sender=push_sender)


@pytest.fixture
def nag_engine(
    preferences: PreferencesService,
    daily_logs: DailyLogService,
    notifications: NotificationService,
    clock: FixedClock,
) -> NagEngine:
    return NagEngine(
        preferences=preferences,
        daily_logs=daily_logs,
        notifications=notifications,
        nag_state=InMemoryNagStateStore(),
        clock=clock,
    )


@pytest.fixture
def container(
    settings: Settings,
    store: InMemoryDocumentStore,
    preferences: PreferencesService,
    daily_logs: DailyLogService,
    notifications: NotificationService,
    nag_engine: NagEngine,
    vision_client: FakeVisionClient,
) -> AppContainer:
    vision_service = VisionService(client=vision_client, model=settings.openai_model)
    meal_log_service = MealLogService(
        daily_logs=daily_logs, vision_service=vision_service
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        store=store,
        preferences=preferences,
        daily_log_service=daily_logs,
        subscription_service=SubscriptionService(store),
        notification_service=notifications,
        nag_engine=nag_engine,
        reminder_scheduler=ReminderScheduler(engine=nag_engine),
        meal_log_service=meal_log_service,
        close_resources=close_resources,
    )
