"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from meal_coach.adapters.json_file_store import JsonFileDocumentStore
from meal_coach.adapters.openai_vision_client import OpenAIVisionClient
from meal_coach.adapters.supabase_store import SupabaseDocumentStore
from meal_coach.adapters.webpush_sender import WebPushSender
from meal_coach.config import Settings
from meal_coach.services.daily_log import DailyLogService
from meal_coach.services.meals import MealLogService
from meal_coach.services.nag_state import (
    DocumentNagStateStore,
    InMemoryNagStateStore,
    NagStateStore,
)
from meal_coach.services.notifications import NotificationService
from meal_coach.services.preferences import PreferencesService
from meal_coach.services.reminders import NagEngine
from meal_coach.services.scheduler import ReminderScheduler
from meal_coach.services.storage import DocumentStore
from meal_coach.services.subscriptions import SubscriptionService
from meal_coach.services.vision import VisionService
from meal_coach.time_utils import system_clock


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: DocumentStore
    preferences: PreferencesService
    daily_log_service: DailyLogService
    subscription_service: SubscriptionService
    notification_service: NotificationService
    nag_engine: NagEngine
    reminder_scheduler: ReminderScheduler
    meal_log_service: MealLogService
    close_resources: Callable[[], Awaitable[None]]


def build_store(settings: Settings) -> DocumentStore:
    """Create the configured storage backend."""
    if settings.storage_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase storage requires SUPABASE_URL and key")
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseDocumentStore(client)
    return JsonFileDocumentStore.create(settings.data_dir)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    clock = system_clock(resolved_settings.timezone)
    store = build_store(resolved_settings)
    preferences = PreferencesService(store)
    daily_log_service = DailyLogService(
        store=store, preferences=preferences, clock=clock
    )
    sender = None
    if resolved_settings.push_configured and resolved_settings.vapid_private_key:
        sender = WebPushSender(
            vapid_private_key=resolved_settings.vapid_private_key,
            vapid_subject=resolved_settings.vapid_subject,
            timeout_seconds=resolved_settings.push_timeout_seconds,
        )
    notification_service = NotificationService(
        store=store,
        sender=sender,
        timeout_seconds=resolved_settings.push_timeout_seconds,
    )
    nag_state: NagStateStore = (
        DocumentNagStateStore(store)
        if resolved_settings.persist_nag_state
        else InMemoryNagStateStore()
    )
    nag_engine = NagEngine(
        preferences=preferences,
        daily_logs=daily_log_service,
        notifications=notification_service,
        nag_state=nag_state,
        clock=clock,
    )
    vision_client = (
        OpenAIVisionClient.create(resolved_settings.openai_api_key)
        if resolved_settings.openai_api_key
        else None
    )
    vision_service = VisionService(
        client=vision_client, model=resolved_settings.openai_model
    )
    meal_log_service = MealLogService(
        daily_logs=daily_log_service, vision_service=vision_service
    )
    reminder_scheduler = ReminderScheduler(
        engine=nag_engine, interval_seconds=resolved_settings.nag_interval_seconds
    )

    async def close_resources() -> None:
        reminder_scheduler.shutdown()
        if vision_client is not None:
            await vision_client.close()

    return AppContainer(
        settings=resolved_settings,
        store=store,
        preferences=preferences,
        daily_log_service=daily_log_service,
        subscription_service=SubscriptionService(store),
        notification_service=notification_service,
        nag_engine=nag_engine,
        reminder_scheduler=reminder_scheduler,
        meal_log_service=meal_log_service,
        close_resources=close_resources,
    )
