"""Tests for container wiring."""

import asyncio

import pytest

from meal_coach.adapters.json_file_store import JsonFileDocumentStore
from meal_coach.adapters.webpush_sender import WebPushSender
from meal_coach.config import Settings
from meal_coach.containers import build_container, build_store
from meal_coach.services.nag_state import DocumentNagStateStore, InMemoryNagStateStore


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings)

    assert isinstance(container.store, JsonFileDocumentStore)
    assert isinstance(container.notification_service.sender, WebPushSender)
    assert isinstance(container.nag_engine.nag_state, DocumentNagStateStore)
    assert container.meal_log_service.vision_service.client is not None
    asyncio.run(container.close_resources())


def test_build_container_without_credentials(tmp_path) -> None:
    settings = Settings(
        data_dir=str(tmp_path),
        openai_api_key="",
        vapid_public_key="",
        vapid_private_key="",
        persist_nag_state=False,
    )

    container = build_container(settings)

    assert not container.notification_service.is_configured
    assert container.meal_log_service.vision_service.client is None
    assert isinstance(container.nag_engine.nag_state, InMemoryNagStateStore)
    asyncio.run(container.close_resources())


def test_supabase_backend_requires_credentials(tmp_path) -> None:
    settings = Settings(
        storage_backend="supabase",
        data_dir=str(tmp_path),
        supabase_url="",
        supabase_service_key="",
    )

    with pytest.raises(ValueError):
        build_store(settings)
