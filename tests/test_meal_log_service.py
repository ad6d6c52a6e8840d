"""Tests for meal logging."""

import asyncio

import pytest

from meal_coach.domain.errors import AnalysisError
from meal_coach.services.daily_log import DailyLogService
from meal_coach.services.meals import MealLogService
from meal_coach.services.vision import VisionService
from tests.conftest import FakeVisionClient, InMemoryDocumentStore


def _service(
    daily_logs: DailyLogService, client: FakeVisionClient
) -> MealLogService:
    return MealLogService(
        daily_logs=daily_logs,
        vision_service=VisionService(client=client, model="gpt-4o-mini"),
    )


def test_log_meal_accumulates_and_reports_remaining(
    daily_logs: DailyLogService, vision_client: FakeVisionClient
) -> None:
    service = _service(daily_logs, vision_client)

    asyncio.run(service.log_meal({"protein_servings": 1, "water_ml": 500}))
    update = asyncio.run(
        service.log_meal({"protein_servings": 1.5, "unknown": 9}, items=["eggs"])
    )

    assert update.consumed.protein_servings == 2.5
    assert update.consumed.water_ml == 500
    assert update.remaining["protein_servings"] == 0.5
    assert update.remaining["water_ml"] == 1500


def test_log_meal_keeps_negative_corrections(
    daily_logs: DailyLogService, vision_client: FakeVisionClient
) -> None:
    service = _service(daily_logs, vision_client)

    asyncio.run(service.log_meal({"carb_servings": 1}))
    update = asyncio.run(service.log_meal({"carb_servings": -2}))

    assert update.consumed.carb_servings == -1
    assert update.remaining["carb_servings"] == 3


def test_log_meal_targets_explicit_date(
    daily_logs: DailyLogService,
    vision_client: FakeVisionClient,
    store: InMemoryDocumentStore,
) -> None:
    service = _service(daily_logs, vision_client)

    asyncio.run(service.log_meal({"veg_servings": 1}, date="2024-05-01"))

    assert "logs:2024-05-01" in store.documents
    assert "logs:2024-05-06" not in store.documents


def test_analyze_and_log_records_estimate(
    daily_logs: DailyLogService,
    vision_client: FakeVisionClient,
    store: InMemoryDocumentStore,
) -> None:
    service = _service(daily_logs, vision_client)

    analyzed = asyncio.run(service.analyze_and_log(b"\xff\xd8\xffimage"))

    assert analyzed.update.consumed.protein_servings == 1.5
    assert analyzed.update.consumed.veg_servings == 1
    entries = store.documents["logs:2024-05-06"]["entries"]
    assert len(entries) == 1  # type: ignore[arg-type]
    assert entries[0]["items"][0]["name"] == "grilled chicken"  # type: ignore[index]


def test_failed_analysis_leaves_log_untouched(
    daily_logs: DailyLogService, store: InMemoryDocumentStore
) -> None:
    service = _service(daily_logs, FakeVisionClient(payload={"summary": "nope"}))

    with pytest.raises(AnalysisError):
        asyncio.run(service.analyze_and_log(b"bytes"))

    assert store.writes == []
