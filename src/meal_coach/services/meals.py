"""Meal logging service."""

from collections.abc import Mapping
from dataclasses import dataclass

from meal_coach.domain.nutrition import NutritionSummary
from meal_coach.domain.vision import MealAnalysis
from meal_coach.services.daily_log import ConsumptionUpdate, DailyLogService
from meal_coach.services.vision import VisionService


@dataclass(frozen=True)
class AnalyzedMeal:
    """Analysis result together with the updated day totals."""

    analysis: MealAnalysis
    update: ConsumptionUpdate


@dataclass
class MealLogService:
    """Merges manual or analyzed meals into the daily log."""

    daily_logs: DailyLogService
    vision_service: VisionService

    async def log_meal(
        self,
        summary: Mapping[str, object] | None,
        items: list[object] | None = None,
        date: str | None = None,
    ) -> ConsumptionUpdate:
        """Record a serving delta as supplied; negative values are kept."""
        delta = NutritionSummary.from_mapping(summary)
        return await self.daily_logs.record_consumption(
            date or self.daily_logs.today(), delta, items or []
        )

    async def analyze_and_log(
        self, image_bytes: bytes, mime_type: str | None = None
    ) -> AnalyzedMeal:
        """Analyze a meal photo and record it for today.

        The log is only touched after the analysis parsed successfully.
        """
        analysis = await self.vision_service.analyze(image_bytes, mime_type)
        update = await self.daily_logs.record_consumption(
            self.daily_logs.today(),
            analysis.summary.to_summary(),
            [item.model_dump(mode="json") for item in analysis.items],
        )
        return AnalyzedMeal(analysis=analysis, update=update)
