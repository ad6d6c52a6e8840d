"""Meal photo analysis using vision LLMs."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

import pydantic

from meal_coach.domain.errors import AnalysisError, ConfigurationMissing
from meal_coach.domain.nutrition import SUMMARY_FIELDS
from meal_coach.domain.vision import FoodCategory, MealAnalysis

_logger = logging.getLogger(__name__)

MEAL_ANALYSIS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "category": {
                        "type": "string",
                        "enum": [category.value for category in FoodCategory],
                    },
                    "estimated_amount": {"type": "string"},
                    "servings": {"type": "number"},
                },
                "required": ["name", "category", "estimated_amount", "servings"],
                "additionalProperties": False,
            },
        },
        "summary": {
            "type": "object",
            "properties": {name: {"type": "number"} for name in SUMMARY_FIELDS},
            "required": list(SUMMARY_FIELDS),
            "additionalProperties": False,
        },
        "note": {"type": "string"},
    },
    "required": ["items", "summary", "note"],
    "additionalProperties": False,
}

ANALYSIS_PROMPT = (
    "You are a nutrition assistant. Estimate food categories and portions. "
    "Return JSON exactly matching the schema. Use servings of 0.5, 1, 1.5 or 2. "
    "When unsure, estimate conservatively. Keep the note short."
)


class VisionClient(Protocol):
    """Interface for LLM vision extraction."""

    async def extract(
        self,
        *,
        model: str,
        image_data_url: str,
        schema_name: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured vision extraction data."""


@dataclass
class VisionService:
    """Service that prepares vision prompts and validates results."""

    client: VisionClient | None
    model: str

    async def analyze(
        self, image_bytes: bytes, mime_type: str | None = None
    ) -> MealAnalysis:
        """Estimate servings for the meal shown in an image."""
        if self.client is None:
            raise ConfigurationMissing("vision_not_configured")
        data_url = _to_data_url(image_bytes, mime_type)
        try:
            raw = await self.client.extract(
                model=self.model,
                image_data_url=data_url,
                schema_name="meal_analysis",
                schema=MEAL_ANALYSIS_SCHEMA,
                prompt=ANALYSIS_PROMPT,
            )
            return MealAnalysis.model_validate(raw)
        except pydantic.ValidationError as exc:
            _logger.warning("Vision result failed validation: %s", exc)
            raise AnalysisError(message="Malformed analysis result") from exc
        except Exception as exc:
            _logger.exception("Vision analysis failed")
            raise AnalysisError(message=str(exc)) from exc


def _to_data_url(image_bytes: bytes, mime_type: str | None = None) -> str:
    """Convert bytes to a base64 data URL for image input."""
    resolved = mime_type or _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{resolved};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
