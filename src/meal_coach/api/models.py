"""Pydantic models for API request payloads."""

from pydantic import BaseModel, ConfigDict, Field


class CheckinRequest(BaseModel):
    """Check-in payload."""

    model_config = ConfigDict(populate_by_name=True)

    slot_id: str | None = Field(default=None, alias="slotId")


class LogMealRequest(BaseModel):
    """Manual meal logging payload."""

    date: str | None = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    summary: dict[str, object] | None = None
    items: list[object] | None = None


class AnalyzeMealRequest(BaseModel):
    """JSON image upload for meal analysis."""

    model_config = ConfigDict(populate_by_name=True)

    image_base64: str | None = Field(default=None, alias="imageBase64")
    mime_type: str | None = Field(default=None, alias="mimeType")
