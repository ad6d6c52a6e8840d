"""Models for meal photo analysis results."""

from enum import Enum

from pydantic import BaseModel, Field

from meal_coach.domain.nutrition import NutritionSummary


class FoodCategory(str, Enum):
    """Coarse category of a detected item."""

    PROTEIN = "protein"
    CARB = "carb"
    VEG = "veg"
    FAT = "fat"
    SNACK = "snack"
    DRINK = "drink"


class AnalyzedItem(BaseModel):
    """Single detected food item."""

    name: str
    category: FoodCategory
    estimated_amount: str
    servings: float = Field(ge=0.0)


class AnalyzedSummary(BaseModel):
    """Serving totals estimated for the whole photo."""

    protein_servings: float = 0
    veg_servings: float = 0
    carb_servings: float = 0
    snack_servings: float = 0
    water_ml: float = 0

    def to_summary(self) -> NutritionSummary:
        return NutritionSummary.from_mapping(self.model_dump())


class MealAnalysis(BaseModel):
    """Structured output for meal analysis."""

    items: list[AnalyzedItem]
    summary: AnalyzedSummary
    note: str = ""
