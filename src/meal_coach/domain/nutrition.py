"""Nutrition serving models."""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields

SUMMARY_FIELDS = (
    "protein_servings",
    "veg_servings",
    "carb_servings",
    "snack_servings",
    "water_ml",
)

DEFAULT_TARGETS: dict[str, float] = {
    "protein_servings": 3,
    "veg_servings": 3,
    "carb_servings": 2,
    "snack_servings": 1,
    "water_ml": 2000,
}


@dataclass(frozen=True)
class NutritionSummary:
    """Servings per category plus water intake."""

    protein_servings: float = 0
    veg_servings: float = 0
    carb_servings: float = 0
    snack_servings: float = 0
    water_ml: float = 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, object] | None) -> "NutritionSummary":
        """Build a summary, treating missing or null fields as zero."""
        data = data or {}
        values = {field.name: _to_number(data.get(field.name)) for field in fields(cls)}
        return cls(**values)

    def plus(self, other: "NutritionSummary") -> "NutritionSummary":
        """Return the field-wise sum of two summaries."""
        return NutritionSummary(
            protein_servings=self.protein_servings + other.protein_servings,
            veg_servings=self.veg_servings + other.veg_servings,
            carb_servings=self.carb_servings + other.carb_servings,
            snack_servings=self.snack_servings + other.snack_servings,
            water_ml=self.water_ml + other.water_ml,
        )

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def remaining(
    targets: Mapping[str, float], consumed: Mapping[str, float]
) -> dict[str, float]:
    """Return per-category amounts still needed, floored at zero.

    Only keys present in ``targets`` are reported.
    """
    return {
        key: max(0, target - (consumed.get(key) or 0))
        for key, target in targets.items()
    }


def _to_number(value: object) -> float:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int | float):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0
    return 0
