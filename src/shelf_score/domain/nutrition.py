"""Nutrition domain models."""

import math
from dataclasses import dataclass, fields
from enum import Enum


class NutrientLevel(str, Enum):
    """Traffic-light rating for a single nutrient."""

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


@dataclass(frozen=True)
class NutrientRow:
    """Formatted nutrient value for display."""

    name: str
    value: str
    level: NutrientLevel


@dataclass(frozen=True)
class NutritionFacts:
    """Nutrition facts per 100g of product."""

    calories: float = 0.0
    fat: float = 0.0
    saturated_fat: float = 0.0
    carbohydrates: float = 0.0
    sugars: float = 0.0
    fiber: float = 0.0
    proteins: float = 0.0
    salt: float = 0.0
    sodium: float = 0.0

    def __post_init__(self) -> None:
        for item in fields(self):
            object.__setattr__(self, item.name, _clean(getattr(self, item.name)))

    @classmethod
    def from_values(cls, **values: float | None) -> "NutritionFacts":
        """Build facts from possibly missing values, coalescing to 0.

        Every field, however it is set, is cleaned on construction: negative and
        non-finite values are clamped to 0 so that bad upstream data never
        reaches the scoring engine.
        """
        return cls(**values)  # type: ignore[arg-type]

    @property
    def fat_level(self) -> NutrientLevel:
        return _level(self.fat, low=3, moderate=17.5)

    @property
    def saturated_fat_level(self) -> NutrientLevel:
        return _level(self.saturated_fat, low=1.5, moderate=5)

    @property
    def sugars_level(self) -> NutrientLevel:
        return _level(self.sugars, low=5, moderate=22.5)

    @property
    def salt_level(self) -> NutrientLevel:
        return _level(self.salt, low=0.3, moderate=1.5)

    @property
    def calories_level(self) -> NutrientLevel:
        return _level(self.calories, low=100, moderate=300)

    @property
    def fiber_level(self) -> NutrientLevel:
        # More fiber means less risk.
        return _inverse_level(self.fiber, low=6, moderate=3)

    @property
    def protein_level(self) -> NutrientLevel:
        return _inverse_level(self.proteins, low=8, moderate=4)

    def display_rows(self) -> list[NutrientRow]:
        """Return nutrient rows in display order."""
        return [
            NutrientRow("Calories", f"{int(self.calories)} kcal", self.calories_level),
            NutrientRow("Fat", f"{self.fat:.1f}g", self.fat_level),
            NutrientRow(
                "Saturated Fat", f"{self.saturated_fat:.1f}g", self.saturated_fat_level
            ),
            NutrientRow(
                "Carbohydrates", f"{self.carbohydrates:.1f}g", NutrientLevel.MODERATE
            ),
            NutrientRow("Sugars", f"{self.sugars:.1f}g", self.sugars_level),
            NutrientRow("Fiber", f"{self.fiber:.1f}g", self.fiber_level),
            NutrientRow("Proteins", f"{self.proteins:.1f}g", self.protein_level),
            NutrientRow("Salt", f"{self.salt:.2f}g", self.salt_level),
        ]


def _clean(value: float | None) -> float:
    if value is None:
        return 0.0
    number = float(value)
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _level(value: float, *, low: float, moderate: float) -> NutrientLevel:
    if value <= low:
        return NutrientLevel.LOW
    if value <= moderate:
        return NutrientLevel.MODERATE
    return NutrientLevel.HIGH


def _inverse_level(value: float, *, low: float, moderate: float) -> NutrientLevel:
    if value >= low:
        return NutrientLevel.LOW
    if value >= moderate:
        return NutrientLevel.MODERATE
    return NutrientLevel.HIGH
