"""Nutrition domain models."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace


@dataclass(frozen=True)
class MacroProfile:
    """Macronutrient profile tracked by the daily ledger."""

    calories: float
    protein_g: float
    fat_g: float
    carbs_g: float


@dataclass(frozen=True)
class Nutrient:
    """A nutrient field with the unit it is read in."""

    name: str
    unit: str
    required: bool = False


NUTRIENTS: tuple[Nutrient, ...] = (
    Nutrient("calories", "kcal", required=True),
    Nutrient("protein", "g", required=True),
    Nutrient("carbs", "g", required=True),
    Nutrient("fat", "g", required=True),
    Nutrient("saturated_fat", "g"),
    Nutrient("trans_fat", "g"),
    Nutrient("cholesterol", "mg"),
    Nutrient("sodium", "mg"),
    Nutrient("fiber", "g"),
    Nutrient("sugar", "g"),
    Nutrient("added_sugar", "g"),
    Nutrient("vitamin_d", "mcg"),
    Nutrient("calcium", "mg"),
    Nutrient("iron", "mg"),
    Nutrient("potassium", "mg"),
)

REQUIRED_NUTRIENTS = tuple(n.name for n in NUTRIENTS if n.required)


@dataclass(frozen=True)
class NutritionRecord:
    """Partially populated nutrition values.

    ``None`` means the nutrient was not detected, which is different from a
    detected amount of zero. Units are the ones the label uses and are never
    converted.
    """

    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None
    saturated_fat: float | None = None
    trans_fat: float | None = None
    cholesterol: float | None = None
    sodium: float | None = None
    fiber: float | None = None
    sugar: float | None = None
    added_sugar: float | None = None
    vitamin_d: float | None = None
    calcium: float | None = None
    iron: float | None = None
    potassium: float | None = None

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int | float):
                raise TypeError(f"{item.name} must be a number, got {value!r}")
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{item.name} must be a finite non-negative number")
            object.__setattr__(self, item.name, float(value))

    @classmethod
    def from_mapping(cls, data: Mapping[str, object] | None) -> "NutritionRecord":
        """Build a record from stored JSON, ignoring unknown keys and nulls."""
        if not data:
            return cls()
        values: dict[str, float] = {}
        for nutrient in NUTRIENTS:
            raw = data.get(nutrient.name)
            if raw is None or isinstance(raw, bool):
                continue
            if isinstance(raw, int | float | str):
                try:
                    values[nutrient.name] = float(raw)
                except ValueError:
                    continue
        return cls(**values)

    def populated(self) -> dict[str, float]:
        """Return only the nutrients that are present."""
        return {
            nutrient.name: getattr(self, nutrient.name)
            for nutrient in NUTRIENTS
            if getattr(self, nutrient.name) is not None
        }

    def scaled(self, factor: float) -> "NutritionRecord":
        """Multiply every present nutrient by ``factor``."""
        return NutritionRecord(
            **{name: value * factor for name, value in self.populated().items()}
        )

    def macros(self) -> MacroProfile:
        """Return the four ledger nutrients, treating absent values as zero."""
        return MacroProfile(
            calories=self.calories or 0.0,
            protein_g=self.protein or 0.0,
            fat_g=self.fat or 0.0,
            carbs_g=self.carbs or 0.0,
        )

    def has_positive_value(self) -> bool:
        """Return True when any nutrient was detected with an amount above zero."""
        return any(value > 0 for value in self.populated().values())

    def with_required_defaults(self) -> "NutritionRecord":
        """Return a copy with missing required nutrients set to zero."""
        return replace(
            self,
            **{
                name: 0.0
                for name in REQUIRED_NUTRIENTS
                if getattr(self, name) is None
            },
        )
