"""Daily goal models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DailyGoals:
    """Daily targets for the ledger nutrients."""

    calories: float = 2000.0
    protein_g: float = 150.0
    carbs_g: float = 225.0
    fat_g: float = 75.0


@dataclass(frozen=True)
class NutrientProgress:
    """Progress of one nutrient against its goal."""

    name: str
    unit: str
    value: float
    goal: float
    percent: float
    remaining: float
