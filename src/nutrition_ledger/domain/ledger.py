"""Domain models for the daily ledger."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from nutrition_ledger.domain.nutrition import MacroProfile, NutritionRecord


@dataclass(frozen=True)
class DailyAggregate:
    """Running totals for one user and calendar day.

    ``id`` is None for an aggregate synthesized in memory before the first
    entry of the day is written.
    """

    id: UUID | None
    user_id: UUID
    day: date
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    version: int = 0

    @classmethod
    def empty(cls, user_id: UUID, day: date) -> "DailyAggregate":
        """Return a zeroed, unpersisted aggregate."""
        return cls(
            id=None,
            user_id=user_id,
            day=day,
            total_calories=0.0,
            total_protein=0.0,
            total_carbs=0.0,
            total_fat=0.0,
        )

    def totals(self) -> MacroProfile:
        """Return the totals as a macro profile."""
        return MacroProfile(
            calories=self.total_calories,
            protein_g=self.total_protein,
            fat_g=self.total_fat,
            carbs_g=self.total_carbs,
        )


@dataclass(frozen=True)
class NewFoodEntry:
    """Values for a food entry that has not been stored yet."""

    user_id: UUID
    daily_log_id: UUID
    day: date
    food_name: str
    brand: str | None
    quantity: float
    nutrition: NutritionRecord


@dataclass(frozen=True)
class FoodEntry:
    """A logged food with nutrition already scaled by quantity."""

    id: UUID
    user_id: UUID
    daily_log_id: UUID
    day: date
    food_name: str
    brand: str | None
    quantity: float
    nutrition: NutritionRecord
    created_at: datetime


@dataclass(frozen=True)
class DayLedger:
    """Aggregate with the day's entries, newest first."""

    aggregate: DailyAggregate
    entries: list[FoodEntry]
