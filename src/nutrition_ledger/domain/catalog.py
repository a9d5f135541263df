"""Domain models for the per-user food catalog."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from nutrition_ledger.domain.nutrition import NutritionRecord


@dataclass(frozen=True)
class FoodCatalogItem:
    """A previously entered food with per-serving values."""

    id: UUID
    user_id: UUID
    name: str
    brand: str | None
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    nutrition: NutritionRecord
    updated_at: datetime | None
