"""Supabase implementation for the food catalog."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from nutrition_ledger.domain.catalog import FoodCatalogItem
from nutrition_ledger.domain.nutrition import NutritionRecord
from nutrition_ledger.services.catalog import CatalogRepository


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Supabase-backed repository for the per-user food catalog.

    A missing brand is stored as an empty string so the
    ``(user_id, name, brand)`` unique key also covers unbranded foods.
    """

    client: Client

    def upsert_food(
        self,
        user_id: UUID,
        name: str,
        brand: str | None,
        per_serving: NutritionRecord,
    ) -> FoodCatalogItem:
        """Insert or update the food keyed by user, name and brand."""
        macros = per_serving.macros()
        response = (
            self.client.table("foods")
            .upsert(
                {
                    "user_id": str(user_id),
                    "name": name,
                    "brand": brand or "",
                    "calories_per_serving": macros.calories,
                    "protein_per_serving": macros.protein_g,
                    "carbs_per_serving": macros.carbs_g,
                    "fat_per_serving": macros.fat_g,
                    "nutrition_per_serving": per_serving.populated(),
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id,name,brand",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to upsert catalog food")
        return _parse_food(response.data[0])

    def search_foods(
        self, user_id: UUID, query: str, limit: int
    ) -> list[FoodCatalogItem]:
        """Search foods by name."""
        response = (
            self.client.table("foods")
            .select("*")
            .eq("user_id", str(user_id))
            .ilike("name", f"%{query}%")
            .limit(limit)
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]

    def list_recent_foods(self, user_id: UUID, limit: int) -> list[FoodCatalogItem]:
        """Return recently updated foods."""
        response = (
            self.client.table("foods")
            .select("*")
            .eq("user_id", str(user_id))
            .order("updated_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]


def _parse_food(row: dict[str, object]) -> FoodCatalogItem:
    """Parse a catalog row into a domain model."""
    updated_raw = row.get("updated_at")
    updated_at = (
        datetime.fromisoformat(updated_raw)
        if isinstance(updated_raw, str) and updated_raw
        else None
    )
    calories = float(row.get("calories_per_serving") or 0.0)
    protein = float(row.get("protein_per_serving") or 0.0)
    carbs = float(row.get("carbs_per_serving") or 0.0)
    fat = float(row.get("fat_per_serving") or 0.0)
    stored = row.get("nutrition_per_serving")
    nutrition = (
        NutritionRecord.from_mapping(stored)
        if isinstance(stored, dict) and stored
        else NutritionRecord(calories=calories, protein=protein, carbs=carbs, fat=fat)
    )
    return FoodCatalogItem(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        name=str(row.get("name", "")),
        brand=row.get("brand") or None,
        calories=calories,
        protein_g=protein,
        carbs_g=carbs,
        fat_g=fat,
        nutrition=nutrition,
        updated_at=updated_at,
    )
