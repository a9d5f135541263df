"""Services for the per-user food catalog."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from nutrition_ledger.domain.catalog import FoodCatalogItem
from nutrition_ledger.domain.nutrition import NutritionRecord


class CatalogRepository(Protocol):
    """Persistence interface for the food catalog."""

    def upsert_food(
        self,
        user_id: UUID,
        name: str,
        brand: str | None,
        per_serving: NutritionRecord,
    ) -> FoodCatalogItem:
        """Insert or update the food keyed by user, name and brand."""

    def search_foods(
        self, user_id: UUID, query: str, limit: int
    ) -> list[FoodCatalogItem]:
        """Search foods by name."""

    def list_recent_foods(self, user_id: UUID, limit: int) -> list[FoodCatalogItem]:
        """Return recently updated foods."""


@dataclass
class CatalogService:
    """Application service for catalog operations."""

    repository: CatalogRepository

    def remember(
        self,
        user_id: UUID,
        name: str,
        brand: str | None,
        per_serving: NutritionRecord,
    ) -> FoodCatalogItem:
        """Store per-serving values for a food so it can be reused."""
        return self.repository.upsert_food(user_id, name.strip(), brand, per_serving)

    def search(
        self, user_id: UUID, query: str | None, limit: int = 5
    ) -> list[FoodCatalogItem]:
        """Search the catalog, falling back to recent foods when query is empty."""
        if not query or not query.strip():
            return self._rank(self.repository.list_recent_foods(user_id, limit))
        return self._rank(self.repository.search_foods(user_id, query.strip(), limit))

    @staticmethod
    def _rank(items: list[FoodCatalogItem]) -> list[FoodCatalogItem]:
        """Rank foods by most recent update."""
        return sorted(
            items,
            key=lambda item: item.updated_at or datetime.min.replace(tzinfo=UTC),
            reverse=True,
        )
