"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from nutrition_ledger.config import Settings
from nutrition_ledger.containers import AppContainer
from nutrition_ledger.domain.catalog import FoodCatalogItem
from nutrition_ledger.domain.errors import DuplicateRowError
from nutrition_ledger.domain.goals import DailyGoals
from nutrition_ledger.domain.ledger import DailyAggregate, FoodEntry, NewFoodEntry
from nutrition_ledger.domain.nutrition import MacroProfile, NutritionRecord
from nutrition_ledger.services.catalog import CatalogRepository, CatalogService
from nutrition_ledger.services.labels import LabelScanService, OcrClient
from nutrition_ledger.services.ledger import LedgerRepository, LedgerService

LABEL_TEXT = """
Nutrition Facts
8 servings per container
Serving size 2/3 cup (55g)
Amount per serving
Calories 230
Total Fat 8g 10%
  Saturated Fat 1g 5%
  Trans Fat 0g
Cholesterol 0mg 0%
Sodium 160mg 7%
Total Carbohydrate 37g 13%
  Dietary Fiber 4g 14%
  Total Sugars 12g
    Includes 10g Added Sugars 20%
Protein 3g
Vitamin D 2mcg 10%
Calcium 260mg 20%
Iron 8mg 45%
Potassium 240mg 6%
"""

_EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


class StoreUnavailable(Exception):
    """Simulated store outage."""


@dataclass
class InMemoryLedgerRepository(LedgerRepository):
    """In-memory ledger repository for tests.

    ``fail_on`` names methods that raise, ``conflicts`` makes that many
    totals writes lose a version race, and ``race_on_create`` makes the
    first create behave as if another request inserted the row first.
    """

    logs: dict[UUID, DailyAggregate] = field(default_factory=dict)
    entries: dict[UUID, FoodEntry] = field(default_factory=dict)
    fail_on: set[str] = field(default_factory=set)
    conflicts: int = 0
    race_on_create: bool = False
    create_calls: int = 0
    sequence: int = 0

    def _check(self, name: str) -> None:
        if name in self.fail_on:
            raise StoreUnavailable(name)

    def find_daily_log(self, user_id: UUID, day: date) -> DailyAggregate | None:
        self._check("find_daily_log")
        for log in self.logs.values():
            if log.user_id == user_id and log.day == day:
                return log
        return None

    def get_daily_log(self, daily_log_id: UUID) -> DailyAggregate | None:
        self._check("get_daily_log")
        return self.logs.get(daily_log_id)

    def create_daily_log(self, user_id: UUID, day: date) -> DailyAggregate:
        self._check("create_daily_log")
        self.create_calls += 1
        if self.find_daily_log(user_id, day) is not None:
            raise DuplicateRowError(f"{user_id} {day}")
        log = DailyAggregate(
            id=uuid4(),
            user_id=user_id,
            day=day,
            total_calories=0.0,
            total_protein=0.0,
            total_carbs=0.0,
            total_fat=0.0,
        )
        self.logs[log.id] = log
        if self.race_on_create:
            self.race_on_create = False
            raise DuplicateRowError(f"{user_id} {day}")
        return log

    def update_daily_totals(
        self, daily_log_id: UUID, totals: MacroProfile, expected_version: int
    ) -> DailyAggregate | None:
        self._check("update_daily_totals")
        current = self.logs.get(daily_log_id)
        if current is None:
            return None
        if self.conflicts > 0:
            self.conflicts -= 1
            self.logs[daily_log_id] = replace(current, version=current.version + 1)
            return None
        if current.version != expected_version:
            return None
        updated = replace(
            current,
            total_calories=totals.calories,
            total_protein=totals.protein_g,
            total_carbs=totals.carbs_g,
            total_fat=totals.fat_g,
            version=current.version + 1,
        )
        self.logs[daily_log_id] = updated
        return updated

    def create_entry(self, entry: NewFoodEntry) -> FoodEntry:
        self._check("create_entry")
        self.sequence += 1
        stored = FoodEntry(
            id=uuid4(),
            user_id=entry.user_id,
            daily_log_id=entry.daily_log_id,
            day=entry.day,
            food_name=entry.food_name,
            brand=entry.brand,
            quantity=entry.quantity,
            nutrition=entry.nutrition,
            created_at=_EPOCH + timedelta(seconds=self.sequence),
        )
        self.entries[stored.id] = stored
        return stored

    def get_entry(self, daily_log_id: UUID, entry_id: UUID) -> FoodEntry | None:
        self._check("get_entry")
        entry = self.entries.get(entry_id)
        if entry is None or entry.daily_log_id != daily_log_id:
            return None
        return entry

    def delete_entry(self, entry_id: UUID) -> bool:
        self._check("delete_entry")
        return self.entries.pop(entry_id, None) is not None

    def list_entries(self, daily_log_id: UUID) -> list[FoodEntry]:
        self._check("list_entries")
        return sorted(
            (e for e in self.entries.values() if e.daily_log_id == daily_log_id),
            key=lambda e: e.created_at,
            reverse=True,
        )


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    """In-memory catalog repository for tests."""

    foods: dict[tuple[UUID, str, str], FoodCatalogItem] = field(default_factory=dict)
    fail: bool = False
    sequence: int = 0

    def upsert_food(
        self,
        user_id: UUID,
        name: str,
        brand: str | None,
        per_serving: NutritionRecord,
    ) -> FoodCatalogItem:
        if self.fail:
            raise StoreUnavailable("upsert_food")
        self.sequence += 1
        key = (user_id, name, brand or "")
        existing = self.foods.get(key)
        macros = per_serving.macros()
        item = FoodCatalogItem(
            id=existing.id if existing else uuid4(),
            user_id=user_id,
            name=name,
            brand=brand,
            calories=macros.calories,
            protein_g=macros.protein_g,
            carbs_g=macros.carbs_g,
            fat_g=macros.fat_g,
            nutrition=per_serving,
            updated_at=_EPOCH + timedelta(seconds=self.sequence),
        )
        self.foods[key] = item
        return item

    def search_foods(
        self, user_id: UUID, query: str, limit: int
    ) -> list[FoodCatalogItem]:
        query_lower = query.lower()
        return [
            item
            for (owner, _, _), item in self.foods.items()
            if owner == user_id and query_lower in item.name.lower()
        ][:limit]

    def list_recent_foods(self, user_id: UUID, limit: int) -> list[FoodCatalogItem]:
        return [
            item for (owner, _, _), item in self.foods.items() if owner == user_id
        ][:limit]


@dataclass
class FakeOcrClient(OcrClient):
    """Fake OCR client returning fixed text or raising."""

    text: str = LABEL_TEXT
    error: Exception | None = None
    calls: list[str] = field(default_factory=list)

    async def recognize(self, *, image_data_url: str, language: str) -> str:
        self.calls.append(image_data_url)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        api_token="api-token",
        openai_api_key="openai-key",
    )


@pytest.fixture
def ledger_repository() -> InMemoryLedgerRepository:
    return InMemoryLedgerRepository()


@pytest.fixture
def catalog_repository() -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository()


@pytest.fixture
def ocr_client() -> FakeOcrClient:
    return FakeOcrClient()


@pytest.fixture
def ledger_service(
    ledger_repository: InMemoryLedgerRepository,
    catalog_repository: InMemoryCatalogRepository,
) -> LedgerService:
    return LedgerService(
        repository=ledger_repository,
        catalog_service=CatalogService(catalog_repository),
    )


@pytest.fixture
def container(
    settings: Settings,
    ledger_service: LedgerService,
    ocr_client: FakeOcrClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        label_scan_service=LabelScanService(client=ocr_client),
        ledger_service=ledger_service,
        catalog_service=ledger_service.catalog_service,
        goals=DailyGoals(),
        close_resources=close_resources,
    )
