"""Pydantic models for the HTTP API."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from nutrition_ledger.domain.catalog import FoodCatalogItem
from nutrition_ledger.domain.goals import NutrientProgress
from nutrition_ledger.domain.labels import LabelScan
from nutrition_ledger.domain.ledger import DailyAggregate, FoodEntry
from nutrition_ledger.domain.nutrition import NutritionRecord


class NutritionPayload(BaseModel):
    """Nutrition values; null means not detected."""

    calories: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    protein: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    carbs: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    fat: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    saturated_fat: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    trans_fat: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    cholesterol: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    sodium: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    fiber: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    sugar: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    added_sugar: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    vitamin_d: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    calcium: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    iron: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    potassium: float | None = Field(default=None, ge=0, allow_inf_nan=False)

    @classmethod
    def from_record(cls, record: NutritionRecord) -> "NutritionPayload":
        return cls(**record.populated())

    def to_record(self) -> NutritionRecord:
        return NutritionRecord(**self.model_dump(exclude_none=True))


class ExtractRequest(BaseModel):
    """Label text recognized by the client."""

    text: str


class LabelScanResponse(BaseModel):
    """Result of reading a nutrition label."""

    text: str
    status: str
    nutrition: NutritionPayload
    prefill: NutritionPayload

    @classmethod
    def from_scan(cls, scan: LabelScan) -> "LabelScanResponse":
        return cls(
            text=scan.text,
            status=scan.status.value,
            nutrition=NutritionPayload.from_record(scan.record),
            prefill=NutritionPayload.from_record(scan.prefill()),
        )


class EntryCreate(BaseModel):
    """A confirmed food to log."""

    food_name: str
    brand: str | None = None
    quantity: float = 1.0
    nutrition: NutritionPayload = Field(default_factory=NutritionPayload)


class FoodEntryResponse(BaseModel):
    """A logged food entry."""

    id: UUID
    day: date
    food_name: str
    brand: str | None
    quantity: float
    nutrition: NutritionPayload
    created_at: datetime

    @classmethod
    def from_entry(cls, entry: FoodEntry) -> "FoodEntryResponse":
        return cls(
            id=entry.id,
            day=entry.day,
            food_name=entry.food_name,
            brand=entry.brand,
            quantity=entry.quantity,
            nutrition=NutritionPayload.from_record(entry.nutrition),
            created_at=entry.created_at,
        )


class DailyAggregateResponse(BaseModel):
    """Daily running totals."""

    id: UUID | None
    day: date
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    persisted: bool

    @classmethod
    def from_aggregate(cls, aggregate: DailyAggregate) -> "DailyAggregateResponse":
        return cls(
            id=aggregate.id,
            day=aggregate.day,
            total_calories=aggregate.total_calories,
            total_protein=aggregate.total_protein,
            total_carbs=aggregate.total_carbs,
            total_fat=aggregate.total_fat,
            persisted=aggregate.id is not None,
        )


class ProgressResponse(BaseModel):
    """Progress of one nutrient against its goal."""

    name: str
    unit: str
    value: float
    goal: float
    percent: float
    remaining: float

    @classmethod
    def from_progress(cls, progress: NutrientProgress) -> "ProgressResponse":
        return cls(
            name=progress.name,
            unit=progress.unit,
            value=progress.value,
            goal=progress.goal,
            percent=progress.percent,
            remaining=progress.remaining,
        )


class DayResponse(BaseModel):
    """A day's totals, entries and goal progress."""

    aggregate: DailyAggregateResponse
    entries: list[FoodEntryResponse]
    progress: list[ProgressResponse]


class CatalogItemResponse(BaseModel):
    """A remembered food with per-serving values."""

    id: UUID
    name: str
    brand: str | None
    nutrition: NutritionPayload
    updated_at: datetime | None

    @classmethod
    def from_item(cls, item: FoodCatalogItem) -> "CatalogItemResponse":
        return cls(
            id=item.id,
            name=item.name,
            brand=item.brand,
            nutrition=NutritionPayload.from_record(item.nutrition),
            updated_at=item.updated_at,
        )
