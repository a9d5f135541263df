"""Daily ledger service."""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from nutrition_ledger.domain.errors import (
    AggregateUpdateError,
    DuplicateRowError,
    EntryNotFound,
    StoreError,
    ValidationError,
)
from nutrition_ledger.domain.ledger import (
    DailyAggregate,
    DayLedger,
    FoodEntry,
    NewFoodEntry,
)
from nutrition_ledger.domain.nutrition import MacroProfile, NutritionRecord
from nutrition_ledger.services.catalog import CatalogService

_logger = logging.getLogger(__name__)


class LedgerRepository(Protocol):
    """Persistence interface for daily logs and food entries.

    The store has no multi-row transactions. Totals are written with an
    optimistic version check instead.
    """

    def find_daily_log(self, user_id: UUID, day: date) -> DailyAggregate | None:
        """Return the daily log for a user and day."""

    def get_daily_log(self, daily_log_id: UUID) -> DailyAggregate | None:
        """Return a daily log by id."""

    def create_daily_log(self, user_id: UUID, day: date) -> DailyAggregate:
        """Create a zeroed daily log, raising DuplicateRowError if one exists."""

    def update_daily_totals(
        self, daily_log_id: UUID, totals: MacroProfile, expected_version: int
    ) -> DailyAggregate | None:
        """Write totals if the version still matches, else return None."""

    def create_entry(self, entry: NewFoodEntry) -> FoodEntry:
        """Create a food entry row."""

    def get_entry(self, daily_log_id: UUID, entry_id: UUID) -> FoodEntry | None:
        """Return an entry belonging to a daily log."""

    def delete_entry(self, entry_id: UUID) -> bool:
        """Delete an entry, returning False when no row was removed."""

    def list_entries(self, daily_log_id: UUID) -> list[FoodEntry]:
        """Return entries for a daily log, newest first."""


@dataclass
class LedgerService:
    """Service that keeps food entries and daily totals in step."""

    repository: LedgerRepository
    catalog_service: CatalogService | None = None
    update_attempts: int = 3

    def record_entry(  # noqa: PLR0913
        self,
        user_id: UUID,
        day: date,
        food_name: str,
        brand: str | None,
        quantity: float,
        per_serving: NutritionRecord | None,
    ) -> FoodEntry:
        """Log a food for the day and add it to the daily totals."""
        name = _clean_name(food_name)
        factor = _validate_quantity(quantity)
        clean_brand = _clean_brand(brand)
        per_serving = per_serving or NutritionRecord()
        try:
            scaled = per_serving.scaled(factor)
        except ValueError as exc:
            raise ValidationError(f"Quantity {factor} is too large") from exc

        daily_log = self._find_or_create_daily_log(user_id, day)
        try:
            entry = self.repository.create_entry(
                NewFoodEntry(
                    user_id=user_id,
                    daily_log_id=daily_log.id,
                    day=day,
                    food_name=name,
                    brand=clean_brand,
                    quantity=factor,
                    nutrition=scaled,
                )
            )
        except Exception as exc:
            raise StoreError("create_entry") from exc

        self._update_totals(daily_log, entry, sign=1)
        self._remember(user_id, name, clean_brand, per_serving)
        return entry

    def delete_entry(self, user_id: UUID, day: date, entry_id: UUID) -> None:
        """Remove an entry and subtract it from the totals.

        Deleting an entry that is already gone is a no-op.
        """
        try:
            daily_log = self.repository.find_daily_log(user_id, day)
            entry = (
                self.repository.get_entry(daily_log.id, entry_id)
                if daily_log is not None
                else None
            )
        except Exception as exc:
            raise StoreError("find_entry") from exc
        if daily_log is None or entry is None:
            _logger.info("Entry %s is already deleted", entry_id)
            return

        try:
            deleted = self.repository.delete_entry(entry.id)
        except Exception as exc:
            raise StoreError("delete_entry") from exc
        if not deleted:
            _logger.info("Entry %s was deleted concurrently", entry_id)
            return

        self._update_totals(daily_log, entry, sign=-1)

    def reapply_entry(self, user_id: UUID, day: date, entry_id: UUID) -> DailyAggregate:
        """Retry only the totals update for an entry that is already stored."""
        try:
            daily_log = self.repository.find_daily_log(user_id, day)
            entry = (
                self.repository.get_entry(daily_log.id, entry_id)
                if daily_log is not None
                else None
            )
        except Exception as exc:
            raise StoreError("find_entry") from exc
        if daily_log is None or entry is None:
            raise EntryNotFound(f"Entry {entry_id} not found for {day}")
        return self._update_totals(daily_log, entry, sign=1)

    def reconcile_day(self, user_id: UUID, day: date) -> DailyAggregate:
        """Recompute the day's totals from the entries that are still stored."""
        try:
            daily_log = self.repository.find_daily_log(user_id, day)
            if daily_log is None:
                return DailyAggregate.empty(user_id, day)
            updated = self._write_totals(daily_log, self._sum_entries)
        except Exception as exc:
            raise StoreError("reconcile_totals") from exc
        if updated is None:
            raise StoreError(
                "reconcile_totals",
                f"Daily log {daily_log.id} kept changing after "
                f"{self.update_attempts} attempts",
            )
        _logger.info("Reconciled totals for daily log %s", updated.id)
        return updated

    def load_day(self, user_id: UUID, day: date) -> DayLedger:
        """Return the day's totals and entries, newest first."""
        try:
            daily_log = self.repository.find_daily_log(user_id, day)
            entries = (
                self.repository.list_entries(daily_log.id)
                if daily_log is not None
                else []
            )
        except Exception as exc:
            raise StoreError("load_day") from exc
        if daily_log is None:
            return DayLedger(aggregate=DailyAggregate.empty(user_id, day), entries=[])
        return DayLedger(aggregate=daily_log, entries=entries)

    def _find_or_create_daily_log(self, user_id: UUID, day: date) -> DailyAggregate:
        try:
            existing = self.repository.find_daily_log(user_id, day)
            if existing is not None:
                return existing
            try:
                return self.repository.create_daily_log(user_id, day)
            except DuplicateRowError:
                _logger.info(
                    "Daily log for user %s on %s created concurrently", user_id, day
                )
            raced = self.repository.find_daily_log(user_id, day)
        except Exception as exc:
            raise StoreError("find_or_create_daily_log") from exc
        if raced is None:
            raise StoreError(
                "find_or_create_daily_log",
                f"Daily log for {day} missing after a duplicate create",
            )
        return raced

    def _update_totals(
        self, daily_log: DailyAggregate, entry: FoodEntry, sign: int
    ) -> DailyAggregate:
        """Apply an entry's stored values to the totals with optimistic retries."""
        delta = entry.nutrition.macros()
        operation = "add" if sign > 0 else "remove"
        try:
            updated = self._write_totals(
                daily_log, lambda current: _shift(current.totals(), delta, sign)
            )
        except Exception as exc:
            raise AggregateUpdateError(entry, operation=operation) from exc
        if updated is None:
            raise AggregateUpdateError(
                entry,
                f"Daily log {daily_log.id} kept changing after "
                f"{self.update_attempts} attempts",
                operation=operation,
            )
        return updated

    def _write_totals(
        self,
        daily_log: DailyAggregate,
        compute: Callable[[DailyAggregate], MacroProfile],
    ) -> DailyAggregate | None:
        """Write ``compute(current)`` with a version check, re-reading on conflict.

        Returns None when the row kept changing or disappeared.
        """
        current: DailyAggregate | None = daily_log
        for attempt in range(1, self.update_attempts + 1):
            if current is None or current.id is None:
                return None
            updated = self.repository.update_daily_totals(
                current.id, compute(current), expected_version=current.version
            )
            if updated is not None:
                return updated
            _logger.warning(
                "Daily log %s changed concurrently (attempt %s/%s)",
                current.id,
                attempt,
                self.update_attempts,
            )
            current = self.repository.get_daily_log(current.id)
        return None

    def _sum_entries(self, daily_log: DailyAggregate) -> MacroProfile:
        totals = MacroProfile(calories=0.0, protein_g=0.0, fat_g=0.0, carbs_g=0.0)
        for entry in self.repository.list_entries(daily_log.id):
            totals = _shift(totals, entry.nutrition.macros(), sign=1)
        return totals

    def _remember(
        self,
        user_id: UUID,
        name: str,
        brand: str | None,
        per_serving: NutritionRecord,
    ) -> None:
        if self.catalog_service is None:
            return
        try:
            self.catalog_service.remember(user_id, name, brand, per_serving)
        except Exception:
            _logger.warning("Failed to update food catalog for %r", name, exc_info=True)


def _shift(totals: MacroProfile, delta: MacroProfile, sign: int) -> MacroProfile:
    """Add or subtract a delta, never going below zero."""
    return MacroProfile(
        calories=max(totals.calories + sign * delta.calories, 0.0),
        protein_g=max(totals.protein_g + sign * delta.protein_g, 0.0),
        fat_g=max(totals.fat_g + sign * delta.fat_g, 0.0),
        carbs_g=max(totals.carbs_g + sign * delta.carbs_g, 0.0),
    )


def _clean_name(food_name: str | None) -> str:
    name = (food_name or "").strip()
    if not name:
        raise ValidationError("Food name is required")
    return name


def _clean_brand(brand: str | None) -> str | None:
    if brand is None:
        return None
    return brand.strip() or None


def _validate_quantity(quantity: object) -> float:
    if isinstance(quantity, bool) or not isinstance(quantity, int | float):
        raise ValidationError("Quantity must be a number")
    if not math.isfinite(quantity) or quantity <= 0:
        raise ValidationError("Quantity must be greater than zero")
    return float(quantity)
