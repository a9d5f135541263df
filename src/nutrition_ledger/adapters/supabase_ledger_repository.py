"""Supabase repository for daily logs and food entries."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client, PostgrestAPIError

from nutrition_ledger.domain.errors import DuplicateRowError
from nutrition_ledger.domain.ledger import DailyAggregate, FoodEntry, NewFoodEntry
from nutrition_ledger.domain.nutrition import MacroProfile, NutritionRecord
from nutrition_ledger.services.ledger import LedgerRepository

UNIQUE_VIOLATION = "23505"


@dataclass
class SupabaseLedgerRepository(LedgerRepository):
    """Supabase implementation for the daily ledger."""

    client: Client

    def find_daily_log(self, user_id: UUID, day: date) -> DailyAggregate | None:
        """Return the daily log for a user and day."""
        response = (
            self.client.table("daily_logs")
            .select("*")
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_daily_log(response.data[0])

    def get_daily_log(self, daily_log_id: UUID) -> DailyAggregate | None:
        """Return a daily log by id."""
        response = (
            self.client.table("daily_logs")
            .select("*")
            .eq("id", str(daily_log_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_daily_log(response.data[0])

    def create_daily_log(self, user_id: UUID, day: date) -> DailyAggregate:
        """Create a zeroed daily log row."""
        try:
            response = (
                self.client.table("daily_logs")
                .insert(
                    {
                        "user_id": str(user_id),
                        "date": day.isoformat(),
                        "total_calories": 0,
                        "total_protein": 0,
                        "total_carbs": 0,
                        "total_fat": 0,
                        "version": 0,
                    }
                )
                .execute()
            )
        except PostgrestAPIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise DuplicateRowError(
                    f"Daily log for {user_id} on {day} already exists"
                ) from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create daily log")
        return _parse_daily_log(response.data[0])

    def update_daily_totals(
        self, daily_log_id: UUID, totals: MacroProfile, expected_version: int
    ) -> DailyAggregate | None:
        """Write totals only if nobody else bumped the version first."""
        response = (
            self.client.table("daily_logs")
            .update(
                {
                    "total_calories": totals.calories,
                    "total_protein": totals.protein_g,
                    "total_carbs": totals.carbs_g,
                    "total_fat": totals.fat_g,
                    "version": expected_version + 1,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("id", str(daily_log_id))
            .eq("version", expected_version)
            .execute()
        )
        if not response.data:
            return None
        return _parse_daily_log(response.data[0])

    def create_entry(self, entry: NewFoodEntry) -> FoodEntry:
        """Create a food entry row."""
        macros = entry.nutrition.macros()
        response = (
            self.client.table("food_entries")
            .insert(
                {
                    "user_id": str(entry.user_id),
                    "daily_log_id": str(entry.daily_log_id),
                    "date": entry.day.isoformat(),
                    "food_name": entry.food_name,
                    "food_brand": entry.brand,
                    "quantity": entry.quantity,
                    "calories": macros.calories,
                    "protein": macros.protein_g,
                    "carbs": macros.carbs_g,
                    "fat": macros.fat_g,
                    "nutrition_snapshot": entry.nutrition.populated(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food entry")
        return _parse_entry(response.data[0])

    def get_entry(self, daily_log_id: UUID, entry_id: UUID) -> FoodEntry | None:
        """Return an entry belonging to a daily log."""
        response = (
            self.client.table("food_entries")
            .select("*")
            .eq("daily_log_id", str(daily_log_id))
            .eq("id", str(entry_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def delete_entry(self, entry_id: UUID) -> bool:
        """Delete an entry row."""
        response = (
            self.client.table("food_entries").delete().eq("id", str(entry_id)).execute()
        )
        return bool(response.data)

    def list_entries(self, daily_log_id: UUID) -> list[FoodEntry]:
        """Return entries for a daily log, newest first."""
        response = (
            self.client.table("food_entries")
            .select("*")
            .eq("daily_log_id", str(daily_log_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]


def _parse_daily_log(row: dict[str, object]) -> DailyAggregate:
    return DailyAggregate(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        day=date.fromisoformat(str(row["date"])),
        total_calories=float(row.get("total_calories") or 0.0),
        total_protein=float(row.get("total_protein") or 0.0),
        total_carbs=float(row.get("total_carbs") or 0.0),
        total_fat=float(row.get("total_fat") or 0.0),
        version=int(row.get("version") or 0),
    )


def _parse_entry(row: dict[str, object]) -> FoodEntry:
    snapshot = row.get("nutrition_snapshot")
    if isinstance(snapshot, dict) and snapshot:
        nutrition = NutritionRecord.from_mapping(snapshot)
    else:
        nutrition = NutritionRecord.from_mapping(
            {key: row.get(key) for key in ("calories", "protein", "carbs", "fat")}
        )
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else datetime.now(tz=UTC)
    )
    return FoodEntry(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        daily_log_id=UUID(row["daily_log_id"]),
        day=date.fromisoformat(str(row["date"])),
        food_name=str(row.get("food_name", "")),
        brand=row.get("food_brand") or None,
        quantity=float(row.get("quantity") or 1.0),
        nutrition=nutrition,
        created_at=created_at,
    )
