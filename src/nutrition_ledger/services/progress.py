"""Progress of daily totals against goals."""

from nutrition_ledger.domain.goals import DailyGoals, NutrientProgress
from nutrition_ledger.domain.ledger import DailyAggregate

MAX_PERCENT = 100.0


def compute_progress(
    aggregate: DailyAggregate, goals: DailyGoals
) -> list[NutrientProgress]:
    """Return per-nutrient progress, capping the percentage at 100."""
    rows = (
        ("calories", "kcal", aggregate.total_calories, goals.calories),
        ("protein", "g", aggregate.total_protein, goals.protein_g),
        ("carbs", "g", aggregate.total_carbs, goals.carbs_g),
        ("fat", "g", aggregate.total_fat, goals.fat_g),
    )
    return [
        NutrientProgress(
            name=name,
            unit=unit,
            value=value,
            goal=goal,
            percent=_percent(value, goal),
            remaining=max(goal - value, 0.0),
        )
        for name, unit, value, goal in rows
    ]


def _percent(value: float, goal: float) -> float:
    if goal <= 0:
        return 0.0
    return min(value / goal * 100.0, MAX_PERCENT)
