"""Daily ledger and catalog endpoints.

Handlers are plain functions so FastAPI runs them in its threadpool while
the blocking store calls are in flight.
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from nutrition_ledger.api.schemas import (
    CatalogItemResponse,
    DailyAggregateResponse,
    DayResponse,
    EntryCreate,
    FoodEntryResponse,
    ProgressResponse,
)
from nutrition_ledger.api.security import get_container, require_api_token
from nutrition_ledger.containers import AppContainer
from nutrition_ledger.services.progress import compute_progress

router = APIRouter(
    prefix="/users/{user_id}",
    tags=["ledger"],
    dependencies=[Depends(require_api_token)],
)


@router.get("/days/{day}")
def load_day(
    user_id: UUID, day: date, container: AppContainer = Depends(get_container)
) -> DayResponse:
    """Return the day's totals, entries and goal progress."""
    ledger = container.ledger_service.load_day(user_id, day)
    return DayResponse(
        aggregate=DailyAggregateResponse.from_aggregate(ledger.aggregate),
        entries=[FoodEntryResponse.from_entry(entry) for entry in ledger.entries],
        progress=[
            ProgressResponse.from_progress(item)
            for item in compute_progress(ledger.aggregate, container.goals)
        ],
    )


@router.post("/days/{day}/entries", status_code=status.HTTP_201_CREATED)
def record_entry(
    user_id: UUID,
    day: date,
    payload: EntryCreate,
    container: AppContainer = Depends(get_container),
) -> FoodEntryResponse:
    """Log a confirmed food for the day."""
    entry = container.ledger_service.record_entry(
        user_id=user_id,
        day=day,
        food_name=payload.food_name,
        brand=payload.brand,
        quantity=payload.quantity,
        per_serving=payload.nutrition.to_record(),
    )
    return FoodEntryResponse.from_entry(entry)


@router.post("/days/{day}/entries/{entry_id}/totals")
def reapply_entry_totals(
    user_id: UUID,
    day: date,
    entry_id: UUID,
    container: AppContainer = Depends(get_container),
) -> DailyAggregateResponse:
    """Retry the totals update for an entry whose first update failed."""
    aggregate = container.ledger_service.reapply_entry(user_id, day, entry_id)
    return DailyAggregateResponse.from_aggregate(aggregate)


@router.post("/days/{day}/totals")
def reconcile_day_totals(
    user_id: UUID, day: date, container: AppContainer = Depends(get_container)
) -> DailyAggregateResponse:
    """Rebuild the day's totals from its stored entries."""
    aggregate = container.ledger_service.reconcile_day(user_id, day)
    return DailyAggregateResponse.from_aggregate(aggregate)


@router.delete(
    "/days/{day}/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT
)
def delete_entry(
    user_id: UUID,
    day: date,
    entry_id: UUID,
    container: AppContainer = Depends(get_container),
) -> Response:
    """Delete an entry; deleting a missing entry succeeds."""
    container.ledger_service.delete_entry(user_id, day, entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/catalog")
def search_catalog(
    user_id: UUID,
    q: str | None = None,
    limit: int = 5,
    container: AppContainer = Depends(get_container),
) -> dict[str, list[CatalogItemResponse]]:
    """Search previously entered foods."""
    items = container.catalog_service.search(user_id, q, limit=limit)
    return {"foods": [CatalogItemResponse.from_item(item) for item in items]}
