"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from nutrition_ledger.api.labels import router as labels_router
from nutrition_ledger.api.ledger import router as ledger_router
from nutrition_ledger.app_logging import configure_logging
from nutrition_ledger.containers import AppContainer
from nutrition_ledger.domain.errors import (
    AggregateUpdateError,
    EntryNotFound,
    ExtractionFailed,
    StoreError,
    ValidationError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        try:
            await app.state.container.close_resources()
        except Exception:
            logger.exception("Failed to close application resources")

    app = FastAPI(title="Nutrition Ledger", lifespan=lifespan)
    app.state.container = container

    app.include_router(labels_router)
    app.include_router(ledger_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.exception_handler(ValidationError)
    async def validation_error(_: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc)},
        )

    @app.exception_handler(EntryNotFound)
    async def entry_not_found(_: Request, exc: EntryNotFound) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(ExtractionFailed)
    async def extraction_failed(_: Request, exc: ExtractionFailed) -> JSONResponse:
        logger.warning("Label extraction failed: %s", exc, exc_info=exc.__cause__)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "detail": str(exc),
                "hint": "Try a clearer photo or enter the values manually.",
            },
        )

    @app.exception_handler(AggregateUpdateError)
    async def aggregate_update_failed(
        _: Request, exc: AggregateUpdateError
    ) -> JSONResponse:
        logger.error(
            "Daily totals not updated for entry %s",
            exc.entry.id,
            exc_info=exc.__cause__,
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "detail": str(exc),
                "step": exc.step,
                "entry_id": str(exc.entry.id),
                "operation": exc.operation,
                "retry": "totals" if exc.operation == "add" else "reconcile",
            },
        )

    @app.exception_handler(StoreError)
    async def store_failed(_: Request, exc: StoreError) -> JSONResponse:
        logger.error("Store failure during %s", exc.step, exc_info=exc.__cause__)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": str(exc), "step": exc.step},
        )

    return app
