"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_ledger.adapters.ocr_space_client import HttpxOcrSpaceClient
from nutrition_ledger.adapters.openai_ocr_client import OpenAIOcrClient
from nutrition_ledger.adapters.supabase_catalog_repository import (
    SupabaseCatalogRepository,
)
from nutrition_ledger.adapters.supabase_ledger_repository import (
    SupabaseLedgerRepository,
)
from nutrition_ledger.config import Settings, daily_goals, parse_ocr_provider
from nutrition_ledger.domain.goals import DailyGoals
from nutrition_ledger.services.catalog import CatalogService
from nutrition_ledger.services.labels import LabelScanService
from nutrition_ledger.services.ledger import LedgerService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    label_scan_service: LabelScanService
    ledger_service: LedgerService
    catalog_service: CatalogService
    goals: DailyGoals
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    catalog_service = CatalogService(SupabaseCatalogRepository(supabase_client))
    ledger_service = LedgerService(
        repository=SupabaseLedgerRepository(supabase_client),
        catalog_service=catalog_service,
        update_attempts=resolved_settings.ledger_update_attempts,
    )
    ocr_client = _build_ocr_client(resolved_settings)
    label_scan_service = LabelScanService(
        client=ocr_client, language=resolved_settings.ocr_language
    )

    async def close_resources() -> None:
        await ocr_client.close()

    return AppContainer(
        settings=resolved_settings,
        label_scan_service=label_scan_service,
        ledger_service=ledger_service,
        catalog_service=catalog_service,
        goals=daily_goals(resolved_settings),
        close_resources=close_resources,
    )


def _build_ocr_client(settings: Settings) -> OpenAIOcrClient | HttpxOcrSpaceClient:
    provider = parse_ocr_provider(settings.ocr_provider)
    if provider == "ocr_space":
        if not settings.ocr_space_api_key:
            raise ValueError("OCR_SPACE_API_KEY is required for the ocr_space provider")
        return HttpxOcrSpaceClient.create(
            api_key=settings.ocr_space_api_key,
            base_url=settings.ocr_space_base_url,
        )
    if not settings.openai_api_key:
        raise ValueError("OPENAI_API_KEY is required for the openai provider")
    return OpenAIOcrClient.create(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        reasoning_effort=settings.openai_reasoning_effort,
        store=settings.openai_store,
    )
