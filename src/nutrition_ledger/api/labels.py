"""Label extraction endpoints."""

import logging

from fastapi import APIRouter, Depends, Request

from nutrition_ledger.api.schemas import ExtractRequest, LabelScanResponse
from nutrition_ledger.api.security import get_container, require_api_token
from nutrition_ledger.containers import AppContainer

router = APIRouter(
    prefix="/labels", tags=["labels"], dependencies=[Depends(require_api_token)]
)

_logger = logging.getLogger(__name__)


@router.post("/extract")
async def extract_label_text(
    payload: ExtractRequest, container: AppContainer = Depends(get_container)
) -> LabelScanResponse:
    """Extract nutrition values from label text the client already has."""
    scan = container.label_scan_service.extract_text(payload.text)
    return LabelScanResponse.from_scan(scan)


@router.post("/scan")
async def scan_label(
    request: Request, container: AppContainer = Depends(get_container)
) -> LabelScanResponse:
    """Run OCR on the raw image body and extract nutrition values."""
    image_bytes = await request.body()
    scan = await container.label_scan_service.scan(image_bytes)
    _logger.info(
        "Label scanned: status=%s fields=%s",
        scan.status.value,
        len(scan.record.populated()),
    )
    return LabelScanResponse.from_scan(scan)
