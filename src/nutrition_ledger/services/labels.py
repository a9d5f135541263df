"""Label scanning: OCR followed by nutrition extraction."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from nutrition_ledger.domain.errors import ExtractionFailed
from nutrition_ledger.domain.labels import LabelScan, ScanStatus
from nutrition_ledger.services.extraction import extract, has_nutrition_data

_logger = logging.getLogger(__name__)


class OcrClient(Protocol):
    """Interface for optical character recognition."""

    async def recognize(self, *, image_data_url: str, language: str) -> str:
        """Return the text recognized in the image."""


@dataclass
class LabelScanService:
    """Service that reads nutrition facts from label photos."""

    client: OcrClient
    language: str = "eng"

    async def scan(self, image_bytes: bytes) -> LabelScan:
        """Recognize the label text and extract nutrition values from it."""
        if not image_bytes:
            raise ExtractionFailed("No image data received")
        data_url = _to_data_url(image_bytes)
        try:
            text = await self.client.recognize(
                image_data_url=data_url, language=self.language
            )
        except Exception as exc:
            raise ExtractionFailed("Could not read the nutrition label") from exc
        if not text or not text.strip():
            raise ExtractionFailed("No text was recognized in the image")
        return self.extract_text(text)

    def extract_text(self, text: str) -> LabelScan:
        """Extract nutrition values from text that was already recognized."""
        record = extract(text)
        if has_nutrition_data(record):
            status = ScanStatus.DETECTED
        else:
            _logger.info("No nutrition data found in %s characters of text", len(text))
            status = ScanStatus.NO_NUTRITION_DETECTED
        return LabelScan(text=text, record=record, status=status)


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
