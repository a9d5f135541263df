"""Models for label scan results."""

from dataclasses import dataclass
from enum import StrEnum

from nutrition_ledger.domain.nutrition import NutritionRecord


class ScanStatus(StrEnum):
    """Outcome of running the extractor on label text."""

    DETECTED = "detected"
    NO_NUTRITION_DETECTED = "no_nutrition_detected"


@dataclass(frozen=True)
class LabelScan:
    """Recognized text and the nutrition read from it."""

    text: str
    record: NutritionRecord
    status: ScanStatus

    @property
    def detected(self) -> bool:
        """Return True when the record is worth confirming."""
        return self.status is ScanStatus.DETECTED

    def prefill(self) -> NutritionRecord:
        """Return values for the confirmation form, zero-filling the macros."""
        return self.record.with_required_defaults()
