"""Errors raised by the label and ledger services."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nutrition_ledger.domain.ledger import FoodEntry


class LedgerError(Exception):
    """Base class for errors surfaced to callers."""


class ValidationError(LedgerError):
    """Input rejected before anything was persisted."""


class EntryNotFound(LedgerError):
    """The requested entry does not exist for that user and day."""


class ExtractionFailed(LedgerError):
    """The OCR step failed or produced no usable text."""


class StoreError(LedgerError):
    """A persistence call failed.

    ``step`` names the ledger step that failed so callers know what is
    already durable.
    """

    def __init__(self, step: str, message: str | None = None) -> None:
        super().__init__(message or f"Store failure during {step}")
        self.step = step


class AggregateUpdateError(StoreError):
    """The entry row changed but the daily totals were not updated.

    ``operation`` is ``"add"`` when the entry was just stored and ``"remove"``
    when it was just deleted. An add can be retried for ``entry`` alone; a
    remove has no row left to retry from, so the day must be reconciled from
    its remaining entries. Re-running the whole operation would count the
    entry twice.
    """

    def __init__(
        self,
        entry: "FoodEntry",
        message: str | None = None,
        operation: str = "add",
    ) -> None:
        super().__init__(
            "update_totals",
            message or f"Daily totals were not updated for entry {entry.id}",
        )
        self.entry = entry
        self.operation = operation


class DuplicateRowError(Exception):
    """Raised by store adapters when an insert hits a unique constraint."""
