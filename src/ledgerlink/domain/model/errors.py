"""Domain error taxonomy.

Validation failures are not exceptions: they travel as ``ValidationResult``
values and are logged by the row manager.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledgerlink.domain.model.enums import SourceSystem


class LedgerError(Exception):
    """Base class for domain errors raised to callers."""


class RowNotFoundError(LedgerError, LookupError):
    """Raised when a mutating call references an unknown row."""

    def __init__(self, row_id: str) -> None:
        self.row_id = row_id
        super().__init__(f"Row not found: {row_id}")


class InvalidOperationError(LedgerError, ValueError):
    """Raised when an operation is not applicable to the current row state."""


class UnseparableSystemError(InvalidOperationError):
    """Raised when separating a source system that is inactive or has no primary key."""

    def __init__(self, system: SourceSystem) -> None:
        self.system = system
        super().__init__(f"Cannot separate {system}: source record is inactive or empty")


class ConversionError(LedgerError, ValueError):
    """Raised when one legacy record cannot be converted."""
