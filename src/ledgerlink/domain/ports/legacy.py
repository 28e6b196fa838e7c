"""Port for converting between integrated rows and legacy ledger records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ledgerlink.domain.model import IntegratedRow


@runtime_checkable
class LegacyRecordTranslator(Protocol):
    """Boundary conversion used by ``RowIndexManager`` import and export.

    Both directions raise ``ConversionError`` for a record they cannot handle.
    """

    def to_row(self, record: Mapping[str, Any]) -> IntegratedRow: ...

    def to_record(self, row: IntegratedRow) -> dict[str, Any]: ...


__all__ = ["LegacyRecordTranslator"]
