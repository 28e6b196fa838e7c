"""Result and diagnostic records produced by the row manager."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledgerlink.domain.model import SourceSystem


class IssueKind(StrEnum):
    DUPLICATE_INTEGRATION_KEY = "duplicate_integration_key"
    INDEX_MISMATCH = "index_mismatch"
    MISSING_INDEX_ENTRY = "missing_index_entry"
    SOURCE_INDEX_MISMATCH = "source_index_mismatch"


@dataclass(frozen=True, slots=True, kw_only=True)
class ConsistencyIssue:
    kind: IssueKind
    key: str | None = None
    row_ids: tuple[str, ...] = ()
    system: SourceSystem | None = None
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class ConsistencyReport:
    """Index/row desync findings. Nothing here is repaired automatically."""

    issues: tuple[ConsistencyIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.issues

    def of_kind(self, kind: IssueKind) -> tuple[ConsistencyIssue, ...]:
        return tuple(issue for issue in self.issues if issue.kind is kind)


@dataclass(frozen=True, slots=True, kw_only=True)
class RowStatistics:
    total_rows: int
    integrated_rows: int
    single_rows: int
    system_counts: dict[SourceSystem, int]
    validation_errors: int


@dataclass(slots=True)
class ImportResult:
    success: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list["str"])
