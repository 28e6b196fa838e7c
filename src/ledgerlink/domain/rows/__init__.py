"""Row store, change events and diagnostics."""

from __future__ import annotations

from .events import (
    AppSeparated,
    ChangeEvent,
    EventPayload,
    FieldsExchanged,
    Observer,
    ObserverRegistry,
    RowRemoved,
    RowUpdated,
)
from .manager import RowIndexManager
from .reports import (
    ConsistencyIssue,
    ConsistencyReport,
    ImportResult,
    IssueKind,
    RowStatistics,
)

__all__ = [  # noqa: RUF022
    # manager
    "RowIndexManager",
    # events
    "ChangeEvent",
    "EventPayload",
    "Observer",
    "ObserverRegistry",
    "RowUpdated",
    "RowRemoved",
    "AppSeparated",
    "FieldsExchanged",
    # reports
    "ConsistencyIssue",
    "ConsistencyReport",
    "ImportResult",
    "IssueKind",
    "RowStatistics",
]
