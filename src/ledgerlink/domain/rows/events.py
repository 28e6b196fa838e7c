"""Synchronous change notification for the row manager."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from ledgerlink.domain.model import IntegratedRow, SourceSystem


log = getLogger(__name__)


class ChangeEvent(StrEnum):
    ROW_UPDATED = "row_updated"
    ROW_REMOVED = "row_removed"
    APP_SEPARATED = "app_separated"
    FIELDS_EXCHANGED = "fields_exchanged"


@dataclass(frozen=True, slots=True)
class RowUpdated:
    row: IntegratedRow
    old_row: IntegratedRow | None = None


@dataclass(frozen=True, slots=True)
class RowRemoved:
    row: IntegratedRow


@dataclass(frozen=True, slots=True)
class AppSeparated:
    source_row: IntegratedRow
    separated_row: IntegratedRow
    system: SourceSystem


@dataclass(frozen=True, slots=True)
class FieldsExchanged:
    source_row: IntegratedRow
    target_row: IntegratedRow
    source_system: SourceSystem
    target_system: SourceSystem


EventPayload: TypeAlias = RowUpdated | RowRemoved | AppSeparated | FieldsExchanged
Observer: TypeAlias = Callable[[ChangeEvent, EventPayload, int], None]


class ObserverRegistry:
    """Ordered observer list; one failing observer never stops the others."""

    def __init__(self) -> None:
        self._observers: list[Observer] = []
        self.version = 1

    def add(self, observer: Observer) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def remove(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def notify(self, event: ChangeEvent, payload: EventPayload) -> int:
        self.version += 1
        for observer in tuple(self._observers):
            try:
                observer(event, payload, self.version)
            except Exception:
                log.exception("Observer %r failed on %s", observer, event)
        return self.version
