"""In-memory row store with a key index and a by-system index.

``RowIndexManager`` is the only mutable owner of rows. Every mutation goes
through ``set_row`` or ``remove_row`` so that both indexes move together:

* ``_by_integration_key`` holds exactly one entry per row, equal to its key;
* ``_by_source_system`` lists each row id under each of its active and valid
  systems and under no other, in the order the rows were indexed.

Invalid rows are accepted by default (operators pass through transient states
while merging); ``strict_validation`` refuses rows whose active records fail
their field rules.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from ledgerlink.domain.model import (
    ConversionError,
    IntegratedRow,
    InvalidOperationError,
    RowNotFoundError,
    SourceSystem,
    sorted_systems,
)
from ledgerlink.domain.schema import FieldSchemaRegistry

from .events import (
    AppSeparated,
    ChangeEvent,
    FieldsExchanged,
    ObserverRegistry,
    RowRemoved,
    RowUpdated,
)
from .reports import (
    ConsistencyIssue,
    ConsistencyReport,
    ImportResult,
    IssueKind,
    RowStatistics,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ledgerlink.domain.model import ExchangeResult, SeparationResult
    from ledgerlink.domain.ports import LegacyRecordTranslator

    from .events import Observer


log = getLogger(__name__)


class RowIndexManager:
    def __init__(
        self,
        *,
        schema: FieldSchemaRegistry | None = None,
        translator: LegacyRecordTranslator | None = None,
        strict_validation: bool = False,
    ) -> None:
        self.schema = schema or FieldSchemaRegistry.with_defaults()
        self.translator = translator
        self.strict_validation = strict_validation
        self._rows: dict[str, IntegratedRow] = {}
        self._by_integration_key: dict[str, str] = {}
        self._by_source_system: dict[SourceSystem, dict[str, None]] = {
            system: {} for system in SourceSystem
        }
        self._events = ObserverRegistry()

    @property
    def version(self) -> int:
        return self._events.version

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, row_id: object) -> bool:
        return row_id in self._rows

    # Writes

    def set_row(self, row: IntegratedRow) -> bool:
        """Store ``row`` (insert or replace by id) and reindex it."""

        validation = row.validate()
        if not validation.is_valid:
            log.warning("Row %s failed validation: %s", row.id, "; ".join(validation.errors))
            if self.strict_validation and not row.validate_records().is_valid:
                return False

        old_row = self._rows.get(row.id)
        try:
            if old_row is not None:
                self._unindex(old_row)
            self._index(row)
            self._rows[row.id] = row
        except Exception:
            log.exception("Failed to store row %s", row.id)
            return False

        self._events.notify(ChangeEvent.ROW_UPDATED, RowUpdated(row=row, old_row=old_row))
        return True

    def remove_row(self, row_id: str) -> bool:
        row = self._rows.get(row_id)
        if row is None:
            return False
        try:
            self._unindex(row)
            del self._rows[row_id]
        except Exception:
            log.exception("Failed to remove row %s", row_id)
            return False

        self._events.notify(ChangeEvent.ROW_REMOVED, RowRemoved(row=row))
        return True

    def remove_row_by_integration_key(self, integration_key: str) -> bool:
        row = self.get_row_by_integration_key(integration_key)
        if row is None:
            return False
        return self.remove_row(row.id)

    def clear_all_rows(self) -> int:
        removed = sum(1 for row_id in list(self._rows) if self.remove_row(row_id))
        log.info("Cleared %d rows", removed)
        return removed

    def update_fields(self, row_id: str, updates: Mapping[str, str]) -> IntegratedRow:
        """Apply raw values addressed by field code alone.

        The owning system comes from the schema; codes the schema does not know
        go to the first active system already holding them. Codes that resolve
        to no system are skipped.
        """

        row = self._require_row(row_id)
        updated = row
        for field_code, value in updates.items():
            system = self._resolve_field_system(updated, field_code)
            if system is None:
                log.warning("No system owns field %s on row %s; skipped", field_code, row_id)
                continue
            record = updated.get_source_record(system)
            if not record.has_field(field_code):
                seeded = self.schema.build_field_value(system, field_code, "")
                updated = updated.set_field(system, field_code, seeded)
            updated = updated.set_field(system, field_code, value)

        if updated is row:
            return row
        if not self.set_row(updated):
            raise InvalidOperationError(f"Row {row_id} was rejected after updating fields")
        return updated

    def separate_app(self, row_id: str, system: SourceSystem) -> SeparationResult:
        row = self._require_row(row_id)
        system = SourceSystem(system)
        result = row.separate_app(system)
        self._check_strict(result.source_row, result.separated_row)

        self._store_pair(row, result.source_row, result.separated_row, "Separation")
        self._events.notify(
            ChangeEvent.APP_SEPARATED,
            AppSeparated(
                source_row=result.source_row,
                separated_row=result.separated_row,
                system=system,
            ),
        )
        log.info(
            "Separated %s from %s into %s",
            system,
            result.source_row.integration_key,
            result.separated_row.integration_key,
        )
        return result

    def exchange_fields(
        self,
        source_row_id: str,
        target_row_id: str,
        source_system: SourceSystem,
        target_system: SourceSystem,
    ) -> ExchangeResult:
        if source_row_id == target_row_id:
            raise InvalidOperationError(
                f"Cannot exchange fields of row {source_row_id} with itself"
            )
        source_row = self._require_row(source_row_id)
        target_row = self._require_row(target_row_id)
        source_system = SourceSystem(source_system)
        target_system = SourceSystem(target_system)

        result = source_row.exchange_fields(target_row, source_system, target_system)
        self._check_strict(result.source_row, result.target_row)

        self._store_pair(source_row, result.source_row, result.target_row, "Exchange")
        self._events.notify(
            ChangeEvent.FIELDS_EXCHANGED,
            FieldsExchanged(
                source_row=result.source_row,
                target_row=result.target_row,
                source_system=source_system,
                target_system=target_system,
            ),
        )
        return result

    # Reads

    def get_row(self, row_id: str) -> IntegratedRow | None:
        return self._rows.get(row_id)

    def get_row_by_integration_key(self, integration_key: str) -> IntegratedRow | None:
        row_id = self._by_integration_key.get(integration_key)
        return self._rows.get(row_id) if row_id is not None else None

    def get_rows_by_source_system(self, system: SourceSystem) -> list[IntegratedRow]:
        row_ids = self._by_source_system[SourceSystem(system)]
        return [self._rows[row_id] for row_id in row_ids if row_id in self._rows]

    def get_all_rows(self) -> list[IntegratedRow]:
        return list(self._rows.values())

    def find_row_by_external_record_id(self, record_id: str) -> IntegratedRow | None:
        for row in self._rows.values():
            if record_id in row.get_external_record_ids().values():
                return row
        return None

    def filter_rows(self, conditions: Mapping[str, str]) -> list[IntegratedRow]:
        """Rows where every ``code -> value`` matches a field of an active system."""

        return [row for row in self._rows.values() if _matches(row, conditions)]

    # Legacy boundary

    def import_from_legacy(self, records: Iterable[Mapping[str, Any]]) -> ImportResult:
        translator = self._require_translator()
        result = ImportResult()
        for position, record in enumerate(records):
            try:
                row = translator.to_row(record)
            except ConversionError as exc:
                log.warning("Skipping legacy record #%d: %s", position, exc)
                result.failed += 1
                result.errors.append(f"Record #{position}: {exc}")
                continue
            if self.set_row(row):
                result.success += 1
            else:
                result.failed += 1
                result.errors.append(f"Record #{position}: rejected row {row.integration_key}")
        log.info("Imported %d legacy records (%d failed)", result.success, result.failed)
        return result

    def export_to_legacy(self) -> list[dict[str, Any]]:
        translator = self._require_translator()
        exported: list[dict[str, Any]] = []
        for row in self._rows.values():
            try:
                exported.append(translator.to_record(row))
            except ConversionError as exc:
                log.warning("Skipping row %s on export: %s", row.integration_key, exc)
        return exported

    # Snapshot

    def snapshot(self) -> list[dict[str, Any]]:
        return [row.to_dict() for row in self._rows.values()]

    def load_snapshot(self, rows: Iterable[Mapping[str, Any]]) -> int:
        """Replace the current rows with a snapshot, re-attaching schema rules.

        Every entry is parsed before anything is cleared; a malformed entry
        raises ``ConversionError`` and leaves the current rows untouched.
        """

        try:
            parsed = [
                self.schema.attach_row_rules(IntegratedRow.from_dict(data)) for data in rows
            ]
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise ConversionError(f"Invalid snapshot entry: {exc}") from exc

        self.clear_all_rows()
        return sum(1 for row in parsed if self.set_row(row))

    # Observers

    def add_observer(self, observer: Observer) -> None:
        self._events.add(observer)

    def remove_observer(self, observer: Observer) -> None:
        self._events.remove(observer)

    # Diagnostics

    def validate_consistency(self) -> ConsistencyReport:
        issues: list[ConsistencyIssue] = []

        by_key: dict[str, list[str]] = {}
        for row in self._rows.values():
            by_key.setdefault(row.integration_key, []).append(row.id)
        issues.extend(
            ConsistencyIssue(
                kind=IssueKind.DUPLICATE_INTEGRATION_KEY,
                key=key,
                row_ids=tuple(row_ids),
            )
            for key, row_ids in by_key.items()
            if len(row_ids) > 1
        )

        for key, row_id in self._by_integration_key.items():
            row = self._rows.get(row_id)
            if row is None or row.integration_key != key:
                issues.append(
                    ConsistencyIssue(
                        kind=IssueKind.INDEX_MISMATCH,
                        key=key,
                        row_ids=(row_id,),
                        detail=(
                            "row missing" if row is None else f"row key is {row.integration_key}"
                        ),
                    )
                )

        for row in self._rows.values():
            if self._by_integration_key.get(row.integration_key) != row.id:
                issues.append(
                    ConsistencyIssue(
                        kind=IssueKind.MISSING_INDEX_ENTRY,
                        key=row.integration_key,
                        row_ids=(row.id,),
                    )
                )

        for system in sorted_systems(self._by_source_system):
            indexed = set(self._by_source_system[system])
            expected = {
                row.id for row in self._rows.values() if system in row.get_active_systems()
            }
            for row_id in sorted(indexed - expected):
                issues.append(
                    ConsistencyIssue(
                        kind=IssueKind.SOURCE_INDEX_MISMATCH,
                        row_ids=(row_id,),
                        system=system,
                        detail="stale entry",
                    )
                )
            for row_id in sorted(expected - indexed):
                issues.append(
                    ConsistencyIssue(
                        kind=IssueKind.SOURCE_INDEX_MISMATCH,
                        row_ids=(row_id,),
                        system=system,
                        detail="missing entry",
                    )
                )

        return ConsistencyReport(tuple(issues))

    def get_statistics(self) -> RowStatistics:
        system_counts = dict.fromkeys(sorted_systems(SourceSystem), 0)
        integrated = 0
        invalid = 0
        for row in self._rows.values():
            if row.is_integrated:
                integrated += 1
            for system in row.get_active_systems():
                system_counts[system] += 1
            if not row.validate().is_valid:
                invalid += 1
        return RowStatistics(
            total_rows=len(self._rows),
            integrated_rows=integrated,
            single_rows=len(self._rows) - integrated,
            system_counts=system_counts,
            validation_errors=invalid,
        )

    # Internals

    def _index(self, row: IntegratedRow) -> None:
        holder = self._by_integration_key.get(row.integration_key)
        if holder is not None and holder != row.id:
            log.warning(
                "Integration key %s moves from row %s to row %s",
                row.integration_key,
                holder,
                row.id,
            )
        self._by_integration_key[row.integration_key] = row.id
        for system in row.get_active_systems():
            self._by_source_system[system][row.id] = None

    def _unindex(self, row: IntegratedRow) -> None:
        # Only drop the key entry this row still owns.
        if self._by_integration_key.get(row.integration_key) == row.id:
            del self._by_integration_key[row.integration_key]
        for row_ids in self._by_source_system.values():
            row_ids.pop(row.id, None)

    def _require_row(self, row_id: str) -> IntegratedRow:
        row = self._rows.get(row_id)
        if row is None:
            raise RowNotFoundError(row_id)
        return row

    def _require_translator(self) -> LegacyRecordTranslator:
        if self.translator is None:
            raise InvalidOperationError("No legacy record translator is configured")
        return self.translator

    def _resolve_field_system(self, row: IntegratedRow, field_code: str) -> SourceSystem | None:
        system = self.schema.find_owning_system(field_code)
        if system is not None:
            return system
        for candidate in row.get_active_systems():
            if row.get_source_record(candidate).has_field(field_code):
                return candidate
        return None

    def _store_pair(
        self,
        original: IntegratedRow,
        first: IntegratedRow,
        second: IntegratedRow,
        operation: str,
    ) -> None:
        """Store two rows of one operation, restoring ``original`` if the second fails."""

        if not self.set_row(first):
            raise InvalidOperationError(f"{operation} aborted: row {first.id} was rejected")
        if not self.set_row(second):
            log.error(
                "%s: row %s was rejected; restoring row %s", operation, second.id, original.id
            )
            if not self.set_row(original):
                log.error("Failed to restore row %s", original.id)
            raise InvalidOperationError(f"{operation} aborted: row {second.id} was rejected")

    def _check_strict(self, *rows: IntegratedRow) -> None:
        if not self.strict_validation:
            return
        for row in rows:
            result = row.validate_records()
            if not result.is_valid:
                raise InvalidOperationError(
                    f"Row {row.id} would fail validation: {'; '.join(result.errors)}"
                )


def _matches(row: IntegratedRow, conditions: Mapping[str, str]) -> bool:
    active = row.get_active_systems()
    for field_code, expected in conditions.items():
        if not any(
            row.get_source_record(system).has_field(field_code)
            and row.get_field(system, field_code).value == expected
            for system in active
        ):
            return False
    return True
