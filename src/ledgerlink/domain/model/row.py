"""Integrated row: one sub-record per source system behind a derived identity.

Rows are immutable. Every command returns a new row with ``version`` bumped and
``updated_at`` refreshed; the integration key and the integrated flag are always
re-derived from the active and valid source records, never patched by hand.

``separate_app`` and ``exchange_fields`` are pure: they return the resulting rows
and leave persisting them to the caller (usually ``RowIndexManager``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from logging import getLogger
from types import MappingProxyType
from typing import Any
from uuid import uuid4

from ledgerlink.domain.model.enums import SourceSystem
from ledgerlink.domain.model.errors import InvalidOperationError, UnseparableSystemError
from ledgerlink.domain.model.field_value import FieldValue
from ledgerlink.domain.model.keys import build_integration_key, sorted_systems
from ledgerlink.domain.model.source_record import SourceRecord
from ledgerlink.domain.model.validation import ValidationResult

log = getLogger(__name__)


def new_row_id() -> str:
    return f"row_{uuid4().hex}"


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def _empty_records() -> Mapping[SourceSystem, SourceRecord]:
    return {system: SourceRecord.empty(system) for system in SourceSystem}


@dataclass(frozen=True, slots=True)
class SeparationResult:
    source_row: IntegratedRow
    separated_row: IntegratedRow


@dataclass(frozen=True, slots=True)
class ExchangeResult:
    source_row: IntegratedRow
    target_row: IntegratedRow


@dataclass(frozen=True, slots=True, kw_only=True)
class IntegratedRow:
    id: str = field(default_factory=new_row_id)
    source_records: Mapping[SourceSystem, SourceRecord] = field(default_factory=_empty_records)
    integration_key: str = ""
    is_integrated: bool = False
    version: int = 1
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    metadata: Mapping[str, Any] = field(default_factory=dict["str", "Any"])

    def __post_init__(self) -> None:
        records = dict(_empty_records())
        for system, record in self.source_records.items():
            slot = SourceSystem(system)
            if record.source_system is not slot:
                raise InvalidOperationError(
                    f"Source record of {record.source_system} cannot occupy the {slot} slot"
                )
            records[slot] = record
        object.__setattr__(self, "source_records", MappingProxyType(records))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
        # A blank key means "derive from the records"; restored rows keep theirs.
        if not self.integration_key.strip():
            object.__setattr__(self, "integration_key", self._derive_integration_key())
            object.__setattr__(self, "is_integrated", len(self.get_active_systems()) > 1)

    # Queries

    def get_source_record(self, system: SourceSystem) -> SourceRecord:
        return self.source_records[SourceSystem(system)]

    def get_field(self, system: SourceSystem, field_code: str) -> FieldValue:
        return self.get_source_record(system).get_field(field_code)

    def get_external_record_id(self, system: SourceSystem) -> str | None:
        return self.get_source_record(system).external_record_id

    def get_external_record_ids(self) -> dict[SourceSystem, str | None]:
        return {
            system: record.external_record_id for system, record in self.source_records.items()
        }

    def get_active_systems(self) -> list[SourceSystem]:
        return sorted_systems(
            system for system, record in self.source_records.items() if record.is_valid()
        )

    def get_integration_key(self) -> str:
        return self.integration_key

    def _derive_integration_key(self) -> str:
        primary_keys = {
            system: self.source_records[system].get_primary_key_field().value
            for system in self.get_active_systems()
        }
        return build_integration_key(primary_keys, row_id=self.id)

    def validate(self) -> ValidationResult:
        errors: list[str] = []
        if not self.integration_key.strip():
            errors.append("Integration key is not set")
        if not self.get_active_systems():
            errors.append("Row has no active source record")
        return ValidationResult((*errors, *self.validate_records().errors))

    def validate_records(self) -> ValidationResult:
        """Field-level findings of the active records only.

        A row emptied by a separation still passes here.
        """

        errors: list[str] = []
        for system in sorted_systems(self.source_records):
            record = self.source_records[system]
            if not record.is_active:
                continue
            result = record.validate()
            if not result.is_valid:
                errors.append(f"{system}: {', '.join(result.errors)}")
        return ValidationResult(tuple(errors))

    # Commands

    def _rebuilt(self, records: Mapping[SourceSystem, SourceRecord]) -> IntegratedRow:
        return replace(
            self,
            source_records=records,
            integration_key="",
            version=self.version + 1,
            updated_at=_utcnow(),
        )

    def set_source_record(self, system: SourceSystem, record: SourceRecord) -> IntegratedRow:
        records = dict(self.source_records)
        records[SourceSystem(system)] = record
        return self._rebuilt(records)

    def set_field(
        self, system: SourceSystem, field_code: str, value: str | FieldValue
    ) -> IntegratedRow:
        record = self.get_source_record(system).set_field(field_code, value).set_active(True)
        return self.set_source_record(system, record)

    def remove_field(self, system: SourceSystem, field_code: str) -> IntegratedRow:
        record = self.get_source_record(system).remove_field(field_code)
        if not record.fields and not record.external_record_id:
            record = record.set_active(False)
        return self.set_source_record(system, record)

    def set_external_record_id(self, system: SourceSystem, record_id: str | None) -> IntegratedRow:
        record = self.get_source_record(system).set_external_record_id(record_id)
        return self.set_source_record(system, record)

    def separate_app(self, system: SourceSystem) -> SeparationResult:
        """Split ``system`` out of this row into a brand-new row.

        The remaining row gets an empty inactive slot; the new row holds the
        extracted record with every field flagged as separated.
        """

        system = SourceSystem(system)
        extracted = self.get_source_record(system)
        if not extracted.is_valid():
            raise UnseparableSystemError(system)

        records = dict(self.source_records)
        records[system] = SourceRecord.empty(system)
        source_row = self._rebuilt(records)

        separated_row = IntegratedRow(
            source_records={system: extracted.mark_all_fields_as_separated()},
            metadata={"separated_from": self.id},
        )
        log.debug(
            "Separated %s from row %s: %s -> %s + %s",
            system,
            self.id,
            self.integration_key,
            source_row.integration_key,
            separated_row.integration_key,
        )
        return SeparationResult(source_row=source_row, separated_row=separated_row)

    def exchange_fields(
        self,
        target_row: IntegratedRow,
        source_system: SourceSystem,
        target_system: SourceSystem,
    ) -> ExchangeResult:
        """Trade source records with ``target_row``.

        With two different systems this row takes ``target_row``'s
        ``target_system`` record and vacates its own ``source_system`` slot, and
        ``target_row`` takes this row's ``source_system`` record and vacates its
        ``target_system`` slot. With the same system on both sides the two
        records are swapped in place.
        """

        source_system = SourceSystem(source_system)
        target_system = SourceSystem(target_system)
        own = self.get_source_record(source_system)
        theirs = target_row.get_source_record(target_system)

        if source_system is target_system:
            new_source = self.set_source_record(source_system, theirs)
            new_target = target_row.set_source_record(source_system, own)
        else:
            new_source = self.set_source_record(target_system, theirs).set_source_record(
                source_system, SourceRecord.empty(source_system)
            )
            new_target = target_row.set_source_record(source_system, own).set_source_record(
                target_system, SourceRecord.empty(target_system)
            )
        return ExchangeResult(source_row=new_source, target_row=new_target)

    # Snapshot

    def to_dict(self) -> dict[str, Any]:
        # Untouched slots are implied by the constructor and left out.
        records = {
            system.value: record.to_dict()
            for system, record in self.source_records.items()
            if record != SourceRecord.empty(system)
        }
        return {
            "id": self.id,
            "source_records": records,
            "integration_key": self.integration_key,
            "is_integrated": self.is_integrated,
            "version": self.version,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IntegratedRow:
        raw_records: Mapping[str, Mapping[str, Any]] = data.get("source_records") or {}
        return cls(
            id=data["id"],
            source_records={
                SourceSystem(system): SourceRecord.from_dict(record)
                for system, record in raw_records.items()
            },
            integration_key=data.get("integration_key", ""),
            is_integrated=bool(data.get("is_integrated", False)),
            version=int(data.get("version", 1)),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
            metadata=data.get("metadata") or {},
        )
