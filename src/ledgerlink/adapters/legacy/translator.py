"""Translate legacy ledger records into integrated rows and back.

Two record shapes exist. A *flat* record belongs to one ledger and maps field
codes straight to ``{"value": ...}`` (plus ``$id`` and other ``$`` metadata); an
*integrated* record carries ``ledgerData`` per system and ``recordIds``.
"""

from __future__ import annotations

from collections.abc import Mapping
from logging import getLogger
from typing import Any

from pydantic import ValidationError

from ledgerlink.domain.model import (
    ConversionError,
    IntegratedRow,
    SourceRecord,
    SourceSystem,
    system_for_primary_key_field,
)
from ledgerlink.domain.schema import FieldSchemaRegistry

from .schema import (
    META_FIELD_PREFIX,
    RECORD_ID_FIELD,
    FieldPayload,
    IntegratedRecordPayload,
    LegacyRecord,
    is_integrated_record,
)

log = getLogger(__name__)


class LegacyTranslator:
    """Schema-aware implementation of ``LegacyRecordTranslator``."""

    def __init__(self, schema: FieldSchemaRegistry | None = None) -> None:
        self.schema = schema or FieldSchemaRegistry.with_defaults()

    def to_row(self, record: LegacyRecord) -> IntegratedRow:
        if not isinstance(record, Mapping):
            raise ConversionError(
                f"Legacy record must be a mapping, got {type(record).__name__}"
            )
        try:
            if is_integrated_record(record):
                return self._from_integrated(IntegratedRecordPayload.model_validate(record))
            return self._from_flat(record)
        except ValidationError as exc:
            raise ConversionError(f"Invalid legacy record: {exc}") from exc

    def to_record(self, row: IntegratedRow) -> dict[str, Any]:
        systems = row.get_active_systems()
        if not systems:
            raise ConversionError(f"Row {row.id} has no active source record to export")
        if len(systems) == 1:
            return _flat_record(row.get_source_record(systems[0]))
        return {
            "integrationKey": row.integration_key,
            "isIntegratedRecord": row.is_integrated,
            "ledgerData": {
                system.value: _field_payloads(row.get_source_record(system)) for system in systems
            },
            "recordIds": {
                system.value: record_id
                for system in systems
                if (record_id := row.get_external_record_id(system))
            },
        }

    # Import

    def _from_flat(self, record: LegacyRecord) -> IntegratedRow:
        if not all(isinstance(code, str) for code in record):
            raise ConversionError("Flat legacy record has non-string field codes")
        payloads = {
            code: FieldPayload.model_validate(data)
            for code, data in record.items()
            if not code.startswith(META_FIELD_PREFIX)
        }
        if not payloads:
            raise ConversionError("Flat legacy record has no fields")

        system = self._detect_system(payloads)
        record_id = None
        if RECORD_ID_FIELD in record:
            record_id = FieldPayload.model_validate(record[RECORD_ID_FIELD]).value or None

        source_record = self._build_record(system, payloads, record_id)
        return IntegratedRow(source_records={system: source_record})

    def _from_integrated(self, payload: IntegratedRecordPayload) -> IntegratedRow:
        records: dict[SourceSystem, SourceRecord] = {}
        for name, fields in payload.ledger_data.items():
            system = _known_system(name)
            if system is not None:
                records[system] = self._build_record(system, fields, payload.record_ids.get(name))

        # Record ids of ledgers without data stay attached to an inactive slot.
        for name, record_id in payload.record_ids.items():
            system = _known_system(name)
            if system is not None and system not in records and record_id:
                records[system] = SourceRecord(
                    source_system=system, external_record_id=record_id, is_active=False
                )

        row = IntegratedRow(source_records=records)
        if payload.integration_key and payload.integration_key != row.integration_key:
            log.debug(
                "Legacy key %s re-derived as %s", payload.integration_key, row.integration_key
            )
        return row

    def _detect_system(self, payloads: Mapping[str, FieldPayload]) -> SourceSystem:
        for code in payloads:
            system = system_for_primary_key_field(code)
            if system is not None:
                return system
        for code in payloads:
            system = self.schema.find_owning_system(code)
            if system is not None:
                return system
        raise ConversionError(
            f"Cannot detect the source system from fields: {', '.join(payloads)}"
        )

    def _build_record(
        self,
        system: SourceSystem,
        payloads: Mapping[str, FieldPayload],
        record_id: str | None,
    ) -> SourceRecord:
        fields = {
            code: self.schema.build_field_value(system, code, payload.value)
            for code, payload in payloads.items()
        }
        return SourceRecord(
            source_system=system,
            fields=fields,
            external_record_id=record_id,
            is_active=bool(fields) or record_id is not None,
        )


def _known_system(name: str) -> SourceSystem | None:
    try:
        return SourceSystem(name)
    except ValueError:
        log.warning("Skipping unknown source system %r in legacy record", name)
        return None


def _field_payloads(record: SourceRecord) -> dict[str, dict[str, str]]:
    return {code: {"value": value.value} for code, value in record.fields.items()}


def _flat_record(record: SourceRecord) -> dict[str, Any]:
    flat: dict[str, Any] = dict(_field_payloads(record))
    if record.external_record_id:
        flat[RECORD_ID_FIELD] = {"value": record.external_record_id}
    return flat


def from_legacy_record(
    record: LegacyRecord, *, schema: FieldSchemaRegistry | None = None
) -> IntegratedRow:
    return LegacyTranslator(schema).to_row(record)


def to_legacy_record(row: IntegratedRow) -> dict[str, Any]:
    return LegacyTranslator().to_record(row)
