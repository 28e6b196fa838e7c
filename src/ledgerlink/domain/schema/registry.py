"""Field schema registry: definitions per source system.

The registry owns no row state. Rows consult it to attach validation rules to
field values and to find which system a bare field code belongs to.
"""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING

from ledgerlink.domain.model import FieldValue, SourceSystem, sorted_systems

from .defaults import DEFAULT_FIELD_DEFINITIONS

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ledgerlink.domain.model import IntegratedRow, SourceRecord

    from .definitions import FieldDefinition


log = getLogger(__name__)


class FieldSchemaRegistry:
    def __init__(
        self,
        definitions: Mapping[SourceSystem, Mapping[str, FieldDefinition]] | None = None,
    ) -> None:
        self._definitions: dict[SourceSystem, dict[str, FieldDefinition]] = {
            system: {} for system in SourceSystem
        }
        for system, by_code in (definitions or {}).items():
            for field_code, definition in by_code.items():
                self.set_field_definition(system, field_code, definition)

    @classmethod
    def with_defaults(cls) -> FieldSchemaRegistry:
        return cls(DEFAULT_FIELD_DEFINITIONS)

    def set_field_definition(
        self,
        system: SourceSystem,
        field_code: str,
        definition: FieldDefinition,
    ) -> None:
        self._definitions[SourceSystem(system)][field_code] = definition

    def get_field_definition(
        self, system: SourceSystem, field_code: str
    ) -> FieldDefinition | None:
        return self._definitions[SourceSystem(system)].get(field_code)

    def get_system_field_definitions(self, system: SourceSystem) -> Mapping[str, FieldDefinition]:
        return MappingProxyType(self._definitions[SourceSystem(system)])

    def find_owning_system(self, field_code: str) -> SourceSystem | None:
        owners = [
            system
            for system in sorted_systems(self._definitions)
            if field_code in self._definitions[system]
        ]
        if len(owners) > 1:
            log.warning("Field %s is defined for several systems: %s", field_code, owners)
        return owners[0] if owners else None

    # Field values

    def build_field_value(
        self,
        system: SourceSystem,
        field_code: str,
        value: str | None = None,
    ) -> FieldValue:
        """Create an unmodified value carrying the schema's rules."""

        definition = self.get_field_definition(system, field_code)
        if definition is None:
            return FieldValue(value=value or "")
        return FieldValue(
            value=definition.default_value if value is None else value,
            is_required=definition.required,
            validation_rules=definition.rules(),
        )

    def attach_rules(self, system: SourceSystem, field_code: str, value: FieldValue) -> FieldValue:
        definition = self.get_field_definition(system, field_code)
        if definition is None:
            return value
        return value.with_rules(definition.rules(), is_required=definition.required)

    def attach_record_rules(self, record: SourceRecord) -> SourceRecord:
        fields = {
            code: self.attach_rules(record.source_system, code, value)
            for code, value in record.fields.items()
        }
        return replace(record, fields=fields)

    def attach_row_rules(self, row: IntegratedRow) -> IntegratedRow:
        """Re-attach rules to every field; not a state change, so no version bump."""

        records = {
            system: self.attach_record_rules(record)
            for system, record in row.source_records.items()
        }
        return replace(row, source_records=records)
