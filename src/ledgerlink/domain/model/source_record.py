"""Per-ledger sub-record of an integrated row."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, TypeVar

from ledgerlink.domain.model.enums import SourceSystem
from ledgerlink.domain.model.field_value import FieldValue
from ledgerlink.domain.model.keys import primary_key_field_for
from ledgerlink.domain.model.validation import ValidationResult


K = TypeVar("K")
V = TypeVar("V")


def _freeze(mapping: Mapping[K, V] | None = None) -> Mapping[K, V]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True, slots=True, kw_only=True)
class SourceRecord:
    """Field map of one source system plus its external record id.

    Every command returns a new record; the field map is copied, the field values
    themselves are shared.
    """

    source_system: SourceSystem
    fields: Mapping[str, FieldValue] = field(default_factory=_freeze)
    external_record_id: str | None = None
    is_active: bool = True
    metadata: Mapping[str, Any] = field(default_factory=_freeze)

    def __post_init__(self) -> None:
        object.__setattr__(self, "source_system", SourceSystem(self.source_system))
        object.__setattr__(self, "fields", _freeze(self.fields))
        object.__setattr__(self, "metadata", _freeze(self.metadata))

    @classmethod
    def empty(cls, system: SourceSystem) -> SourceRecord:
        return cls(source_system=system, is_active=False)

    # Queries

    def get_field(self, field_code: str) -> FieldValue:
        return self.fields.get(field_code) or FieldValue()

    def has_field(self, field_code: str) -> bool:
        return field_code in self.fields

    @property
    def primary_key_field_code(self) -> str:
        return primary_key_field_for(self.source_system)

    def get_primary_key_field(self) -> FieldValue:
        return self.get_field(self.primary_key_field_code)

    def is_valid(self) -> bool:
        return self.is_active and not self.get_primary_key_field().is_blank()

    def validate(self) -> ValidationResult:
        errors: list[str] = []
        if self.is_active and not self.is_valid():
            errors.append(
                f"{self.source_system}: primary key {self.primary_key_field_code} is not set"
            )
        for field_code, value in self.fields.items():
            result = value.validate()
            if not result.is_valid:
                errors.append(f"{field_code}: {', '.join(result.errors)}")
        return ValidationResult(tuple(errors))

    # Commands

    def set_field(self, field_code: str, value: str | FieldValue) -> SourceRecord:
        fields = dict(self.fields)
        if isinstance(value, FieldValue):
            fields[field_code] = value
        else:
            fields[field_code] = self.get_field(field_code).set_value(value)
        return replace(self, fields=fields)

    def remove_field(self, field_code: str) -> SourceRecord:
        fields = {code: value for code, value in self.fields.items() if code != field_code}
        return replace(self, fields=fields)

    def mark_field_as_separated(self, field_code: str) -> SourceRecord:
        return self.set_field(field_code, self.get_field(field_code).mark_as_separated())

    def mark_all_fields_as_separated(self) -> SourceRecord:
        fields = {code: value.mark_as_separated() for code, value in self.fields.items()}
        return replace(self, fields=fields)

    def set_external_record_id(self, record_id: str | None) -> SourceRecord:
        return replace(self, external_record_id=record_id)

    def set_active(self, is_active: bool) -> SourceRecord:  # noqa: FBT001
        return replace(self, is_active=is_active)

    # Snapshot

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_system": self.source_system.value,
            "fields": {code: value.to_dict() for code, value in self.fields.items()},
            "external_record_id": self.external_record_id,
            "is_active": self.is_active,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SourceRecord:
        raw_fields: Mapping[str, Mapping[str, Any]] = data.get("fields") or {}
        return cls(
            source_system=SourceSystem(data["source_system"]),
            fields={code: FieldValue.from_dict(value) for code, value in raw_fields.items()},
            external_record_id=data.get("external_record_id"),
            is_active=bool(data.get("is_active", True)),
            metadata=data.get("metadata") or {},
        )
