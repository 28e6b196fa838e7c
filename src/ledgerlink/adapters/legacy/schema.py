"""Pydantic models describing the legacy ledger record payloads."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator

INTEGRATED_MARKER: Final[str] = "ledgerData"
RECORD_ID_FIELD: Final[str] = "$id"
META_FIELD_PREFIX: Final[str] = "$"


def _to_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        raise ValueError("boolean field values are not supported")  # noqa: TRY004
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ValueError(f"unsupported field value of type {type(value).__name__}")


class LegacyBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class FieldPayload(LegacyBaseModel):
    value: str = ""
    type: str | None = None

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value: object) -> str:
        return _to_text(value)


class IntegratedRecordPayload(LegacyBaseModel):
    integration_key: str | None = Field(default=None, alias="integrationKey")
    is_integrated: bool | None = Field(default=None, alias="isIntegratedRecord")
    ledger_data: dict[str, dict[str, FieldPayload]] = Field(
        default_factory=dict, alias="ledgerData"
    )
    record_ids: dict[str, str | None] = Field(default_factory=dict, alias="recordIds")

    @field_validator("ledger_data", mode="before")
    @classmethod
    def _drop_empty_systems(cls, value: object) -> object:
        if isinstance(value, Mapping):
            return {system: fields for system, fields in value.items() if fields}
        return value

    @field_validator("record_ids", mode="before")
    @classmethod
    def _stringify_ids(cls, value: object) -> object:
        if isinstance(value, Mapping):
            return {
                system: str(record_id) if record_id not in (None, "") else None
                for system, record_id in value.items()
            }
        return value


def is_integrated_record(record: Mapping[str, Any]) -> bool:
    return INTEGRATED_MARKER in record


LegacyRecord: TypeAlias = Mapping[str, Any]
