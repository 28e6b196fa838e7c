"""Public domain model surface."""

from __future__ import annotations

from ledgerlink.domain.model.enums import FieldKind, SourceSystem
from ledgerlink.domain.model.errors import (
    ConversionError,
    InvalidOperationError,
    LedgerError,
    RowNotFoundError,
    UnseparableSystemError,
)
from ledgerlink.domain.model.field_value import FieldValue
from ledgerlink.domain.model.keys import (
    PRIMARY_KEY_FIELDS,
    build_integration_key,
    parse_integration_key,
    primary_key_field_for,
    sorted_systems,
    system_for_primary_key_field,
)
from ledgerlink.domain.model.row import (
    ExchangeResult,
    IntegratedRow,
    SeparationResult,
    new_row_id,
)
from ledgerlink.domain.model.source_record import SourceRecord
from ledgerlink.domain.model.validation import Rule, ValidationResult

__all__ = [  # noqa: RUF022
    # enums
    "SourceSystem",
    "FieldKind",
    # values
    "FieldValue",
    "SourceRecord",
    "IntegratedRow",
    "SeparationResult",
    "ExchangeResult",
    "new_row_id",
    # keys
    "PRIMARY_KEY_FIELDS",
    "build_integration_key",
    "parse_integration_key",
    "primary_key_field_for",
    "sorted_systems",
    "system_for_primary_key_field",
    # validation
    "Rule",
    "ValidationResult",
    # errors
    "LedgerError",
    "ConversionError",
    "InvalidOperationError",
    "RowNotFoundError",
    "UnseparableSystemError",
]
