"""Public interface for the legacy ledger record adapter."""

from __future__ import annotations

from .schema import FieldPayload, IntegratedRecordPayload, LegacyRecord, is_integrated_record
from .translator import LegacyTranslator, from_legacy_record, to_legacy_record

__all__ = [
    "FieldPayload",
    "IntegratedRecordPayload",
    "LegacyRecord",
    "LegacyTranslator",
    "from_legacy_record",
    "is_integrated_record",
    "to_legacy_record",
]
