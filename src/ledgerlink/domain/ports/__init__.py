"""Domain port definitions for adapters."""

from __future__ import annotations

from .legacy import LegacyRecordTranslator

__all__ = ["LegacyRecordTranslator"]
