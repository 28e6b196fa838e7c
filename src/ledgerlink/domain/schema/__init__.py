"""Field schema: per-system field definitions and validation rules."""

from __future__ import annotations

from .definitions import (
    FieldDefinition,
    SchemaDefinitionError,
    max_length_rule,
    numeric_rule,
    options_rule,
    pattern_rule,
)
from .registry import FieldSchemaRegistry

__all__ = [
    "FieldDefinition",
    "FieldSchemaRegistry",
    "SchemaDefinitionError",
    "max_length_rule",
    "numeric_rule",
    "options_rule",
    "pattern_rule",
]
