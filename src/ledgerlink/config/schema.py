"""Load field definitions from a JSON schema file.

The file maps systems to field codes::

    {
      "extend_defaults": true,
      "fields": {
        "PC": {
          "PC番号": {"label": "PC番号", "required": true, "pattern": "[A-Z0-9-]+"},
          "PC用途": {"label": "PC用途", "kind": "dropdown", "options": ["在庫"]}
        }
      }
    }

With ``extend_defaults`` (the default) the file overrides single definitions of
the built-in schema; otherwise it replaces it.
"""

from __future__ import annotations

import re
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ledgerlink.domain.model import FieldKind, Rule, SourceSystem
from ledgerlink.domain.schema import (
    FieldDefinition,
    FieldSchemaRegistry,
    max_length_rule,
    pattern_rule,
)

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from pathlib import Path


log = getLogger(__name__)


class SchemaBaseModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class FieldDefinitionPayload(SchemaBaseModel):
    label: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False
    default_value: str = Field(default="", alias="default")
    options: tuple[str, ...] = ()
    pattern: str | None = None
    pattern_message: str | None = None
    max_length: int | None = Field(default=None, gt=0)

    @field_validator("pattern")
    @classmethod
    def _compile_check(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"invalid pattern {value!r}: {exc}") from exc
        return value

    def to_definition(self) -> FieldDefinition:
        rules: list[Rule] = []
        if self.pattern is not None:
            message = self.pattern_message or f"Invalid {self.label} format"
            rules.append(pattern_rule(self.pattern, message))
        if self.max_length is not None:
            rules.append(max_length_rule(self.max_length, self.label))
        return FieldDefinition(
            label=self.label,
            kind=self.kind,
            required=self.required,
            validation_rules=tuple(rules),
            default_value=self.default_value,
            options=self.options,
        )


class SchemaFilePayload(SchemaBaseModel):
    extend_defaults: bool = True
    fields: dict[SourceSystem, dict[str, FieldDefinitionPayload]] = Field(default_factory=dict)


def load_field_schema(path: Path) -> FieldSchemaRegistry:
    """Build a registry from ``path``.

    Raises ``MissingConfigurationError`` for a missing file, ``ConfigurationError``
    for malformed JSON or payloads, and lets ``SchemaDefinitionError`` through for
    definitions whose kind and options disagree.
    """

    if not path.is_file():
        raise MissingConfigurationError(f"Schema file not found: {path}")
    try:
        payload = SchemaFilePayload.model_validate_json(path.read_bytes())
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid schema file {path}: {exc}") from exc

    if payload.extend_defaults:
        registry = FieldSchemaRegistry.with_defaults()
    else:
        registry = FieldSchemaRegistry()
    for system, by_code in payload.fields.items():
        for field_code, definition in by_code.items():
            registry.set_field_definition(system, field_code, definition.to_definition())
    log.info(
        "Loaded %d field definitions from %s",
        sum(len(by_code) for by_code in payload.fields.values()),
        path,
    )
    return registry
