"""Field definitions and the rules they imply."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ledgerlink.domain.model.enums import FieldKind

if TYPE_CHECKING:
    from ledgerlink.domain.model.validation import Rule


class SchemaDefinitionError(ValueError):
    """Raised when a field definition is inconsistent with its kind."""


def pattern_rule(pattern: str, message: str) -> Rule:
    """Rule accepting blank values and values fully matching ``pattern``."""

    compiled = re.compile(pattern)

    def rule(value: str) -> bool | str:
        if not value.strip():
            return True
        return compiled.fullmatch(value) is not None or message

    return rule


def max_length_rule(limit: int, label: str) -> Rule:
    def rule(value: str) -> bool | str:
        return len(value) <= limit or f"{label} must be at most {limit} characters"

    return rule


def options_rule(options: tuple[str, ...], label: str) -> Rule:
    def rule(value: str) -> bool | str:
        if not value.strip() or value in options:
            return True
        return f"{label}: {value!r} is not one of {', '.join(options)}"

    return rule


def numeric_rule(label: str) -> Rule:
    return pattern_rule(r"-?\d+(\.\d+)?", f"{label} must be numeric")


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldDefinition:
    """Schema entry for one field code of one source system.

    The kind is checked when the definition is built so that lookups never have
    to guess what a field is.
    """

    label: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False
    validation_rules: tuple[Rule, ...] = field(default=(), compare=False, repr=False)
    default_value: str = ""
    options: tuple[str, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict["str", "Any"], compare=False)

    def __post_init__(self) -> None:
        try:
            kind = FieldKind(self.kind)
        except ValueError as exc:
            raise SchemaDefinitionError(f"{self.label}: unknown field kind {self.kind!r}") from exc
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "options", tuple(self.options))
        if kind is FieldKind.DROPDOWN and not self.options:
            raise SchemaDefinitionError(f"{self.label}: dropdown fields need options")
        if kind is not FieldKind.DROPDOWN and self.options:
            raise SchemaDefinitionError(f"{self.label}: only dropdown fields take options")
        if self.default_value and kind is FieldKind.DROPDOWN and (
            self.default_value not in self.options
        ):
            raise SchemaDefinitionError(
                f"{self.label}: default {self.default_value!r} is not an option"
            )

    def rules(self) -> tuple[Rule, ...]:
        """Kind-implied rules followed by the configured ones."""

        implied: tuple[Rule, ...] = ()
        if self.kind is FieldKind.DROPDOWN:
            implied = (options_rule(self.options, self.label),)
        elif self.kind is FieldKind.NUMERIC:
            implied = (numeric_rule(self.label),)
        return implied + self.validation_rules
