"""Scalar field values with provenance flags."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from ledgerlink.domain.model.validation import ValidationResult

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ledgerlink.domain.model.validation import Rule

REQUIRED_FIELD_ERROR = "This field is required"


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldValue:
    """One field of a source record.

    ``original_value`` is fixed when the value is first created and survives every
    ``set_value``. ``is_modified`` is only ever computed by ``set_value``; building
    a value directly keeps whatever flag the caller passes.
    """

    value: str = ""
    original_value: str | None = None
    is_modified: bool = False
    is_separated: bool = False
    is_required: bool = False
    validation_rules: tuple[Rule, ...] = field(default=(), compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.original_value is None:
            object.__setattr__(self, "original_value", self.value)

    def set_value(self, new_value: str) -> FieldValue:
        return replace(
            self,
            value=new_value,
            is_modified=new_value != self.original_value,
        )

    def mark_as_separated(self) -> FieldValue:
        return replace(self, is_separated=True)

    def with_rules(self, rules: Iterable[Rule], *, is_required: bool) -> FieldValue:
        """Re-attach schema rules, e.g. after restoring from a snapshot."""

        return replace(self, validation_rules=tuple(rules), is_required=is_required)

    def is_blank(self) -> bool:
        return not self.value.strip()

    def validate(self) -> ValidationResult:
        errors: list[str] = []
        if self.is_required and self.is_blank():
            errors.append(REQUIRED_FIELD_ERROR)
        for rule in self.validation_rules:
            outcome = rule(self.value)
            if outcome is not True:
                errors.append(str(outcome))
        return ValidationResult(tuple(errors))

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "original_value": self.original_value,
            "is_modified": self.is_modified,
            "is_separated": self.is_separated,
            "is_required": self.is_required,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FieldValue:
        return cls(
            value=str(data.get("value", "")),
            original_value=data.get("original_value"),
            is_modified=bool(data.get("is_modified", False)),
            is_separated=bool(data.get("is_separated", False)),
            is_required=bool(data.get("is_required", False)),
        )
