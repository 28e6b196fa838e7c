"""Validation outcome shared by field values, source records and rows."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeAlias

Rule: TypeAlias = Callable[[str], bool | str]
"""A rule returns ``True`` for an accepted value or an error message."""


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Non-fatal validation outcome; callers decide whether to log or reject."""

    errors: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors
