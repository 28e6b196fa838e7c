"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class SourceSystem(StrEnum):
    """Ledgers that contribute one sub-record to an integrated row."""

    SEAT = "SEAT"
    PC = "PC"
    EXT = "EXT"
    USER = "USER"


class FieldKind(StrEnum):
    """Closed set of field kinds a schema definition may declare."""

    TEXT = "text"
    DROPDOWN = "dropdown"
    LINK = "link"
    NUMERIC = "numeric"
