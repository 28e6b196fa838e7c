"""Primary-key mapping and integration-key derivation.

An integration key joins ``"{system}:{primary key}"`` for every active and valid
source record of a row, systems in a fixed sorted order, separated by ``|``.
A row with no valid record gets ``EMPTY_{row id}`` so keys stay unique.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from ledgerlink.domain.model.enums import SourceSystem

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

KEY_SEPARATOR: Final[str] = "|"
SYSTEM_SEPARATOR: Final[str] = ":"
EMPTY_KEY_PREFIX: Final[str] = "EMPTY_"

PRIMARY_KEY_FIELDS: Final[dict[SourceSystem, str]] = {
    SourceSystem.SEAT: "座席番号",
    SourceSystem.PC: "PC番号",
    SourceSystem.EXT: "内線番号",
    SourceSystem.USER: "ユーザーID",
}


def primary_key_field_for(system: SourceSystem) -> str:
    return PRIMARY_KEY_FIELDS[system]


def system_for_primary_key_field(field_code: str) -> SourceSystem | None:
    for system, code in PRIMARY_KEY_FIELDS.items():
        if code == field_code:
            return system
    return None


def sorted_systems(systems: Iterable[SourceSystem]) -> list[SourceSystem]:
    return sorted(systems, key=lambda system: system.value)


def build_integration_key(primary_keys: Mapping[SourceSystem, str], *, row_id: str) -> str:
    """Join the primary keys of the valid systems of one row."""

    parts = [
        f"{system}{SYSTEM_SEPARATOR}{primary_keys[system].strip()}"
        for system in sorted_systems(primary_keys)
        if primary_keys[system].strip()
    ]
    if not parts:
        return f"{EMPTY_KEY_PREFIX}{row_id}"
    return KEY_SEPARATOR.join(parts)


def parse_integration_key(key: str) -> dict[SourceSystem, str]:
    """Split a key back into its per-system primary keys (empty for ``EMPTY_`` keys)."""

    if not key or key.startswith(EMPTY_KEY_PREFIX):
        return {}
    parsed: dict[SourceSystem, str] = {}
    for part in key.split(KEY_SEPARATOR):
        system, sep, value = part.partition(SYSTEM_SEPARATOR)
        if not sep:
            raise ValueError(f"Malformed integration key segment: {part!r}")
        parsed[SourceSystem(system)] = value
    return parsed
