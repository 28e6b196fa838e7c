from __future__ import annotations

import pytest

from ledgerlink.domain.model import (
    SourceSystem,
    build_integration_key,
    parse_integration_key,
    primary_key_field_for,
    sorted_systems,
    system_for_primary_key_field,
)


def test_systems_sort_by_value() -> None:
    assert sorted_systems(SourceSystem) == [
        SourceSystem.EXT,
        SourceSystem.PC,
        SourceSystem.SEAT,
        SourceSystem.USER,
    ]


def test_primary_key_mapping_is_bidirectional() -> None:
    for system in SourceSystem:
        assert system_for_primary_key_field(primary_key_field_for(system)) is system
    assert system_for_primary_key_field("座席拠点") is None


def test_build_key_sorts_systems_and_strips_values() -> None:
    key = build_integration_key(
        {SourceSystem.SEAT: " A-101 ", SourceSystem.PC: "PC-55", SourceSystem.USER: "  "},
        row_id="row_1",
    )

    assert key == "PC:PC-55|SEAT:A-101"


def test_build_key_without_values_uses_row_id() -> None:
    assert build_integration_key({}, row_id="row_1") == "EMPTY_row_1"


def test_parse_integration_key() -> None:
    assert parse_integration_key("PC:PC-55|SEAT:A-101") == {
        SourceSystem.PC: "PC-55",
        SourceSystem.SEAT: "A-101",
    }
    assert parse_integration_key("EMPTY_row_1") == {}


def test_parse_rejects_malformed_segment() -> None:
    with pytest.raises(ValueError, match="Malformed"):
        parse_integration_key("PC-55")
