from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest

from ledgerlink.config import ConfigurationError, MissingConfigurationError, load_field_schema
from ledgerlink.domain.model import FieldKind, SourceSystem
from ledgerlink.domain.schema import SchemaDefinitionError

if TYPE_CHECKING:
    from pathlib import Path


def _write(path: Path, payload: dict[str, Any]) -> Path:
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path


def test_file_overrides_defaults(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "schema.json",
        {
            "fields": {
                "PC": {
                    "PC番号": {
                        "label": "PC番号",
                        "required": True,
                        "pattern": "PC-\\d+",
                        "pattern_message": "PC numbers look like PC-123",
                        "max_length": 6,
                    },
                    "OS": {"label": "OS", "kind": "dropdown", "options": ["Win", "Mac"]},
                }
            }
        },
    )

    registry = load_field_schema(path)

    os_definition = registry.get_field_definition(SourceSystem.PC, "OS")
    assert os_definition is not None
    assert os_definition.kind is FieldKind.DROPDOWN
    assert registry.get_field_definition(SourceSystem.SEAT, "座席番号") is not None
    value = registry.build_field_value(SourceSystem.PC, "PC番号", "PC-1234567")
    assert value.validate().errors == ("PC番号 must be at most 6 characters",)
    assert registry.build_field_value(SourceSystem.PC, "PC番号", "X1").validate().errors == (
        "PC numbers look like PC-123",
    )


def test_file_can_replace_defaults(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "schema.json",
        {
            "extend_defaults": False,
            "fields": {"USER": {"ユーザーID": {"label": "ユーザーID", "required": True}}},
        },
    )

    registry = load_field_schema(path)

    assert registry.get_field_definition(SourceSystem.SEAT, "座席番号") is None
    assert registry.find_owning_system("ユーザーID") is SourceSystem.USER


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(MissingConfigurationError, match="not found"):
        load_field_schema(tmp_path / "absent.json")


@pytest.mark.parametrize(
    "payload",
    [
        {"fields": {"FAX": {}}},
        {"fields": {"PC": {"x": {"label": "x", "kind": "checkbox"}}}},
        {"fields": {"PC": {"x": {"label": "x", "pattern": "("}}}},
        {"fields": {"PC": {"x": {"label": "x", "max_length": 0}}}},
        {"fields": {"PC": {"x": {"label": "x", "colour": "red"}}}},
    ],
)
def test_invalid_payloads(tmp_path: Path, payload: dict[str, Any]) -> None:
    path = _write(tmp_path / "schema.json", payload)

    with pytest.raises(ConfigurationError, match="Invalid schema file"):
        load_field_schema(path)


def test_malformed_json(tmp_path: Path) -> None:
    path = tmp_path / "schema.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_field_schema(path)


def test_dropdown_without_options_is_a_definition_error(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "schema.json",
        {"fields": {"PC": {"OS": {"label": "OS", "kind": "dropdown"}}}},
    )

    with pytest.raises(SchemaDefinitionError, match="need options"):
        load_field_schema(path)
