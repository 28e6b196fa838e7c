from __future__ import annotations

import pytest

from ledgerlink.domain.model import FieldValue, SourceRecord, SourceSystem


def test_empty_record_is_inactive_and_invalid() -> None:
    record = SourceRecord.empty(SourceSystem.PC)

    assert record.is_active is False
    assert record.is_valid() is False
    assert record.validate().is_valid is True


def test_get_field_returns_blank_value_for_unknown_code() -> None:
    record = SourceRecord(source_system=SourceSystem.SEAT)

    assert record.get_field("missing") == FieldValue()
    assert record.has_field("missing") is False


def test_set_field_raw_value_goes_through_existing_field_value() -> None:
    record = SourceRecord(
        source_system=SourceSystem.SEAT,
        fields={"座席番号": FieldValue(value="A-101")},
    )

    updated = record.set_field("座席番号", "A-102")

    field = updated.get_field("座席番号")
    assert field.value == "A-102"
    assert field.original_value == "A-101"
    assert field.is_modified is True
    assert record.get_field("座席番号").value == "A-101"


def test_set_field_stores_field_value_verbatim() -> None:
    stored = FieldValue(value="PC-1", original_value="PC-0", is_modified=True)

    record = SourceRecord(source_system=SourceSystem.PC).set_field("PC番号", stored)

    assert record.get_field("PC番号") is stored


def test_fields_are_read_only() -> None:
    record = SourceRecord(source_system=SourceSystem.EXT, fields={"内線番号": FieldValue(value="1")})

    with pytest.raises(TypeError):
        record.fields["内線番号"] = FieldValue(value="2")  # type: ignore[index]


def test_validity_requires_active_record_with_primary_key() -> None:
    record = SourceRecord(source_system=SourceSystem.EXT, fields={"内線番号": FieldValue(value=" ")})

    assert record.is_valid() is False
    assert record.set_field("内線番号", "1234").is_valid() is True
    assert record.set_field("内線番号", "1234").set_active(False).is_valid() is False


def test_validate_collects_primary_key_and_field_errors() -> None:
    record = SourceRecord(
        source_system=SourceSystem.PC,
        fields={"PC用途": FieldValue(value="x", validation_rules=(lambda _: "bad usage",))},
    )

    result = record.validate()

    assert result.errors == ("PC: primary key PC番号 is not set", "PC用途: bad usage")


def test_mark_field_as_separated_and_external_id() -> None:
    record = SourceRecord(
        source_system=SourceSystem.USER,
        fields={"ユーザーID": FieldValue(value="u1"), "ユーザー名": FieldValue(value="Sato")},
    )

    marked = record.mark_field_as_separated("ユーザーID").set_external_record_id("42")

    assert marked.get_field("ユーザーID").is_separated is True
    assert marked.get_field("ユーザー名").is_separated is False
    assert marked.external_record_id == "42"
    assert record.external_record_id is None


def test_round_trip() -> None:
    record = SourceRecord(
        source_system=SourceSystem.SEAT,
        fields={"座席番号": FieldValue(value="A-1").set_value("A-2")},
        external_record_id="7",
        metadata={"note": "x"},
    )

    assert SourceRecord.from_dict(record.to_dict()) == record
