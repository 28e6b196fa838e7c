from __future__ import annotations

from ledgerlink.domain.model import FieldValue
from ledgerlink.domain.model.field_value import REQUIRED_FIELD_ERROR


def test_set_value_keeps_original_and_tracks_modification() -> None:
    value = FieldValue(value="A-101")

    changed = value.set_value("A-102")

    assert changed.value == "A-102"
    assert changed.original_value == "A-101"
    assert changed.is_modified is True
    assert value.value == "A-101"
    assert value.is_modified is False


def test_setting_back_the_original_clears_modified_flag() -> None:
    value = FieldValue(value="A-101").set_value("B-1").set_value("A-101")

    assert value.is_modified is False


def test_explicit_blank_original_is_preserved() -> None:
    value = FieldValue(value="new", original_value="")

    assert value.original_value == ""
    assert value.set_value("other").is_modified is True


def test_mark_as_separated_returns_new_instance() -> None:
    value = FieldValue(value="x")

    separated = value.mark_as_separated()

    assert separated.is_separated is True
    assert value.is_separated is False
    assert separated.value == "x"


def test_validate_reports_required_first_then_rules_in_order() -> None:
    def first(_: str) -> bool | str:
        return "first failed"

    def passing(_: str) -> bool | str:
        return True

    def second(_: str) -> bool | str:
        return "second failed"

    value = FieldValue(value="  ", is_required=True, validation_rules=(first, passing, second))

    result = value.validate()

    assert result.is_valid is False
    assert result.errors == (REQUIRED_FIELD_ERROR, "first failed", "second failed")


def test_with_rules_reattaches_rules_without_touching_value() -> None:
    value = FieldValue(value="abc", is_modified=True)

    ruled = value.with_rules((lambda v: v == "ok" or "not ok",), is_required=True)

    assert ruled.value == "abc"
    assert ruled.is_modified is True
    assert ruled.is_required is True
    assert ruled.validate().errors == ("not ok",)


def test_round_trip_drops_validation_rules() -> None:
    value = FieldValue(
        value="1234",
        is_required=True,
        validation_rules=(lambda v: v.isdigit() or "digits only",),
    ).set_value("12a4")

    restored = FieldValue.from_dict(value.to_dict())

    assert restored == value
    assert restored.original_value == "1234"
    assert restored.is_modified is True
    # Rules are not serialized; only the required check survives.
    assert restored.validation_rules == ()
    assert restored.validate().is_valid is True
    assert value.validate().is_valid is False
