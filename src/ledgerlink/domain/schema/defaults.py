"""Built-in field definitions of the four ledgers."""

from __future__ import annotations

from typing import Final

from ledgerlink.domain.model.enums import FieldKind, SourceSystem

from .definitions import FieldDefinition, pattern_rule

SEAT_NUMBER_PATTERN: Final[str] = r"[A-Za-z0-9\-\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]+"
PC_NUMBER_PATTERN: Final[str] = r"[A-Za-z0-9\-]+"
EXTENSION_NUMBER_PATTERN: Final[str] = r"\d{4,6}"

SEAT_LOCATIONS: Final[tuple[str, ...]] = ("池袋", "埼玉", "文京", "浦和")
PC_USAGES: Final[tuple[str, ...]] = (
    "個人専用",
    "CO/TOブース",
    "RPA用",
    "拠点設備用",
    "会議用",
    "在庫",
)
PHONE_TYPES: Final[tuple[str, ...]] = ("ビジネス", "ACD")


DEFAULT_FIELD_DEFINITIONS: Final[dict[SourceSystem, dict[str, FieldDefinition]]] = {
    SourceSystem.SEAT: {
        "座席番号": FieldDefinition(
            label="座席番号",
            required=True,
            validation_rules=(pattern_rule(SEAT_NUMBER_PATTERN, "Invalid seat number format"),),
        ),
        "座席拠点": FieldDefinition(
            label="座席拠点",
            kind=FieldKind.DROPDOWN,
            options=SEAT_LOCATIONS,
        ),
        "階数": FieldDefinition(label="階数", kind=FieldKind.NUMERIC),
        "座席部署": FieldDefinition(label="座席部署"),
    },
    SourceSystem.PC: {
        "PC番号": FieldDefinition(
            label="PC番号",
            required=True,
            validation_rules=(pattern_rule(PC_NUMBER_PATTERN, "Invalid PC number format"),),
        ),
        "PC用途": FieldDefinition(label="PC用途", kind=FieldKind.DROPDOWN, options=PC_USAGES),
    },
    SourceSystem.EXT: {
        "内線番号": FieldDefinition(
            label="内線番号",
            required=True,
            validation_rules=(
                pattern_rule(EXTENSION_NUMBER_PATTERN, "Extension number must be 4-6 digits"),
            ),
        ),
        "電話機種別": FieldDefinition(
            label="電話機種別",
            kind=FieldKind.DROPDOWN,
            options=PHONE_TYPES,
        ),
    },
    SourceSystem.USER: {
        "ユーザーID": FieldDefinition(label="ユーザーID", required=True),
        "ユーザー名": FieldDefinition(label="ユーザー名"),
    },
}
