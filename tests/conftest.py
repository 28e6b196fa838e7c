from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from ledgerlink.adapters.legacy import LegacyTranslator
from ledgerlink.domain.model import IntegratedRow, SourceSystem
from ledgerlink.domain.rows import RowIndexManager
from ledgerlink.domain.schema import FieldSchemaRegistry

if TYPE_CHECKING:
    from collections.abc import Callable


SEAT_NUMBER = "座席番号"
PC_NUMBER = "PC番号"
EXTENSION_NUMBER = "内線番号"
USER_ID = "ユーザーID"


@pytest.fixture
def schema() -> FieldSchemaRegistry:
    return FieldSchemaRegistry.with_defaults()


@pytest.fixture
def manager(schema: FieldSchemaRegistry) -> RowIndexManager:
    return RowIndexManager(schema=schema, translator=LegacyTranslator(schema))


@pytest.fixture
def make_row() -> Callable[..., IntegratedRow]:
    """Build a row from ``{system: {code: value}}`` the way an operator would."""

    def factory(
        values: dict[SourceSystem, dict[str, str]] | None = None,
        **kwargs: object,
    ) -> IntegratedRow:
        row = IntegratedRow(**kwargs)  # type: ignore[arg-type]
        for system, fields in (values or {}).items():
            for code, value in fields.items():
                row = row.set_field(system, code, value)
        return row

    return factory
