"""Application orchestration entry points."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter, ValidationError

from ledgerlink.adapters.legacy import LegacyTranslator
from ledgerlink.config import get_app_config, load_field_schema
from ledgerlink.domain.model import ConversionError, RowNotFoundError, SourceSystem
from ledgerlink.domain.rows import RowIndexManager
from ledgerlink.domain.schema import FieldSchemaRegistry

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from ledgerlink.config import AppConfig
    from ledgerlink.domain.model import SeparationResult
    from ledgerlink.domain.rows import ImportResult


log = getLogger(__name__)

_RECORDS_ADAPTER: TypeAdapter[list[dict[str, Any]]] = TypeAdapter(list[dict[str, Any]])


def build_schema(config: AppConfig | None = None) -> FieldSchemaRegistry:
    effective = config or get_app_config()
    if effective.schema_path is None:
        return FieldSchemaRegistry.with_defaults()
    return load_field_schema(effective.schema_path)


def build_row_manager(config: AppConfig | None = None) -> RowIndexManager:
    """Wire schema, legacy translator and manager from configuration."""

    effective = config or get_app_config()
    schema = build_schema(effective)
    return RowIndexManager(
        schema=schema,
        translator=LegacyTranslator(schema),
        strict_validation=effective.strict_validation,
    )


def load_legacy_records(path: Path) -> list[dict[str, Any]]:
    try:
        return _RECORDS_ADAPTER.validate_json(path.read_bytes())
    except ValidationError as exc:
        raise ConversionError(f"{path} is not a JSON array of records: {exc}") from exc


def write_legacy_records(path: Path, records: Iterable[dict[str, Any]]) -> None:
    payload = list(records)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    log.info("Wrote %d legacy records to %s", len(payload), path)


def import_legacy_file(
    path: Path, *, config: AppConfig | None = None
) -> tuple[RowIndexManager, ImportResult]:
    manager = build_row_manager(config)
    result = manager.import_from_legacy(load_legacy_records(path))
    log.info(
        "Imported %s: success=%s, failed=%s, rows=%s",
        path,
        result.success,
        result.failed,
        len(manager),
    )
    for error in result.errors:
        log.warning("Import error: %s", error)
    return manager, result


def separate_by_integration_key(
    manager: RowIndexManager, integration_key: str, system: SourceSystem | str
) -> SeparationResult:
    row = manager.get_row_by_integration_key(integration_key)
    if row is None:
        raise RowNotFoundError(integration_key)
    return manager.separate_app(row.id, SourceSystem(system))
