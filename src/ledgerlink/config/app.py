"""Top-level application settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .env import env_flag, env_log_level, env_path

if TYPE_CHECKING:
    from pathlib import Path

SCHEMA_PATH_ENV = "LEDGERLINK_SCHEMA_PATH"
STRICT_VALIDATION_ENV = "LEDGERLINK_STRICT_VALIDATION"
LOG_LEVEL_ENV = "LEDGERLINK_LOG_LEVEL"


@dataclass(frozen=True, slots=True)
class AppConfig:
    schema_path: Path | None = None
    strict_validation: bool = False
    log_level: int = logging.INFO


def get_app_config() -> AppConfig:
    return AppConfig(
        schema_path=env_path(SCHEMA_PATH_ENV),
        strict_validation=env_flag(STRICT_VALIDATION_ENV),
        log_level=env_log_level(LOG_LEVEL_ENV),
    )
