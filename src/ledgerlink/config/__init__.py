"""Application configuration helpers."""

from __future__ import annotations

from .app import (
    LOG_LEVEL_ENV,
    SCHEMA_PATH_ENV,
    STRICT_VALIDATION_ENV,
    AppConfig,
    get_app_config,
)
from .env import env_flag, env_log_level, env_path
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging
from .schema import FieldDefinitionPayload, SchemaFilePayload, load_field_schema

__all__ = [
    "LOG_LEVEL_ENV",
    "SCHEMA_PATH_ENV",
    "STRICT_VALIDATION_ENV",
    "AppConfig",
    "ConfigurationError",
    "FieldDefinitionPayload",
    "MissingConfigurationError",
    "SchemaFilePayload",
    "configure_logging",
    "env_flag",
    "env_log_level",
    "env_path",
    "get_app_config",
    "load_field_schema",
]
