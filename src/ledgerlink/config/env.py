"""Environment variable readers for configuration."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .errors import ConfigurationError

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def env_flag(name: str, *, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got {value!r}")


def env_path(name: str) -> Path | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return Path(value.strip()).expanduser()


def env_log_level(name: str, *, default: int = logging.INFO) -> int:
    """Resolve a level name such as ``DEBUG`` (or a numeric level)."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    normalized = value.strip().upper()
    if normalized.isdigit():
        return int(normalized)
    level = logging.getLevelNamesMapping().get(normalized)
    if level is None:
        raise ConfigurationError(f"{name} is not a logging level: {value!r}")
    return level
