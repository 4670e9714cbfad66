"""Dynaconf-backed manifest loading for crashdesk.

The declarative default source is read from, in increasing precedence:

1. Primary manifest (``crashdesk.toml``)
2. Local overlay next to it (``crashdesk.local.toml``)
3. Environment variables (``CRASHDESK_<SETTING>``)

Reporting settings live under ``[reports]`` and logging under ``[logging]``.
Blank environment variables are treated as "not provided". Programmatic
overrides are applied later, on the :class:`~crashdesk.config.layers.OverrideLayer`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional, Tuple

from dynaconf import Dynaconf

from crashdesk.infrastructure.logging import LOG_FORMAT_JSON, LOG_FORMAT_TEXT

from .constants import (
    DEFAULT_BACKUP_COUNT,
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_BYTES,
    ENVVAR_PREFIX,
    LOCAL_CONFIG_FILENAME,
    coerce_positive_int,
)
from .layers import DefaultSource
from .schema import SETTING_SPECS

REPORTS_SECTION = "reports"
LOGGING_SECTION = "logging"

CONFIG_PATH_ENV = f"{ENVVAR_PREFIX}_CONFIG"

_LOGGING_KEYS = ("level", "format", "file", "max_bytes", "backup_count")
_LOGGING_ENVIRONMENT_MAP = {
    f"{ENVVAR_PREFIX}_LOG_{key.upper()}": f"{LOGGING_SECTION}.{key}" for key in _LOGGING_KEYS
}
_REPORTS_ENVIRONMENT_MAP = {
    spec.env_var: f"{REPORTS_SECTION}.{spec.name}" for spec in SETTING_SPECS
}

# values of [logging].file that mean "console only"
_LOG_FILE_DISABLE_SENTINELS = frozenset({"disabled", "none", "stderr", "stdout", "-"})


@dataclass(frozen=True)
class LoggingInputs:
    """Explicit logging choices, typically gathered from CLI options."""

    level: Optional[str] = None
    format: Optional[str] = None
    file_path: Optional[str] = None
    max_bytes: Optional[int] = None
    backup_count: Optional[int] = None

    def entries(self) -> Iterator[Tuple[str, Any]]:
        yield "level", self.level
        yield "format", self.format
        yield "file", self.file_path
        yield "max_bytes", self.max_bytes
        yield "backup_count", self.backup_count


@dataclass(frozen=True)
class LoggingSettings:
    level: int
    format: str
    file_path: Optional[str]
    max_bytes: int
    backup_count: int

    @property
    def level_name(self) -> str:
        return logging.getLevelName(self.level)


def _manifest_files(config_path: Optional[str]) -> list[str]:
    explicit = (config_path or os.getenv(CONFIG_PATH_ENV) or "").strip()
    if not explicit:
        return [DEFAULT_CONFIG_FILENAME, LOCAL_CONFIG_FILENAME]

    primary = Path(explicit).expanduser()
    overlay = primary.with_name(f"{primary.stem}.local{primary.suffix}")
    present = [str(path) for path in (primary, overlay) if path.exists()]
    # dynaconf tolerates a missing file; keep the primary so the path is reported
    return present or [str(primary)]


def _text(value: Optional[Any]) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip() or None


def _positive_int_or_default(value: Optional[Any], default: int) -> int:
    try:
        return coerce_positive_int(value, default=default)
    except ValueError:
        return default


def _apply_environment_overrides(settings: Dynaconf) -> None:
    environment = {**_REPORTS_ENVIRONMENT_MAP, **_LOGGING_ENVIRONMENT_MAP}
    for env_var, key in environment.items():
        raw = os.getenv(env_var, "")
        if raw.strip():
            settings.set(key, raw)


def load_settings(config_path: Optional[str] = None) -> Dynaconf:
    """Load the manifest, its local overlay and ``CRASHDESK_*`` variables."""

    settings = Dynaconf(
        settings_files=_manifest_files(config_path),
        envvar_prefix=ENVVAR_PREFIX,
        environments=False,
        load_dotenv=True,
        merge_enabled=True,
    )
    _apply_environment_overrides(settings)
    return settings


def _section(settings: Dynaconf, name: str) -> Mapping[str, Any]:
    section = settings.get(name)
    if isinstance(section, Mapping):
        return section
    return {}


def default_source_from_settings(settings: Dynaconf) -> DefaultSource:
    """Build the declarative default source from the ``[reports]`` section."""

    raw = {str(key).lower(): value for key, value in _section(settings, REPORTS_SECTION).items()}
    return DefaultSource.from_mapping(raw)


def load_default_source(config_path: Optional[str] = None) -> DefaultSource:
    return default_source_from_settings(load_settings(config_path))


def apply_logging_overrides(settings: Dynaconf, logging_inputs: Optional[LoggingInputs]) -> None:
    if logging_inputs is None:
        return
    for key, value in logging_inputs.entries():
        if value is None:
            continue
        settings.set(f"{LOGGING_SECTION}.{key}", value.strip() if isinstance(value, str) else value)


def _level_number(name: str) -> int:
    if name.isdigit():
        return int(name)
    level = logging.getLevelNamesMapping().get(name.upper())
    return level if level is not None else logging.INFO


def logging_from_settings(settings: Dynaconf) -> LoggingSettings:
    """Read ``[logging]`` into :class:`LoggingSettings`.

    Unknown levels fall back to INFO and non-positive sizes to their defaults;
    an unknown format is an error.
    """

    section = _section(settings, LOGGING_SECTION)

    log_format = (_text(section.get("format")) or LOG_FORMAT_TEXT).lower()
    if log_format not in (LOG_FORMAT_TEXT, LOG_FORMAT_JSON):
        raise ValueError(f"Unsupported log format: {log_format}")

    file_path = _text(section.get("file"))
    if file_path is not None and file_path.lower() in _LOG_FILE_DISABLE_SENTINELS:
        file_path = None

    return LoggingSettings(
        level=_level_number(_text(section.get("level")) or DEFAULT_LOG_LEVEL),
        format=log_format,
        file_path=file_path,
        max_bytes=_positive_int_or_default(section.get("max_bytes"), DEFAULT_MAX_BYTES),
        backup_count=_positive_int_or_default(section.get("backup_count"), DEFAULT_BACKUP_COUNT),
    )


def resolve_logging_settings(
    *,
    config_path: Optional[str] = None,
    level_override: Optional[str] = None,
    format_override: Optional[str] = None,
    file_override: Optional[str] = None,
    max_bytes_override: Optional[int] = None,
    backup_count_override: Optional[int] = None,
    debug: bool = False,
) -> LoggingSettings:
    settings = load_settings(config_path)
    overrides = LoggingInputs(
        level=level_override,
        format=format_override,
        file_path=file_override,
        max_bytes=max_bytes_override,
        backup_count=backup_count_override,
    )
    apply_logging_overrides(settings, overrides)
    resolved = logging_from_settings(settings)
    if debug:
        resolved = replace(resolved, level=min(resolved.level, logging.DEBUG))
    return resolved


__all__ = [
    "CONFIG_PATH_ENV",
    "LOGGING_SECTION",
    "REPORTS_SECTION",
    "LoggingInputs",
    "LoggingSettings",
    "apply_logging_overrides",
    "default_source_from_settings",
    "load_default_source",
    "load_settings",
    "logging_from_settings",
    "resolve_logging_settings",
]
