"""Reusable helper utilities for the crashdesk CLI."""

from __future__ import annotations

from pathlib import Path

from crashdesk.cli import options as cli_options
from crashdesk.config.settings import LoggingSettings, resolve_logging_settings
from crashdesk.infrastructure.logging import configure_logging


def config_path_argument(config: Path | None) -> str | None:
    return str(config) if config is not None else None


def setup_cli_logging(
    config_path: str | None,
    *,
    log_level: str | None = None,
    log_format: str | None = None,
) -> LoggingSettings:
    """Resolve logging from the manifest plus CLI flags and install it."""

    logging_settings = resolve_logging_settings(
        config_path=config_path,
        level_override=cli_options.normalize_log_level(log_level),
        format_override=cli_options.normalize_log_format(log_format),
    )
    configure_logging(logging_settings)
    return logging_settings


__all__ = ["config_path_argument", "setup_cli_logging"]
