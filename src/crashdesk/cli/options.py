"""Reusable CLI options for crashdesk commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Final

import typer

from crashdesk.config.settings import CONFIG_PATH_ENV
from crashdesk.infrastructure.logging import LOG_FORMAT_JSON, LOG_FORMAT_TEXT

LOG_FORMAT_CHOICES: Final[tuple[str, ...]] = (LOG_FORMAT_TEXT, LOG_FORMAT_JSON)
LOG_LEVEL_SET: Final[frozenset[str]] = frozenset(
    name for name in logging.getLevelNamesMapping() if name.isalpha()
)

ConfigPathOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        help="crashdesk.toml to read [reports] and [logging] from",
        envvar=CONFIG_PATH_ENV,
        show_envvar=True,
        dir_okay=False,
        rich_help_panel="Configuration",
    ),
]

# no envvar on overrides: environment values belong to the default tier
MailToOption = Annotated[
    str | None,
    typer.Option("--mail-to", help="Explicit report recipient address", rich_help_panel="Overrides"),
]

FormUriOption = Annotated[
    str | None,
    typer.Option("--form-uri", help="Explicit report submission endpoint", rich_help_panel="Overrides"),
]

CertificateTypeOption = Annotated[
    str,
    typer.Option(
        "--certificate-type",
        help="Certificate type of the pinned anchor (X.509)",
        rich_help_panel="Trust anchor",
    ),
]

LogLevelOption = Annotated[
    str | None,
    typer.Option("--log-level", help="Log level for this invocation", rich_help_panel="Logging"),
]

LogFormatOption = Annotated[
    str | None,
    typer.Option("--log-format", help="Log output format: text or json", rich_help_panel="Logging"),
]


def clean_string(value: str | None) -> str | None:
    """Strip ``value``; blank input counts as not given."""

    if value is None:
        return None
    return value.strip() or None


def normalize_log_level(value: str | None) -> str | None:
    level = clean_string(value)
    if level is None:
        return None
    if level.upper() not in LOG_LEVEL_SET:
        raise typer.BadParameter(f"Unknown log level '{value}'", param_hint="--log-level")
    return level.upper()


def normalize_log_format(value: str | None) -> str | None:
    log_format = clean_string(value)
    if log_format is None:
        return None
    if log_format.lower() not in LOG_FORMAT_CHOICES:
        choices = " or ".join(repr(choice) for choice in LOG_FORMAT_CHOICES)
        raise typer.BadParameter(f"Log format must be {choices}", param_hint="--log-format")
    return log_format.lower()


__all__ = [
    "CertificateTypeOption",
    "ConfigPathOption",
    "FormUriOption",
    "LogFormatOption",
    "LogLevelOption",
    "MailToOption",
    "clean_string",
    "normalize_log_format",
    "normalize_log_level",
]
