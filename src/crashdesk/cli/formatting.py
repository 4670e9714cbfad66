"""Rich rendering helpers shared by CLI commands."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Final

from rich import box
from rich.table import Table

from crashdesk.config.constants import NULL_VALUE

_SENSITIVE_NAMES: Final[frozenset[str]] = frozenset({"form_uri_basic_auth_password"})


class RichStyles:
    ACCENT = "cyan"
    SECONDARY = "magenta"
    SUCCESS = "green"
    WARNING = "yellow"
    ERROR = "red"


def create_config_table(title: str) -> Table:
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("Setting", style=RichStyles.ACCENT)
    table.add_column("Value", style=RichStyles.SECONDARY, overflow="fold")
    table.add_column("Source", style=RichStyles.SUCCESS)
    return table


def mask_sensitive_value(value: str) -> str:
    if not value or value == NULL_VALUE:
        return value
    if len(value) <= 4:
        return "****"
    return f"{value[:2]}****{value[-2:]}"


def format_config_value(name: str, value: Any) -> str:
    """Render one resolved setting for display."""

    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, str):
        if name in _SENSITIVE_NAMES:
            return mask_sensitive_value(value)
        return value if value else "<empty>"
    if isinstance(value, bool) or isinstance(value, int):
        return str(value)
    if isinstance(value, Mapping):
        if not value:
            return "{}"
        return ", ".join(f"{key}={item}" for key, item in value.items())
    if isinstance(value, Iterable):
        items = [format_config_value(name, item) for item in value]
        return ", ".join(items) if items else "<none>"
    return repr(value)


__all__ = [
    "RichStyles",
    "create_config_table",
    "format_config_value",
    "mask_sensitive_value",
]
