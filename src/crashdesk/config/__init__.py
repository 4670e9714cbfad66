"""Layered reporting configuration for crashdesk."""

from .fields import (
    DEFAULT_MAIL_REPORT_FIELDS,
    DEFAULT_REPORT_FIELDS,
    HttpMethod,
    ReportField,
    ReportingInteractionMode,
    ReportType,
)
from .layers import EMPTY_DEFAULTS, DefaultSource, OverrideLayer
from .resolver import ResolvedConfiguration, resolve, resolve_report_fields
from .schema import SETTING_NAMES, SETTING_SPECS, SettingKind, SettingSpec
from .settings import (
    LoggingSettings,
    default_source_from_settings,
    load_default_source,
    load_settings,
    resolve_logging_settings,
)

__all__ = [
    "DEFAULT_MAIL_REPORT_FIELDS",
    "DEFAULT_REPORT_FIELDS",
    "HttpMethod",
    "ReportField",
    "ReportingInteractionMode",
    "ReportType",
    "EMPTY_DEFAULTS",
    "DefaultSource",
    "OverrideLayer",
    "ResolvedConfiguration",
    "resolve",
    "resolve_report_fields",
    "SETTING_NAMES",
    "SETTING_SPECS",
    "SettingKind",
    "SettingSpec",
    "LoggingSettings",
    "default_source_from_settings",
    "load_default_source",
    "load_settings",
    "resolve_logging_settings",
]
