"""Declarative description of every reporting setting.

Each :class:`SettingSpec` names a setting, its kind and the hardcoded
fallback used when neither the override layer nor the default source
provides a value. The resolver walks this table once, so precedence is
implemented in exactly one place.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Optional, Tuple, Type

from crashdesk.security.sources import (
    NO_CERTIFICATE_SOURCE,
    FileCertificateSource,
    is_certificate_source,
)

from .constants import (
    DEFAULT_APPLICATION_LOGFILE,
    DEFAULT_APPLICATION_LOGFILE_LINES,
    DEFAULT_CONNECTION_TIMEOUT,
    DEFAULT_DELETE_OLD_UNSENT_REPORTS_ON_APPLICATION_START,
    DEFAULT_DELETE_UNAPPROVED_REPORTS_ON_APPLICATION_START,
    DEFAULT_DIALOG_ICON,
    DEFAULT_DROPBOX_COLLECTION_MINUTES,
    DEFAULT_FORCE_CLOSE_DIALOG_AFTER_TOAST,
    DEFAULT_INCLUDE_DROPBOX_SYSTEM_TAGS,
    DEFAULT_LOGCAT_ARGUMENTS,
    DEFAULT_LOGCAT_FILTER_BY_PID,
    DEFAULT_NOTIFICATION_ICON,
    DEFAULT_REPORT_DIALOG_CLASS,
    DEFAULT_REPORT_PRIMER_CLASS,
    DEFAULT_REPORT_SENDER_FACTORY_CLASSES,
    DEFAULT_RES_VALUE,
    DEFAULT_SEND_REPORTS_IN_DEV_MODE,
    DEFAULT_SHARED_PREFERENCES_MODE,
    DEFAULT_SOCKET_TIMEOUT,
    DEFAULT_STRING_VALUE,
    FALSY_STRINGS,
    NULL_VALUE,
    TRUTHY_STRINGS,
)
from .fields import HttpMethod, ReportingInteractionMode, ReportType, parse_report_field


class SettingKind(str, Enum):
    BOOL = "bool"
    INT = "int"
    STR = "str"
    STR_LIST = "str_list"
    ENUM = "enum"
    RESOURCE = "resource"
    CLASS_REF = "class_ref"
    CLASS_REF_LIST = "class_ref_list"
    FIELD_LIST = "field_list"
    MAP = "map"
    CAPABILITY = "capability"


@dataclass(frozen=True)
class SettingSpec:
    name: str
    kind: SettingKind
    fallback: Any
    enum_type: Optional[Type[Enum]] = None
    nullable: bool = False

    @property
    def env_var(self) -> str:
        return f"CRASHDESK_{self.name.upper()}"


def _resource(name: str, fallback: int = DEFAULT_RES_VALUE) -> SettingSpec:
    return SettingSpec(name, SettingKind.RESOURCE, fallback)


SETTING_SPECS: Tuple[SettingSpec, ...] = (
    SettingSpec("additional_dropbox_tags", SettingKind.STR_LIST, ()),
    SettingSpec("additional_shared_preferences", SettingKind.STR_LIST, ()),
    SettingSpec("connection_timeout", SettingKind.INT, DEFAULT_CONNECTION_TIMEOUT),
    SettingSpec("custom_report_content", SettingKind.FIELD_LIST, ()),
    SettingSpec(
        "delete_unapproved_reports_on_application_start",
        SettingKind.BOOL,
        DEFAULT_DELETE_UNAPPROVED_REPORTS_ON_APPLICATION_START,
    ),
    SettingSpec(
        "delete_old_unsent_reports_on_application_start",
        SettingKind.BOOL,
        DEFAULT_DELETE_OLD_UNSENT_REPORTS_ON_APPLICATION_START,
    ),
    SettingSpec(
        "dropbox_collection_minutes", SettingKind.INT, DEFAULT_DROPBOX_COLLECTION_MINUTES
    ),
    SettingSpec(
        "force_close_dialog_after_toast",
        SettingKind.BOOL,
        DEFAULT_FORCE_CLOSE_DIALOG_AFTER_TOAST,
    ),
    SettingSpec("form_uri", SettingKind.STR, DEFAULT_STRING_VALUE, nullable=True),
    SettingSpec("form_uri_basic_auth_login", SettingKind.STR, NULL_VALUE, nullable=True),
    SettingSpec("form_uri_basic_auth_password", SettingKind.STR, NULL_VALUE, nullable=True),
    SettingSpec(
        "include_dropbox_system_tags", SettingKind.BOOL, DEFAULT_INCLUDE_DROPBOX_SYSTEM_TAGS
    ),
    SettingSpec("logcat_arguments", SettingKind.STR_LIST, DEFAULT_LOGCAT_ARGUMENTS),
    SettingSpec("mail_to", SettingKind.STR, DEFAULT_STRING_VALUE, nullable=True),
    SettingSpec(
        "reporting_interaction_mode",
        SettingKind.ENUM,
        ReportingInteractionMode.SILENT,
        enum_type=ReportingInteractionMode,
    ),
    _resource("res_dialog_positive_button_text"),
    _resource("res_dialog_negative_button_text"),
    _resource("res_dialog_comment_prompt"),
    _resource("res_dialog_email_prompt"),
    _resource("res_dialog_icon", DEFAULT_DIALOG_ICON),
    _resource("res_dialog_ok_toast"),
    _resource("res_dialog_text"),
    _resource("res_dialog_title"),
    _resource("res_notif_icon", DEFAULT_NOTIFICATION_ICON),
    _resource("res_notif_text"),
    _resource("res_notif_ticker_text"),
    _resource("res_notif_title"),
    _resource("res_toast_text"),
    SettingSpec("shared_preferences_mode", SettingKind.INT, DEFAULT_SHARED_PREFERENCES_MODE),
    SettingSpec("shared_preferences_name", SettingKind.STR, DEFAULT_STRING_VALUE),
    SettingSpec("socket_timeout", SettingKind.INT, DEFAULT_SOCKET_TIMEOUT),
    SettingSpec("logcat_filter_by_pid", SettingKind.BOOL, DEFAULT_LOGCAT_FILTER_BY_PID),
    SettingSpec("send_reports_in_dev_mode", SettingKind.BOOL, DEFAULT_SEND_REPORTS_IN_DEV_MODE),
    SettingSpec("exclude_matching_shared_preferences_keys", SettingKind.STR_LIST, ()),
    SettingSpec("exclude_matching_settings_keys", SettingKind.STR_LIST, ()),
    SettingSpec("build_config_class", SettingKind.CLASS_REF, DEFAULT_STRING_VALUE, nullable=True),
    SettingSpec("application_log_file", SettingKind.STR, DEFAULT_APPLICATION_LOGFILE),
    SettingSpec(
        "application_log_file_lines", SettingKind.INT, DEFAULT_APPLICATION_LOGFILE_LINES
    ),
    SettingSpec("report_dialog_class", SettingKind.CLASS_REF, DEFAULT_REPORT_DIALOG_CLASS),
    SettingSpec("report_primer_class", SettingKind.CLASS_REF, DEFAULT_REPORT_PRIMER_CLASS),
    SettingSpec("http_method", SettingKind.ENUM, HttpMethod.POST, enum_type=HttpMethod),
    SettingSpec("report_type", SettingKind.ENUM, ReportType.FORM, enum_type=ReportType),
    SettingSpec("http_headers", SettingKind.MAP, MappingProxyType({})),
    SettingSpec("certificate_source", SettingKind.CAPABILITY, NO_CERTIFICATE_SOURCE),
    SettingSpec(
        "report_sender_factory_classes",
        SettingKind.CLASS_REF_LIST,
        DEFAULT_REPORT_SENDER_FACTORY_CLASSES,
    ),
)

SPECS_BY_NAME: Mapping[str, SettingSpec] = MappingProxyType(
    {spec.name: spec for spec in SETTING_SPECS}
)

SETTING_NAMES: Tuple[str, ...] = tuple(spec.name for spec in SETTING_SPECS)


def get_setting_spec(name: str) -> SettingSpec:
    try:
        return SPECS_BY_NAME[name]
    except KeyError as exc:
        raise KeyError(f"Unknown setting: {name}") from exc


def _class_path(value: Any, name: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, type):
        return f"{value.__module__}.{value.__qualname__}"
    raise TypeError(f"{name} expects a class or dotted class path, got {type(value).__name__}")


def _string_sequence(value: Any, name: str) -> Tuple[str, ...]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise TypeError(f"{name} expects a sequence of strings, got {type(value).__name__}")
    items = tuple(value)
    for item in items:
        if not isinstance(item, str):
            raise TypeError(f"{name} expects a sequence of strings, got item {item!r}")
    return items


def validate_value(spec: SettingSpec, value: Any) -> Any:
    """Check ``value`` against ``spec`` and return its immutable form.

    Raises ``TypeError`` for a wrong type and ``ValueError`` for a value of the
    right type that cannot be interpreted (an unknown enum member, say).
    """

    name = spec.name
    kind = spec.kind
    if value is None:
        raise TypeError(f"{name} must not be None")

    if kind is SettingKind.BOOL:
        if not isinstance(value, bool):
            raise TypeError(f"{name} expects a bool, got {type(value).__name__}")
        return value

    if kind in (SettingKind.INT, SettingKind.RESOURCE):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{name} expects an int, got {type(value).__name__}")
        return value

    if kind is SettingKind.STR:
        if not isinstance(value, str):
            raise TypeError(f"{name} expects a str, got {type(value).__name__}")
        return value

    if kind is SettingKind.STR_LIST:
        return _string_sequence(value, name)

    if kind is SettingKind.ENUM:
        enum_type = spec.enum_type
        if enum_type is None:
            raise TypeError(f"{name} is declared as an enum setting without an enum type")
        if isinstance(value, enum_type):
            return value
        if not isinstance(value, str):
            raise TypeError(f"{name} expects {enum_type.__name__}, got {type(value).__name__}")
        try:
            return enum_type[value.strip().upper()]
        except KeyError as exc:
            raise ValueError(f"Unknown {enum_type.__name__} for {name}: {value}") from exc

    if kind is SettingKind.CLASS_REF:
        return _class_path(value, name)

    if kind is SettingKind.CLASS_REF_LIST:
        if isinstance(value, (str, bytes, type)) or not isinstance(value, Iterable):
            raise TypeError(f"{name} expects a sequence of classes, got {type(value).__name__}")
        return tuple(_class_path(item, name) for item in value)

    if kind is SettingKind.FIELD_LIST:
        if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
            raise TypeError(f"{name} expects a sequence of report fields, got {type(value).__name__}")
        return tuple(parse_report_field(item) for item in value)

    if kind is SettingKind.MAP:
        if not isinstance(value, Mapping):
            raise TypeError(f"{name} expects a mapping, got {type(value).__name__}")
        frozen: Dict[str, str] = {}
        for key, item in value.items():
            if not isinstance(key, str) or not isinstance(item, str):
                raise TypeError(f"{name} expects str keys and values, got {key!r}: {item!r}")
            frozen[key] = item
        return MappingProxyType(frozen)

    if kind is SettingKind.CAPABILITY:
        if not is_certificate_source(value):
            raise TypeError(f"{name} expects a certificate source, got {type(value).__name__}")
        return value

    raise AssertionError(f"Unhandled setting kind: {kind}")  # pragma: no cover


def _split_list(raw: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def coerce_manifest_value(spec: SettingSpec, raw: Any) -> Any:
    """Interpret a value read from a manifest file or environment variable.

    Strings are accepted for every non-string kind: booleans use the usual
    truthy/falsy markers, lists are comma-separated and certificate sources
    are file paths. Returns the validated immutable value.
    """

    kind = spec.kind
    if isinstance(raw, str):
        text = raw.strip()
        if kind is SettingKind.BOOL:
            lowered = text.lower()
            if lowered in TRUTHY_STRINGS:
                return True
            if lowered in FALSY_STRINGS:
                return False
            raise ValueError(f"Invalid boolean value for {spec.name}: {raw!r}")
        if kind in (SettingKind.INT, SettingKind.RESOURCE):
            try:
                return int(text)
            except ValueError as exc:
                raise ValueError(f"Invalid integer value for {spec.name}: {raw!r}") from exc
        if kind in (SettingKind.STR_LIST, SettingKind.FIELD_LIST, SettingKind.CLASS_REF_LIST):
            return validate_value(spec, _split_list(text))
        if kind is SettingKind.CAPABILITY:
            if not text:
                raise ValueError(f"Empty certificate path for {spec.name}")
            return FileCertificateSource(text)
        if kind is SettingKind.MAP:
            raise ValueError(f"{spec.name} must be a table, not a string")
    elif kind is SettingKind.MAP and isinstance(raw, Mapping):
        return validate_value(spec, {str(key): str(item) for key, item in raw.items()})
    return validate_value(spec, raw)


__all__ = [
    "SettingKind",
    "SettingSpec",
    "SETTING_SPECS",
    "SPECS_BY_NAME",
    "SETTING_NAMES",
    "get_setting_spec",
    "validate_value",
    "coerce_manifest_value",
]
