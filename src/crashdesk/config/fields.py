"""Report content fields and enumerated setting values."""

from __future__ import annotations

from enum import Enum
from typing import Tuple


class ReportField(str, Enum):
    """Named pieces of data a crash report may carry."""

    REPORT_ID = "REPORT_ID"
    APP_VERSION_CODE = "APP_VERSION_CODE"
    APP_VERSION_NAME = "APP_VERSION_NAME"
    PACKAGE_NAME = "PACKAGE_NAME"
    FILE_PATH = "FILE_PATH"
    PHONE_MODEL = "PHONE_MODEL"
    ANDROID_VERSION = "ANDROID_VERSION"
    BUILD = "BUILD"
    BRAND = "BRAND"
    PRODUCT = "PRODUCT"
    TOTAL_MEM_SIZE = "TOTAL_MEM_SIZE"
    AVAILABLE_MEM_SIZE = "AVAILABLE_MEM_SIZE"
    BUILD_CONFIG = "BUILD_CONFIG"
    CUSTOM_DATA = "CUSTOM_DATA"
    STACK_TRACE = "STACK_TRACE"
    STACK_TRACE_HASH = "STACK_TRACE_HASH"
    INITIAL_CONFIGURATION = "INITIAL_CONFIGURATION"
    CRASH_CONFIGURATION = "CRASH_CONFIGURATION"
    DISPLAY = "DISPLAY"
    USER_COMMENT = "USER_COMMENT"
    USER_APP_START_DATE = "USER_APP_START_DATE"
    USER_CRASH_DATE = "USER_CRASH_DATE"
    DUMPSYS_MEMINFO = "DUMPSYS_MEMINFO"
    DROPBOX = "DROPBOX"
    LOGCAT = "LOGCAT"
    EVENTSLOG = "EVENTSLOG"
    RADIOLOG = "RADIOLOG"
    IS_SILENT = "IS_SILENT"
    DEVICE_ID = "DEVICE_ID"
    INSTALLATION_ID = "INSTALLATION_ID"
    USER_EMAIL = "USER_EMAIL"
    DEVICE_FEATURES = "DEVICE_FEATURES"
    ENVIRONMENT = "ENVIRONMENT"
    SETTINGS_SYSTEM = "SETTINGS_SYSTEM"
    SETTINGS_SECURE = "SETTINGS_SECURE"
    SETTINGS_GLOBAL = "SETTINGS_GLOBAL"
    SHARED_PREFERENCES = "SHARED_PREFERENCES"
    APPLICATION_LOG = "APPLICATION_LOG"
    MEDIA_CODEC_LIST = "MEDIA_CODEC_LIST"
    THREAD_DETAILS = "THREAD_DETAILS"
    USER_IP = "USER_IP"


class ReportingInteractionMode(str, Enum):
    """How the user is involved before a report is sent."""

    SILENT = "SILENT"
    NOTIFICATION = "NOTIFICATION"
    TOAST = "TOAST"
    DIALOG = "DIALOG"


class HttpMethod(str, Enum):
    POST = "POST"
    PUT = "PUT"


class ReportType(str, Enum):
    FORM = "FORM"
    JSON = "JSON"


DEFAULT_REPORT_FIELDS: Tuple[ReportField, ...] = (
    ReportField.REPORT_ID,
    ReportField.APP_VERSION_CODE,
    ReportField.APP_VERSION_NAME,
    ReportField.PACKAGE_NAME,
    ReportField.FILE_PATH,
    ReportField.PHONE_MODEL,
    ReportField.BRAND,
    ReportField.PRODUCT,
    ReportField.ANDROID_VERSION,
    ReportField.BUILD,
    ReportField.TOTAL_MEM_SIZE,
    ReportField.AVAILABLE_MEM_SIZE,
    ReportField.BUILD_CONFIG,
    ReportField.CUSTOM_DATA,
    ReportField.IS_SILENT,
    ReportField.STACK_TRACE,
    ReportField.INITIAL_CONFIGURATION,
    ReportField.CRASH_CONFIGURATION,
    ReportField.DISPLAY,
    ReportField.USER_COMMENT,
    ReportField.USER_EMAIL,
    ReportField.USER_APP_START_DATE,
    ReportField.USER_CRASH_DATE,
    ReportField.DUMPSYS_MEMINFO,
    ReportField.LOGCAT,
    ReportField.INSTALLATION_ID,
    ReportField.DEVICE_FEATURES,
    ReportField.ENVIRONMENT,
    ReportField.SHARED_PREFERENCES,
)

# Mail reports are read by a human; keep them short.
DEFAULT_MAIL_REPORT_FIELDS: Tuple[ReportField, ...] = (
    ReportField.USER_COMMENT,
    ReportField.ANDROID_VERSION,
    ReportField.APP_VERSION_NAME,
    ReportField.BRAND,
    ReportField.PHONE_MODEL,
    ReportField.CUSTOM_DATA,
    ReportField.STACK_TRACE,
)


def parse_report_field(value: object) -> ReportField:
    """Return the :class:`ReportField` named by ``value`` (case-insensitive)."""

    if isinstance(value, ReportField):
        return value
    if not isinstance(value, str):
        raise TypeError(f"Report field must be a string or ReportField, got {type(value).__name__}")
    try:
        return ReportField[value.strip().upper()]
    except KeyError as exc:
        raise ValueError(f"Unknown report field: {value}") from exc


__all__ = [
    "ReportField",
    "ReportingInteractionMode",
    "HttpMethod",
    "ReportType",
    "DEFAULT_REPORT_FIELDS",
    "DEFAULT_MAIL_REPORT_FIELDS",
    "parse_report_field",
]
