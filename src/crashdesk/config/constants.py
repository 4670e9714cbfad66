"""Common coercion helpers and fallback constants."""

from __future__ import annotations

from typing import Optional

TRUTHY_STRINGS = {"1", "true", "yes", "on"}
FALSY_STRINGS = {"0", "false", "no", "off"}


CONFIG_BASENAME = "crashdesk"
DEFAULT_CONFIG_FILENAME = f"{CONFIG_BASENAME}.toml"
LOCAL_CONFIG_FILENAME = f"{CONFIG_BASENAME}.local.toml"
ENVVAR_PREFIX = "CRASHDESK"

# Placeholders understood by report senders.
DEFAULT_STRING_VALUE = ""
NULL_VALUE = "ACRA-NULL-STRING"
DEFAULT_RES_VALUE = 0

DEFAULT_CONNECTION_TIMEOUT = 5000
DEFAULT_SOCKET_TIMEOUT = 20000
DEFAULT_DELETE_UNAPPROVED_REPORTS_ON_APPLICATION_START = True
DEFAULT_DELETE_OLD_UNSENT_REPORTS_ON_APPLICATION_START = True
DEFAULT_DROPBOX_COLLECTION_MINUTES = 5
DEFAULT_FORCE_CLOSE_DIALOG_AFTER_TOAST = False
DEFAULT_INCLUDE_DROPBOX_SYSTEM_TAGS = False
DEFAULT_LOGCAT_LINES = 100
DEFAULT_LOGCAT_FILTER_BY_PID = False
DEFAULT_SEND_REPORTS_IN_DEV_MODE = True
DEFAULT_SHARED_PREFERENCES_MODE = 0
DEFAULT_APPLICATION_LOGFILE = DEFAULT_STRING_VALUE
DEFAULT_APPLICATION_LOGFILE_LINES = 100
# android.R.drawable.ic_dialog_alert / stat_notify_error
DEFAULT_DIALOG_ICON = 17301543
DEFAULT_NOTIFICATION_ICON = 17301624

DEFAULT_LOGCAT_ARGUMENTS = ("-t", str(DEFAULT_LOGCAT_LINES), "-v", "time")

DEFAULT_REPORT_DIALOG_CLASS = "CrashReportDialog"
DEFAULT_REPORT_PRIMER_CLASS = "NoOpReportPrimer"
DEFAULT_REPORT_SENDER_FACTORY_CLASSES = ("DefaultReportSenderFactory",)

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_MAX_BYTES = 10_000_000
DEFAULT_BACKUP_COUNT = 5

DEFAULT_CERTIFICATE_TYPE = "X.509"
TRUST_ANCHOR_ALIAS = "ca"


def coerce_positive_int(
    candidate: Optional[object], *, default: Optional[int] = None
) -> int:
    """Coerce ``candidate`` into a positive integer, enforcing strict validation."""

    if candidate is None:
        if default is None:
            raise ValueError("No integer value provided and no default specified")
        return default

    if isinstance(candidate, bool):
        raise ValueError(f"Invalid integer value: {candidate}")

    try:
        value = int(candidate)  # type: ignore[call-overload]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid integer value: {candidate}") from exc

    if value <= 0:
        raise ValueError(f"Value must be positive: {candidate}")

    return value


__all__ = [
    "coerce_positive_int",
    "TRUTHY_STRINGS",
    "FALSY_STRINGS",
    "CONFIG_BASENAME",
    "DEFAULT_CONFIG_FILENAME",
    "LOCAL_CONFIG_FILENAME",
    "ENVVAR_PREFIX",
    "DEFAULT_STRING_VALUE",
    "NULL_VALUE",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_MAX_BYTES",
    "DEFAULT_BACKUP_COUNT",
    "DEFAULT_CERTIFICATE_TYPE",
    "TRUST_ANCHOR_ALIAS",
]
