"""Resolve layered reporting settings into one immutable configuration.

Every setting resolves with the same precedence:

1. Explicit value on the :class:`~crashdesk.config.layers.OverrideLayer`
2. Declared value on the :class:`~crashdesk.config.layers.DefaultSource`
3. Hardcoded fallback from :mod:`crashdesk.config.schema`

The report field set is derived afterwards from the resolved values plus the
per-field deltas recorded on the override layer. Resolution never raises;
checks that span several settings belong to the consumer that needs them.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, FrozenSet, Iterator, Mapping, Optional, Tuple

from crashdesk.infrastructure.errors import ConfigurationError, ErrorCode
from crashdesk.infrastructure.logging import get_logger
from crashdesk.security.sources import CertificateSourceLike

from .fields import (
    DEFAULT_MAIL_REPORT_FIELDS,
    DEFAULT_REPORT_FIELDS,
    HttpMethod,
    ReportField,
    ReportingInteractionMode,
    ReportType,
)
from .layers import EMPTY_DEFAULTS, DefaultSource, OverrideLayer
from .schema import SETTING_SPECS

_LOGGER = get_logger("crashdesk.config.resolver")

SOURCE_OVERRIDE = "override"
SOURCE_DEFAULT = "default"
SOURCE_FALLBACK = "fallback"

BASE_FIELDS_CUSTOM = "custom"
BASE_FIELDS_MAIL = "mail_default"
BASE_FIELDS_DEFAULT = "default"


@dataclass(frozen=True)
class ResolvedConfiguration:
    """Immutable snapshot shared by every reporting component.

    Attribute names match the setting names; :meth:`get` and item access
    look settings up by name.
    """

    additional_dropbox_tags: Tuple[str, ...]
    additional_shared_preferences: Tuple[str, ...]
    connection_timeout: int
    custom_report_content: Tuple[ReportField, ...]
    delete_unapproved_reports_on_application_start: bool
    delete_old_unsent_reports_on_application_start: bool
    dropbox_collection_minutes: int
    force_close_dialog_after_toast: bool
    form_uri: str
    form_uri_basic_auth_login: str
    form_uri_basic_auth_password: str
    include_dropbox_system_tags: bool
    logcat_arguments: Tuple[str, ...]
    mail_to: str
    reporting_interaction_mode: ReportingInteractionMode
    res_dialog_positive_button_text: int
    res_dialog_negative_button_text: int
    res_dialog_comment_prompt: int
    res_dialog_email_prompt: int
    res_dialog_icon: int
    res_dialog_ok_toast: int
    res_dialog_text: int
    res_dialog_title: int
    res_notif_icon: int
    res_notif_text: int
    res_notif_ticker_text: int
    res_notif_title: int
    res_toast_text: int
    shared_preferences_mode: int
    shared_preferences_name: str
    socket_timeout: int
    logcat_filter_by_pid: bool
    send_reports_in_dev_mode: bool
    exclude_matching_shared_preferences_keys: Tuple[str, ...]
    exclude_matching_settings_keys: Tuple[str, ...]
    build_config_class: str
    application_log_file: str
    application_log_file_lines: int
    report_dialog_class: str
    report_primer_class: str
    http_method: HttpMethod
    report_type: ReportType
    http_headers: Mapping[str, str]
    certificate_source: CertificateSourceLike
    report_sender_factory_classes: Tuple[str, ...]
    report_content: FrozenSet[ReportField]
    sources: Mapping[str, str]

    def get(self, name: str) -> Any:
        if name not in _SETTING_FIELD_NAMES and name != "report_content":
            raise KeyError(f"Unknown setting: {name}")
        return getattr(self, name)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __iter__(self) -> Iterator[str]:
        return iter(_SETTING_FIELD_NAMES)

    def source_of(self, name: str) -> str:
        """Return which layer supplied ``name``: override, default or fallback."""

        return self.sources[name]

    def as_dict(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in _SETTING_FIELD_NAMES}

    @property
    def mail_delivery(self) -> bool:
        return bool(self.mail_to.strip())

    def require_form_uri(self) -> str:
        """Return the form URI, raising when an HTTP sender has no destination."""

        if not self.form_uri:
            raise ConfigurationError(
                "form_uri is required for HTTP report delivery",
                code=ErrorCode.CONFIGURATION_MISSING_FORM_URI,
                user_message="Configure form_uri before enabling HTTP report delivery.",
            )
        return self.form_uri


_SETTING_FIELD_NAMES: Tuple[str, ...] = tuple(spec.name for spec in SETTING_SPECS)


def _resolve_value(
    name: str, fallback: Any, defaults: DefaultSource, overrides: OverrideLayer
) -> Tuple[Any, str]:
    if overrides.has(name):
        return overrides.get(name), SOURCE_OVERRIDE
    if defaults.has(name):
        return defaults.get(name), SOURCE_DEFAULT
    return fallback, SOURCE_FALLBACK


def _base_report_fields(
    custom: Tuple[ReportField, ...], mail_to: str
) -> Tuple[Tuple[ReportField, ...], str]:
    if custom:
        return custom, BASE_FIELDS_CUSTOM
    if mail_to.strip():
        return DEFAULT_MAIL_REPORT_FIELDS, BASE_FIELDS_MAIL
    return DEFAULT_REPORT_FIELDS, BASE_FIELDS_DEFAULT


def resolve_report_fields(
    custom: Tuple[ReportField, ...],
    mail_to: str,
    deltas: Mapping[ReportField, bool],
) -> FrozenSet[ReportField]:
    """Build the report field set from its base list and per-field deltas.

    The base list is the custom list when one is supplied, the mail list when
    reports go to an email address, and the standard list otherwise. Deltas
    are keyed by field, so the order they are applied in does not matter.
    """

    base, tier = _base_report_fields(custom, mail_to)
    _LOGGER.debug("config.report_fields.base", tier=tier, count=len(base))

    content = set(base)
    for report_field, enabled in deltas.items():
        if enabled:
            content.add(report_field)
        else:
            content.discard(report_field)
    return frozenset(content)


def resolve(
    defaults: Optional[DefaultSource] = None,
    overrides: Optional[OverrideLayer] = None,
) -> ResolvedConfiguration:
    """Merge ``defaults`` and ``overrides`` into a :class:`ResolvedConfiguration`."""

    defaults = defaults if defaults is not None else EMPTY_DEFAULTS
    overrides = overrides if overrides is not None else OverrideLayer()

    values: dict[str, Any] = {}
    sources: dict[str, str] = {}
    for spec in SETTING_SPECS:
        value, source = _resolve_value(spec.name, spec.fallback, defaults, overrides)
        values[spec.name] = value
        sources[spec.name] = source

    report_content = resolve_report_fields(
        values["custom_report_content"],
        values["mail_to"],
        overrides.report_field_deltas,
    )

    return ResolvedConfiguration(
        **values,
        report_content=report_content,
        sources=MappingProxyType(sources),
    )


__all__ = [
    "ResolvedConfiguration",
    "resolve",
    "resolve_report_fields",
    "SOURCE_OVERRIDE",
    "SOURCE_DEFAULT",
    "SOURCE_FALLBACK",
]
