"""Default and override layers consumed by the resolver."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

from crashdesk.infrastructure.logging import get_logger
from crashdesk.security.sources import CertificateSourceLike

from .fields import HttpMethod, ReportField, ReportingInteractionMode, ReportType, parse_report_field
from .schema import SPECS_BY_NAME, coerce_manifest_value, get_setting_spec, validate_value

_LOGGER = get_logger("crashdesk.config.layers")

ClassRef = Union[str, type]


@dataclass(frozen=True)
class DefaultSource:
    """Read-only snapshot of declaratively specified settings.

    Build it with :meth:`from_mapping` from manifest data, or directly from
    already typed values at host startup. Direct values are validated like
    override assignments; ``None`` entries count as undeclared.
    """

    values: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    warnings: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        normalized: Dict[str, Any] = {}
        for name, value in self.values.items():
            if value is None:
                continue
            normalized[name] = validate_value(get_setting_spec(name), value)
        object.__setattr__(self, "values", MappingProxyType(normalized))
        object.__setattr__(self, "warnings", tuple(self.warnings))

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]] = None) -> "DefaultSource":
        """Normalize ``raw`` against the setting schema.

        Unknown names and values that cannot be interpreted are dropped and
        reported in :attr:`warnings`; ``None`` entries count as undeclared.
        """

        values: Dict[str, Any] = {}
        warnings: list[str] = []
        for name, raw_value in (raw or {}).items():
            key = str(name).strip().lower()
            spec = SPECS_BY_NAME.get(key)
            if spec is None:
                warnings.append(f"Ignoring unknown setting '{name}'")
                continue
            if raw_value is None:
                continue
            try:
                values[key] = coerce_manifest_value(spec, raw_value)
            except (TypeError, ValueError) as exc:
                warnings.append(f"Ignoring invalid value for '{key}': {exc}")

        for message in warnings:
            _LOGGER.warning("config.defaults.ignored", detail=message)

        return cls(values=MappingProxyType(values), warnings=tuple(warnings))

    def has(self, name: str) -> bool:
        return name in self.values

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def __contains__(self, name: object) -> bool:
        return name in self.values


EMPTY_DEFAULTS = DefaultSource()


class OverrideLayer:
    """Explicit, programmatic assignments made by host code before resolution.

    Every setter validates only its own argument and returns the layer so
    calls can be chained. The layer is not thread-safe: populate it during
    setup, then hand it to :func:`crashdesk.config.resolver.resolve`.
    """

    def __init__(self) -> None:
        self._values: Dict[str, Any] = {}
        self._report_field_deltas: Dict[ReportField, bool] = {}

    @classmethod
    def from_defaults(cls, defaults: DefaultSource) -> "OverrideLayer":
        """Return a layer pre-populated with every value ``defaults`` declares."""

        layer = cls()
        layer._values.update(defaults.values)
        return layer

    # generic access

    def set(self, name: str, value: Any) -> "OverrideLayer":
        spec = get_setting_spec(name)
        if value is None and spec.nullable:
            self._values.pop(name, None)
            return self
        self._values[name] = validate_value(spec, value)
        return self

    def unset(self, name: str) -> "OverrideLayer":
        get_setting_spec(name)
        self._values.pop(name, None)
        return self

    def has(self, name: str) -> bool:
        return name in self._values

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    @property
    def values(self) -> Mapping[str, Any]:
        return MappingProxyType(self._values)

    @property
    def report_field_deltas(self) -> Mapping[ReportField, bool]:
        return MappingProxyType(self._report_field_deltas)

    def set_report_field(self, report_field: Union[ReportField, str], enable: bool) -> "OverrideLayer":
        """Include (``True``) or exclude (``False``) one field from the report.

        Later calls for the same field replace earlier ones.
        """

        if not isinstance(enable, bool):
            raise TypeError(f"enable expects a bool, got {type(enable).__name__}")
        self._report_field_deltas[parse_report_field(report_field)] = enable
        return self

    def __repr__(self) -> str:
        return (
            f"<OverrideLayer settings={sorted(self._values)} "
            f"report_field_deltas={len(self._report_field_deltas)}>"
        )

    # per-setting setters

    def set_additional_dropbox_tags(self, tags: Sequence[str]) -> "OverrideLayer":
        return self.set("additional_dropbox_tags", tags)

    def set_additional_shared_preferences(self, names: Sequence[str]) -> "OverrideLayer":
        return self.set("additional_shared_preferences", names)

    def set_connection_timeout(self, milliseconds: int) -> "OverrideLayer":
        return self.set("connection_timeout", milliseconds)

    def set_custom_report_content(
        self, fields: Iterable[Union[ReportField, str]]
    ) -> "OverrideLayer":
        return self.set("custom_report_content", fields)

    def set_delete_unapproved_reports_on_application_start(self, enabled: bool) -> "OverrideLayer":
        return self.set("delete_unapproved_reports_on_application_start", enabled)

    def set_delete_old_unsent_reports_on_application_start(self, enabled: bool) -> "OverrideLayer":
        return self.set("delete_old_unsent_reports_on_application_start", enabled)

    def set_dropbox_collection_minutes(self, minutes: int) -> "OverrideLayer":
        return self.set("dropbox_collection_minutes", minutes)

    def set_force_close_dialog_after_toast(self, enabled: bool) -> "OverrideLayer":
        return self.set("force_close_dialog_after_toast", enabled)

    def set_form_uri(self, uri: Optional[str]) -> "OverrideLayer":
        return self.set("form_uri", uri)

    def set_form_uri_basic_auth_login(self, login: Optional[str]) -> "OverrideLayer":
        return self.set("form_uri_basic_auth_login", login)

    def set_form_uri_basic_auth_password(self, password: Optional[str]) -> "OverrideLayer":
        return self.set("form_uri_basic_auth_password", password)

    def set_include_dropbox_system_tags(self, enabled: bool) -> "OverrideLayer":
        return self.set("include_dropbox_system_tags", enabled)

    def set_logcat_arguments(self, arguments: Sequence[str]) -> "OverrideLayer":
        return self.set("logcat_arguments", arguments)

    def set_mail_to(self, address: Optional[str]) -> "OverrideLayer":
        return self.set("mail_to", address)

    def set_reporting_interaction_mode(
        self, mode: Union[ReportingInteractionMode, str]
    ) -> "OverrideLayer":
        return self.set("reporting_interaction_mode", mode)

    set_mode = set_reporting_interaction_mode

    def set_res_dialog_positive_button_text(self, res_id: int) -> "OverrideLayer":
        return self.set("res_dialog_positive_button_text", res_id)

    def set_res_dialog_negative_button_text(self, res_id: int) -> "OverrideLayer":
        return self.set("res_dialog_negative_button_text", res_id)

    def set_res_dialog_comment_prompt(self, res_id: int) -> "OverrideLayer":
        return self.set("res_dialog_comment_prompt", res_id)

    def set_res_dialog_email_prompt(self, res_id: int) -> "OverrideLayer":
        return self.set("res_dialog_email_prompt", res_id)

    def set_res_dialog_icon(self, res_id: int) -> "OverrideLayer":
        return self.set("res_dialog_icon", res_id)

    def set_res_dialog_ok_toast(self, res_id: int) -> "OverrideLayer":
        return self.set("res_dialog_ok_toast", res_id)

    def set_res_dialog_text(self, res_id: int) -> "OverrideLayer":
        return self.set("res_dialog_text", res_id)

    def set_res_dialog_title(self, res_id: int) -> "OverrideLayer":
        return self.set("res_dialog_title", res_id)

    def set_res_notif_icon(self, res_id: int) -> "OverrideLayer":
        return self.set("res_notif_icon", res_id)

    def set_res_notif_text(self, res_id: int) -> "OverrideLayer":
        return self.set("res_notif_text", res_id)

    def set_res_notif_ticker_text(self, res_id: int) -> "OverrideLayer":
        return self.set("res_notif_ticker_text", res_id)

    def set_res_notif_title(self, res_id: int) -> "OverrideLayer":
        return self.set("res_notif_title", res_id)

    def set_res_toast_text(self, res_id: int) -> "OverrideLayer":
        return self.set("res_toast_text", res_id)

    def set_shared_preferences_mode(self, mode: int) -> "OverrideLayer":
        return self.set("shared_preferences_mode", mode)

    def set_shared_preferences_name(self, name: str) -> "OverrideLayer":
        return self.set("shared_preferences_name", name)

    def set_socket_timeout(self, milliseconds: int) -> "OverrideLayer":
        return self.set("socket_timeout", milliseconds)

    def set_logcat_filter_by_pid(self, enabled: bool) -> "OverrideLayer":
        return self.set("logcat_filter_by_pid", enabled)

    def set_send_reports_in_dev_mode(self, enabled: bool) -> "OverrideLayer":
        return self.set("send_reports_in_dev_mode", enabled)

    def set_exclude_matching_shared_preferences_keys(
        self, patterns: Sequence[str]
    ) -> "OverrideLayer":
        return self.set("exclude_matching_shared_preferences_keys", patterns)

    def set_exclude_matching_settings_keys(self, patterns: Sequence[str]) -> "OverrideLayer":
        return self.set("exclude_matching_settings_keys", patterns)

    def set_build_config_class(self, build_config: Optional[ClassRef]) -> "OverrideLayer":
        return self.set("build_config_class", build_config)

    def set_application_log_file(self, path: str) -> "OverrideLayer":
        return self.set("application_log_file", path)

    def set_application_log_file_lines(self, lines: int) -> "OverrideLayer":
        return self.set("application_log_file_lines", lines)

    def set_report_dialog_class(self, dialog: ClassRef) -> "OverrideLayer":
        return self.set("report_dialog_class", dialog)

    def set_report_primer_class(self, primer: ClassRef) -> "OverrideLayer":
        return self.set("report_primer_class", primer)

    def set_http_method(self, method: Union[HttpMethod, str]) -> "OverrideLayer":
        return self.set("http_method", method)

    def set_report_type(self, report_type: Union[ReportType, str]) -> "OverrideLayer":
        return self.set("report_type", report_type)

    def set_http_headers(self, headers: Mapping[str, str]) -> "OverrideLayer":
        """Replace the custom HTTP headers sent along with each report."""
        return self.set("http_headers", headers)

    def set_certificate_source(self, source: CertificateSourceLike) -> "OverrideLayer":
        return self.set("certificate_source", source)

    def set_report_sender_factory_classes(
        self, factories: Sequence[ClassRef]
    ) -> "OverrideLayer":
        return self.set("report_sender_factory_classes", factories)


__all__ = ["DefaultSource", "EMPTY_DEFAULTS", "OverrideLayer", "ClassRef"]
