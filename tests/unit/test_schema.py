from __future__ import annotations

from pathlib import Path
from types import MappingProxyType

import pytest

from crashdesk.config.constants import NULL_VALUE
from crashdesk.config.fields import HttpMethod, ReportField, ReportingInteractionMode
from crashdesk.config.schema import (
    SETTING_NAMES,
    SETTING_SPECS,
    SettingKind,
    SettingSpec,
    coerce_manifest_value,
    get_setting_spec,
    validate_value,
)
from crashdesk.security.sources import (
    NO_CERTIFICATE_SOURCE,
    BytesCertificateSource,
    FileCertificateSource,
)


class SampleSenderFactory:
    pass


def test_setting_names_are_unique() -> None:
    assert len(SETTING_NAMES) == len(set(SETTING_NAMES)) == len(SETTING_SPECS)


def test_every_setting_has_a_fallback() -> None:
    for spec in SETTING_SPECS:
        assert spec.fallback is not None, spec.name


def test_selected_fallbacks() -> None:
    assert get_setting_spec("connection_timeout").fallback == 5000
    assert get_setting_spec("socket_timeout").fallback == 20000
    assert get_setting_spec("form_uri_basic_auth_login").fallback == NULL_VALUE
    assert get_setting_spec("reporting_interaction_mode").fallback is ReportingInteractionMode.SILENT
    assert get_setting_spec("http_method").fallback is HttpMethod.POST
    assert get_setting_spec("certificate_source").fallback is NO_CERTIFICATE_SOURCE


def test_env_var_names_follow_prefix() -> None:
    assert get_setting_spec("form_uri").env_var == "CRASHDESK_FORM_URI"


def test_unknown_setting_raises_key_error() -> None:
    with pytest.raises(KeyError, match="Unknown setting"):
        get_setting_spec("not_a_setting")


@pytest.mark.parametrize(
    "name,value",
    [
        ("connection_timeout", "5000"),
        ("connection_timeout", True),
        ("delete_unapproved_reports_on_application_start", 1),
        ("form_uri", 42),
        ("logcat_arguments", "-t 100"),
        ("logcat_arguments", ["-t", 100]),
        ("http_headers", [("X-Test", "1")]),
        ("http_headers", {"X-Test": 1}),
        ("certificate_source", "ca.pem"),
        ("report_dialog_class", 3),
        ("custom_report_content", "STACK_TRACE"),
        ("reporting_interaction_mode", 2),
    ],
)
def test_validate_value_rejects_wrong_types(name: str, value: object) -> None:
    with pytest.raises(TypeError):
        validate_value(get_setting_spec(name), value)


def test_validate_value_rejects_none() -> None:
    with pytest.raises(TypeError, match="must not be None"):
        validate_value(get_setting_spec("socket_timeout"), None)


def test_validate_value_parses_enum_names() -> None:
    spec = get_setting_spec("reporting_interaction_mode")
    assert validate_value(spec, "dialog") is ReportingInteractionMode.DIALOG
    with pytest.raises(ValueError, match="Unknown ReportingInteractionMode"):
        validate_value(spec, "popup")


def test_validate_value_returns_immutable_collections() -> None:
    headers = validate_value(get_setting_spec("http_headers"), {"X-Test": "1"})
    assert isinstance(headers, MappingProxyType)
    tags = validate_value(get_setting_spec("additional_dropbox_tags"), ["a", "b"])
    assert tags == ("a", "b")
    fields = validate_value(get_setting_spec("custom_report_content"), ["logcat", ReportField.BRAND])
    assert fields == (ReportField.LOGCAT, ReportField.BRAND)


def test_validate_value_turns_classes_into_dotted_paths() -> None:
    spec = get_setting_spec("report_sender_factory_classes")
    value = validate_value(spec, [SampleSenderFactory, "pkg.Other"])
    assert value == (f"{__name__}.SampleSenderFactory", "pkg.Other")


def test_validate_value_accepts_callables_as_certificate_sources() -> None:
    spec = get_setting_spec("certificate_source")
    provider = lambda context: None  # noqa: E731
    assert validate_value(spec, provider) is provider
    source = BytesCertificateSource(b"")
    assert validate_value(spec, source) is source


@pytest.mark.parametrize(
    "name,raw,expected",
    [
        ("delete_old_unsent_reports_on_application_start", "no", False),
        ("force_close_dialog_after_toast", " YES ", True),
        ("dropbox_collection_minutes", "15", 15),
        ("res_dialog_icon", "17301543", 17301543),
        ("additional_shared_preferences", "a, b,,c", ("a", "b", "c")),
        ("custom_report_content", "stack_trace,LOGCAT", (ReportField.STACK_TRACE, ReportField.LOGCAT)),
        ("http_method", "put", HttpMethod.PUT),
        ("send_reports_in_dev_mode", False, False),
    ],
)
def test_coerce_manifest_value(name: str, raw: object, expected: object) -> None:
    assert coerce_manifest_value(get_setting_spec(name), raw) == expected


def test_coerce_manifest_value_turns_paths_into_file_sources(tmp_path: Path) -> None:
    source = coerce_manifest_value(get_setting_spec("certificate_source"), str(tmp_path / "ca.pem"))
    assert isinstance(source, FileCertificateSource)
    assert source.path == tmp_path / "ca.pem"


def test_coerce_manifest_value_stringifies_header_tables() -> None:
    headers = coerce_manifest_value(get_setting_spec("http_headers"), {"X-Retry": 3})
    assert dict(headers) == {"X-Retry": "3"}


@pytest.mark.parametrize(
    "name,raw",
    [
        ("include_dropbox_system_tags", "maybe"),
        ("socket_timeout", "fast"),
        ("http_headers", "X-Test: 1"),
        ("certificate_source", "   "),
    ],
)
def test_coerce_manifest_value_rejects_uninterpretable_strings(name: str, raw: str) -> None:
    with pytest.raises(ValueError):
        coerce_manifest_value(get_setting_spec(name), raw)


def test_setting_kinds_cover_every_spec() -> None:
    kinds = {spec.kind for spec in SETTING_SPECS}
    assert kinds == set(SettingKind)


def test_enum_spec_without_enum_type_is_rejected() -> None:
    broken = SettingSpec("broken_mode", SettingKind.ENUM, None)
    with pytest.raises(TypeError, match="without an enum type"):
        validate_value(broken, "dialog")
