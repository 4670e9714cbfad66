from __future__ import annotations

import dataclasses
import itertools
from types import MappingProxyType
from typing import Any

import pytest

from crashdesk.config.fields import (
    DEFAULT_MAIL_REPORT_FIELDS,
    DEFAULT_REPORT_FIELDS,
    ReportField,
)
from crashdesk.config.layers import DefaultSource, OverrideLayer
from crashdesk.config.resolver import (
    SOURCE_DEFAULT,
    SOURCE_FALLBACK,
    SOURCE_OVERRIDE,
    resolve,
    resolve_report_fields,
)
from crashdesk.config.schema import SETTING_NAMES, SETTING_SPECS, SettingKind, SettingSpec, validate_value
from crashdesk.infrastructure.errors import ConfigurationError, ErrorCode
from crashdesk.security.sources import NO_CERTIFICATE_SOURCE, BytesCertificateSource

_SOURCES = {
    1: BytesCertificateSource(b"first"),
    2: BytesCertificateSource(b"second"),
}


def _sample_value(spec: SettingSpec, variant: int) -> Any:
    kind = spec.kind
    if kind is SettingKind.BOOL:
        return (not spec.fallback) if variant == 1 else spec.fallback
    if kind in (SettingKind.INT, SettingKind.RESOURCE):
        return spec.fallback + variant
    if kind is SettingKind.STR:
        return f"{spec.name}-{variant}"
    if kind is SettingKind.STR_LIST:
        return (f"item-{variant}",)
    if kind is SettingKind.ENUM:
        members = [member for member in spec.enum_type if member != spec.fallback]
        return members[variant - 1] if len(members) >= variant else members[0]
    if kind is SettingKind.CLASS_REF:
        return f"samples.Class{variant}"
    if kind is SettingKind.CLASS_REF_LIST:
        return (f"samples.Factory{variant}",)
    if kind is SettingKind.FIELD_LIST:
        return (ReportField.STACK_TRACE,) if variant == 1 else (ReportField.LOGCAT,)
    if kind is SettingKind.MAP:
        return {"X-Variant": str(variant)}
    if kind is SettingKind.CAPABILITY:
        return _SOURCES[variant]
    raise AssertionError(kind)


def _expected(spec: SettingSpec, variant: int) -> Any:
    return validate_value(spec, _sample_value(spec, variant))


def _defaults_for(spec: SettingSpec, variant: int) -> DefaultSource:
    return DefaultSource(values=MappingProxyType({spec.name: _expected(spec, variant)}))


@pytest.mark.parametrize("spec", SETTING_SPECS, ids=lambda spec: spec.name)
def test_fallback_used_when_no_layer_sets_value(spec: SettingSpec) -> None:
    resolved = resolve()
    assert resolved.get(spec.name) == spec.fallback
    assert resolved.source_of(spec.name) == SOURCE_FALLBACK


@pytest.mark.parametrize("spec", SETTING_SPECS, ids=lambda spec: spec.name)
def test_defaults_beat_fallback(spec: SettingSpec) -> None:
    resolved = resolve(_defaults_for(spec, 1), OverrideLayer())
    assert resolved.get(spec.name) == _expected(spec, 1)
    assert resolved.source_of(spec.name) == SOURCE_DEFAULT


@pytest.mark.parametrize("spec", SETTING_SPECS, ids=lambda spec: spec.name)
def test_override_beats_defaults(spec: SettingSpec) -> None:
    overrides = OverrideLayer().set(spec.name, _sample_value(spec, 2))
    resolved = resolve(_defaults_for(spec, 1), overrides)
    assert resolved.get(spec.name) == _expected(spec, 2)
    assert resolved.source_of(spec.name) == SOURCE_OVERRIDE


def test_resolution_without_layers_uses_null_certificate_source() -> None:
    resolved = resolve()
    assert resolved.certificate_source is NO_CERTIFICATE_SOURCE
    assert resolved.report_content == frozenset(DEFAULT_REPORT_FIELDS)
    assert not resolved.mail_delivery


def test_custom_fields_with_deltas() -> None:
    overrides = OverrideLayer().set_custom_report_content(
        [ReportField.REPORT_ID, ReportField.BRAND, ReportField.LOGCAT]
    )
    overrides.set_report_field(ReportField.REPORT_ID, False)
    overrides.set_report_field(ReportField.DROPBOX, True)

    resolved = resolve(overrides=overrides)

    assert resolved.report_content == frozenset(
        {ReportField.BRAND, ReportField.LOGCAT, ReportField.DROPBOX}
    )


def test_mail_default_fields_when_mail_to_set() -> None:
    defaults = DefaultSource.from_mapping({"mail_to": "crashes@example.com"})
    resolved = resolve(defaults)
    assert resolved.report_content == frozenset(DEFAULT_MAIL_REPORT_FIELDS)
    assert resolved.mail_delivery


def test_custom_fields_win_over_mail_default() -> None:
    overrides = OverrideLayer().set_mail_to("crashes@example.com")
    overrides.set_custom_report_content(["STACK_TRACE"])
    assert resolve(overrides=overrides).report_content == frozenset({ReportField.STACK_TRACE})


def test_empty_custom_list_counts_as_not_supplied() -> None:
    overrides = OverrideLayer().set_custom_report_content([])
    assert resolve(overrides=overrides).report_content == frozenset(DEFAULT_REPORT_FIELDS)


def test_empty_mail_to_keeps_standard_fields() -> None:
    overrides = OverrideLayer().set_mail_to("")
    assert resolve(overrides=overrides).report_content == frozenset(DEFAULT_REPORT_FIELDS)


def test_delta_order_does_not_matter() -> None:
    deltas = [
        (ReportField.LOGCAT, False),
        (ReportField.DROPBOX, True),
        (ReportField.USER_IP, True),
        (ReportField.BRAND, False),
    ]
    results = set()
    for ordering in itertools.permutations(deltas):
        layer = OverrideLayer()
        for report_field, enabled in ordering:
            layer.set_report_field(report_field, enabled)
        results.add(resolve(overrides=layer).report_content)
    assert len(results) == 1


def test_last_delta_for_a_field_wins() -> None:
    layer = OverrideLayer()
    layer.set_report_field(ReportField.LOGCAT, False)
    layer.set_report_field(ReportField.LOGCAT, True)
    assert ReportField.LOGCAT in resolve(overrides=layer).report_content

    layer.set_report_field(ReportField.LOGCAT, False)
    assert ReportField.LOGCAT not in resolve(overrides=layer).report_content


def test_resolve_report_fields_directly() -> None:
    content = resolve_report_fields((), "", {ReportField.THREAD_DETAILS: True})
    assert content == frozenset(DEFAULT_REPORT_FIELDS) | {ReportField.THREAD_DETAILS}


def test_resolved_configuration_is_a_snapshot() -> None:
    layer = OverrideLayer().set_socket_timeout(100)
    resolved = resolve(overrides=layer)
    layer.set_socket_timeout(200)

    assert resolved.socket_timeout == 100
    with pytest.raises(dataclasses.FrozenInstanceError):
        resolved.socket_timeout = 300  # type: ignore[misc]


def test_lookup_by_name() -> None:
    resolved = resolve(overrides=OverrideLayer().set_form_uri("https://a"))
    assert resolved["form_uri"] == "https://a"
    assert resolved.get("report_content") == resolved.report_content
    assert list(resolved) == list(SETTING_NAMES)
    assert set(resolved.as_dict()) == set(SETTING_NAMES)
    with pytest.raises(KeyError):
        resolved.get("colour")


def test_require_form_uri() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        resolve().require_form_uri()
    assert excinfo.value.code == ErrorCode.CONFIGURATION_MISSING_FORM_URI.value

    resolved = resolve(overrides=OverrideLayer().set_form_uri("https://a"))
    assert resolved.require_form_uri() == "https://a"


def test_blank_mail_to_keeps_standard_fields() -> None:
    overrides = OverrideLayer().set_mail_to("   ")
    resolved = resolve(overrides=overrides)
    assert resolved.report_content == frozenset(DEFAULT_REPORT_FIELDS)
    assert not resolved.mail_delivery


def test_declared_custom_fields_with_override_deltas() -> None:
    defaults = DefaultSource.from_mapping(
        {"custom_report_content": ["APP_VERSION_CODE", "ANDROID_VERSION", "PHONE_MODEL"]}
    )
    overrides = OverrideLayer()
    overrides.set_report_field(ReportField.APP_VERSION_CODE, False)
    overrides.set_report_field(ReportField.STACK_TRACE, True)

    resolved = resolve(defaults, overrides)

    assert resolved.source_of("custom_report_content") == SOURCE_DEFAULT
    assert resolved.report_content == frozenset(
        {ReportField.ANDROID_VERSION, ReportField.PHONE_MODEL, ReportField.STACK_TRACE}
    )


def test_directly_built_defaults_never_leak_none_or_lists() -> None:
    defaults = DefaultSource(values={"mail_to": None, "logcat_arguments": ["-t", "100"]})

    resolved = resolve(defaults, OverrideLayer())

    assert resolved.mail_to is not None
    assert resolved.source_of("mail_to") == SOURCE_FALLBACK
    assert resolved.logcat_arguments == ("-t", "100")
    assert resolved.source_of("logcat_arguments") == SOURCE_DEFAULT
