from __future__ import annotations

import importlib
from pathlib import Path

import typer
from rich.console import Console
from typer.testing import CliRunner

from crashdesk.cli.commands import config as config_command
from crashdesk.cli.commands import truststore as truststore_command

app_mod = importlib.import_module("crashdesk.cli.app")


def _wide_app() -> typer.Typer:
    # Wide consoles keep table rows on one line so assertions stay simple.
    app = typer.Typer()
    stdout_console = Console(width=240)
    stderr_console = Console(stderr=True, width=240)
    config_command.register(app, stdout_console=stdout_console, stderr_console=stderr_console)
    truststore_command.register(
        app, stdout_console=stdout_console, stderr_console=stderr_console
    )
    return app


def _write_manifest(path: Path) -> Path:
    path.write_text(
        "\n".join(
            [
                "[reports]",
                'form_uri = "https://reports.example.com/submit"',
                "connection_timeout = 3000",
                'form_uri_basic_auth_password = "topsecret"',
                'unknown_option = "x"',
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    return path


def test_version_uses_pyproject(tmp_path: Path, monkeypatch) -> None:  # noqa: ANN001
    (tmp_path / "pyproject.toml").write_text("[project]\nversion='9.9.9'\n", encoding="utf-8")
    monkeypatch.setattr(app_mod, "PROJECT_ROOT", tmp_path)

    runner = CliRunner()
    result = runner.invoke(app_mod.app, ["version"], color=False)
    assert result.exit_code == 0
    assert result.stdout.strip()


def test_version_uses_metadata(monkeypatch) -> None:  # noqa: ANN001
    class _Meta:
        class PackageNotFoundError(Exception):
            pass

        @staticmethod
        def version(name: str) -> str:
            return "9.9.9"

    monkeypatch.setattr(app_mod, "PROJECT_ROOT", Path("/__does_not_exist__"))
    monkeypatch.setattr(importlib, "metadata", _Meta, raising=True)

    runner = CliRunner()
    result = runner.invoke(app_mod.app, ["version"], color=False)
    assert result.exit_code == 0 and result.stdout.strip() == "9.9.9"


def test_config_show_reports_sources(tmp_path: Path) -> None:
    manifest = _write_manifest(tmp_path / "crashdesk.toml")

    runner = CliRunner()
    result = runner.invoke(
        _wide_app(),
        ["config", "show", "--config", str(manifest), "--mail-to", "ops@example.com"],
        color=False,
    )

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    mail_row = next(line for line in lines if " mail_to " in f" {line} ")
    assert "ops@example.com" in mail_row and "override" in mail_row
    timeout_row = next(line for line in lines if "connection_timeout" in line)
    assert "3000" in timeout_row and "default" in timeout_row
    socket_row = next(line for line in lines if "socket_timeout" in line)
    assert "20000" in socket_row and "fallback" in socket_row
    assert "topsecret" not in result.output
    assert "Report content (7 fields)" in result.output
    assert "Ignoring unknown setting 'unknown_option'" in result.output


def test_config_show_rejects_unknown_log_level() -> None:
    runner = CliRunner()
    result = runner.invoke(_wide_app(), ["config", "show", "--log-level", "chatty"], color=False)
    assert result.exit_code != 0


def test_truststore_inspect_prints_fingerprint(ca_pem_path: Path, ca_fingerprint: str) -> None:
    runner = CliRunner()
    result = runner.invoke(_wide_app(), ["truststore", "inspect", str(ca_pem_path)], color=False)

    assert result.exit_code == 0, result.output
    assert "alias: ca" in result.output
    assert f"sha256: {ca_fingerprint}" in result.output


def test_truststore_inspect_falls_back_on_bad_certificate(tmp_path: Path) -> None:
    bogus = tmp_path / "bogus.pem"
    bogus.write_bytes(b"not a certificate")

    runner = CliRunner()
    result = runner.invoke(_wide_app(), ["truststore", "inspect", str(bogus)], color=False)

    assert result.exit_code == 1
    assert "falling back to system trust" in result.output


def test_truststore_inspect_rejects_unsupported_type(ca_der_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        _wide_app(),
        ["truststore", "inspect", str(ca_der_path), "--certificate-type", "PGP"],
        color=False,
    )
    assert result.exit_code == 1


def test_root_app_registers_command_groups() -> None:
    runner = CliRunner()
    result = runner.invoke(app_mod.app, ["--help"], color=False)
    assert result.exit_code == 0
    assert "config" in result.output
    assert "truststore" in result.output
