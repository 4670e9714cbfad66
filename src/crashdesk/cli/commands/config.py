"""Config inspection commands for the crashdesk CLI."""

from __future__ import annotations

import typer
from rich.console import Console

from crashdesk.cli import options as cli_options
from crashdesk.cli.formatting import RichStyles, create_config_table, format_config_value
from crashdesk.cli.helpers import config_path_argument, setup_cli_logging
from crashdesk.config.layers import DefaultSource, OverrideLayer
from crashdesk.config.resolver import ResolvedConfiguration, resolve
from crashdesk.config.settings import load_default_source


def _build_overrides(mail_to: str | None, form_uri: str | None) -> OverrideLayer:
    overrides = OverrideLayer()
    mail = cli_options.clean_string(mail_to)
    if mail is not None:
        overrides.set_mail_to(mail)
    uri = cli_options.clean_string(form_uri)
    if uri is not None:
        overrides.set_form_uri(uri)
    return overrides


def _print_warnings(defaults: DefaultSource, stderr_console: Console) -> None:
    for message in defaults.warnings:
        stderr_console.print(message, style=RichStyles.WARNING, markup=False)


def _print_resolved(resolved: ResolvedConfiguration, stdout_console: Console) -> None:
    table = create_config_table("Resolved reporting configuration")
    for name in resolved:
        table.add_row(
            name,
            format_config_value(name, resolved.get(name)),
            resolved.source_of(name),
        )
    stdout_console.print(table)

    fields = sorted(field.value for field in resolved.report_content)
    stdout_console.print(
        f"Report content ({len(fields)} fields): {', '.join(fields)}",
        markup=False,
        soft_wrap=True,
    )


def register(
    app: typer.Typer,
    *,
    stdout_console: Console,
    stderr_console: Console,
) -> None:
    """Register config commands with the app."""

    config_app = typer.Typer(
        help="Inspect crashdesk reporting configuration.",
        no_args_is_help=True,
    )
    app.add_typer(config_app, name="config")

    @config_app.command(
        "show",
        help="Resolve every reporting setting and show which layer supplied it.",
    )
    def config_show(
        config: cli_options.ConfigPathOption = None,
        mail_to: cli_options.MailToOption = None,
        form_uri: cli_options.FormUriOption = None,
        log_level: cli_options.LogLevelOption = None,
        log_format: cli_options.LogFormatOption = None,
    ) -> None:
        config_path = config_path_argument(config)
        setup_cli_logging(config_path, log_level=log_level, log_format=log_format)

        defaults = load_default_source(config_path)
        _print_warnings(defaults, stderr_console)
        resolved = resolve(defaults, _build_overrides(mail_to, form_uri))
        _print_resolved(resolved, stdout_console)


__all__ = ["register"]
