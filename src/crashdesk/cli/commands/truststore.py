"""Trust store commands for the crashdesk CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from crashdesk.cli import options as cli_options
from crashdesk.cli.formatting import RichStyles
from crashdesk.cli.helpers import setup_cli_logging
from crashdesk.config.constants import DEFAULT_CERTIFICATE_TYPE
from crashdesk.security.sources import FileCertificateSource
from crashdesk.security.truststore import create_trust_store

CertificatePathArgument = Annotated[
    Path,
    typer.Argument(help="PEM or DER encoded certificate to pin"),
]


def register(
    app: typer.Typer,
    *,
    stdout_console: Console,
    stderr_console: Console,
) -> None:
    """Register trust store commands with the app."""

    truststore_app = typer.Typer(
        help="Build and inspect pinned trust stores.",
        no_args_is_help=True,
    )
    app.add_typer(truststore_app, name="truststore")

    @truststore_app.command(
        "inspect",
        help="Load a certificate into a pinned trust store and print its fingerprint.",
    )
    def truststore_inspect(
        path: CertificatePathArgument,
        certificate_type: cli_options.CertificateTypeOption = DEFAULT_CERTIFICATE_TYPE,
        log_level: cli_options.LogLevelOption = None,
        log_format: cli_options.LogFormatOption = None,
    ) -> None:
        setup_cli_logging(None, log_level=log_level, log_format=log_format)

        store = create_trust_store(
            FileCertificateSource(path), certificate_type=certificate_type
        )
        if store is None:
            stderr_console.print(
                "Certificate pinning unavailable; falling back to system trust.",
                style=RichStyles.ERROR,
            )
            raise typer.Exit(code=1)

        for alias in store.aliases():
            stdout_console.print(f"alias: {alias}", markup=False, soft_wrap=True)
            stdout_console.print(
                f"sha256: {store.fingerprint(alias)}", markup=False, soft_wrap=True
            )
        stdout_console.print(f"store type: {store.store_type}", markup=False)


__all__ = ["register"]
