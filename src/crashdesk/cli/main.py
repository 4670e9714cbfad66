"""CLI entry point wrapper.

The console script points at :func:`main`, which runs the Typer application
exported by :mod:`crashdesk.cli.app` as a click command.
"""

from __future__ import annotations

from typer.main import get_command

from crashdesk.cli.app import app

PROG_NAME = "crashdesk"


def main(argv: list[str] | None = None) -> None:
    """Invoke the CLI.

    Parameters
    ----------
    argv:
        Optional list of arguments to pass to Typer. When ``None`` the
        process arguments are used.
    """

    command = get_command(app)
    command.main(args=argv, prog_name=PROG_NAME)


if __name__ == "__main__":  # pragma: no cover
    main()


__all__ = ["main"]
