"""Typer application entry point."""

from __future__ import annotations

from typing import Annotated

import typer

from mailwright import meta
from mailwright.cli.commands.mail import preview, send
from mailwright.cli.common import console

app = typer.Typer(
    name=meta.__app_name__,
    help="mailwright: compose and send email messages.",
    no_args_is_help=True,
    add_completion=False,
)

app.command("preview")(preview)
app.command("send")(send)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"{meta.__app_name__} {meta.__version__}", highlight=False)
        raise typer.Exit()


@app.callback()
def _root(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """mailwright: compose and send email messages."""


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual entry point
    main()
