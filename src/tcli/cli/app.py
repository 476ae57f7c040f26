# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared options."""

from __future__ import annotations

from pathlib import Path

import typer

from .. import __version__
from . import catalog_cmds, check, config_cmd, scan
from .options import DEBUG_OPTION, EMOJI_OPTION, ROOT_OPTION
from .shared import CLIState, configure_logging

app = typer.Typer(
    name="tcli",
    help="Manage multi-language JSON translation catalogs.",
    no_args_is_help=True,
    add_completion=False,
)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"tcli {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    root: ROOT_OPTION = Path("."),
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_show_version,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Capture global options shared by every command."""

    configure_logging(debug)
    ctx.obj = CLIState(root=root.resolve(), emoji=emoji, debug=debug)


catalog_cmds.register(app)
check.register(app)
scan.register(app)
config_cmd.register(app)

__all__ = ["app"]
