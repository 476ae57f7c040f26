# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""The ``scan`` command reporting unused translation keys."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..reporting import render_usage
from ..usage import UsageScanner
from .check import emit_json
from .options import DETAILED_OPTION, JSON_FORMAT_OPTION, OUTPUT_OPTION
from .shared import get_state, handle_errors, open_project


def scan_command(
    ctx: typer.Context,
    scan_dir: Annotated[
        Path | None,
        typer.Option("--dir", help="Directory to scan (defaults to the project root)."),
    ] = None,
    detailed: DETAILED_OPTION = False,
    show_used: Annotated[bool, typer.Option("--show-used", help="Also list the keys found in code.")] = False,
    json_format: JSON_FORMAT_OPTION = False,
    output: OUTPUT_OPTION = None,
) -> None:
    """Find source-language keys that no scanned file references."""

    state = get_state(ctx)
    logger = state.logger()
    with handle_errors(logger):
        project = open_project(state, logger)
        directory = scan_dir if scan_dir is not None else state.root
        if not directory.is_absolute():
            directory = state.root / directory
        logger.debug(f"scan dir={directory}")
        report = UsageScanner(project.store).scan(project.config, directory)
    if json_format or output is not None:
        emit_json(report.to_dict(), output, logger)
        return
    render_usage(report, logger.console, detailed=detailed, show_used=show_used, use_emoji=state.emoji)


def register(app: typer.Typer) -> None:
    """Attach the ``scan`` command to ``app``."""

    app.command(name="scan")(scan_command)


__all__ = ["register"]
