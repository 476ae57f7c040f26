# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""The ``check`` command: consistency, completeness and missing-key templates."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer

from ..reconcile import ReconciliationEngine
from ..reporting import render_completeness, render_incomplete, render_verification, write_json_report
from .options import DETAILED_OPTION, JSON_FORMAT_OPTION, OUTPUT_OPTION
from .shared import CLILogger, get_state, handle_errors, open_project


def emit_json(payload: Any, output: Path | None, logger: CLILogger) -> None:
    """Echo ``payload`` as JSON or save it to ``output``."""

    written = write_json_report(payload, output)
    if isinstance(written, Path):
        logger.ok(f"Report saved to {written}")
    else:
        logger.echo(written)


def check_command(
    ctx: typer.Context,
    detailed: DETAILED_OPTION = False,
    report: Annotated[bool, typer.Option("--report", help="Show per-language completeness.")] = False,
    incomplete: Annotated[
        bool,
        typer.Option("--incomplete", help="Compare every language against the source language only."),
    ] = False,
    template: Annotated[
        str | None,
        typer.Option("--template", metavar="LANG", help="Emit source values for the keys LANG is missing."),
    ] = None,
    json_format: JSON_FORMAT_OPTION = False,
    output: OUTPUT_OPTION = None,
) -> None:
    """Check that every language holds the same translation keys.

    Exits with status 1 when the plain consistency check finds missing keys.
    """

    state = get_state(ctx)
    logger = state.logger()
    with handle_errors(logger):
        project = open_project(state, logger)
        engine = ReconciliationEngine(project.store)
        catalog_set = project.catalog_set

        if template is not None:
            emit_json(engine.missing_keys_template(catalog_set, template), output, logger)
            return

        if report:
            completeness = engine.completeness_report(catalog_set)
            if json_format or output is not None:
                emit_json(completeness.to_dict(), output, logger)
            else:
                render_completeness(completeness, logger.console, use_emoji=state.emoji)
            return

        if incomplete:
            relative = engine.incomplete_relative_to_source(catalog_set)
            if json_format or output is not None:
                emit_json(relative.to_dict(), output, logger)
            else:
                render_incomplete(relative, logger.console, detailed=detailed, use_emoji=state.emoji)
            return

        result = engine.verify(catalog_set)
        if json_format or output is not None:
            emit_json(result.to_dict(), output, logger)
        else:
            render_verification(
                result,
                logger.console,
                languages=catalog_set.languages,
                lang_dir=project.lang_dir,
                detailed=detailed,
                use_emoji=state.emoji,
            )
    if not result.is_valid:
        raise typer.Exit(code=1)


def register(app: typer.Typer) -> None:
    """Attach the ``check`` command to ``app``."""

    app.command(name="check")(check_command)


__all__ = ["emit_json", "register"]
