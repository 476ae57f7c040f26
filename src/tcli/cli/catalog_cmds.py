# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Commands that add, rename, remove and list translation keys."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

from ..catalog import parse_batch_input
from ..config_loader import write_config
from ..reporting import render_add_language, render_mutation, render_translations
from .options import FORCE_OVERWRITE_OPTION, INTERACTIVE_OPTION
from .shared import CLIError, CLILogger, conflict_policy, get_state, handle_errors, open_project

STDIN_MARKER = "-"


def _report_failures(failed: list[str], logger: CLILogger) -> None:
    if failed:
        logger.warn(f"Translation failed for: {', '.join(failed)}")


def add_command(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Dotted translation key, e.g. common.buttons.save.")],
    text: Annotated[str, typer.Argument(help="Text in the source language.")],
    force: FORCE_OVERWRITE_OPTION = False,
    interactive: INTERACTIVE_OPTION = True,
) -> None:
    """Add or update a key in every language, translating from the source text."""

    state = get_state(ctx)
    logger = state.logger()
    with handle_errors(logger):
        project = open_project(state, logger, translate=True)
        catalog_set = project.catalog_set
        logger.info(f'Adding "{key}" from {catalog_set.source_display_name} to {len(catalog_set)} languages')
        result = project.store.add_or_update_key(
            key,
            text,
            catalog_set,
            conflict_policy(force=force, interactive=interactive),
        )
    render_mutation(result, logger.console, use_emoji=state.emoji)
    _report_failures(result.failed, logger)


def batch_command(
    ctx: typer.Context,
    source: Annotated[str, typer.Argument(help='JSON file of key/text pairs, or "-" to read stdin.')],
    force: FORCE_OVERWRITE_OPTION = False,
    interactive: INTERACTIVE_OPTION = True,
) -> None:
    """Add many keys at once with one translation request per language."""

    state = get_state(ctx)
    logger = state.logger()
    with handle_errors(logger):
        content = _read_batch_source(source, state.root)
        pairs = parse_batch_input(content)
        if not pairs:
            raise CLIError("No valid translation pairs found in input")
        project = open_project(state, logger, translate=True)
        logger.info(f"Processing {len(pairs)} translations across {len(project.catalog_set)} languages")
        result = project.store.batch_add(
            pairs,
            project.catalog_set,
            conflict_policy(force=force, interactive=_can_prompt(interactive, source)),
        )
    render_mutation(result, logger.console, use_emoji=state.emoji)
    _report_failures(result.failed, logger)


def _can_prompt(interactive: bool, source: str) -> bool:
    """Return whether conflicts may be confirmed on the terminal.

    Stdin already holds the batch document when it is the source, and a
    non-terminal stdin cannot answer prompts; conflicts are then kept.
    """

    return interactive and source != STDIN_MARKER and sys.stdin.isatty()


def _read_batch_source(source: str, root: Path) -> str:
    if source == STDIN_MARKER:
        return typer.get_text_stream("stdin").read()
    path = Path(source)
    if not path.is_absolute():
        path = root / path
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise CLIError(f"File not found: {source}") from exc


def list_command(
    ctx: typer.Context,
    language: Annotated[str, typer.Argument(help="Language code to list.")],
) -> None:
    """Show every translation stored for one language."""

    state = get_state(ctx)
    logger = state.logger()
    with handle_errors(logger):
        project = open_project(state, logger)
        name = project.catalog_set.display_name(language)
        flat = project.store.list_translations(language)
    render_translations(language, name, flat, logger.console)


def rename_command(
    ctx: typer.Context,
    old_key: Annotated[str, typer.Argument(help="Existing key.")],
    new_key: Annotated[str, typer.Argument(help="New key.")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite the new key if it already exists.")] = False,
) -> None:
    """Rename a key in every language that holds it."""

    state = get_state(ctx)
    logger = state.logger()
    with handle_errors(logger):
        project = open_project(state, logger)
        result = project.store.rename_key(old_key, new_key, project.catalog_set, force=force)
    render_mutation(result, logger.console, use_emoji=state.emoji)
    logger.ok(f'Renamed "{old_key}" to "{new_key}" in {len(result.updated)} languages')


def remove_command(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Key to remove.")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Remove without asking for confirmation.")] = False,
) -> None:
    """Remove a key from every language that holds it."""

    state = get_state(ctx)
    logger = state.logger()
    with handle_errors(logger):
        project = open_project(state, logger)
        if not force:
            typer.confirm(f'Remove "{key}" from all languages?', default=False, abort=True)
        result = project.store.remove_key(key, project.catalog_set)
    render_mutation(result, logger.console, use_emoji=state.emoji)
    logger.ok(f'Removed "{key}" from {len(result.updated)} languages')


def add_language_command(
    ctx: typer.Context,
    code: Annotated[str, typer.Argument(help="Language code of the form xx-xx, e.g. de-de.")],
    name: Annotated[str, typer.Argument(help='Display name, e.g. "German".')],
    translate: Annotated[
        bool,
        typer.Option("--translate/--no-translate", help="Translate every source key into the new language."),
    ] = True,
) -> None:
    """Register a new language and create its catalog."""

    state = get_state(ctx)
    logger = state.logger()
    with handle_errors(logger):
        project = open_project(state, logger, translate=translate)
        result = project.store.add_language(code, name, project.catalog_set, translate_from_source=translate)
        config_path = write_config(state.root, project.config.with_language(code, name))
    logger.ok(f"Updated {config_path.name}")
    render_add_language(result, logger.console, use_emoji=state.emoji)


def register(app: typer.Typer) -> None:
    """Attach the catalog commands to ``app``."""

    app.command(name="add")(add_command)
    app.command(name="batch")(batch_command)
    app.command(name="list")(list_command)
    app.command(name="rename")(rename_command)
    app.command(name="remove")(remove_command)
    app.command(name="add-language")(add_language_command)


__all__ = ["register"]
