# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Configuration inspection and project initialisation commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..config import DEFAULT_LANGUAGES, DEFAULT_SOURCE_LANGUAGE
from ..config_loader import (
    ConfigLoader,
    build_initial_config,
    config_target,
    write_config,
)
from ..reporting import render_config
from ..storage import JsonCatalogStorage
from .shared import CLIError, get_state, handle_errors

config_app = typer.Typer(help="Inspect the effective configuration.", no_args_is_help=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Print the effective configuration and the file it was read from."""

    state = get_state(ctx)
    logger = state.logger()
    with handle_errors(logger):
        loaded = ConfigLoader.for_root(state.root).load_with_trace()
    render_config(loaded, logger.console)


def parse_language_specs(specs: list[str]) -> dict[str, str | None]:
    """Return ``code -> name`` from ``CODE`` or ``CODE=NAME`` entries, keeping order."""

    languages: dict[str, str | None] = {}
    for spec in specs:
        code, _, name = spec.partition("=")
        code = code.strip()
        if not code:
            raise CLIError(f'Invalid --language value "{spec}"')
        languages[code] = name.strip() or None
    return languages


def init_command(
    ctx: typer.Context,
    lang_dir: Annotated[Path, typer.Option("--lang-dir", help="Catalog directory relative to the root.")] = Path(
        "lang"
    ),
    source: Annotated[str | None, typer.Option("--source", help="Source language code.")] = None,
    language: Annotated[
        list[str] | None,
        typer.Option("--language", "-l", help="Language as CODE or CODE=NAME (repeatable)."),
    ] = None,
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite an existing configuration file.")] = False,
) -> None:
    """Write a configuration file for the project.

    Without ``--language`` the catalogs already present in the language
    directory are used, falling back to the default language set.
    """

    state = get_state(ctx)
    logger = state.logger()
    with handle_errors(logger):
        target = config_target(state.root)
        if target.is_file() and not force:
            raise CLIError(f"{target.name} already exists. Use --force to overwrite")

        catalog_dir = lang_dir if lang_dir.is_absolute() else state.root / lang_dir
        found = JsonCatalogStorage(catalog_dir).available_codes()
        if found:
            logger.info(f"Found {len(found)} existing language files in {lang_dir}")
        else:
            catalog_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created languages directory: {lang_dir}")

        if language:
            languages = parse_language_specs(language)
        elif found:
            languages = dict.fromkeys(found)
        else:
            languages = dict(DEFAULT_LANGUAGES)

        if source is None:
            source = DEFAULT_SOURCE_LANGUAGE if DEFAULT_SOURCE_LANGUAGE in languages else next(iter(languages))
        config = build_initial_config(lang_dir, languages, source)
        written = write_config(state.root, config)
    logger.ok(f"Created {written.name} with {len(config.languages)} languages (source: {config.source_language})")


def register(app: typer.Typer) -> None:
    """Attach the ``config`` group and ``init`` command to ``app``."""

    app.add_typer(config_app, name="config")
    app.command(name="init")(init_command)


__all__ = ["config_app", "parse_language_specs", "register"]
