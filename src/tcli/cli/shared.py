# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors, project wiring)."""

from __future__ import annotations

import logging
import os
import re
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.text import Text

from ..catalog import CatalogSet, CatalogStore, ConflictPolicy
from ..config import CatalogConfig
from ..config_loader import ConfigLoader, ConfigLoadResult
from ..errors import TcliError
from ..logging import fail as core_fail
from ..logging import info as core_info
from ..logging import ok as core_ok
from ..logging import warn as core_warn
from ..storage import JsonCatalogStorage
from ..translation import API_KEY_ENV, GeminiTranslator, Translator


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI emoji settings."""

    console: Console
    use_emoji: bool
    debug_enabled: bool = False
    _key_value_re: re.Pattern[str] = re.compile(r"([\w-]+)=(\".*?\"|\S+)")

    def fail(self, message: str) -> None:
        """Log a failure message honouring emoji preferences."""

        core_fail(message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        """Log a warning message honouring emoji preferences."""

        core_warn(message, use_emoji=self.use_emoji)

    def ok(self, message: str) -> None:
        """Log a success message honouring emoji preferences."""

        core_ok(message, use_emoji=self.use_emoji)

    def info(self, message: str) -> None:
        core_info(message, use_emoji=self.use_emoji)

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout using Typer's echo helper."""

        typer.echo(message)

    def debug(self, message: str) -> None:
        """Emit a debug message when debug logging is enabled.

        ``key=value`` pairs in ``message`` are highlighted.
        """

        if not self.debug_enabled:
            return
        text = Text("[debug] ", style="bold cyan")
        cursor = 0
        for match in self._key_value_re.finditer(message):
            start, end = match.span()
            if start > cursor:
                text.append(message[cursor:start], style="dim")
            text.append(match.group(1), style="bold magenta")
            text.append("=", style="dim")
            text.append(match.group(2), style="bold green")
            cursor = end
        if cursor < len(message):
            text.append(message[cursor:], style="dim")
        self.console.print(text)


def build_cli_logger(*, emoji: bool, debug: bool = False, no_color: bool = False) -> CLILogger:
    """Return a ``CLILogger`` configured for the provided emoji preference.

    Args:
        emoji: Whether log output may include emoji glyphs.
        debug: Whether debug logging should be enabled.
        no_color: Whether terminal colour output should be disabled.

    Returns:
        CLILogger: Logger instance bound to a dedicated Rich console.
    """

    console = Console(no_color=no_color, highlight=False, soft_wrap=True)
    return CLILogger(console=console, use_emoji=emoji, debug_enabled=debug)


@dataclass(slots=True)
class CLIState:
    """Global options captured by the application callback."""

    root: Path = field(default_factory=Path.cwd)
    emoji: bool = True
    debug: bool = False

    def logger(self) -> CLILogger:
        return build_cli_logger(emoji=self.emoji, debug=self.debug)


def get_state(ctx: typer.Context) -> CLIState:
    """Return the global options stored on ``ctx`` (defaults when absent)."""

    root_ctx = ctx.find_root()
    if not isinstance(root_ctx.obj, CLIState):
        root_ctx.obj = CLIState()
    return root_ctx.obj


@dataclass(slots=True)
class Project:
    """Configuration and catalog store resolved for one command invocation."""

    root: Path
    loaded: ConfigLoadResult
    store: CatalogStore

    @property
    def config(self) -> CatalogConfig:
        return self.loaded.config

    @property
    def catalog_set(self) -> CatalogSet:
        return self.config.catalog_set()

    @property
    def lang_dir(self) -> Path:
        return self.config.resolve_lang_dir(self.root)


def build_translator(config: CatalogConfig, root: Path, logger: CLILogger) -> Translator | None:
    """Return the Gemini translator, or ``None`` when no API key is available.

    ``.env`` in ``root`` is loaded first without overriding the environment.
    """

    load_dotenv(root / ".env", override=False)
    api_key = os.environ.get(API_KEY_ENV, "").strip()
    if not api_key:
        logger.warn(f"{API_KEY_ENV} is not set; only the source language can be written")
        return None
    logger.debug(f"translator model={config.model} temperature={config.temperature}")
    return GeminiTranslator(api_key, model=config.model, temperature=config.temperature)


def open_project(state: CLIState, logger: CLILogger, *, translate: bool = False) -> Project:
    """Load configuration for ``state.root`` and build the catalog store.

    Raises:
        ConfigError: If the configuration is invalid.
    """

    loaded = ConfigLoader.for_root(state.root).load_with_trace()
    logger.debug(f"config source={loaded.description!r}")
    translator = build_translator(loaded.config, state.root, logger) if translate else None
    storage = JsonCatalogStorage(loaded.config.resolve_lang_dir(state.root))
    return Project(root=state.root, loaded=loaded, store=CatalogStore(storage, translator))


def conflict_policy(*, force: bool, interactive: bool) -> ConflictPolicy:
    """Return the overwrite policy for ``add``/``batch`` honouring CLI flags."""

    return ConflictPolicy(force=force, interactive=interactive, confirm=_confirm_overwrite)


def _confirm_overwrite(key: str, existing: Any, incoming: Any) -> bool:
    return typer.confirm(f'"{key}" already holds "{existing}". Overwrite with "{incoming}"?', default=False)


@contextmanager
def handle_errors(logger: CLILogger) -> Iterator[None]:
    """Report domain errors through ``logger`` and exit with their status code."""

    try:
        yield
    except TcliError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc


def configure_logging(debug: bool) -> None:
    """Stream ``tcli`` debug records to stderr when ``debug`` is set."""

    if not debug:
        return
    package_logger = logging.getLogger("tcli")
    if not getattr(package_logger, "_tcli_configured", False):
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        package_logger.addHandler(handler)
        package_logger.propagate = False
        setattr(package_logger, "_tcli_configured", True)
    package_logger.setLevel(logging.DEBUG)


__all__ = [
    "CLIError",
    "CLILogger",
    "CLIState",
    "Project",
    "build_cli_logger",
    "build_translator",
    "configure_logging",
    "conflict_policy",
    "get_state",
    "handle_errors",
    "open_project",
]
