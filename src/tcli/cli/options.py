# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Reusable Typer option declarations."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

ROOT_OPTION = Annotated[
    Path,
    typer.Option("--root", "-r", help="Project root containing the configuration file."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]
DEBUG_OPTION = Annotated[
    bool,
    typer.Option("--debug", help="Show debug diagnostics."),
]
FORCE_OVERWRITE_OPTION = Annotated[
    bool,
    typer.Option("--force", "-f", help="Overwrite existing translations without asking."),
]
INTERACTIVE_OPTION = Annotated[
    bool,
    typer.Option(
        "--interactive/--no-interactive",
        help="Ask before overwriting existing translations; when disabled they are kept.",
    ),
]
DETAILED_OPTION = Annotated[
    bool,
    typer.Option("--detailed", "-d", help="List every key instead of a preview."),
]
JSON_FORMAT_OPTION = Annotated[
    bool,
    typer.Option("--json-format", help="Emit the report as JSON."),
]
OUTPUT_OPTION = Annotated[
    Path | None,
    typer.Option("--output", "-o", help="Write the JSON report to this file."),
]

__all__ = [
    "DEBUG_OPTION",
    "DETAILED_OPTION",
    "EMOJI_OPTION",
    "FORCE_OVERWRITE_OPTION",
    "INTERACTIVE_OPTION",
    "JSON_FORMAT_OPTION",
    "OUTPUT_OPTION",
    "ROOT_OPTION",
]
