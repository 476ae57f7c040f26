# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Console and JSON rendering for catalog, verification and usage results."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .catalog import AddLanguageResult, MutationResult, Outcome
from .config_loader import ConfigLoadResult
from .logging import emoji
from .paths import Leaf
from .reconcile import CompletenessReport, IncompleteReport, VerificationResult
from .usage import UsageReport

MISSING_PREVIEW: Final[int] = 5
UNUSED_PREVIEW: Final[int] = 20
LOCATION_PREVIEW: Final[int] = 3
WARNING_THRESHOLD: Final[float] = 90.0


def _line(console: Console, message: str = "", *, style: str | None = None) -> None:
    console.print(Text(message, style=style or ""))


def preview(keys: Sequence[str], limit: int = MISSING_PREVIEW) -> str:
    """Return the first ``limit`` keys joined, noting how many were left out."""

    shown = ", ".join(keys[:limit])
    hidden = len(keys) - limit
    return f"{shown} and {hidden} more..." if hidden > 0 else shown


def status_glyph(completeness: float, *, use_emoji: bool = True) -> str:
    """Return the status marker for a completeness percentage."""

    if completeness >= 100:
        return emoji("✅", use_emoji) or "OK"
    if completeness >= WARNING_THRESHOLD:
        return emoji("⚠️", use_emoji) or "WARN"
    return emoji("❌", use_emoji) or "FAIL"


def render_mutation(result: MutationResult, console: Console, *, use_emoji: bool) -> None:
    """Print one line per language describing what a mutation did."""

    for entry in result.outcomes:
        label = f"{entry.display_name} ({entry.code})"
        if entry.outcome is Outcome.UPDATED:
            detail = ", ".join(f'{key}: "{value}"' for key, value in entry.values.items())
            _line(console, f"{emoji('✅ ', use_emoji)}{label}: {detail}", style="green")
        elif entry.outcome is Outcome.FAILED:
            _line(console, f"{emoji('❌ ', use_emoji)}{label}: {entry.message or 'failed'}", style="red")
        elif entry.outcome is Outcome.SKIPPED:
            reason = entry.message or "skipped"
            keys = f" ({', '.join(entry.skipped_keys)})" if entry.skipped_keys else ""
            _line(console, f"{emoji('⏭️  ', use_emoji)}{label}: {reason}{keys}", style="yellow")
        else:
            _line(console, f"{emoji('➖ ', use_emoji)}{label}: {entry.message or 'unchanged'}", style="dim")
        if entry.outcome is not Outcome.SKIPPED and entry.skipped_keys:
            _line(console, f"   kept existing: {', '.join(entry.skipped_keys)}", style="dim")


def render_add_language(result: AddLanguageResult, console: Console, *, use_emoji: bool) -> None:
    """Print the outcome of registering a new language."""

    label = f"{result.display_name} ({result.code})"
    if result.translated:
        _line(console, f"{emoji('✅ ', use_emoji)}Translated {result.keys_count} keys into {label}", style="green")
    elif result.error:
        _line(
            console,
            f"{emoji('❌ ', use_emoji)}{result.error}; created an empty catalog for {label}",
            style="red",
        )
    elif result.source_keys == 0:
        _line(console, f"{emoji('📝 ', use_emoji)}Source language has no keys; created an empty catalog for {label}")
    else:
        _line(console, f"{emoji('📝 ', use_emoji)}Created an empty catalog for {label}")
    if result.path is not None:
        _line(console, f"   {result.path}", style="dim")


def render_translations(code: str, display_name: str, flat: Mapping[str, Leaf], console: Console) -> None:
    """Print every flattened translation of one language."""

    _line(console, f"{display_name} ({code}): {len(flat)} keys", style="bold")
    for key, value in flat.items():
        _line(console, f'   {key}: "{value}"')


def render_verification(
    result: VerificationResult,
    console: Console,
    *,
    languages: Mapping[str, str],
    lang_dir: Path,
    detailed: bool,
    use_emoji: bool,
) -> None:
    """Print per-language consistency findings and a summary."""

    _line(console, f"{emoji('🔍 ', use_emoji)}Checking translations in {lang_dir}")
    if result.total_keys == 0:
        _line(console, f"{emoji('📝 ', use_emoji)}No translation keys found in any language file.")
        return
    _line(console, f"{emoji('📊 ', use_emoji)}Found {result.total_keys} unique translation keys")
    _line(console)

    by_language: dict[str, list[Any]] = {}
    for issue in result.issues:
        by_language.setdefault(issue.code, []).append(issue)

    for code, name in languages.items():
        diff = result.diffs[code]
        issues = by_language.get(code, [])
        _line(console, f"{emoji('🌐 ', use_emoji)}{name} ({code})", style="bold")
        if diff.is_consistent:
            _line(console, f"   {emoji('✅ ', use_emoji)}All keys present", style="green")
            continue
        for issue in issues:
            heading = "Missing" if issue.kind == "missing" else "Extra"
            glyph = "❌ " if issue.kind == "missing" else "⚠️  "
            _line(console, f"   {emoji(glyph, use_emoji)}{heading} {len(issue.keys)} keys:")
            if detailed:
                for key in issue.keys:
                    _line(console, f"     - {key}")
            else:
                _line(console, f"     - {preview(issue.keys)}")

    _line(console)
    if result.is_valid:
        _line(console, f"{emoji('🎉 ', use_emoji)}All languages have consistent translation keys!", style="green")
        return
    missing = sum(1 for issue in result.issues if issue.kind == "missing")
    _line(console, f"{emoji('❌ ', use_emoji)}{missing} languages have missing translations", style="red")
    if not detailed:
        _line(console, "   Run with --detailed to see all missing keys", style="dim")


def render_completeness(report: CompletenessReport, console: Console, *, use_emoji: bool) -> None:
    """Print the completeness table followed by a preview of missing keys."""

    table = Table(title="Translation Completeness Report", box=box.SIMPLE)
    table.add_column("", no_wrap=True)
    table.add_column("Language", overflow="fold")
    table.add_column("Code", no_wrap=True)
    table.add_column("Keys", justify="right")
    table.add_column("Missing", justify="right")
    table.add_column("Complete", justify="right")
    for entry in report.languages:
        table.add_row(
            status_glyph(entry.completeness, use_emoji=use_emoji),
            entry.display_name,
            entry.code,
            str(entry.total_keys),
            str(entry.missing_count),
            f"{entry.completeness:.1f}%",
        )
    console.print(table)
    for entry in report.languages:
        if entry.missing_keys:
            _line(console, f"{entry.code}: {preview(entry.missing_keys)}", style="dim")


def render_incomplete(report: IncompleteReport, console: Console, *, detailed: bool, use_emoji: bool) -> None:
    """Print languages missing keys defined by the source language."""

    if not report.source_keys:
        _line(console, f"{emoji('📝 ', use_emoji)}No keys found in source language ({report.source_language}).")
        return
    _line(
        console,
        f"{emoji('📊 ', use_emoji)}Source language {report.source_language} has {len(report.source_keys)} keys",
    )
    if not report.incomplete_languages:
        _line(console, f"{emoji('🎉 ', use_emoji)}All languages are complete!", style="green")
        return
    for entry in report.incomplete_languages:
        _line(
            console,
            f"{emoji('❌ ', use_emoji)}{entry.display_name} ({entry.code}): "
            f"{entry.completeness:.1f}% complete, {entry.missing_count} missing",
        )
        if detailed:
            for key in entry.missing_keys:
                _line(console, f"     - {key}")
        else:
            _line(console, f"     - {preview(entry.missing_keys)}")
    _line(console)
    _line(
        console,
        f"{len(report.incomplete_languages)}/{report.total_languages} languages incomplete; "
        f"complete: {', '.join(report.complete_languages) or 'none'}",
    )


def render_usage(report: UsageReport, console: Console, *, detailed: bool, show_used: bool, use_emoji: bool) -> None:
    """Print usage counts, unused keys and optionally the used keys with locations."""

    if not report.reference:
        _line(console, f"{emoji('📝 ', use_emoji)}No translation keys found in source language.")
        return
    _line(
        console,
        f"{emoji('✅ ', use_emoji)}Scanned {report.scanned_files} files ({report.error_files} errors)",
    )
    _line(console)
    _line(console, f"{emoji('📋 ', use_emoji)}Total translation keys: {report.total_keys}")
    _line(console, f"{emoji('✅ ', use_emoji)}Used keys: {len(report.used_keys)}")
    _line(console, f"{emoji('❌ ', use_emoji)}Unused keys: {len(report.unused_keys)}")
    _line(console, f"{emoji('📈 ', use_emoji)}Usage rate: {report.usage_rate:.1f}%")
    _line(console)

    if report.unused_keys:
        _line(console, f"{emoji('🗑️  ', use_emoji)}Unused Translation Keys:", style="bold")
        if detailed:
            for key in report.unused_keys:
                _line(console, f'   {key}: "{report.reference.get(key)}"')
        else:
            for key in report.unused_keys[:UNUSED_PREVIEW]:
                _line(console, f"   {key}")
            hidden = len(report.unused_keys) - UNUSED_PREVIEW
            if hidden > 0:
                _line(console, f"   ... and {hidden} more")
                _line(console, "   (use --detailed to see all unused keys)", style="dim")
        _line(console, "   Some keys might be used dynamically and are not detected.", style="dim")
    else:
        _line(console, f"{emoji('🎉 ', use_emoji)}All translation keys are being used!", style="green")

    if show_used and report.used_keys:
        _line(console)
        _line(console, f"{emoji('✅ ', use_emoji)}Used Translation Keys:", style="bold")
        for key in report.used_keys:
            _line(console, f"   {key}")
            if detailed:
                _line(console, f"     Used in: {format_locations(report.locations.get(key, []))}", style="dim")


def format_locations(files: Sequence[str], limit: int = LOCATION_PREVIEW) -> str:
    """Return the first ``limit`` file paths, noting how many more there are."""

    shown = ", ".join(files[:limit])
    hidden = len(files) - limit
    return f"{shown} +{hidden} more" if hidden > 0 else shown


def render_config(result: ConfigLoadResult, console: Console) -> None:
    """Print the effective configuration and where it came from."""

    _line(console, f"# Source: {result.description}", style="dim")
    console.print_json(json.dumps(result.config.to_document(), ensure_ascii=False))


def dump_json(payload: Any) -> str:
    """Return ``payload`` as indented JSON text."""

    return json.dumps(payload, indent=2, ensure_ascii=False)


def write_json_report(payload: Any, output: Path | None = None) -> str | Path:
    """Write ``payload`` to ``output`` or return the JSON text for echoing.

    Args:
        payload: JSON-serialisable report.
        output: Destination file; ``None`` means the caller prints the text.

    Returns:
        str | Path: The written path, or the JSON text when ``output`` is ``None``.
    """

    text = dump_json(payload)
    if output is None:
        return text
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    return output


__all__ = [
    "dump_json",
    "format_locations",
    "preview",
    "render_add_language",
    "render_completeness",
    "render_config",
    "render_incomplete",
    "render_mutation",
    "render_translations",
    "render_usage",
    "render_verification",
    "status_glyph",
    "write_json_report",
]
