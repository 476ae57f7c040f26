# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem discovery of source files to scan for key usage."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WalkContext:
    """Parameters required to walk the filesystem hierarchy."""

    root: Path
    extensions: frozenset[str]
    include_dirs: tuple[str, ...] | None
    exclude_dirs: frozenset[str]


def list_scannable_files(
    root: Path,
    extensions: Sequence[str],
    include_dirs: Sequence[str] | None = None,
    exclude_dirs: Sequence[str] = (),
) -> list[Path]:
    """Return files beneath ``root`` whose suffix is in ``extensions``.

    Args:
        root: Directory to walk.
        extensions: Allowed suffixes including the dot, e.g. ``.tsx``.
        include_dirs: When given, only paths inside one of these directories
            (matched against the path relative to ``root`` or any path
            component) are kept.
        exclude_dirs: Directory names pruned wherever they appear.

    Returns:
        list[Path]: Files in deterministic walk order (sorted per directory).
    """

    context = WalkContext(
        root=Path(root),
        extensions=frozenset(extensions),
        include_dirs=tuple(include_dirs) if include_dirs else None,
        exclude_dirs=frozenset(exclude_dirs),
    )
    return list(_walk(context))


def _walk(context: WalkContext) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(context.root, onerror=_log_walk_error):
        current = Path(dirpath)
        dirnames[:] = sorted(
            name
            for name in dirnames
            if name not in context.exclude_dirs and _within_includes(current / name, context, is_dir=True)
        )
        for filename in sorted(filenames):
            candidate = current / filename
            if candidate.suffix not in context.extensions:
                continue
            if not _within_includes(candidate, context, is_dir=False):
                continue
            yield candidate


def _within_includes(path: Path, context: WalkContext, *, is_dir: bool) -> bool:
    """Return ``True`` when ``path`` falls inside one of the include directories."""

    if context.include_dirs is None:
        return True
    relative = path.relative_to(context.root)
    relative_text = relative.as_posix()
    parts = relative.parts[:-1] if not is_dir else relative.parts
    for include in context.include_dirs:
        if relative_text.startswith(include):
            return True
        if include in parts:
            return True
    return False


def _log_walk_error(error: OSError) -> None:
    LOGGER.debug("skipping directory %s: %s", error.filename, error)


__all__ = ["WalkContext", "list_scannable_files"]
