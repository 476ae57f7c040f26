# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Static detection of translation keys referenced in source files."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Final

from .catalog import CatalogStore
from .config import CatalogConfig
from .discovery import list_scannable_files
from .paths import Leaf

LOGGER = logging.getLogger(__name__)

TRANSLATION_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    # t('key') / t("key") / t(`key`)
    re.compile(r"""\bt\s*\(\s*['"`]([^'"`]+)['"`]"""),
    re.compile(r"\bt\s*\(\s*`([^`]+)`"),
    # $t('key'), vue-i18n style
    re.compile(r"""\$t\s*\(\s*['"`]([^'"`]+)['"`]"""),
    # i18n.t('key')
    re.compile(r"""i18n\.t\s*\(\s*['"`]([^'"`]+)['"`]"""),
)
DYNAMIC_MARKERS: Final[tuple[str, ...]] = ("${", "{{", "+")

FileLister = Callable[[Path, Sequence[str], Sequence[str] | None, Sequence[str]], list[Path]]


def is_dynamic_key(literal: str) -> bool:
    """Return ``True`` when ``literal`` is built by interpolation or concatenation."""

    return any(marker in literal for marker in DYNAMIC_MARKERS)


def extract_keys_from_text(text: str) -> set[str]:
    """Return the literal keys passed to ``t``/``$t``/``i18n.t`` calls in ``text``."""

    keys: set[str] = set()
    for pattern in TRANSLATION_PATTERNS:
        for match in pattern.finditer(text):
            literal = match.group(1)
            if not is_dynamic_key(literal):
                keys.add(literal)
    return keys


@dataclass(slots=True)
class FileScanResult:
    """Keys found across a list of files plus where each key was seen."""

    used_keys: set[str] = field(default_factory=set)
    locations: dict[str, list[str]] = field(default_factory=dict)
    scanned_count: int = 0
    error_count: int = 0
    errors: dict[str, str] = field(default_factory=dict)


def scan_files(files: Iterable[Path], root: Path) -> FileScanResult:
    """Extract keys from every file, recording per-key locations relative to ``root``.

    Unreadable files are counted as errors and contribute nothing; the scan
    carries on with the next file.
    """

    result = FileScanResult()
    for path in files:
        result.scanned_count += 1
        relative = os.path.relpath(path, root)
        try:
            content = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            result.error_count += 1
            result.errors[relative] = str(exc)
            LOGGER.debug("failed to read %s: %s", path, exc)
            continue
        for key in sorted(extract_keys_from_text(content)):
            result.used_keys.add(key)
            result.locations.setdefault(key, []).append(relative)
    return result


def unused_keys(reference: Iterable[str], used: Iterable[str]) -> list[str]:
    """Return reference keys never used, keeping reference order."""

    used_set = set(used)
    return [key for key in reference if key not in used_set]


def usage_rate(reference: Iterable[str], used: Iterable[str]) -> float:
    """Return the share of reference keys that are used, as a one-decimal percentage.

    Used keys absent from the reference do not count toward the numerator.
    """

    reference_set = set(reference)
    if not reference_set:
        return 0.0
    return round(len(reference_set & set(used)) / len(reference_set) * 100, 1)


@dataclass(slots=True)
class UsageReport:
    """Outcome of scanning a project for references to source-language keys."""

    scan_dir: Path
    source_language: str
    reference: dict[str, Leaf]
    used_keys: list[str]
    unused_keys: list[str]
    usage_rate: float
    locations: dict[str, list[str]]
    scanned_files: int
    error_files: int
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def total_keys(self) -> int:
        return len(self.reference)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-serialisable form of the report."""

        return {
            "timestamp": self.timestamp,
            "scanDirectory": str(self.scan_dir),
            "sourceLanguage": self.source_language,
            "totalKeys": self.total_keys,
            "usedKeys": len(self.used_keys),
            "unusedKeys": len(self.unused_keys),
            "usageRate": f"{self.usage_rate:.1f}",
            "scannedFiles": self.scanned_files,
            "errorFiles": self.error_files,
            "unusedKeysList": list(self.unused_keys),
            "usedKeysList": list(self.used_keys),
        }


class UsageScanner:
    """Compare the source-language keys with the keys referenced by project files."""

    def __init__(self, store: CatalogStore, *, file_lister: FileLister = list_scannable_files) -> None:
        self.store = store
        self.file_lister = file_lister

    def scan(self, config: CatalogConfig, scan_dir: Path) -> UsageReport:
        """Scan ``scan_dir`` using the filters in ``config.verification``.

        Args:
            config: Project configuration providing the source language and
                directory/extension filters.
            scan_dir: Directory whose files are searched for key usage.

        Returns:
            UsageReport: Used and unused keys, usage rate and file counts.
        """

        reference = self.store.load(config.source_language).flat()
        report = UsageReport(
            scan_dir=scan_dir,
            source_language=config.source_language,
            reference=reference,
            used_keys=[],
            unused_keys=list(reference),
            usage_rate=0.0,
            locations={},
            scanned_files=0,
            error_files=0,
        )
        if not reference:
            return report

        scan = config.verification
        files = self.file_lister(scan_dir, scan.extensions, scan.include, scan.exclude)
        if not files:
            return report

        result = scan_files(files, scan_dir)
        report.used_keys = sorted(result.used_keys)
        report.unused_keys = unused_keys(reference, result.used_keys)
        report.usage_rate = usage_rate(reference, result.used_keys)
        report.locations = result.locations
        report.scanned_files = result.scanned_count
        report.error_files = result.error_count
        return report


__all__ = [
    "DYNAMIC_MARKERS",
    "FileScanResult",
    "TRANSLATION_PATTERNS",
    "UsageReport",
    "UsageScanner",
    "extract_keys_from_text",
    "is_dynamic_key",
    "scan_files",
    "unused_keys",
    "usage_rate",
]
