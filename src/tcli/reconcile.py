# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Key-set reconciliation across language catalogs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

from .catalog import CatalogSet, CatalogStore
from .paths import Tree, set_path, sort_recursive


def completeness(total: int, missing: int) -> float:
    """Return the percentage of ``total`` keys present, rounded to one decimal.

    An empty reference counts as fully complete.
    """

    if total <= 0:
        return 100.0
    return round((total - missing) / total * 100, 1)


@dataclass(slots=True)
class LanguageDiff:
    """Keys a language lacks or holds beyond the reference set."""

    missing_keys: list[str] = field(default_factory=list)
    extra_keys: list[str] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return not self.missing_keys and not self.extra_keys


@dataclass(slots=True)
class Issue:
    """A verification finding for one language."""

    kind: Literal["missing", "extra"]
    code: str
    display_name: str
    keys: list[str]


@dataclass(slots=True)
class VerificationResult:
    """Outcome of checking every catalog against the union of keys."""

    is_valid: bool
    issues: list[Issue]
    total_keys: int
    all_keys: list[str]
    diffs: dict[str, LanguageDiff] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "totalKeys": self.total_keys,
            "issues": [
                {"type": issue.kind, "langCode": issue.code, "languageName": issue.display_name, "keys": issue.keys}
                for issue in self.issues
            ],
        }


@dataclass(slots=True)
class LanguageCompleteness:
    """Completeness figures for one language."""

    code: str
    display_name: str
    total_keys: int
    missing_keys: list[str]
    completeness: float

    @property
    def missing_count(self) -> int:
        return len(self.missing_keys)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.display_name,
            "totalKeys": self.total_keys,
            "missingKeys": list(self.missing_keys),
            "missingCount": self.missing_count,
            "completeness": f"{self.completeness:.1f}",
        }


@dataclass(slots=True)
class CompletenessReport:
    """Per-language completeness against the union of all keys."""

    timestamp: str
    total_keys: int
    languages: list[LanguageCompleteness]

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-serialisable form of the report."""

        return {
            "timestamp": self.timestamp,
            "totalKeys": self.total_keys,
            "languages": {entry.code: entry.to_dict() for entry in self.languages},
        }


@dataclass(slots=True)
class IncompleteReport:
    """Non-source languages missing keys that the source language defines."""

    source_language: str
    source_keys: list[str]
    incomplete_languages: list[LanguageCompleteness]
    complete_languages: list[str]
    total_languages: int

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-serialisable form of the report."""

        return {
            "sourceLanguage": self.source_language,
            "sourceKeys": len(self.source_keys),
            "incompleteLanguages": {entry.code: entry.to_dict() for entry in self.incomplete_languages},
            "completeLanguages": list(self.complete_languages),
            "totalLanguages": self.total_languages,
        }


class ReconciliationEngine:
    """Compare flattened key sets across the catalogs of a :class:`CatalogSet`."""

    def __init__(self, store: CatalogStore) -> None:
        self.store = store

    def key_sets(self, catalog_set: CatalogSet) -> dict[str, set[str]]:
        """Return each language's flattened key set, in configured order."""

        return {catalog.code: set(catalog.keys()) for catalog in self.store.load_all(catalog_set)}

    def all_keys(self, catalog_set: CatalogSet) -> list[str]:
        """Return the sorted union of keys across every language."""

        return sorted(_union(self.key_sets(catalog_set)))

    def per_language_diff(self, catalog_set: CatalogSet) -> dict[str, LanguageDiff]:
        """Return missing and extra keys per language relative to the union.

        ``extra_keys`` is measured against the union itself, so it is always
        empty; the field is kept so every diff has the same shape.
        """

        key_sets = self.key_sets(catalog_set)
        return _diff(key_sets, _union(key_sets))

    def verify(self, catalog_set: CatalogSet) -> VerificationResult:
        """Check that every language holds every key any language holds."""

        key_sets = self.key_sets(catalog_set)
        union = _union(key_sets)
        diffs = _diff(key_sets, union)
        issues: list[Issue] = []
        for code, name in catalog_set:
            diff = diffs[code]
            if diff.missing_keys:
                issues.append(Issue("missing", code, name, diff.missing_keys))
            if diff.extra_keys:
                issues.append(Issue("extra", code, name, diff.extra_keys))
        return VerificationResult(
            is_valid=not any(issue.kind == "missing" for issue in issues),
            issues=issues,
            total_keys=len(union),
            all_keys=sorted(union),
            diffs=diffs,
        )

    def completeness_report(self, catalog_set: CatalogSet) -> CompletenessReport:
        """Return per-language completeness against the union of keys."""

        key_sets = self.key_sets(catalog_set)
        union = _union(key_sets)
        languages = []
        for code, name in catalog_set:
            keys = key_sets[code]
            missing = sorted(union - keys)
            languages.append(
                LanguageCompleteness(
                    code=code,
                    display_name=name,
                    total_keys=len(keys),
                    missing_keys=missing,
                    completeness=completeness(len(union), len(missing)),
                )
            )
        return CompletenessReport(
            timestamp=datetime.now(timezone.utc).isoformat(),
            total_keys=len(union),
            languages=languages,
        )

    def incomplete_relative_to_source(self, catalog_set: CatalogSet) -> IncompleteReport:
        """Return languages missing keys defined by the source language.

        Unlike :meth:`per_language_diff`, the reference is the source catalog
        alone, and completeness is measured against its key count.
        """

        source_keys = self.store.load(catalog_set.source_language).keys()
        report = IncompleteReport(
            source_language=catalog_set.source_language,
            source_keys=source_keys,
            incomplete_languages=[],
            complete_languages=[],
            total_languages=len(catalog_set) - 1,
        )
        if not source_keys:
            return report

        for code, name in catalog_set:
            if code == catalog_set.source_language:
                continue
            present = set(self.store.load(code, name).keys())
            missing = [key for key in source_keys if key not in present]
            if not missing:
                report.complete_languages.append(code)
                continue
            report.incomplete_languages.append(
                LanguageCompleteness(
                    code=code,
                    display_name=name,
                    total_keys=len(present),
                    missing_keys=missing,
                    completeness=completeness(len(source_keys), len(missing)),
                )
            )
        return report

    def missing_keys_template(self, catalog_set: CatalogSet, target_code: str) -> Tree:
        """Return a nested tree of source values for keys ``target_code`` lacks.

        Raises:
            UnknownLanguageError: If ``target_code`` is not configured.
        """

        catalog_set.require(target_code)
        source_flat = self.store.load(catalog_set.source_language).flat()
        present = set(self.store.load(target_code).keys())
        template: Tree = {}
        for key, value in source_flat.items():
            if key not in present:
                set_path(template, key, value if value is not None else "")
        return sort_recursive(template)


def _union(key_sets: dict[str, set[str]]) -> set[str]:
    union: set[str] = set()
    for keys in key_sets.values():
        union.update(keys)
    return union


def _diff(key_sets: dict[str, set[str]], reference: set[str]) -> dict[str, LanguageDiff]:
    return {
        code: LanguageDiff(missing_keys=sorted(reference - keys), extra_keys=sorted(keys - reference))
        for code, keys in key_sets.items()
    }


__all__ = [
    "CompletenessReport",
    "IncompleteReport",
    "Issue",
    "LanguageCompleteness",
    "LanguageDiff",
    "ReconciliationEngine",
    "VerificationResult",
    "completeness",
]
