# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Multi-language catalog mutations that keep every language aligned."""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

from .errors import (
    BatchInputError,
    ConfigError,
    KeyExistsError,
    KeyNotFoundError,
    LanguageExistsError,
    UnknownLanguageError,
)
from .paths import (
    KEY_PATH_PATTERN,
    Leaf,
    Tree,
    flatten,
    get_path,
    has_path,
    remove_path,
    set_path,
    sort_recursive,
    validate_key_path,
    validate_language_code,
)
from .storage import CatalogStorage

if TYPE_CHECKING:
    from .translation import Translator

LOGGER = logging.getLogger(__name__)

TRANSLATION_FAILED: Final[str] = "Translation failed"

ConfirmCallback = Callable[[str, Any, Any], bool]


@dataclass(frozen=True, slots=True)
class CatalogSet:
    """Ordered ``code -> display name`` mapping plus the designated source language."""

    languages: dict[str, str]
    source_language: str

    def __post_init__(self) -> None:
        if self.source_language not in self.languages:
            raise ConfigError(f'Source language "{self.source_language}" is not defined in the languages list')

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.languages.items())

    def __contains__(self, code: object) -> bool:
        return code in self.languages

    def __len__(self) -> int:
        return len(self.languages)

    @property
    def codes(self) -> tuple[str, ...]:
        """Return language codes in configured order."""

        return tuple(self.languages)

    @property
    def source_display_name(self) -> str:
        """Return the display name of the source language."""

        return self.languages[self.source_language]

    def display_name(self, code: str) -> str:
        """Return the display name for ``code``.

        Raises:
            UnknownLanguageError: If ``code`` is not configured.
        """

        self.require(code)
        return self.languages[code]

    def require(self, code: str) -> None:
        """Raise :class:`UnknownLanguageError` unless ``code`` is configured."""

        if code not in self.languages:
            raise UnknownLanguageError(code, self.codes)

    def with_language(self, code: str, display_name: str) -> CatalogSet:
        """Return a new set with ``code`` appended after the existing languages."""

        return CatalogSet(languages={**self.languages, code: display_name}, source_language=self.source_language)


@dataclass(slots=True)
class Catalog:
    """Nested translation data for one language."""

    code: str
    display_name: str
    tree: Tree = field(default_factory=dict)

    def flat(self) -> dict[str, Leaf]:
        """Return the dotted ``path -> leaf`` view of the tree."""

        return flatten(self.tree)

    def keys(self) -> list[str]:
        """Return the dotted paths of every leaf."""

        return list(self.flat())


@dataclass(frozen=True, slots=True)
class ConflictPolicy:
    """Decide whether an existing value may be overwritten.

    ``force`` always overwrites. Otherwise an interactive policy asks
    ``confirm(key, old, new)`` per conflicting key, and a non-interactive one
    keeps the old value.
    """

    force: bool = False
    interactive: bool = False
    confirm: ConfirmCallback | None = None

    def should_overwrite(self, key: str, existing: Any, incoming: Any) -> bool:
        """Return ``True`` when ``existing`` at ``key`` may be replaced by ``incoming``."""

        if self.force:
            return True
        if self.interactive and self.confirm is not None:
            return bool(self.confirm(key, existing, incoming))
        return False


class Outcome(str, Enum):
    """Per-language result of a multi-language mutation."""

    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"
    UNCHANGED = "unchanged"


@dataclass(slots=True)
class LanguageOutcome:
    """Record what a mutation did to one language's catalog."""

    code: str
    display_name: str
    outcome: Outcome
    values: dict[str, Any] = field(default_factory=dict)
    skipped_keys: list[str] = field(default_factory=list)
    message: str | None = None


@dataclass(slots=True)
class MutationResult:
    """Aggregate per-language outcomes of one add/batch/rename/remove call."""

    operation: str
    outcomes: list[LanguageOutcome] = field(default_factory=list)

    def record(self, outcome: LanguageOutcome) -> None:
        """Append ``outcome`` to the result."""

        self.outcomes.append(outcome)

    def codes_with(self, outcome: Outcome) -> list[str]:
        """Return the language codes whose outcome equals ``outcome``."""

        return [entry.code for entry in self.outcomes if entry.outcome is outcome]

    @property
    def updated(self) -> list[str]:
        return self.codes_with(Outcome.UPDATED)

    @property
    def skipped(self) -> list[str]:
        return self.codes_with(Outcome.SKIPPED)

    @property
    def failed(self) -> list[str]:
        return self.codes_with(Outcome.FAILED)


@dataclass(frozen=True, slots=True)
class TranslationPair:
    """Key and source-language text supplied for a batch add."""

    key: str
    text: str


@dataclass(slots=True)
class AddLanguageResult:
    """Outcome of registering a new language catalog."""

    code: str
    display_name: str
    keys_count: int
    translated: bool
    source_keys: int = 0
    path: Path | None = None
    error: str | None = None


def parse_batch_input(content: str) -> list[TranslationPair]:
    """Return translation pairs parsed from a (possibly nested) JSON object.

    Blank and non-string values are ignored. Keys outside the key grammar are
    skipped with a warning rather than failing the whole batch.

    Raises:
        BatchInputError: If ``content`` is not a JSON object.
    """

    try:
        payload = json.loads(content)
    except json.JSONDecodeError as exc:
        raise BatchInputError(f"Invalid JSON format: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise BatchInputError("Invalid JSON format: expected an object of translations")

    pairs: list[TranslationPair] = []
    for key, value in flatten(payload).items():
        if not isinstance(value, str) or not value.strip():
            continue
        if not KEY_PATH_PATTERN.match(key):
            LOGGER.warning('skipping invalid key format: "%s"', key)
            continue
        pairs.append(TranslationPair(key=key, text=value))
    return pairs


class CatalogStore:
    """Load, save and mutate catalogs across every configured language.

    Languages are always processed one at a time in configured order. A
    translation failure for one language is recorded on the result and never
    aborts the remaining languages.
    """

    def __init__(self, storage: CatalogStorage, translator: Translator | None = None) -> None:
        self.storage = storage
        self.translator = translator

    # Persistence ---------------------------------------------------------------

    def load(self, code: str, display_name: str = "") -> Catalog:
        """Return the catalog for ``code``; an absent catalog is an empty tree."""

        tree = self.storage.load(code)
        return Catalog(code=code, display_name=display_name or code, tree=tree if tree is not None else {})

    def save(self, code: str, tree: Mapping[str, Any]) -> Path:
        """Sort ``tree`` recursively and hand it to storage."""

        return self.storage.save(code, sort_recursive(tree))

    def load_all(self, catalog_set: CatalogSet) -> list[Catalog]:
        """Return every configured catalog in configured order."""

        return [self.load(code, name) for code, name in catalog_set]

    def list_translations(self, code: str) -> dict[str, Leaf]:
        """Return the flattened translations stored for ``code``."""

        return self.load(code).flat()

    # Mutations -----------------------------------------------------------------

    def add_or_update_key(
        self,
        path: str,
        source_text: str,
        catalog_set: CatalogSet,
        policy: ConflictPolicy | None = None,
    ) -> MutationResult:
        """Add ``path`` to every catalog, translating ``source_text`` as needed.

        Args:
            path: Dotted key to add or update.
            source_text: Text in the source language.
            catalog_set: Languages to update, in order.
            policy: Conflict policy for languages that already hold ``path``.

        Returns:
            MutationResult: One outcome per language.

        Raises:
            InvalidKeyPathError: If ``path`` is malformed.
        """

        validate_key_path(path)
        policy = policy or ConflictPolicy()
        result = MutationResult(operation="add")
        for code, name in catalog_set:
            catalog = self.load(code, name)
            if has_path(catalog.tree, path):
                existing = get_path(catalog.tree, path)
                if not policy.should_overwrite(path, existing, source_text):
                    result.record(
                        LanguageOutcome(
                            code,
                            name,
                            Outcome.SKIPPED,
                            skipped_keys=[path],
                            message="keeping existing translation",
                        )
                    )
                    continue

            if code == catalog_set.source_language:
                text: str | None = source_text
            else:
                text = self._translate_one(source_text, name, catalog_set.source_display_name)
            if text is None:
                result.record(LanguageOutcome(code, name, Outcome.FAILED, message=TRANSLATION_FAILED))
                continue

            updated = copy.deepcopy(catalog.tree)
            set_path(updated, path, text)
            self.save(code, updated)
            result.record(LanguageOutcome(code, name, Outcome.UPDATED, values={path: text}))
        return result

    def batch_add(
        self,
        pairs: Sequence[TranslationPair],
        catalog_set: CatalogSet,
        policy: ConflictPolicy | None = None,
    ) -> MutationResult:
        """Add many keys per language with a single batch translation call each.

        Existing keys go through ``policy`` one by one. When the batch call fails
        or returns the wrong number of texts, that language is left untouched.
        """

        for pair in pairs:
            validate_key_path(pair.key)
        policy = policy or ConflictPolicy()
        result = MutationResult(operation="batch")
        for code, name in catalog_set:
            catalog = self.load(code, name)
            accepted: list[TranslationPair] = []
            skipped: list[str] = []
            for pair in pairs:
                if has_path(catalog.tree, pair.key) and not policy.should_overwrite(
                    pair.key, get_path(catalog.tree, pair.key), pair.text
                ):
                    skipped.append(pair.key)
                    continue
                accepted.append(pair)

            if not accepted:
                result.record(
                    LanguageOutcome(
                        code,
                        name,
                        Outcome.UNCHANGED,
                        skipped_keys=skipped,
                        message="No translations to add",
                    )
                )
                continue

            texts = [pair.text for pair in accepted]
            if code == catalog_set.source_language:
                translated: list[str] | None = texts
            else:
                translated = self._translate_many(texts, name, catalog_set.source_display_name)
            if translated is None or len(translated) != len(texts):
                result.record(
                    LanguageOutcome(code, name, Outcome.FAILED, skipped_keys=skipped, message=TRANSLATION_FAILED)
                )
                continue

            updated = copy.deepcopy(catalog.tree)
            values: dict[str, Any] = {}
            for pair, text in zip(accepted, translated, strict=True):
                set_path(updated, pair.key, text)
                values[pair.key] = text
            self.save(code, updated)
            result.record(LanguageOutcome(code, name, Outcome.UPDATED, values=values, skipped_keys=skipped))
        return result

    def rename_key(
        self,
        old_path: str,
        new_path: str,
        catalog_set: CatalogSet,
        *,
        force: bool = False,
    ) -> MutationResult:
        """Move the value at ``old_path`` to ``new_path`` in every language holding it.

        Every catalog is inspected before anything is written: the old key must
        exist somewhere and, unless ``force`` is set, the new key must exist
        nowhere. Languages without the old key are skipped.

        Raises:
            InvalidKeyPathError: If ``new_path`` is malformed.
            KeyNotFoundError: If ``old_path`` exists in no catalog.
            KeyExistsError: If ``new_path`` exists and ``force`` is false.
        """

        validate_key_path(new_path)
        catalogs = self.load_all(catalog_set)
        if not any(has_path(catalog.tree, old_path) for catalog in catalogs):
            raise KeyNotFoundError(old_path)
        if not force and any(has_path(catalog.tree, new_path) for catalog in catalogs):
            raise KeyExistsError(new_path)

        result = MutationResult(operation="rename")
        for catalog in catalogs:
            if not has_path(catalog.tree, old_path):
                result.record(
                    LanguageOutcome(catalog.code, catalog.display_name, Outcome.SKIPPED, message="key not found")
                )
                continue
            value = get_path(catalog.tree, old_path)
            if old_path == new_path:
                result.record(
                    LanguageOutcome(catalog.code, catalog.display_name, Outcome.UNCHANGED, values={new_path: value})
                )
                continue
            remove_path(catalog.tree, old_path)
            set_path(catalog.tree, new_path, value)
            self.save(catalog.code, catalog.tree)
            result.record(LanguageOutcome(catalog.code, catalog.display_name, Outcome.UPDATED, values={new_path: value}))
        return result

    def remove_key(self, path: str, catalog_set: CatalogSet) -> MutationResult:
        """Delete ``path`` from every language holding it.

        Raises:
            KeyNotFoundError: If ``path`` exists in no catalog.
        """

        catalogs = self.load_all(catalog_set)
        if not any(has_path(catalog.tree, path) for catalog in catalogs):
            raise KeyNotFoundError(path)

        result = MutationResult(operation="remove")
        for catalog in catalogs:
            if not has_path(catalog.tree, path):
                result.record(
                    LanguageOutcome(catalog.code, catalog.display_name, Outcome.SKIPPED, message="key not found")
                )
                continue
            value = get_path(catalog.tree, path)
            remove_path(catalog.tree, path)
            self.save(catalog.code, catalog.tree)
            result.record(LanguageOutcome(catalog.code, catalog.display_name, Outcome.UPDATED, values={path: value}))
        return result

    def add_language(
        self,
        code: str,
        display_name: str,
        catalog_set: CatalogSet,
        *,
        translate_from_source: bool = True,
    ) -> AddLanguageResult:
        """Create the catalog for a new language, optionally translated from the source.

        A catalog file is always written: when translation is disabled, the
        source is empty, or the batch call fails or returns a mismatched number
        of texts, the new catalog is empty.

        Raises:
            LanguageExistsError: If ``code`` is already configured.
            InvalidLanguageCodeError: If ``code`` is not of the form ``xx-xx``.
        """

        if code in catalog_set:
            raise LanguageExistsError(code)
        validate_language_code(code)

        source_flat = self.load(catalog_set.source_language).flat()
        if not translate_from_source or not source_flat:
            path = self.save(code, {})
            return AddLanguageResult(code, display_name, 0, False, source_keys=len(source_flat), path=path)

        source_keys = list(source_flat)
        texts = [source_flat[key] for key in source_keys]
        translated = self._translate_many(texts, display_name, catalog_set.source_display_name)
        if translated is None or len(translated) != len(texts):
            path = self.save(code, {})
            return AddLanguageResult(
                code,
                display_name,
                0,
                False,
                source_keys=len(source_keys),
                path=path,
                error=TRANSLATION_FAILED,
            )

        tree: Tree = {}
        for key, text in zip(source_keys, translated, strict=True):
            set_path(tree, key, text)
        path = self.save(code, tree)
        return AddLanguageResult(code, display_name, len(source_keys), True, source_keys=len(source_keys), path=path)

    # Translation ---------------------------------------------------------------

    def _translate_one(self, text: str, target_name: str, source_name: str) -> str | None:
        if self.translator is None:
            LOGGER.warning("no translator configured; cannot translate to %s", target_name)
            return None
        return self.translator.translate_one(text, target_name, source_name)

    def _translate_many(self, texts: Sequence[Any], target_name: str, source_name: str) -> list[str] | None:
        if self.translator is None:
            LOGGER.warning("no translator configured; cannot translate to %s", target_name)
            return None
        return self.translator.translate_many([str(text) for text in texts], target_name, source_name)


__all__ = [
    "AddLanguageResult",
    "Catalog",
    "CatalogSet",
    "CatalogStore",
    "ConfirmCallback",
    "ConflictPolicy",
    "LanguageOutcome",
    "MutationResult",
    "Outcome",
    "TRANSLATION_FAILED",
    "TranslationPair",
    "parse_batch_input",
]
