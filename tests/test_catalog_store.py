# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for multi-language catalog mutations."""

from __future__ import annotations

from pathlib import Path

import pytest

from tcli.catalog import (
    TRANSLATION_FAILED,
    CatalogSet,
    CatalogStore,
    ConflictPolicy,
    Outcome,
    TranslationPair,
    parse_batch_input,
)
from tcli.errors import (
    BatchInputError,
    ConfigError,
    InvalidKeyPathError,
    InvalidLanguageCodeError,
    KeyExistsError,
    KeyNotFoundError,
    LanguageExistsError,
    UnknownLanguageError,
)
from tcli.storage import JsonCatalogStorage


def test_catalog_set_requires_source_language() -> None:
    with pytest.raises(ConfigError):
        CatalogSet(languages={"en-us": "English"}, source_language="pt-pt")


def test_catalog_set_rejects_unknown_code(catalog_set: CatalogSet) -> None:
    with pytest.raises(UnknownLanguageError):
        catalog_set.display_name("de-de")


def test_add_translates_into_every_language(
    store: CatalogStore, catalog_set: CatalogSet, lang_dir: Path, read_catalog
) -> None:
    result = store.add_or_update_key("button.save", "Guardar", catalog_set)

    assert result.updated == ["pt-pt", "en-us", "es-es"]
    assert read_catalog(lang_dir, "pt-pt") == {"button": {"save": "Guardar"}}
    assert read_catalog(lang_dir, "en-us") == {"button": {"save": "[American English] Guardar"}}
    assert read_catalog(lang_dir, "es-es") == {"button": {"save": "[Spanish (Spain)] Guardar"}}


def test_add_existing_key_non_interactive_leaves_catalog_unchanged(
    store: CatalogStore, catalog_set: CatalogSet, lang_dir: Path, write_catalog, read_catalog
) -> None:
    for code in catalog_set.codes:
        write_catalog(lang_dir, code, {"button": {"save": f"old-{code}"}})

    result = store.add_or_update_key("button.save", "Novo", catalog_set, ConflictPolicy())

    assert result.skipped == list(catalog_set.codes)
    for code in catalog_set.codes:
        assert read_catalog(lang_dir, code) == {"button": {"save": f"old-{code}"}}


def test_add_existing_key_with_force_overwrites(
    store: CatalogStore, catalog_set: CatalogSet, lang_dir: Path, write_catalog, read_catalog
) -> None:
    write_catalog(lang_dir, "pt-pt", {"title": "Velho"})

    result = store.add_or_update_key("title", "Novo", catalog_set, ConflictPolicy(force=True))

    assert result.updated == ["pt-pt", "en-us", "es-es"]
    assert read_catalog(lang_dir, "pt-pt") == {"title": "Novo"}


def test_add_interactive_asks_per_conflicting_language(
    store: CatalogStore, catalog_set: CatalogSet, lang_dir: Path, write_catalog, read_catalog
) -> None:
    write_catalog(lang_dir, "pt-pt", {"title": "Velho"})
    write_catalog(lang_dir, "en-us", {"title": "Old"})
    asked: list[str] = []

    def confirm(key: str, existing: object, incoming: object) -> bool:
        asked.append(str(existing))
        return existing == "Old"

    policy = ConflictPolicy(interactive=True, confirm=confirm)
    result = store.add_or_update_key("title", "Novo", catalog_set, policy)

    assert asked == ["Velho", "Old"]
    assert result.skipped == ["pt-pt"]
    assert result.updated == ["en-us", "es-es"]
    assert read_catalog(lang_dir, "pt-pt") == {"title": "Velho"}
    assert read_catalog(lang_dir, "en-us") == {"title": "[American English] Novo"}


def test_translation_failure_is_recorded_per_language(
    storage: JsonCatalogStorage, catalog_set: CatalogSet, lang_dir: Path, translator_factory
) -> None:
    store = CatalogStore(storage, translator_factory(fail_for=["American English"]))

    result = store.add_or_update_key("greeting", "Olá", catalog_set)

    assert result.failed == ["en-us"]
    assert result.updated == ["pt-pt", "es-es"]
    failed = next(entry for entry in result.outcomes if entry.outcome is Outcome.FAILED)
    assert failed.message == TRANSLATION_FAILED
    assert not (lang_dir / "en-us.json").exists()


def test_add_without_translator_only_writes_source(
    storage: JsonCatalogStorage, catalog_set: CatalogSet, lang_dir: Path
) -> None:
    store = CatalogStore(storage)
    result = store.add_or_update_key("greeting", "Olá", catalog_set)
    assert result.updated == ["pt-pt"]
    assert result.failed == ["en-us", "es-es"]


def test_add_rejects_invalid_key(store: CatalogStore, catalog_set: CatalogSet, lang_dir: Path) -> None:
    with pytest.raises(InvalidKeyPathError):
        store.add_or_update_key("bad key", "x", catalog_set)
    assert list(lang_dir.iterdir()) == []


def test_batch_add_uses_one_call_per_language(
    store: CatalogStore, catalog_set: CatalogSet, translator, lang_dir: Path, read_catalog
) -> None:
    pairs = [TranslationPair("a.one", "Um"), TranslationPair("a.two", "Dois")]

    result = store.batch_add(pairs, catalog_set)

    assert result.updated == ["pt-pt", "en-us", "es-es"]
    assert [call[0] for call in translator.calls] == ["many", "many"]
    assert read_catalog(lang_dir, "en-us") == {
        "a": {"one": "[American English] Um", "two": "[American English] Dois"}
    }


def test_batch_add_mismatched_length_fails_language(
    storage: JsonCatalogStorage, catalog_set: CatalogSet, lang_dir: Path, translator_factory
) -> None:
    store = CatalogStore(storage, translator_factory(short_batch=True))
    pairs = [TranslationPair("a", "Um"), TranslationPair("b", "Dois")]

    result = store.batch_add(pairs, catalog_set)

    assert result.updated == ["pt-pt"]
    assert result.failed == ["en-us", "es-es"]
    assert not (lang_dir / "en-us.json").exists()


def test_batch_add_all_existing_is_unchanged(
    store: CatalogStore, catalog_set: CatalogSet, lang_dir: Path, write_catalog
) -> None:
    for code in catalog_set.codes:
        write_catalog(lang_dir, code, {"a": "x"})

    result = store.batch_add([TranslationPair("a", "Um")], catalog_set)

    assert [entry.outcome for entry in result.outcomes] == [Outcome.UNCHANGED] * 3
    assert result.outcomes[0].skipped_keys == ["a"]


def test_parse_batch_input_flattens_and_filters() -> None:
    pairs = parse_batch_input('{"a": {"b": "x", "c": ""}, "bad key": "y", "n": 3}')
    assert pairs == [TranslationPair("a.b", "x")]


def test_parse_batch_input_rejects_non_object() -> None:
    with pytest.raises(BatchInputError):
        parse_batch_input("[1, 2]")
    with pytest.raises(BatchInputError):
        parse_batch_input("{oops")


def test_rename_moves_value_in_languages_holding_key(
    store: CatalogStore, catalog_set: CatalogSet, lang_dir: Path, write_catalog, read_catalog
) -> None:
    write_catalog(lang_dir, "pt-pt", {"a": {"b": "valor"}})
    write_catalog(lang_dir, "en-us", {"a": {"b": "value"}})

    result = store.rename_key("a.b", "a.c", catalog_set)

    assert result.updated == ["pt-pt", "en-us"]
    assert result.skipped == ["es-es"]
    assert read_catalog(lang_dir, "pt-pt") == {"a": {"c": "valor"}}
    assert read_catalog(lang_dir, "en-us") == {"a": {"c": "value"}}
    assert not (lang_dir / "es-es.json").exists()


def test_rename_prunes_emptied_parents(
    store: CatalogStore, catalog_set: CatalogSet, lang_dir: Path, write_catalog, read_catalog
) -> None:
    write_catalog(lang_dir, "pt-pt", {"old": {"deep": {"key": "v"}}})
    store.rename_key("old.deep.key", "fresh", catalog_set)
    assert read_catalog(lang_dir, "pt-pt") == {"fresh": "v"}


def test_rename_missing_key_raises(store: CatalogStore, catalog_set: CatalogSet) -> None:
    with pytest.raises(KeyNotFoundError):
        store.rename_key("nope", "other", catalog_set)


def test_rename_onto_existing_key_requires_force(
    store: CatalogStore, catalog_set: CatalogSet, lang_dir: Path, write_catalog, read_catalog
) -> None:
    write_catalog(lang_dir, "pt-pt", {"a": "1", "b": "2"})
    with pytest.raises(KeyExistsError):
        store.rename_key("a", "b", catalog_set)
    assert read_catalog(lang_dir, "pt-pt") == {"a": "1", "b": "2"}

    store.rename_key("a", "b", catalog_set, force=True)
    assert read_catalog(lang_dir, "pt-pt") == {"b": "1"}


def test_rename_validates_new_key(
    store: CatalogStore, catalog_set: CatalogSet, lang_dir: Path, write_catalog
) -> None:
    write_catalog(lang_dir, "pt-pt", {"a": "1"})
    with pytest.raises(InvalidKeyPathError):
        store.rename_key("a", "b c", catalog_set)


def test_remove_key_from_every_language(
    store: CatalogStore, catalog_set: CatalogSet, lang_dir: Path, write_catalog, read_catalog
) -> None:
    write_catalog(lang_dir, "pt-pt", {"a": {"b": "1"}, "c": "2"})
    write_catalog(lang_dir, "en-us", {"a": {"b": "1"}})

    result = store.remove_key("a.b", catalog_set)

    assert result.updated == ["pt-pt", "en-us"]
    assert read_catalog(lang_dir, "pt-pt") == {"c": "2"}
    assert read_catalog(lang_dir, "en-us") == {}


def test_remove_missing_key_raises(store: CatalogStore, catalog_set: CatalogSet) -> None:
    with pytest.raises(KeyNotFoundError):
        store.remove_key("ghost", catalog_set)


def test_add_language_translates_source(
    store: CatalogStore, catalog_set: CatalogSet, lang_dir: Path, write_catalog, read_catalog
) -> None:
    write_catalog(lang_dir, "pt-pt", {"a": "Um", "b": {"c": "Dois"}})

    result = store.add_language("de-de", "German", catalog_set)

    assert result.translated is True
    assert result.keys_count == 2
    assert read_catalog(lang_dir, "de-de") == {"a": "[German] Um", "b": {"c": "[German] Dois"}}


def test_add_language_without_translation_writes_empty_catalog(
    store: CatalogStore, catalog_set: CatalogSet, lang_dir: Path, write_catalog, read_catalog, translator
) -> None:
    write_catalog(lang_dir, "pt-pt", {"a": "Um"})

    result = store.add_language("de-de", "German", catalog_set, translate_from_source=False)

    assert result.translated is False
    assert result.keys_count == 0
    assert read_catalog(lang_dir, "de-de") == {}
    assert translator.calls == []


def test_add_language_failure_still_writes_empty_catalog(
    storage: JsonCatalogStorage, catalog_set: CatalogSet, lang_dir: Path, write_catalog, read_catalog,
    translator_factory,
) -> None:
    write_catalog(lang_dir, "pt-pt", {"a": "Um"})
    store = CatalogStore(storage, translator_factory(fail_for=["German"]))

    result = store.add_language("de-de", "German", catalog_set)

    assert result.translated is False
    assert result.error == TRANSLATION_FAILED
    assert read_catalog(lang_dir, "de-de") == {}


def test_add_language_mismatched_batch_writes_empty_catalog(
    storage: JsonCatalogStorage, catalog_set: CatalogSet, lang_dir: Path, write_catalog, read_catalog,
    translator_factory,
) -> None:
    write_catalog(lang_dir, "pt-pt", {"a": "Um", "b": "Dois"})
    store = CatalogStore(storage, translator_factory(short_batch=True))

    result = store.add_language("de-de", "German", catalog_set)

    assert result.translated is False
    assert result.keys_count == 0
    assert result.error == TRANSLATION_FAILED
    assert (lang_dir / "de-de.json").is_file()
    assert read_catalog(lang_dir, "de-de") == {}


def test_add_language_with_empty_source_skips_translator(
    storage: JsonCatalogStorage, catalog_set: CatalogSet, lang_dir: Path, read_catalog, translator_factory
) -> None:
    translator = translator_factory()
    store = CatalogStore(storage, translator)

    result = store.add_language("de-de", "German", catalog_set)

    assert result.translated is False
    assert result.error is None
    assert result.source_keys == 0
    assert read_catalog(lang_dir, "de-de") == {}
    assert translator.calls == []


def test_add_language_rejects_existing_and_malformed_codes(store: CatalogStore, catalog_set: CatalogSet) -> None:
    with pytest.raises(LanguageExistsError):
        store.add_language("en-us", "English", catalog_set)
    with pytest.raises(InvalidLanguageCodeError):
        store.add_language("german", "German", catalog_set)
