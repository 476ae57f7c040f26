# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

from tcli.catalog import CatalogSet, CatalogStore
from tcli.config import CatalogConfig
from tcli.storage import JsonCatalogStorage


class FakeTranslator:
    """Deterministic translator tagging each text with the target language name."""

    def __init__(self, *, fail_for: Sequence[str] = (), short_batch: bool = False) -> None:
        self.fail_for = set(fail_for)
        self.short_batch = short_batch
        self.calls: list[tuple[str, tuple[str, ...], str]] = []

    def translate_one(self, text: str, target_name: str, source_name: str) -> str | None:
        self.calls.append(("one", (text,), target_name))
        if target_name in self.fail_for:
            return None
        return f"[{target_name}] {text}"

    def translate_many(self, texts: Sequence[str], target_name: str, source_name: str) -> list[str] | None:
        self.calls.append(("many", tuple(texts), target_name))
        if target_name in self.fail_for:
            return None
        translated = [f"[{target_name}] {text}" for text in texts]
        return translated[:-1] if self.short_batch else translated


def _write_catalog(lang_dir: Path, code: str, tree: dict[str, Any]) -> None:
    lang_dir.mkdir(parents=True, exist_ok=True)
    (lang_dir / f"{code}.json").write_text(json.dumps(tree, indent=2), encoding="utf-8")


def _read_catalog(lang_dir: Path, code: str) -> dict[str, Any]:
    return json.loads((lang_dir / f"{code}.json").read_text(encoding="utf-8"))


@pytest.fixture
def write_catalog():
    """Return a helper writing ``<code>.json`` into a directory."""

    return _write_catalog


@pytest.fixture
def read_catalog():
    return _read_catalog


@pytest.fixture
def translator_factory():
    return FakeTranslator


@pytest.fixture
def lang_dir(tmp_path: Path) -> Path:
    path = tmp_path / "lang"
    path.mkdir()
    return path


@pytest.fixture
def config() -> CatalogConfig:
    return CatalogConfig(
        languages={"pt-pt": "European Portuguese", "en-us": "American English", "es-es": "Spanish (Spain)"},
        source_language="pt-pt",
    )


@pytest.fixture
def catalog_set(config: CatalogConfig) -> CatalogSet:
    return config.catalog_set()


@pytest.fixture
def storage(lang_dir: Path) -> JsonCatalogStorage:
    return JsonCatalogStorage(lang_dir)


@pytest.fixture
def translator() -> FakeTranslator:
    return FakeTranslator()


@pytest.fixture
def store(storage: JsonCatalogStorage, translator: FakeTranslator) -> CatalogStore:
    return CatalogStore(storage, translator)


@pytest.fixture
def project_root(tmp_path: Path, lang_dir: Path) -> Path:
    """Project root holding a ``.translation-cli.json`` pointing at ``lang/``."""

    document = {
        "langDir": "lang",
        "languages": {"pt-pt": "European Portuguese", "en-us": "American English"},
        "sourceLanguage": "pt-pt",
    }
    (tmp_path / ".translation-cli.json").write_text(json.dumps(document), encoding="utf-8")
    return tmp_path
