# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for the translation catalog manager."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .catalog import CatalogSet
from .translation import DEFAULT_MODEL

DEFAULT_LANGUAGES: Final[dict[str, str]] = {
    "pt-pt": "European Portuguese",
    "pt-br": "Brazilian Portuguese",
    "es-es": "Spanish (Spain)",
    "en-us": "American English",
}
DEFAULT_SOURCE_LANGUAGE: Final[str] = "pt-pt"
DEFAULT_INCLUDE_DIRS: Final[tuple[str, ...]] = ("src", "components", "pages", "app")
DEFAULT_EXCLUDE_DIRS: Final[tuple[str, ...]] = (
    "node_modules",
    ".git",
    "dist",
    "build",
    ".next",
    "coverage",
    ".nuxt",
    ".output",
    "public",
    "static",
    "test",
    "tests",
    "__tests__",
)
DEFAULT_EXTENSIONS: Final[tuple[str, ...]] = (".js", ".jsx", ".ts", ".tsx", ".vue", ".svelte")

# Well-known display names offered when initialising a project.
LANGUAGE_MAPPINGS: Final[dict[str, str]] = {
    "en-us": "American English",
    "en-gb": "British English",
    "pt-pt": "European Portuguese",
    "pt-br": "Brazilian Portuguese",
    "es-es": "Spanish (Spain)",
    "es-mx": "Spanish (Latin America)",
    "fr-fr": "French",
    "de-de": "German",
    "it-it": "Italian",
    "nl-nl": "Dutch",
    "ru-ru": "Russian",
    "ja-jp": "Japanese",
    "zh-cn": "Chinese (Simplified)",
    "ko-kr": "Korean",
}


class ScanConfig(BaseModel):
    """Directory and extension filters used by the usage scan."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    include: list[str] | None = Field(default_factory=lambda: list(DEFAULT_INCLUDE_DIRS))
    exclude: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS))
    extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))


class CatalogConfig(BaseModel):
    """Project configuration: catalog directory, languages and scan filters."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True, extra="ignore")

    lang_dir: Path = Field(default=Path("lang"), alias="langDir")
    languages: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_LANGUAGES))
    source_language: str = Field(default=DEFAULT_SOURCE_LANGUAGE, alias="sourceLanguage")
    verification: ScanConfig = Field(default_factory=ScanConfig)
    model: str = DEFAULT_MODEL
    temperature: float = 0.3

    @field_validator("verification", mode="before")
    @classmethod
    def _replace_verification(cls, value: Any) -> Any:
        # A configured block replaces the default one; without "include" every directory is scanned.
        if isinstance(value, Mapping):
            return {"include": None, **value}
        return value

    @model_validator(mode="after")
    def _ensure_source_language(self) -> CatalogConfig:
        if self.source_language not in self.languages:
            raise ValueError(f'Source language "{self.source_language}" is not defined in the languages list')
        return self

    def resolve_lang_dir(self, root: Path) -> Path:
        """Return the catalog directory resolved against ``root``."""

        return self.lang_dir if self.lang_dir.is_absolute() else (root / self.lang_dir)

    def catalog_set(self) -> CatalogSet:
        """Return the ordered language set consumed by the engines."""

        return CatalogSet(languages=dict(self.languages), source_language=self.source_language)

    def with_language(self, code: str, display_name: str) -> CatalogConfig:
        """Return a copy with ``code`` appended to the language mapping."""

        languages = {**self.languages, code: display_name}
        return self.model_copy(update={"languages": languages})

    def to_document(self) -> dict[str, Any]:
        """Return the JSON document written to ``.translation-cli.json``."""

        return self.model_dump(mode="json", by_alias=True)


__all__ = [
    "CatalogConfig",
    "DEFAULT_EXCLUDE_DIRS",
    "DEFAULT_EXTENSIONS",
    "DEFAULT_INCLUDE_DIRS",
    "DEFAULT_LANGUAGES",
    "DEFAULT_SOURCE_LANGUAGE",
    "LANGUAGE_MAPPINGS",
    "ScanConfig",
]
