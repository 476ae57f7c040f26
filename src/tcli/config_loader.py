# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Discovery, loading and persistence of project configuration files."""

from __future__ import annotations

import json
import logging
import tomllib
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ValidationError

from .config import LANGUAGE_MAPPINGS, CatalogConfig
from .errors import ConfigError

LOGGER = logging.getLogger(__name__)

PRIMARY_CONFIG: Final[str] = ".translation-cli.json"
SECONDARY_CONFIG: Final[str] = "translation-cli.config.json"
PACKAGE_JSON: Final[str] = "package.json"
PACKAGE_JSON_FIELD: Final[str] = "translationCli"
PYPROJECT: Final[str] = "pyproject.toml"
PYPROJECT_SECTION: Final[str] = "tcli"
WRITABLE_CONFIGS: Final[tuple[str, ...]] = (PRIMARY_CONFIG, SECONDARY_CONFIG)


class ConfigSource(ABC):
    """Base class for a single candidate configuration file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    @abstractmethod
    def load(self) -> Mapping[str, Any] | None:
        """Return the configuration fragment or ``None`` when unavailable."""

    def describe(self) -> str:
        return str(self.path)


class JsonConfigSource(ConfigSource):
    """A standalone JSON configuration document."""

    def load(self) -> Mapping[str, Any] | None:
        document = _read_json(self.path)
        return document if isinstance(document, Mapping) else None


class PackageJsonConfigSource(ConfigSource):
    """The ``translationCli`` field of a ``package.json`` manifest."""

    def load(self) -> Mapping[str, Any] | None:
        document = _read_json(self.path)
        if not isinstance(document, Mapping):
            return None
        section = document.get(PACKAGE_JSON_FIELD)
        return section if isinstance(section, Mapping) else None

    def describe(self) -> str:
        return f"{self.path} ({PACKAGE_JSON_FIELD})"


class PyProjectConfigSource(ConfigSource):
    """The ``[tool.tcli]`` table of ``pyproject.toml``."""

    def load(self) -> Mapping[str, Any] | None:
        if not self.path.is_file():
            return None
        try:
            with self.path.open("rb") as handle:
                data = tomllib.load(handle)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            LOGGER.debug("ignoring unreadable %s: %s", self.path, exc)
            return None
        section = data.get("tool", {}).get(PYPROJECT_SECTION)
        return section if isinstance(section, Mapping) else None

    def describe(self) -> str:
        return f"{self.path} ([tool.{PYPROJECT_SECTION}])"


def _read_json(path: Path) -> Any:
    if not path.is_file():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        LOGGER.debug("ignoring unreadable %s: %s", path, exc)
        return None


class ConfigLoadResult(BaseModel):
    """Loaded configuration plus the file it came from."""

    config: CatalogConfig
    source: Path | None = None
    description: str = "Built-in defaults"


class ConfigLoader:
    """Resolve the effective configuration for a project root.

    Candidates are tried in order and the first one yielding a mapping wins.
    Its top-level keys replace the defaults; unreadable candidates are skipped.
    """

    def __init__(self, root: Path, sources: Sequence[ConfigSource]) -> None:
        self.root = root
        self.sources = tuple(sources)

    @classmethod
    def for_root(cls, root: Path) -> ConfigLoader:
        """Return a loader checking the standard candidate files beneath ``root``."""

        root = Path(root)
        sources: list[ConfigSource] = [
            JsonConfigSource(root / PRIMARY_CONFIG),
            JsonConfigSource(root / SECONDARY_CONFIG),
            PackageJsonConfigSource(root / PACKAGE_JSON),
            PyProjectConfigSource(root / PYPROJECT),
        ]
        return cls(root, sources)

    def load(self) -> CatalogConfig:
        """Return the effective configuration.

        Raises:
            ConfigError: If the winning fragment fails validation.
        """

        return self.load_with_trace().config

    def load_with_trace(self) -> ConfigLoadResult:
        """Return the effective configuration with the file it was read from."""

        for source in self.sources:
            fragment = source.load()
            if fragment is None:
                continue
            LOGGER.debug("using configuration from %s", source.describe())
            return ConfigLoadResult(
                config=_validate(fragment, source.describe()),
                source=source.path,
                description=source.describe(),
            )
        return ConfigLoadResult(config=CatalogConfig())


def _validate(fragment: Mapping[str, Any], origin: str) -> CatalogConfig:
    try:
        return CatalogConfig.model_validate(dict(fragment))
    except ValidationError as exc:
        details = "; ".join(_format_error(error) for error in exc.errors())
        raise ConfigError(f"Invalid configuration in {origin}: {details}") from exc


def _format_error(error: Mapping[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = str(error.get("msg", "invalid value"))
    return f"{location}: {message}" if location else message


def load_config(root: Path) -> CatalogConfig:
    """Return the effective configuration for ``root``."""

    return ConfigLoader.for_root(root).load()


def config_target(root: Path) -> Path:
    """Return the file ``write_config`` updates: the first existing JSON config or a new one."""

    for name in WRITABLE_CONFIGS:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return root / PRIMARY_CONFIG


def write_config(root: Path, config: CatalogConfig) -> Path:
    """Persist ``config`` as JSON beneath ``root`` and return the written path."""

    target = config_target(Path(root))
    target.write_text(json.dumps(config.to_document(), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    LOGGER.debug("wrote configuration to %s", target)
    return target


def build_initial_config(
    lang_dir: Path,
    languages: Mapping[str, str | None],
    source_language: str,
) -> CatalogConfig:
    """Return a configuration for ``init``.

    Languages given without a display name use the well-known name for the
    code, falling back to the code itself.

    Raises:
        ConfigError: If the resulting configuration is invalid.
    """

    named = {code: name or LANGUAGE_MAPPINGS.get(code, code) for code, name in languages.items()}
    payload = {"langDir": str(lang_dir), "languages": named, "sourceLanguage": source_language}
    return _validate(payload, "init options")


__all__ = [
    "ConfigLoadResult",
    "ConfigLoader",
    "ConfigSource",
    "JsonConfigSource",
    "PRIMARY_CONFIG",
    "PackageJsonConfigSource",
    "PyProjectConfigSource",
    "SECONDARY_CONFIG",
    "build_initial_config",
    "config_target",
    "load_config",
    "write_config",
]
