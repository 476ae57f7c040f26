# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""JSON persistence for per-language catalogs."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from .errors import CatalogIntegrityError
from .paths import Tree

LOGGER = logging.getLogger(__name__)

CATALOG_SUFFIX = ".json"


@runtime_checkable
class CatalogStorage(Protocol):
    """Load and persist one catalog tree per language code."""

    def load(self, code: str) -> Tree | None:
        """Return the stored tree for ``code`` or ``None`` when none exists."""
        ...

    def save(self, code: str, tree: Mapping[str, Any]) -> Path:
        """Persist ``tree`` for ``code`` and return the written location."""
        ...


class JsonCatalogStorage:
    """Store catalogs as ``<code>.json`` documents beneath ``base_dir``."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = Path(base_dir)

    def path_for(self, code: str) -> Path:
        """Return the catalog file path for ``code``."""

        return self.base_dir / f"{code}{CATALOG_SUFFIX}"

    def load(self, code: str) -> Tree | None:
        """Load the catalog for ``code``.

        Args:
            code: Language code naming the catalog file.

        Returns:
            Tree | None: Parsed catalog tree, or ``None`` when the file is absent.

        Raises:
            CatalogIntegrityError: If the file exists but is not a JSON object.
            OSError: If the file exists but cannot be read.
        """

        path = self.path_for(code)
        if not path.exists():
            return None
        with path.open("r", encoding="utf-8") as stream:
            try:
                payload = json.load(stream)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise CatalogIntegrityError(f"{path}: failed to parse catalog JSON ({exc})") from exc
        if not isinstance(payload, dict):
            raise CatalogIntegrityError(f"{path}: expected a JSON object")
        return payload

    def save(self, code: str, tree: Mapping[str, Any]) -> Path:
        """Write ``tree`` for ``code`` with two-space indentation.

        The document is written to a sibling temporary file first and then moved
        over the target, so readers never observe a half-written catalog.
        """

        self.base_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(code)
        staging = path.with_name(f".{path.name}.tmp")
        try:
            staging.write_text(json.dumps(tree, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
            staging.replace(path)
        except BaseException:
            staging.unlink(missing_ok=True)
            raise
        LOGGER.debug("saved catalog code=%s path=%s", code, path)
        return path

    def available_codes(self) -> list[str]:
        """Return the language codes that already have a catalog file."""

        if not self.base_dir.is_dir():
            return []
        return sorted(path.stem for path in self.base_dir.glob(f"*{CATALOG_SUFFIX}") if path.is_file())


__all__ = ["CATALOG_SUFFIX", "CatalogStorage", "JsonCatalogStorage"]
