# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Dotted key paths over nested catalog trees.

A catalog tree is a JSON object whose values are either nested objects (nodes)
or leaves. Strings are the usual leaf, but lists and other JSON scalars are
leaves too: only mappings are ever descended into.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, MutableMapping
from typing import Any, Final, TypeAlias

from .errors import InvalidKeyPathError, InvalidLanguageCodeError

Leaf: TypeAlias = str | int | float | bool | list[Any] | None
Tree: TypeAlias = dict[str, Any]

KEY_PATH_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9._-]+$")
LANGUAGE_CODE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-z]{2}-[a-z]{2}$")
SEPARATOR: Final[str] = "."

_MISSING: Final = object()


def is_node(value: object) -> bool:
    """Return ``True`` when ``value`` is a mapping that paths may descend into."""

    return isinstance(value, Mapping)


def is_leaf(value: object) -> bool:
    """Return ``True`` when ``value`` terminates a path (strings, lists, scalars)."""

    return not is_node(value)


def validate_key_path(path: str) -> str:
    """Ensure ``path`` follows the dotted key grammar.

    Args:
        path: Candidate dotted key such as ``button.save``.

    Returns:
        str: The unchanged path, for call chaining.

    Raises:
        InvalidKeyPathError: If the path has characters outside
            ``[A-Za-z0-9._-]`` or an empty segment.
    """

    if not KEY_PATH_PATTERN.match(path) or any(not segment for segment in path.split(SEPARATOR)):
        raise InvalidKeyPathError(path)
    return path


def validate_language_code(code: str) -> str:
    """Ensure ``code`` has the ``xx-xx`` shape used for catalog file names."""

    if not LANGUAGE_CODE_PATTERN.match(code):
        raise InvalidLanguageCodeError(code)
    return code


def split_path(path: str) -> tuple[str, ...]:
    """Return the segments of ``path``."""

    return tuple(path.split(SEPARATOR))


def get_path(tree: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Return the value stored at ``path`` or ``default`` when unresolved.

    Traversal stops as soon as a segment is missing or the cursor is a leaf,
    so this never raises for absent keys.
    """

    cursor: Any = tree
    for segment in split_path(path):
        if not is_node(cursor) or segment not in cursor:
            return default
        cursor = cursor[segment]
    return cursor


def has_path(tree: Mapping[str, Any], path: str) -> bool:
    """Return ``True`` when ``path`` resolves to any value, ``null`` included."""

    return get_path(tree, path, _MISSING) is not _MISSING


def set_path(tree: MutableMapping[str, Any], path: str, value: Any) -> MutableMapping[str, Any]:
    """Store ``value`` at ``path``, creating intermediate nodes as needed.

    An intermediate segment currently holding a leaf is replaced by a fresh
    empty node, discarding the leaf. The final segment is overwritten whatever
    it held before. ``tree`` is mutated in place and returned; callers needing
    the original must copy it first.

    Args:
        tree: Catalog tree to mutate.
        path: Dotted key path.
        value: Leaf (or subtree) to store.

    Returns:
        MutableMapping[str, Any]: The same ``tree`` object.
    """

    *parents, last = split_path(path)
    cursor: MutableMapping[str, Any] = tree
    for segment in parents:
        child = cursor.get(segment)
        if not isinstance(child, MutableMapping):
            child = {}
            cursor[segment] = child
        cursor = child
    cursor[last] = value
    return tree


def remove_path(tree: MutableMapping[str, Any], path: str) -> MutableMapping[str, Any]:
    """Delete the value at ``path`` and prune ancestors left empty.

    Pruning walks from the leaf's parent toward the root and stops at the
    first ancestor that still has children. Unresolvable paths are a no-op.
    """

    *parents, last = split_path(path)
    chain: list[tuple[MutableMapping[str, Any], str]] = []
    cursor: Any = tree
    for segment in parents:
        if not isinstance(cursor, MutableMapping) or not is_node(cursor.get(segment)):
            return tree
        chain.append((cursor, segment))
        cursor = cursor[segment]
    if not isinstance(cursor, MutableMapping) or last not in cursor:
        return tree
    del cursor[last]

    for parent, segment in reversed(chain):
        if parent[segment]:
            break
        del parent[segment]
    return tree


def flatten(tree: Mapping[str, Any], prefix: str = "") -> dict[str, Leaf]:
    """Return a mapping of dotted path to leaf for every leaf in ``tree``."""

    flat: dict[str, Leaf] = {}
    for key, value in tree.items():
        compound = f"{prefix}{SEPARATOR}{key}" if prefix else str(key)
        if is_node(value):
            flat.update(flatten(value, compound))
        else:
            flat[compound] = value
    return flat


def unflatten(flat: Mapping[str, Any]) -> Tree:
    """Build a nested tree from dotted ``path -> leaf`` pairs."""

    tree: Tree = {}
    for path, value in flat.items():
        set_path(tree, path, value)
    return tree


def sort_recursive(value: Any) -> Any:
    """Return a copy of ``value`` with every mapping level sorted by key.

    Leaves, lists included, pass through untouched.
    """

    if not is_node(value):
        return value
    return {key: sort_recursive(value[key]) for key in sorted(value)}


__all__ = [
    "KEY_PATH_PATTERN",
    "LANGUAGE_CODE_PATTERN",
    "Leaf",
    "Tree",
    "flatten",
    "get_path",
    "has_path",
    "is_leaf",
    "is_node",
    "remove_path",
    "set_path",
    "sort_recursive",
    "split_path",
    "unflatten",
    "validate_key_path",
    "validate_language_code",
]
