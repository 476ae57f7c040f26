# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised by catalog, configuration and scan operations."""

from __future__ import annotations


class TcliError(RuntimeError):
    """Base class for errors surfaced verbatim to the command line."""


class PreconditionError(TcliError):
    """Raised before any catalog is written when an operation cannot proceed."""


class KeyNotFoundError(PreconditionError):
    """Raised when a key is absent from every configured catalog."""

    def __init__(self, key: str) -> None:
        super().__init__(f'Translation key "{key}" does not exist in any language')
        self.key = key


class KeyExistsError(PreconditionError):
    """Raised when a rename target already exists and overwriting was not forced."""

    def __init__(self, key: str) -> None:
        super().__init__(f'Translation key "{key}" already exists. Use --force to overwrite')
        self.key = key


class LanguageExistsError(PreconditionError):
    """Raised when adding a language code that is already configured."""

    def __init__(self, code: str) -> None:
        super().__init__(f'Language "{code}" already exists in configuration')
        self.code = code


class UnknownLanguageError(PreconditionError):
    """Raised when a command names a language missing from the configuration."""

    def __init__(self, code: str, known: tuple[str, ...] = ()) -> None:
        message = f"Unsupported language: {code}"
        if known:
            message = f"{message}. Supported languages: {', '.join(known)}"
        super().__init__(message)
        self.code = code


class FormatValidationError(TcliError):
    """Raised when a key path or language code does not match its grammar."""


class InvalidKeyPathError(FormatValidationError):
    """Raised for key paths outside ``[A-Za-z0-9._-]`` or with empty segments."""

    def __init__(self, key: str) -> None:
        super().__init__(
            f'Invalid key format "{key}". Use alphanumeric characters, dots, hyphens, and underscores only.'
        )
        self.key = key


class InvalidLanguageCodeError(FormatValidationError):
    """Raised for language codes that are not of the form ``xx-xx``."""

    def __init__(self, code: str) -> None:
        super().__init__(f'Invalid language code "{code}". Use: xx-xx (e.g., de-de, fr-fr)')
        self.code = code


class BatchInputError(FormatValidationError):
    """Raised when a batch input document is not a JSON object."""


class CatalogIntegrityError(TcliError):
    """Raised when an existing catalog file cannot be parsed."""


class ConfigError(TcliError):
    """Raised when configuration input is invalid."""


__all__ = [
    "BatchInputError",
    "CatalogIntegrityError",
    "ConfigError",
    "FormatValidationError",
    "InvalidKeyPathError",
    "InvalidLanguageCodeError",
    "KeyExistsError",
    "KeyNotFoundError",
    "LanguageExistsError",
    "PreconditionError",
    "TcliError",
    "UnknownLanguageError",
]
