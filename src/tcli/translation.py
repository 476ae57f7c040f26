# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Machine translation through the Gemini text-generation API."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Any, Final, Protocol, runtime_checkable

import requests

LOGGER = logging.getLogger(__name__)

DEFAULT_MODEL: Final[str] = "gemini-1.5-flash"
API_BASE: Final[str] = "https://generativelanguage.googleapis.com/v1beta"
API_KEY_ENV: Final[str] = "GOOGLE_GENERATIVE_AI_API_KEY"
DEFAULT_TIMEOUT: Final[float] = 60.0
_NUMBER_PREFIX: Final[re.Pattern[str]] = re.compile(r"^\d+\.\s*")


@runtime_checkable
class Translator(Protocol):
    """Translate text between two languages named by their display names.

    Both methods report failure by returning ``None`` rather than raising.
    """

    def translate_one(self, text: str, target_name: str, source_name: str) -> str | None:
        """Return ``text`` translated to ``target_name`` or ``None`` on failure."""
        ...

    def translate_many(self, texts: Sequence[str], target_name: str, source_name: str) -> list[str] | None:
        """Return translations in input order or ``None`` on failure."""
        ...


def build_prompt(text: str, target_name: str, source_name: str) -> str:
    """Return the prompt used to translate a single text."""

    return (
        f"Translate the following {source_name} text to {target_name}.\n\n"
        "Only return the translation, nothing else. Keep the same tone and context.\n\n"
        f'Text to translate: "{text}"'
    )


def build_batch_prompt(texts: Sequence[str], target_name: str, source_name: str) -> str:
    """Return the prompt used to translate a numbered list of texts."""

    numbered = "\n".join(f"{index}. {text}" for index, text in enumerate(texts, start=1))
    return (
        f"Translate the following numbered {source_name} texts to {target_name}.\n\n"
        "Return only the translations in the same numbered format, nothing else. "
        "Keep the same tone and context for each.\n\n"
        f"Texts to translate:\n{numbered}"
    )


def parse_numbered_lines(payload: str) -> list[str]:
    """Split a numbered batch response into translations, dropping blank lines."""

    return [_NUMBER_PREFIX.sub("", line.strip()).strip() for line in payload.splitlines() if line.strip()]


class GeminiTranslator:
    """Translator backed by the Generative Language ``generateContent`` endpoint."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.3,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self._session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        """Return the generation URL for the configured model."""

        return f"{API_BASE}/models/{self.model}:generateContent"

    def translate_one(self, text: str, target_name: str, source_name: str) -> str | None:
        generated = self._generate(build_prompt(text, target_name, source_name))
        if generated is None:
            LOGGER.warning("translation to %s failed", target_name)
            return None
        translated = generated.strip()
        if not translated:
            LOGGER.warning("translation to %s returned no text", target_name)
            return None
        return translated

    def translate_many(self, texts: Sequence[str], target_name: str, source_name: str) -> list[str] | None:
        if not texts:
            return []
        generated = self._generate(build_batch_prompt(texts, target_name, source_name))
        if generated is None:
            LOGGER.warning("batch translation to %s failed", target_name)
            return None
        translations = parse_numbered_lines(generated)
        if not translations or not all(translations):
            LOGGER.warning("batch translation to %s returned empty entries", target_name)
            return None
        return translations

    def _generate(self, prompt: str) -> str | None:
        """Send ``prompt`` to the API and return the generated text.

        Args:
            prompt: Complete prompt text.

        Returns:
            str | None: Concatenated text parts of the first candidate, or
            ``None`` when the request fails or the payload is malformed.
        """

        body = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": self.temperature},
        }
        try:
            response = self._session.post(
                self.endpoint,
                headers={"x-goog-api-key": self.api_key},
                json=body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            LOGGER.warning("generation request failed: %s", exc)
            return None
        return _extract_text(payload)


def _extract_text(payload: Any) -> str | None:
    try:
        parts = payload["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        LOGGER.warning("generation response had no candidate text")
        return None
    texts = [part.get("text", "") for part in parts if isinstance(part, dict)]
    joined = "".join(texts)
    return joined or None


__all__ = [
    "API_KEY_ENV",
    "DEFAULT_MODEL",
    "GeminiTranslator",
    "Translator",
    "build_batch_prompt",
    "build_prompt",
    "parse_numbered_lines",
]
