# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI tests driving the Typer application end to end."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from tcli.cli import shared
from tcli.cli.app import app
from tcli.translation import API_KEY_ENV


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def fake_translator(monkeypatch: pytest.MonkeyPatch, translator):
    monkeypatch.setattr(shared, "build_translator", lambda config, root, logger: translator)
    return translator


def _invoke(runner: CliRunner, root: Path, *args: str, input: str | None = None):
    return runner.invoke(app, ["--root", str(root), "--no-emoji", *args], input=input)


def test_add_writes_every_language(runner, project_root: Path, lang_dir: Path, read_catalog, fake_translator) -> None:
    result = _invoke(runner, project_root, "add", "button.save", "Guardar")

    assert result.exit_code == 0, result.output
    assert read_catalog(lang_dir, "pt-pt") == {"button": {"save": "Guardar"}}
    assert read_catalog(lang_dir, "en-us") == {"button": {"save": "[American English] Guardar"}}


def test_add_existing_key_without_force_keeps_value(
    runner, project_root: Path, lang_dir: Path, write_catalog, read_catalog, fake_translator
) -> None:
    write_catalog(lang_dir, "pt-pt", {"title": "Velho"})

    result = _invoke(runner, project_root, "add", "title", "Novo", "--no-interactive")

    assert result.exit_code == 0, result.output
    assert read_catalog(lang_dir, "pt-pt") == {"title": "Velho"}
    assert "keeping existing translation" in result.output


def test_add_interactive_prompt_accepts_overwrite(
    runner, project_root: Path, lang_dir: Path, write_catalog, read_catalog, fake_translator
) -> None:
    write_catalog(lang_dir, "pt-pt", {"title": "Velho"})

    result = _invoke(runner, project_root, "add", "title", "Novo", input="y\n")

    assert result.exit_code == 0, result.output
    assert read_catalog(lang_dir, "pt-pt") == {"title": "Novo"}


def test_add_invalid_key_fails(runner, project_root: Path, fake_translator) -> None:
    result = _invoke(runner, project_root, "add", "bad key", "x")
    assert result.exit_code == 1
    assert "Invalid key format" in result.output


def test_add_without_api_key_only_writes_source(
    runner, project_root: Path, lang_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv(API_KEY_ENV, raising=False)

    result = _invoke(runner, project_root, "add", "greeting", "Olá")

    assert result.exit_code == 0, result.output
    assert (lang_dir / "pt-pt.json").exists()
    assert not (lang_dir / "en-us.json").exists()
    assert API_KEY_ENV in result.output


def test_batch_from_file_and_stdin(
    runner, project_root: Path, lang_dir: Path, read_catalog, fake_translator
) -> None:
    (project_root / "batch.json").write_text(json.dumps({"menu": {"open": "Abrir"}}), encoding="utf-8")

    from_file = _invoke(runner, project_root, "batch", "batch.json")
    from_stdin = _invoke(runner, project_root, "batch", "-", input=json.dumps({"menu.close": "Fechar"}))

    assert from_file.exit_code == 0, from_file.output
    assert from_stdin.exit_code == 0, from_stdin.output
    assert read_catalog(lang_dir, "en-us") == {
        "menu": {"close": "[American English] Fechar", "open": "[American English] Abrir"}
    }


def test_batch_rejects_invalid_json(runner, project_root: Path, fake_translator) -> None:
    result = _invoke(runner, project_root, "batch", "-", input="[1, 2]")
    assert result.exit_code == 1
    assert "Invalid JSON format" in result.output


def test_batch_from_stdin_keeps_conflicting_keys(
    runner, project_root: Path, lang_dir: Path, write_catalog, read_catalog, fake_translator
) -> None:
    write_catalog(lang_dir, "en-us", {"a": "old"})

    result = _invoke(runner, project_root, "batch", "-", input=json.dumps({"a": "Um"}))

    assert result.exit_code == 0, result.output
    assert "Overwrite" not in result.output
    assert read_catalog(lang_dir, "pt-pt") == {"a": "Um"}
    assert read_catalog(lang_dir, "en-us") == {"a": "old"}


def test_batch_without_valid_pairs_fails(runner, project_root: Path, lang_dir: Path, fake_translator) -> None:
    result = _invoke(runner, project_root, "batch", "-", input=json.dumps({"bad key": "x", "empty": "  "}))

    assert result.exit_code == 1
    assert "No valid translation pairs found" in result.output
    assert not (lang_dir / "pt-pt.json").exists()


def test_batch_missing_file(runner, project_root: Path, fake_translator) -> None:
    result = _invoke(runner, project_root, "batch", "nowhere.json")
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_list_shows_flattened_translations(runner, project_root: Path, lang_dir: Path, write_catalog) -> None:
    write_catalog(lang_dir, "en-us", {"a": {"b": "Hello"}})

    result = _invoke(runner, project_root, "list", "en-us")

    assert result.exit_code == 0, result.output
    assert 'a.b: "Hello"' in result.output


def test_list_unknown_language(runner, project_root: Path) -> None:
    result = _invoke(runner, project_root, "list", "de-de")
    assert result.exit_code == 1
    assert "Unsupported language: de-de" in result.output


def test_rename_and_remove(runner, project_root: Path, lang_dir: Path, write_catalog, read_catalog) -> None:
    write_catalog(lang_dir, "pt-pt", {"a": {"b": "valor"}})
    write_catalog(lang_dir, "en-us", {"a": {"b": "value"}})

    renamed = _invoke(runner, project_root, "rename", "a.b", "a.c")
    assert renamed.exit_code == 0, renamed.output
    assert read_catalog(lang_dir, "en-us") == {"a": {"c": "value"}}

    removed = _invoke(runner, project_root, "remove", "a.c", "--force")
    assert removed.exit_code == 0, removed.output
    assert read_catalog(lang_dir, "pt-pt") == {}


def test_rename_conflict_reports_error(runner, project_root: Path, lang_dir: Path, write_catalog) -> None:
    write_catalog(lang_dir, "pt-pt", {"a": "1", "b": "2"})
    result = _invoke(runner, project_root, "rename", "a", "b")
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_remove_asks_for_confirmation(runner, project_root: Path, lang_dir: Path, write_catalog, read_catalog) -> None:
    write_catalog(lang_dir, "pt-pt", {"a": "1"})

    result = _invoke(runner, project_root, "remove", "a", input="n\n")

    assert result.exit_code != 0
    assert read_catalog(lang_dir, "pt-pt") == {"a": "1"}


def test_add_language_updates_config(runner, project_root: Path, lang_dir: Path, write_catalog, read_catalog) -> None:
    write_catalog(lang_dir, "pt-pt", {"a": "Um"})

    result = _invoke(runner, project_root, "add-language", "de-de", "German", "--no-translate")

    assert result.exit_code == 0, result.output
    assert read_catalog(lang_dir, "de-de") == {}
    document = json.loads((project_root / ".translation-cli.json").read_text(encoding="utf-8"))
    assert document["languages"]["de-de"] == "German"


def test_add_language_translates_with_translator(
    runner, project_root: Path, lang_dir: Path, write_catalog, read_catalog, fake_translator
) -> None:
    write_catalog(lang_dir, "pt-pt", {"a": "Um"})

    result = _invoke(runner, project_root, "add-language", "fr-fr", "French")

    assert result.exit_code == 0, result.output
    assert read_catalog(lang_dir, "fr-fr") == {"a": "[French] Um"}


def test_add_language_existing_code_fails(runner, project_root: Path) -> None:
    result = _invoke(runner, project_root, "add-language", "en-us", "English", "--no-translate")
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_check_exit_code_follows_consistency(runner, project_root: Path, lang_dir: Path, write_catalog) -> None:
    write_catalog(lang_dir, "pt-pt", {"a": "1", "b": "2"})
    write_catalog(lang_dir, "en-us", {"a": "1"})

    failing = _invoke(runner, project_root, "check")
    assert failing.exit_code == 1
    assert "Missing 1 keys" in failing.output

    write_catalog(lang_dir, "en-us", {"a": "1", "b": "2"})
    passing = _invoke(runner, project_root, "check")
    assert passing.exit_code == 0, passing.output


def test_check_report_json_to_file(runner, project_root: Path, lang_dir: Path, write_catalog) -> None:
    write_catalog(lang_dir, "pt-pt", {"a": "1", "b": "2", "c": "3"})
    write_catalog(lang_dir, "en-us", {"a": "1"})
    output = project_root / "reports" / "completeness.json"

    result = _invoke(runner, project_root, "check", "--report", "--json-format", "--output", str(output))

    assert result.exit_code == 0, result.output
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload["languages"]["en-us"]["completeness"] == "33.3"
    assert payload["languages"]["pt-pt"]["completeness"] == "100.0"


def test_check_template_prints_missing_source_values(
    runner, project_root: Path, lang_dir: Path, write_catalog
) -> None:
    write_catalog(lang_dir, "pt-pt", {"a": "Um", "b": {"c": "Dois"}})
    write_catalog(lang_dir, "en-us", {"a": "One"})

    result = _invoke(runner, project_root, "check", "--template", "en-us")

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"b": {"c": "Dois"}}


def test_check_incomplete_json(runner, project_root: Path, lang_dir: Path, write_catalog) -> None:
    write_catalog(lang_dir, "pt-pt", {"a": "1", "b": "2"})
    write_catalog(lang_dir, "en-us", {"a": "1"})

    result = _invoke(runner, project_root, "check", "--incomplete", "--json-format")

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["incompleteLanguages"]["en-us"]["missingKeys"] == ["b"]


def test_scan_json_report(runner, project_root: Path, lang_dir: Path, write_catalog) -> None:
    write_catalog(lang_dir, "pt-pt", {"button": {"save": "Guardar", "submit": "Enviar"}})
    source = project_root / "src" / "App.jsx"
    source.parent.mkdir()
    source.write_text("t('button.save')", encoding="utf-8")

    result = _invoke(runner, project_root, "scan", "--json-format")

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["usedKeysList"] == ["button.save"]
    assert payload["unusedKeysList"] == ["button.submit"]
    assert payload["usageRate"] == "50.0"


def test_scan_console_output(runner, project_root: Path, lang_dir: Path, write_catalog) -> None:
    write_catalog(lang_dir, "pt-pt", {"unused": "x"})
    result = _invoke(runner, project_root, "scan")
    assert result.exit_code == 0, result.output
    assert "Unused keys: 1" in result.output


def test_config_show_reports_source(runner, project_root: Path) -> None:
    result = _invoke(runner, project_root, "config", "show")
    assert result.exit_code == 0, result.output
    assert ".translation-cli.json" in result.output
    assert "American English" in result.output


def test_init_uses_existing_catalogs(runner, tmp_path: Path, write_catalog) -> None:
    write_catalog(tmp_path / "locales", "en-us", {})
    write_catalog(tmp_path / "locales", "fr-fr", {})

    result = _invoke(runner, tmp_path, "init", "--lang-dir", "locales", "--source", "en-us")

    assert result.exit_code == 0, result.output
    document = json.loads((tmp_path / ".translation-cli.json").read_text(encoding="utf-8"))
    assert document["langDir"] == "locales"
    assert document["languages"] == {"en-us": "American English", "fr-fr": "French"}
    assert document["sourceLanguage"] == "en-us"


def test_init_refuses_to_overwrite(runner, project_root: Path) -> None:
    result = _invoke(runner, project_root, "init", "--language", "en-us")
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_init_with_explicit_languages(runner, tmp_path: Path) -> None:
    result = _invoke(runner, tmp_path, "init", "-l", "de-de=Deutsch", "-l", "en-us")

    assert result.exit_code == 0, result.output
    document = json.loads((tmp_path / ".translation-cli.json").read_text(encoding="utf-8"))
    assert document["languages"] == {"de-de": "Deutsch", "en-us": "American English"}
    assert document["sourceLanguage"] == "de-de"
    assert (tmp_path / "lang").is_dir()
