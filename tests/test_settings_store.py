"""Tests for the JSON settings store."""

import json
import logging

import settings_store
from settings_store import DEFAULT_SETTINGS, load_settings


def test_defaults_when_file_missing(tmp_path):
    assert load_settings(tmp_path / "missing.json") == DEFAULT_SETTINGS


def test_file_overrides_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"qr_width": 512}), encoding="utf-8")

    settings = load_settings(path)
    assert settings["qr_width"] == 512
    assert settings["refresh_interval_ms"] == 30000


def test_invalid_file_falls_back_with_warning(tmp_path, caplog):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="settings_store"):
        settings = load_settings(path)

    assert settings == DEFAULT_SETTINGS
    assert "broken.json" in caplog.text


def test_non_object_file_ignored(tmp_path, caplog):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="settings_store"):
        assert load_settings(path) == DEFAULT_SETTINGS
    assert "expected a JSON object" in caplog.text


def test_default_path_is_working_directory_file(tmp_path, monkeypatch):
    (tmp_path / settings_store.SETTINGS_FILE).write_text(json.dumps({"uuid_param": "nonce"}), encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    assert load_settings()["uuid_param"] == "nonce"
