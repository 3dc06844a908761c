"""Unit tests for engine settings."""

import json

import pytest
from pydantic import ValidationError

from firequery.core.config import EngineSettings, load_settings, settings_from_env


def test_defaults():
    settings = EngineSettings()

    assert settings.default_limit == 50
    assert settings.max_results == 14
    assert settings.context_window == 220
    assert settings.root_identifier == "db"
    assert settings.default_collection == ""


def test_settings_are_frozen():
    settings = EngineSettings()

    with pytest.raises(ValidationError):
        settings.max_results = 3


@pytest.mark.parametrize(
    "data",
    [
        {"max_results": 0},
        {"default_limit": -1},
        {"root_identifier": ""},
        {"unknown": 1},
    ],
)
def test_invalid_values_rejected(data):
    with pytest.raises(ValidationError):
        EngineSettings(**data)


def test_settings_from_env():
    settings = settings_from_env(
        {
            "FIREQUERY_MAX_RESULTS": "5",
            "FIREQUERY_ROOT_IDENTIFIER": "fs",
            "FIREQUERY_DEFAULT_COLLECTION": "",
            "UNRELATED": "x",
        }
    )

    assert settings.max_results == 5
    assert settings.root_identifier == "fs"
    assert settings.default_collection == ""


def test_load_settings_without_path_reads_environment(monkeypatch):
    monkeypatch.setenv("FIREQUERY_DEFAULT_LIMIT", "7")

    assert load_settings().default_limit == 7


def test_load_settings_from_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"max_results": 5, "default_collection": "users"}), encoding="utf-8")

    settings = load_settings(path)

    assert settings.max_results == 5
    assert settings.default_collection == "users"


def test_load_settings_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(json.JSONDecodeError):
        load_settings(broken)

    invalid = tmp_path / "invalid.json"
    invalid.write_text(json.dumps({"context_window": 0}), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_settings(invalid)
