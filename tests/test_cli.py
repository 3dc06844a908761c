"""Tests for the firequery command line."""

import json
import sys

import pytest
from loguru import logger
from typer.testing import CliRunner

from firequery.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def reset_logging():
    """The CLI points loguru at the runner's stderr; put a normal handler back afterwards."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")


def test_build_prints_structured_query():
    result = runner.invoke(app, ["build", ".collection('users').where('age','>=',21).limit(10).get()"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "from": [{"collectionId": "users"}],
        "limit": 10,
        "where": {
            "fieldFilter": {
                "field": {"fieldPath": "age"},
                "op": "GREATER_THAN_OR_EQUAL",
                "value": {"integerValue": "21"},
            }
        },
    }


def test_parse_uses_collection_option():
    result = runner.invoke(app, ["parse", ".orderBy('age', 'desc')", "--collection", "people"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["collection"] == "people"
    assert data["limit"] == 50
    assert data["order_by"] == {"field": "age", "direction": "desc"}


def test_complete_lists_candidates():
    result = runner.invoke(app, ["complete", "db.collection('users').wh"])

    assert result.exit_code == 0
    assert "trigger='.wh'" in result.stdout
    assert ".where" in result.stdout


def test_complete_without_candidates():
    result = runner.invoke(app, ["complete", "x = 1;"])

    assert result.exit_code == 0
    assert "No completions." in result.stdout


def test_decode_fields_file(tmp_path):
    path = tmp_path / "fields.json"
    path.write_text(json.dumps({"fields": {"age": {"integerValue": "21"}, "ok": {"booleanValue": True}}}))

    result = runner.invoke(app, ["decode", str(path)])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"age": "21", "ok": "true"}


def test_console_command():
    result = runner.invoke(app, ["console", "db.collection('users').limit(5).get()"])

    assert result.exit_code == 0
    assert "action: fetch_collection" in result.stdout
    assert "limit: 5" in result.stdout


def test_console_error_exits_with_failure():
    result = runner.invoke(app, ["console", "drop table"])

    assert result.exit_code == 1


def test_invalid_settings_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"max_results": 0}))

    result = runner.invoke(app, ["--config", str(path), "build", ""])

    assert result.exit_code == 2


def test_settings_file_is_used(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"default_collection": "logs", "default_limit": 3}))

    result = runner.invoke(app, ["--config", str(path), "build", "db.get()"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"from": [{"collectionId": "logs"}], "limit": 3}
