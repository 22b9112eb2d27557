# -*- coding: utf-8 -*-
"""Tests for the command line entry point."""

import json
import sys

import pytest
from loguru import logger as loguru_logger
from typer.testing import CliRunner

from main import app, format_events, load_events
from src.processors.processing_context import ProcessingContext
from src.processors.text_formatter import TextFormatter

runner = CliRunner()

LONG_TITLE = "Festival " + "musique " * 10

EVENTS = [
    {
        "title": "Concert au parc",
        "description": "<p>Infos: info@example.com</p>",
        "location": "Parc Royal",
    },
    {
        "title": LONG_TITLE,
        "description": "- Accueil\n- Concert",
    },
]


@pytest.fixture(autouse=True)
def restore_logger():
    """Restore the default loguru handler after a test."""
    yield
    loguru_logger.remove()
    loguru_logger.add(sys.stderr)


@pytest.fixture
def config_dir(tmp_path):
    """Config directory without a log file."""
    config_path = tmp_path / "configs"
    config_path.mkdir()
    (config_path / "config.yml").write_text("cache:\n  max_size: 100\n", encoding="utf-8")
    return config_path


@pytest.fixture
def events_file(tmp_path):
    """JSON file with two events."""
    path = tmp_path / "events.json"
    path.write_text(json.dumps({"events": EVENTS}), encoding="utf-8")
    return path


@pytest.fixture
def formatter():
    return TextFormatter(ProcessingContext())


def invoke_format(events_file, config_dir, *args):
    return runner.invoke(
        app,
        ["format", str(events_file), "--config-dir", str(config_dir), "--log-level", "ERROR", *args],
    )


def test_load_events_list(tmp_path):
    """Test a bare list of events is accepted."""
    path = tmp_path / "events.json"
    path.write_text(json.dumps([{"title": "A"}, "skipped"]), encoding="utf-8")

    assert load_events(path) == [{"title": "A"}]


def test_load_events_wrapped(events_file):
    """Test an object with an events list is accepted."""
    assert load_events(events_file) == EVENTS


def test_load_events_invalid(tmp_path):
    """Test other JSON shapes are rejected."""
    path = tmp_path / "events.json"
    path.write_text(json.dumps({"items": []}), encoding="utf-8")

    with pytest.raises(ValueError):
        load_events(path)


def test_format_events(formatter):
    """Test events are formatted for one screen."""
    results = format_events(EVENTS, formatter, screen="mobile")

    assert results[0] == {
        "title": "Concert au parc",
        "title_truncated": False,
        "description": "Infos: info@example.com",
        "description_truncated": False,
        "location": "Parc Royal",
        "links": [{"text": "info@example.com", "url": "mailto:info@example.com", "type": "email"}],
    }
    assert results[1]["title_truncated"] is True
    assert len(results[1]["title"]) <= 60
    assert results[1]["location"] == ""


def test_format_events_advanced(formatter):
    """Test advanced mode adds rendered markup."""
    results = format_events(EVENTS, formatter, screen="desktop", advanced=True)

    assert "description_html" in results[0]
    assert results[1]["description_html"].count("text-formatter-list-level-0") == 2


def test_format_command(events_file, config_dir):
    """Test the format command prints JSON."""
    result = invoke_format(events_file, config_dir, "--screen", "mobile")

    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert [event["title_truncated"] for event in output] == [False, True]


def test_format_command_width(events_file, config_dir):
    """Test the screen size is derived from the width."""
    result = invoke_format(events_file, config_dir, "--width", "2560")

    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert output[1]["title"] == LONG_TITLE.strip()
    assert output[1]["title_truncated"] is False


def test_format_command_advanced(events_file, config_dir):
    """Test the advanced flag includes markup."""
    result = invoke_format(events_file, config_dir, "--advanced")

    assert result.exit_code == 0
    assert "description_html" in json.loads(result.stdout)[0]


def test_format_command_unknown_screen(events_file, config_dir):
    """Test an unknown screen size fails."""
    result = invoke_format(events_file, config_dir, "--screen", "watch")
    assert result.exit_code == 1


def test_format_command_invalid_events(tmp_path, config_dir):
    """Test a file without events fails."""
    path = tmp_path / "events.json"
    path.write_text("42", encoding="utf-8")

    result = invoke_format(path, config_dir)
    assert result.exit_code == 1


def test_format_command_missing_file(tmp_path, config_dir):
    """Test a missing events file is a usage error."""
    result = invoke_format(tmp_path / "missing.json", config_dir)
    assert result.exit_code == 2


def test_analyze_command():
    """Test the analyze command prints analysis and suggestions."""
    result = runner.invoke(app, ["analyze", "Concert au parc", "--context", "title", "--container-width", "80"])

    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert output["analysis"]["word_count"] == 3
    assert output["analysis"]["estimated_lines"] == 2
    assert output["suggestions"]["mobile"]["max_length"] == 60
    assert output["suggestions"]["tv"]["break_long_words"] is False
