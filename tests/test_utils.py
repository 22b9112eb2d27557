# -*- coding: utf-8 -*-
"""Tests for utils module."""

import sys

import pytest
import yaml
from loguru import logger as loguru_logger

from src.utils.config_loader import DEFAULT_TRUNCATION_PRESETS, ConfigLoader
from src.utils.logger import get_logger, setup_logger


@pytest.fixture
def config_dir(tmp_path):
    """Temporary config directory."""
    config_path = tmp_path / "configs"
    config_path.mkdir()
    return config_path


@pytest.fixture
def restore_logger():
    """Restore the default loguru handler after a test."""
    yield
    loguru_logger.remove()
    loguru_logger.add(sys.stderr)


def test_config_loader_load_yaml(config_dir):
    """Test loading YAML configuration."""
    config_file = config_dir / "test.yml"
    config_file.write_text("key: value\nnumber: 42")

    loader = ConfigLoader(config_dir=str(config_dir))
    config = loader.load_yaml("test.yml")

    assert config["key"] == "value"
    assert config["number"] == 42


def test_config_loader_missing_file(config_dir):
    """Test loading non-existent file."""
    loader = ConfigLoader(config_dir=str(config_dir))

    with pytest.raises(FileNotFoundError):
        loader.load_yaml("missing.yml")


def test_config_loader_invalid_yaml(config_dir):
    """Test invalid YAML raises a YAML error."""
    (config_dir / "broken.yml").write_text("key: [unclosed")
    loader = ConfigLoader(config_dir=str(config_dir))

    with pytest.raises(yaml.YAMLError):
        loader.load_yaml("broken.yml")


def test_config_loader_empty_file(config_dir):
    """Test an empty file yields an empty configuration."""
    (config_dir / "empty.yml").write_text("")
    loader = ConfigLoader(config_dir=str(config_dir))

    assert loader.load_yaml("empty.yml") == {}


def test_config_loader_env_substitution(config_dir, monkeypatch):
    """Test environment variable substitution."""
    monkeypatch.setenv("TEST_VAR", "substituted_value")
    config_file = config_dir / "test.yml"
    config_file.write_text("key: ${TEST_VAR}")

    loader = ConfigLoader(config_dir=str(config_dir))
    config = loader.load_yaml("test.yml")

    assert config["key"] == "substituted_value"


def test_config_loader_env_missing(config_dir):
    """Test missing environment variable."""
    config_file = config_dir / "test.yml"
    config_file.write_text("key: ${MISSING_VAR}")

    loader = ConfigLoader(config_dir=str(config_dir))
    config = loader.load_yaml("test.yml")

    # Should keep original if env var not found
    assert config["key"] == "${MISSING_VAR}"


def test_config_loader_get_config_caching(config_dir):
    """Test config caching."""
    config_file = config_dir / "test.yml"
    config_file.write_text("key: value")

    loader = ConfigLoader(config_dir=str(config_dir))
    config1 = loader.get_config("test.yml")
    config2 = loader.get_config("test.yml")

    assert config1 == config2
    assert config1 is config2  # Same object (cached)


def test_config_loader_get_cache_settings(config_dir):
    """Test getting cache settings."""
    (config_dir / "config.yml").write_text("cache:\n  max_size: 20\n  ttl_seconds: 30")
    loader = ConfigLoader(config_dir=str(config_dir))

    assert loader.get_cache_settings() == {"max_size": 20, "ttl_seconds": 30}


def test_config_loader_get_truncation_presets(config_dir):
    """Test presets merge over the built-in values."""
    (config_dir / "config.yml").write_text(
        "truncation_presets:\n  title:\n    tv: 250\n  caption:\n    mobile: 30\n"
    )
    loader = ConfigLoader(config_dir=str(config_dir))
    presets = loader.get_truncation_presets()

    assert presets["title"] == {"mobile": 60, "tablet": 80, "desktop": 120, "tv": 250}
    assert presets["description"] == DEFAULT_TRUNCATION_PRESETS["description"]
    assert presets["caption"] == {"mobile": 30}
    # Built-in presets are not modified
    assert DEFAULT_TRUNCATION_PRESETS["title"]["tv"] == 200


def test_config_loader_get_important_words(config_dir):
    """Test getting extra important words."""
    (config_dir / "config.yml").write_text("formatter:\n  extra_important_words: [complet, gratuit]")
    loader = ConfigLoader(config_dir=str(config_dir))

    assert loader.get_important_words() == ["complet", "gratuit"]


def test_config_loader_defaults_when_sections_missing(config_dir):
    """Test missing sections fall back to defaults."""
    (config_dir / "config.yml").write_text("other: 1")
    loader = ConfigLoader(config_dir=str(config_dir))

    assert loader.get_cache_settings() == {}
    assert loader.get_important_words() == []
    assert loader.get_truncation_presets() == DEFAULT_TRUNCATION_PRESETS


def test_config_loader_bundled_config():
    """Test the bundled configuration loads."""
    config = ConfigLoader().get_config()

    assert config["cache"]["max_size"] == 1000
    assert config["truncation_presets"]["title"]["desktop"] == 120


def test_logger_setup(restore_logger):
    """Test logger setup writes bound name and message to the sink."""
    messages = []
    logger = setup_logger("test_logger", log_level="DEBUG", sink=messages.append)

    logger.debug("Test message")

    assert len(messages) == 1
    assert messages[0].record["extra"]["name"] == "test_logger"
    assert "Test message" in messages[0]


def test_logger_level_filters(restore_logger):
    """Test messages below the configured level are dropped."""
    messages = []
    logger = setup_logger("test_logger", log_level="warning", sink=messages.append)

    logger.info("hidden")
    logger.warning("shown")

    assert len(messages) == 1
    assert "shown" in messages[0]


def test_logger_setup_with_file(tmp_path, restore_logger):
    """Test logger setup with file."""
    log_dir = tmp_path / "logs"
    log_file = log_dir / "test.log"
    logger = setup_logger("test_logger_file", log_file="test.log", log_dir=str(log_dir), sink=lambda _: None)

    logger.info("Test message")
    # Removing handlers flushes and closes the file sink
    loguru_logger.remove()

    assert log_file.exists()
    assert "Test message" in log_file.read_text(encoding="utf-8")


def test_logger_get_logger(restore_logger):
    """Test bound loggers tag records with their name."""
    messages = []
    setup_logger("root", sink=messages.append)

    get_logger("src.test.module").info("hello")

    assert messages[0].record["extra"]["name"] == "src.test.module"
    assert "hello" in messages[0]
