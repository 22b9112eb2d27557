# -*- coding: utf-8 -*-
"""Configuration loading utilities."""

import os
import re
from pathlib import Path
from typing import Any

import yaml

DEFAULT_TRUNCATION_PRESETS: dict[str, dict[str, int]] = {
    "title": {"mobile": 60, "tablet": 80, "desktop": 120, "tv": 200},
    "description": {"mobile": 150, "tablet": 200, "desktop": 300, "tv": 500},
    "preview": {"mobile": 100, "tablet": 120, "desktop": 150, "tv": 200},
    "default": {"mobile": 100, "tablet": 150, "desktop": 200, "tv": 300},
}


class ConfigLoader:
    """Load and manage configuration files."""

    def __init__(self, config_dir: str | None = None):
        """Initialize config loader.

        Args:
            config_dir: Configuration directory path. Defaults to 'configs'.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "configs"
        self.config_dir = Path(config_dir)
        self._config_cache: dict[str, Any] = {}

    def load_yaml(self, filename: str) -> dict[str, Any]:
        """Load YAML configuration file.

        Args:
            filename: Name of the YAML file to load.

        Returns:
            Dictionary containing configuration data.

        Raises:
            FileNotFoundError: If the configuration file doesn't exist.
            yaml.YAMLError: If the YAML file is invalid.
        """
        filepath = self.config_dir / filename
        if not filepath.exists():
            raise FileNotFoundError(f"Configuration file not found: {filepath}")

        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()
            # Replace environment variables
            content = self._substitute_env_vars(content)
            config = yaml.safe_load(content)
            return config or {}

    def _substitute_env_vars(self, content: str) -> str:
        """Substitute environment variables in YAML content.

        Replaces ${VAR_NAME} with actual environment variable values.

        Args:
            content: YAML file content as string.

        Returns:
            Content with environment variables substituted.
        """

        def replace_var(match: re.Match) -> str:
            var_name = match.group(1)
            return os.environ.get(var_name, match.group(0))

        pattern = r"\$\{([^}]+)\}"
        return re.sub(pattern, replace_var, content)

    def get_config(self, filename: str = "config.yml") -> dict[str, Any]:
        """Get configuration, with caching.

        Args:
            filename: Configuration file name.

        Returns:
            Configuration dictionary.
        """
        if filename not in self._config_cache:
            self._config_cache[filename] = self.load_yaml(filename)
        return self._config_cache[filename]

    def get_cache_settings(self) -> dict[str, Any]:
        """Get formatting cache settings.

        Returns:
            Dictionary with max_size, ttl_seconds and cleanup_interval_seconds.
        """
        return self.get_config().get("cache", {})

    def get_truncation_presets(self) -> dict[str, dict[str, int]]:
        """Get per-context, per-screen maximum lengths.

        Contexts missing from the configuration keep their built-in values.

        Returns:
            Mapping of context name to {screen size: max_length}.
        """
        presets = {name: dict(sizes) for name, sizes in DEFAULT_TRUNCATION_PRESETS.items()}
        for context, sizes in (self.get_config().get("truncation_presets") or {}).items():
            presets.setdefault(context, {}).update(sizes or {})
        return presets

    def get_important_words(self) -> list[str]:
        """Get additional important words to highlight.

        Returns:
            List of extra vocabulary entries (may be empty).
        """
        return list(self.get_config().get("formatter", {}).get("extra_important_words") or [])

