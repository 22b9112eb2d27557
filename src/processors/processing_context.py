# -*- coding: utf-8 -*-
"""Processing context for sharing resources across formatters."""

from typing import Any

from src.processors.lazy_processor import LazyProcessor
from src.processors.patterns import DEFAULT_PATTERNS, PatternLibrary
from src.storages.formatting_cache import FormattingCache
from src.utils.config_loader import DEFAULT_TRUNCATION_PRESETS, ConfigLoader


class ProcessingContext:
    """Shared context for formatters.

    This context owns the resources formatters share (cache, lazy processor,
    pattern library, configuration) so that nothing lives in module-level
    singletons.

    Attributes:
        cache: FormattingCache for memoized cleaning, extraction and truncation.
        lazy_processor: LazyProcessor for deferred full-document processing.
        patterns: PatternLibrary used for extraction and highlighting.
        config: Global configuration dictionary.
        stats: Statistics dictionary for tracking processing metrics.
    """

    def __init__(
        self,
        cache: FormattingCache | None = None,
        lazy_processor: LazyProcessor | None = None,
        patterns: PatternLibrary | None = None,
        config: dict[str, Any] | None = None,
        stats: dict[str, int] | None = None,
    ):
        """Initialize processing context.

        Args:
            cache: Formatting cache, a default one is created if omitted.
            lazy_processor: Lazy processor, a default one is created if omitted.
            patterns: Pattern library, defaults to the built-in one.
            config: Global configuration dictionary.
            stats: Statistics dictionary for tracking metrics.
        """
        self.cache = cache or FormattingCache()
        self.lazy_processor = lazy_processor or LazyProcessor()
        self.patterns = patterns or DEFAULT_PATTERNS
        self.config = config or {}
        self.stats = stats or {}

    @classmethod
    def from_config(cls, loader: ConfigLoader | None = None, **kwargs) -> "ProcessingContext":
        """Build a context from configs/config.yml.

        Args:
            loader: Configuration loader, defaults to one reading configs/.
            **kwargs: Extra arguments for FormattingCache (e.g. clock).

        Returns:
            ProcessingContext wired from configuration.
        """
        loader = loader or ConfigLoader()
        config = loader.get_config()
        extra_words = loader.get_important_words()

        return cls(
            cache=FormattingCache.from_settings(loader.get_cache_settings(), **kwargs),
            lazy_processor=LazyProcessor(
                enabled=(config.get("lazy_processor") or {}).get("enabled", True)
            ),
            patterns=PatternLibrary(extra_important_words=extra_words) if extra_words else None,
            config={**config, "truncation_presets": loader.get_truncation_presets()},
        )

    @property
    def formatter_config(self) -> dict[str, Any]:
        return self.config.get("formatter") or {}

    @property
    def truncation_presets(self) -> dict[str, dict[str, int]]:
        return self.config.get("truncation_presets") or DEFAULT_TRUNCATION_PRESETS

    def get_stat(self, key: str, default: int = 0) -> int:
        """Get a statistic value.

        Args:
            key: Statistic key.
            default: Default value if key not found.

        Returns:
            Statistic value.
        """
        return self.stats.get(key, default)

    def increment_stat(self, key: str, amount: int = 1) -> None:
        """Increment a statistic value.

        Args:
            key: Statistic key.
            amount: Amount to increment by.
        """
        self.stats[key] = self.stats.get(key, 0) + amount

    def destroy(self) -> None:
        """Release the cache timer and forget lazily computed results."""
        self.cache.destroy()
        self.lazy_processor.clear()
