# -*- coding: utf-8 -*-
"""Base processor interface."""

from abc import ABC, abstractmethod
from typing import Any


class BaseProcessor(ABC):
    """Abstract base class for text processing stages.

    Stages are pure functions of their input and configuration. They accept any
    object as input and fall back to an empty result for non-string values
    instead of raising.
    """

    def __init__(self, config: dict[str, Any] | None = None):
        """Initialize processor.

        Args:
            config: Processor-specific configuration dictionary.
        """
        self.config = config or {}

    @abstractmethod
    def process(self, text: Any) -> Any:  # pragma: no cover
        """Process a single piece of text.

        Args:
            text: Raw or cleaned text.

        Returns:
            Stage-specific result.
        """
        pass

    @abstractmethod
    def get_processor_name(self) -> str:  # pragma: no cover
        """Get the name of this processor.

        Returns:
            Processor name string.
        """
        pass
