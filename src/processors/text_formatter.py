# -*- coding: utf-8 -*-
"""Text formatting facade for event titles and descriptions."""

import json
import math
import re
from typing import Any

from src.processors.content_cleaner import ContentCleaner
from src.processors.highlighter import Highlighter, Span
from src.processors.models import (
    AdvancedFormattingOptions,
    ExtractedLink,
    FormattedText,
    FormattingOptions,
    ProcessedContent,
    SpecialContent,
    TextFormatterOptions,
    TextOverflowAnalysis,
    TruncationResult,
    TruncationSuggestions,
)
from src.processors.processing_context import ProcessingContext
from src.processors.special_content import SpecialContentExtractor
from src.processors.structural_formatter import StructuralFormatter
from src.processors.truncation import TruncationEngine
from src.storages.formatting_cache import hash_string
from src.utils.config_loader import DEFAULT_TRUNCATION_PRESETS
from src.utils.logger import get_logger

TITLE_DEFAULTS = TextFormatterOptions(
    max_length=120, preserve_words=True, show_ellipsis=True, break_long_words=False
)
DESCRIPTION_DEFAULTS = TextFormatterOptions(
    max_length=500, preserve_words=True, show_ellipsis=True, break_long_words=True
)

LONG_WORD_LENGTH = 20
DEFAULT_CHARS_PER_LINE = 80
PIXELS_PER_CHAR = 8
BREAK_POINT_PATTERN = re.compile(r"[\s.,;:!?-]")
SCREEN_SIZES = ("mobile", "tablet", "desktop", "tv")


def _resolve_options(options: TextFormatterOptions | dict | None, defaults: TextFormatterOptions) -> TextFormatterOptions:
    if isinstance(options, dict):
        options = TextFormatterOptions(**options)
    if options is None:
        return defaults
    overrides = {k: v for k, v in options.model_dump().items() if v is not None}
    return defaults.model_copy(update=overrides)


def _as_model(options: Any, model: type) -> Any:
    if options is None:
        return model()
    if isinstance(options, dict):
        return model(**options)
    return options


def _text_key(prefix: str, text: Any) -> str:
    text = text if isinstance(text, str) else ""
    return f"{prefix}_{len(text)}_{hash_string(text)}"


class TextFormatter:
    """Cleans, analyzes, truncates and highlights event text.

    All shared state (cache, lazy processor, patterns, configuration) comes
    from the ProcessingContext, so independent formatters never share results
    unless they share a context.
    """

    def __init__(self, context: ProcessingContext | None = None):
        """Initialize text formatter.

        Args:
            context: Shared processing context; a default one is created if
                omitted.
        """
        self.context = context or ProcessingContext()
        self.logger = get_logger(__name__)

        self.cleaner = ContentCleaner(self.context.formatter_config)
        self.extractor = SpecialContentExtractor(patterns=self.context.patterns)
        self.truncator = TruncationEngine(patterns=self.context.patterns)
        self.highlighter = Highlighter(self.context.patterns)
        self.structural_formatter = StructuralFormatter(
            clean=self.clean_html_content,
            highlighter=self.highlighter,
        )

        cache = self.context.cache
        self._memoized_clean = cache.memoize(
            self.cleaner.process,
            lambda text: _text_key("clean", text),
        )
        self._memoized_extract = cache.memoize(
            self.extractor.extract,
            lambda text: _text_key("special", text),
        )
        self._memoized_truncate = cache.memoize(
            self._truncate,
            lambda text, options: (
                f"{_text_key('truncate', text)}_{json.dumps(options.model_dump(), sort_keys=True)}"
            ),
        )

    def _truncate(self, text: str, options: TextFormatterOptions) -> TruncationResult:
        return self.truncator.truncate(
            text,
            options.max_length,
            preserve_words=options.preserve_words,
            show_ellipsis=options.show_ellipsis,
            break_long_words=options.break_long_words,
        )

    def _format(self, text: Any, options: TextFormatterOptions) -> FormattedText:
        if not text or not isinstance(text, str):
            return FormattedText()

        cleaned = self._memoized_clean(text)
        special_content = self._memoized_extract(cleaned)
        result = self._memoized_truncate(cleaned, options)

        return FormattedText(
            content=result.truncated_text,
            is_truncated=result.is_truncated,
            original_length=len(cleaned),
            has_special_content=special_content.has_any(),
        )

    def format_title(self, text: Any, options: TextFormatterOptions | dict | None = None) -> FormattedText:
        """Format a title: clean and truncate on word boundaries.

        Args:
            text: Raw title.
            options: Truncation options (defaults: 120 characters, keep
                words, ellipsis, no long-word breaking).

        Returns:
            FormattedText; empty for non-string input.
        """
        self.context.increment_stat("titles_formatted")
        return self._format(text, _resolve_options(options, TITLE_DEFAULTS))

    def format_description(self, text: Any, options: TextFormatterOptions | dict | None = None) -> FormattedText:
        """Format a description: clean and truncate, breaking long words.

        Args:
            text: Raw description.
            options: Truncation options (defaults: 500 characters, keep
                words, ellipsis, long-word breaking).

        Returns:
            FormattedText; empty for non-string input.
        """
        self.context.increment_stat("descriptions_formatted")
        return self._format(text, _resolve_options(options, DESCRIPTION_DEFAULTS))

    def clean_html_content(self, text: Any) -> str:
        if not text or not isinstance(text, str):
            return ""
        return self._memoized_clean(text)

    def extract_special_content(self, text: Any) -> SpecialContent:
        if not text or not isinstance(text, str):
            return SpecialContent()
        return self._memoized_extract(text)

    def build_highlight_spans(self, text: Any, options: FormattingOptions | dict | None = None) -> list[Span]:
        """Split text into plain and highlighted spans.

        Args:
            text: Cleaned text.
            options: Highlighting options.

        Returns:
            List of spans; empty for empty input.
        """
        if not text or not isinstance(text, str):
            return []
        return self.highlighter.build_spans(text, _as_model(options, FormattingOptions))

    def format_with_highlights(self, text: Any, options: FormattingOptions | dict | None = None) -> str:
        """Wrap special content of text in class-annotated markup.

        Args:
            text: Cleaned text.
            options: Highlighting options.

        Returns:
            Markup string; empty for empty input.
        """
        if not text or not isinstance(text, str):
            return ""
        return self.highlighter.highlight(text, _as_model(options, FormattingOptions))

    def get_formatted_html(self, text: Any, options: FormattingOptions | dict | None = None) -> str:
        return self.format_with_highlights(self.clean_html_content(text), options)

    def extract_links(self, text: Any) -> list[ExtractedLink]:
        return self.extractor.extract_links(text)

    def process_advanced_content(
        self,
        text: Any,
        options: AdvancedFormattingOptions | dict | None = None,
    ) -> ProcessedContent:
        """Analyze a description: cleaned text, links, dates, contacts, images, structure.

        Args:
            text: Raw description.
            options: Structural formatting options.

        Returns:
            ProcessedContent; empty for non-string input.
        """
        if not text or not isinstance(text, str):
            return ProcessedContent()

        options = _as_model(options, AdvancedFormattingOptions)
        self.context.increment_stat("advanced_processed")
        cleaned = self.clean_html_content(text)

        return ProcessedContent(
            clean_text=cleaned,
            links=self.extractor.extract_links(cleaned),
            dates=self.extractor.extract_dates(cleaned),
            contacts=self.extractor.extract_contacts(cleaned),
            images=self.extractor.extract_images(text),
            formatting=self.structural_formatter.format(text, options),
        )

    async def process_advanced_content_lazy(
        self,
        text: Any,
        options: AdvancedFormattingOptions | dict | None = None,
    ) -> ProcessedContent:
        """Deferred process_advanced_content, shared across concurrent callers.

        Args:
            text: Raw description.
            options: Structural formatting options.

        Returns:
            ProcessedContent.
        """
        options = _as_model(options, AdvancedFormattingOptions)
        raw = text if isinstance(text, str) else ""
        key = f"advanced_{hash_string(raw)}_{json.dumps(options.model_dump(), sort_keys=True)}"

        return await self.context.lazy_processor.process_lazy(
            key,
            lambda: self.process_advanced_content(text, options),
            "normal",
        )

    def format_advanced_description(
        self,
        text: Any,
        options: AdvancedFormattingOptions | dict | None = None,
        highlight_options: FormattingOptions | dict | None = None,
    ) -> str:
        """Render a description with paragraphs, lists and highlights.

        Args:
            text: Raw description.
            options: Structural formatting options.
            highlight_options: Highlighting options.

        Returns:
            Markup string.
        """
        options = _as_model(options, AdvancedFormattingOptions)
        content = self.process_advanced_content(text, options)
        return self.structural_formatter.render(
            content,
            options,
            original_text=text if isinstance(text, str) else None,
            highlight_options=_as_model(highlight_options, FormattingOptions),
        )

    def has_special_content_patterns(self, text: Any) -> bool:
        return self.extractor.has_special_content_patterns(text)

    def analyze_text_overflow(
        self,
        text: Any,
        max_length: int | None = None,
        container_width: int | None = None,
    ) -> TextOverflowAnalysis:
        """Estimate how text will overflow its container.

        Args:
            text: Raw text.
            max_length: Character budget; overflow is only reported when set.
            container_width: Container width in pixels (8 px per character).

        Returns:
            TextOverflowAnalysis.
        """
        if not text or not isinstance(text, str):
            return TextOverflowAnalysis()

        cleaned = self.clean_html_content(text)
        words = cleaned.split()
        chars_per_line = (container_width // PIXELS_PER_CHAR if container_width else 0) or DEFAULT_CHARS_PER_LINE

        return TextOverflowAnalysis(
            has_overflow=bool(max_length) and len(cleaned) > max_length,
            estimated_lines=math.ceil(len(cleaned) / chars_per_line),
            word_count=len(words),
            character_count=len(cleaned),
            has_long_words=any(len(word) > LONG_WORD_LENGTH for word in words),
            has_special_content=self.extract_special_content(cleaned).has_any(),
            break_points=[m.start() for m in BREAK_POINT_PATTERN.finditer(cleaned)],
        )

    def get_truncation_suggestions(self, text: Any, context: str = "default") -> TruncationSuggestions:
        """Suggest truncation options per screen size.

        Args:
            text: Raw text.
            context: 'title', 'description', 'preview' or any other name for
                the generic preset.

        Returns:
            TruncationSuggestions; long words enable long-word breaking.
        """
        analysis = self.analyze_text_overflow(text)
        presets = self.context.truncation_presets
        lengths = {
            **DEFAULT_TRUNCATION_PRESETS["default"],
            **(presets.get(context) or presets.get("default") or {}),
        }

        return TruncationSuggestions(
            **{
                screen: TextFormatterOptions(
                    max_length=lengths[screen],
                    preserve_words=True,
                    show_ellipsis=True,
                    break_long_words=analysis.has_long_words,
                )
                for screen in SCREEN_SIZES
            }
        )

    def destroy(self) -> None:
        """Release the shared cache and lazy processor."""
        self.logger.debug("Destroying text formatter resources")
        self.context.destroy()
