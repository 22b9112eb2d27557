# -*- coding: utf-8 -*-
"""Paragraph, list and line break structure for event descriptions."""

import re
from typing import Any, Callable

from src.processors.base_processor import BaseProcessor
from src.processors.content_cleaner import clean_html, remove_hidden_blocks
from src.processors.highlighter import Highlighter, LineBreak, Span, TextSpan, render_markup
from src.processors.models import (
    AdvancedFormattingOptions,
    EmphasisSpan,
    FormattingOptions,
    ListItem,
    ProcessedContent,
    TextFormatting,
)
from src.processors.patterns import ContentCategory

PARAGRAPH_SPLIT_PATTERN = re.compile(r"\n\s*\n")
LINE_SPLIT_PATTERN = re.compile(r"\r\n|\n")
BULLET_PATTERN = re.compile(r"^[-*•◦▪▫‣⁃]\s+(.+)$")
NUMBERED_PATTERN = re.compile(r"^(\d+|[a-zA-Z])[.)]\s+(.+)$")
LEADING_WHITESPACE_PATTERN = re.compile(r"^\s*")

BULLET_SYMBOL = "•"
DASH_SYMBOL = "–"


def calculate_indent_level(line: str) -> int:
    """Indentation depth: one level per tab or per two spaces."""
    leading = LEADING_WHITESPACE_PATTERN.match(line).group(0)
    tab_count = leading.count("\t")
    return tab_count + (len(leading) - tab_count) // 2


class StructuralFormatter(BaseProcessor):
    """Segments raw text and renders it as class-annotated markup."""

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        clean: Callable[[Any], str] | None = None,
        highlighter: Highlighter | None = None,
    ):
        """Initialize structural formatter.

        Args:
            config: Configuration dictionary, passed to AdvancedFormattingOptions
                by process().
            clean: Cleaning function applied to every paragraph and list item.
            highlighter: Highlighter used when rendering.
        """
        super().__init__(config)
        self.clean = clean or clean_html
        self.highlighter = highlighter or Highlighter()

    def process(self, text: Any) -> TextFormatting:
        return self.format(text, AdvancedFormattingOptions(**self.config))

    def format(self, text: Any, options: AdvancedFormattingOptions | None = None) -> TextFormatting:
        """Extract paragraphs, list items, line breaks and emphasis.

        Args:
            text: Raw description (markup and newlines intact).
            options: Which structures to extract.

        Returns:
            TextFormatting; empty for empty or non-string input.
        """
        options = options or AdvancedFormattingOptions()
        formatting = TextFormatting()
        if not text or not isinstance(text, str):
            return formatting

        # Blocks spanning several lines must go before any line-wise split
        text = remove_hidden_blocks(text)

        if options.format_paragraphs:
            formatting.paragraphs = [
                self.clean(p) for p in self.extract_paragraphs(text, options.max_paragraphs)
            ]

        if options.format_lists:
            formatting.lists = [
                item.model_copy(update={"content": self.clean(item.content)})
                for item in self.extract_lists(text)
            ]

        if options.preserve_line_breaks:
            formatting.line_breaks = self.find_line_breaks(text)

        formatting.emphasis = self.extract_emphasis(self.clean(text))
        return formatting

    @staticmethod
    def extract_paragraphs(text: str, max_paragraphs: int = 10) -> list[str]:
        paragraphs = [p.strip() for p in PARAGRAPH_SPLIT_PATTERN.split(text)]
        return [p for p in paragraphs if p][:max_paragraphs]

    @staticmethod
    def extract_lists(text: str) -> list[ListItem]:
        """Find bulleted and numbered lines.

        Lines that match neither form are skipped.

        Args:
            text: Raw text.

        Returns:
            List items with raw content, indentation level and line number.
        """
        items = []
        for index, line in enumerate(LINE_SPLIT_PATTERN.split(text)):
            stripped = line.strip()

            bullet = BULLET_PATTERN.match(stripped)
            if bullet:
                items.append(
                    ListItem(
                        type="bullet",
                        content=bullet.group(1).strip(),
                        level=calculate_indent_level(line),
                        index=index,
                    )
                )
                continue

            numbered = NUMBERED_PATTERN.match(stripped)
            if numbered:
                items.append(
                    ListItem(
                        type="numbered",
                        content=numbered.group(2).strip(),
                        level=calculate_indent_level(line),
                        index=index,
                    )
                )
        return items

    @staticmethod
    def find_line_breaks(text: str) -> list[int]:
        """Offsets where each line after the first starts."""
        return [match.end() for match in LINE_SPLIT_PATTERN.finditer(text)]

    def extract_emphasis(self, cleaned_text: str) -> list[EmphasisSpan]:
        """Locate the first occurrence of each important word.

        Args:
            cleaned_text: Cleaned text.

        Returns:
            Half-open spans typed 'important'.
        """
        spans = []
        for word in self.highlighter.patterns.find_all(ContentCategory.IMPORTANT, cleaned_text):
            start = cleaned_text.find(word)
            if start != -1:
                spans.append(EmphasisSpan(start=start, end=start + len(word), type="important"))
        return spans

    def render(
        self,
        content: ProcessedContent,
        options: AdvancedFormattingOptions | None = None,
        original_text: str | None = None,
        highlight_options: FormattingOptions | None = None,
    ) -> str:
        """Render processed content as markup.

        Lists come first, followed by paragraphs beyond the list count. Without
        lists, paragraphs are wrapped in <p>. Simple multi-line content (no
        list, at most one paragraph) keeps its line breaks.

        Args:
            content: Output of process_advanced_content.
            options: Rendering options (spacing, list style, bullets).
            original_text: Raw text, needed to keep line breaks.
            highlight_options: Highlighting options for every text segment.

        Returns:
            Markup string.
        """
        options = options or AdvancedFormattingOptions()
        formatting = content.formatting
        spacing_class = f"text-formatter-paragraph-{options.paragraph_spacing}"

        def highlight(text: str) -> str:
            return self.highlighter.highlight(text, highlight_options)

        def paragraphs_markup(paragraphs: list[str]) -> str:
            return "".join(f'<p class="{spacing_class}">{highlight(p)}</p>' for p in paragraphs)

        if (
            original_text
            and formatting.line_breaks
            and len(formatting.paragraphs) <= 1
            and not formatting.lists
        ):
            lines = self._line_spans(remove_hidden_blocks(original_text))
            return render_markup(self.highlighter.build_spans(lines, highlight_options))

        if formatting.lists:
            markup = self.render_lists(formatting.lists, options, highlight_options)
            if len(formatting.paragraphs) > len(formatting.lists):
                markup += paragraphs_markup(formatting.paragraphs[len(formatting.lists):])
            return markup

        if len(formatting.paragraphs) > 1:
            return paragraphs_markup(formatting.paragraphs)

        if len(formatting.paragraphs) == 1:
            return highlight(formatting.paragraphs[0])

        return highlight(content.clean_text)

    def _line_spans(self, original_text: str) -> list[Span]:
        spans: list[Span] = []
        for i, line in enumerate(LINE_SPLIT_PATTERN.split(original_text)):
            if i > 0:
                spans.append(LineBreak())
            cleaned = self.clean(line)
            if cleaned:
                spans.append(TextSpan(text=cleaned))
        return spans

    def render_lists(
        self,
        items: list[ListItem],
        options: AdvancedFormattingOptions,
        highlight_options: FormattingOptions | None = None,
    ) -> str:
        if not items:
            return ""

        symbol = DASH_SYMBOL if options.list_style == "dashes" else BULLET_SYMBOL
        list_class = f"text-formatter-list text-formatter-list-{options.list_style}"

        rendered = []
        for item in items:
            bullet = ""
            if item.type == "bullet" and options.add_visual_bullets:
                bullet = f'<span class="text-formatter-bullet">{symbol}</span>'
            body = self.highlighter.highlight(item.content, highlight_options)
            rendered.append(
                f'<div class="{list_class} text-formatter-list-level-{item.level}">'
                f'{bullet}<span class="text-formatter-list-content">{body}</span></div>'
            )
        return "".join(rendered)

    def get_processor_name(self) -> str:
        return "StructuralFormatter"
