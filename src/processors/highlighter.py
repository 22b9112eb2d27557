# -*- coding: utf-8 -*-
"""Special content highlighting.

Highlighting builds an ordered list of spans instead of editing a markup
string. Passes run in a fixed order (url, email, phone, date, time, important
word) and each pass only splits plain text spans, so the first category to
claim a piece of text wins and nothing is wrapped twice. ``render_markup``
turns spans into the HTML dialect consumed by the display layer; other
renderers can walk the spans directly.
"""

import re
from typing import Callable, Iterable, Union

from pydantic import BaseModel

from src.processors.models import FormattingOptions
from src.processors.patterns import DEFAULT_PATTERNS, ContentCategory, PatternLibrary
from src.processors.special_content import phone_to_tel

OPEN_TAG_PATTERN = re.compile(r"<[^/>][^>]*>")
CLOSE_TAG_PATTERN = re.compile(r"</[^>]+>")

PASS_ORDER: tuple[tuple[ContentCategory, str], ...] = (
    (ContentCategory.URL, "highlight_urls"),
    (ContentCategory.EMAIL, "highlight_emails"),
    (ContentCategory.PHONE, "highlight_phones"),
    (ContentCategory.DATE, "highlight_dates"),
    (ContentCategory.TIME, "highlight_times"),
    (ContentCategory.IMPORTANT, "highlight_important_words"),
)


class TextSpan(BaseModel):
    text: str

    model_config = {"frozen": True}


class ElementSpan(BaseModel):
    """Highlighted piece of text, optionally a link."""

    css_class: str
    content: str
    category: ContentCategory
    href: str | None = None
    external: bool = False

    model_config = {"frozen": True}


class LineBreak(BaseModel):
    model_config = {"frozen": True}


Span = Union[TextSpan, ElementSpan, LineBreak]


def _inside_markup(prefix: str) -> bool:
    """Check whether raw markup before a match leaves a tag unclosed."""
    return len(OPEN_TAG_PATTERN.findall(prefix)) > len(CLOSE_TAG_PATTERN.findall(prefix))


class Highlighter:
    """Wraps special content found in plain text."""

    def __init__(self, patterns: PatternLibrary | None = None):
        """Initialize highlighter.

        Args:
            patterns: Pattern library, defaults to the built-in one.
        """
        self.patterns = patterns or DEFAULT_PATTERNS

    def build_spans(
        self,
        text: str | Iterable[Span],
        options: FormattingOptions | None = None,
    ) -> list[Span]:
        """Split text into plain and highlighted spans.

        Args:
            text: Plain text, or spans from an earlier step (e.g. lines joined
                by LineBreak).
            options: Categories to highlight and whether to emit links.

        Returns:
            Ordered list of spans.
        """
        options = options or FormattingOptions()
        spans: list[Span] = [TextSpan(text=text)] if isinstance(text, str) else list(text)

        for category, flag in PASS_ORDER:
            if getattr(options, flag):
                spans = self._apply_pass(spans, category, options.create_clickable_links)

        return spans

    def _apply_pass(self, spans: list[Span], category: ContentCategory, clickable: bool) -> list[Span]:
        pattern = self.patterns.get(category)
        make_element = self._element_factory(category, clickable)
        result: list[Span] = []

        for span in spans:
            if not isinstance(span, TextSpan) or not span.text:
                result.append(span)
                continue

            text = span.text
            cursor = 0
            for match in pattern.finditer(text):
                if _inside_markup(text[: match.start()]):
                    continue
                if match.start() > cursor:
                    result.append(TextSpan(text=text[cursor : match.start()]))
                result.append(make_element(match.group(0)))
                cursor = match.end()
            if cursor < len(text):
                result.append(TextSpan(text=text[cursor:]))

        return result

    def _element_factory(self, category: ContentCategory, clickable: bool) -> Callable[[str], ElementSpan]:
        css_class = self.patterns.css_class(category)

        def make_element(match: str) -> ElementSpan:
            href = None
            external = False
            if clickable:
                if category is ContentCategory.URL:
                    href, external = match, True
                elif category is ContentCategory.EMAIL:
                    href = f"mailto:{match}"
                elif category is ContentCategory.PHONE:
                    href = f"tel:{phone_to_tel(match)}"
            return ElementSpan(css_class=css_class, content=match, category=category, href=href, external=external)

        return make_element

    def highlight(self, text: str, options: FormattingOptions | None = None) -> str:
        """Highlight text and render it as markup.

        Args:
            text: Plain text.
            options: Highlighting options.

        Returns:
            Markup string ("" for empty input).
        """
        if not text or not isinstance(text, str):
            return ""
        return render_markup(self.build_spans(text, options))


def render_markup(spans: Iterable[Span]) -> str:
    """Render spans as the display-layer HTML dialect.

    Text is emitted as-is; it is expected to be cleaned text.

    Args:
        spans: Spans produced by Highlighter.build_spans.

    Returns:
        Markup string.
    """
    parts = []
    for span in spans:
        if isinstance(span, TextSpan):
            parts.append(span.text)
        elif isinstance(span, LineBreak):
            parts.append("<br>")
        elif span.href is None:
            parts.append(f'<span class="{span.css_class}">{span.content}</span>')
        elif span.external:
            parts.append(
                f'<a href="{span.href}" class="{span.css_class}" '
                f'target="_blank" rel="noopener noreferrer">{span.content}</a>'
            )
        else:
            parts.append(f'<a href="{span.href}" class="{span.css_class}">{span.content}</a>')
    return "".join(parts)
