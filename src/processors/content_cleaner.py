# -*- coding: utf-8 -*-
"""Content cleaning utilities."""

import re
from html import unescape
from typing import Any

from src.processors.base_processor import BaseProcessor

SCRIPT_STYLE_PATTERN = re.compile(r"<(script|style)[^>]*>.*?</(script|style)>", re.IGNORECASE | re.DOTALL)
COMMENT_PATTERN = re.compile(r"<!--.*?-->", re.DOTALL)
TAG_PATTERN = re.compile(r"<[^>]*>")
WHITESPACE_PATTERN = re.compile(r"\s+")

# Decoded by literal replacement before tags are stripped
BASIC_ENTITIES: tuple[tuple[str, str], ...] = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&apos;", "'"),
)

# Used when full entity decoding is turned off
ACCENTED_ENTITIES: tuple[tuple[str, str], ...] = (
    ("&eacute;", "é"),
    ("&egrave;", "è"),
    ("&agrave;", "à"),
    ("&ccedil;", "ç"),
    ("&ocirc;", "ô"),
    ("&ecirc;", "ê"),
    ("&uuml;", "ü"),
    ("&ouml;", "ö"),
    ("&auml;", "ä"),
)

CUSTOM_MARKERS: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"\+\+\+([^+]+)\+\+\+"), r"\1"),  # bold
    (re.compile(r"___([^_]+)___"), r"\1"),  # italic
    (re.compile(r"~~~([^~]+)~~~"), r"\1"),  # underline
    (re.compile(r"\|\|\|"), " "),  # line break
    (re.compile(r"==="), " "),  # separator
)


def remove_hidden_blocks(text: str) -> str:
    """Drop script/style blocks and comments together with their content."""
    text = SCRIPT_STYLE_PATTERN.sub("", text)
    return COMMENT_PATTERN.sub("", text)


def clean_html(html_content: Any, full_entity_decoding: bool = True) -> str:
    """Remove HTML tags and decode HTML entities.

    Tags produced by entity decoding are stripped too. Entities escaped more
    than once are decoded one level per call.

    Args:
        html_content: HTML content string. Non-string input yields "".
        full_entity_decoding: Decode every named/numeric entity left after
            stripping. When False only common accented Latin entities are decoded.

    Returns:
        Cleaned text content.
    """
    if not html_content or not isinstance(html_content, str):
        return ""

    text = remove_hidden_blocks(html_content)

    for entity, char in BASIC_ENTITIES:
        text = text.replace(entity, char)

    text = TAG_PATTERN.sub("", text)

    if full_entity_decoding:
        # Numeric entities may decode to tags
        text = TAG_PATTERN.sub("", unescape(text))
    else:
        for entity, char in ACCENTED_ENTITIES:
            text = text.replace(entity, char)

    # Decoded entities may yield non-breaking spaces, so collapse last
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def remove_custom_formatting(text: Any) -> str:
    """Strip lightweight markup markers for plain previews.

    Handles +++bold+++, ___italic___, ~~~underline~~~, ||| line breaks and
    === separators.

    Args:
        text: Text possibly containing markers.

    Returns:
        Text without markers, whitespace collapsed.
    """
    if not text or not isinstance(text, str):
        return ""

    for pattern, replacement in CUSTOM_MARKERS:
        text = pattern.sub(replacement, text)

    return WHITESPACE_PATTERN.sub(" ", text).strip()


def has_custom_formatting(text: Any) -> bool:
    """Check if text contains lightweight markup markers.

    Args:
        text: Text to check.

    Returns:
        True if any marker is present.
    """
    if not text or not isinstance(text, str):
        return False

    return any(pattern.search(text) for pattern, _ in CUSTOM_MARKERS)


def get_clean_preview(text: Any, max_length: int = 120) -> str:
    """Get a marker-free preview with a hard length limit.

    Args:
        text: Source text.
        max_length: Maximum length including the ellipsis.

    Returns:
        Preview text.
    """
    clean_text = remove_custom_formatting(text)

    if len(clean_text) <= max_length:
        return clean_text

    return clean_text[: max(max_length - 3, 0)] + "..."


class ContentCleaner(BaseProcessor):
    """Processor turning raw markup into cleaned plain text."""

    def __init__(self, config: dict[str, Any] | None = None):
        """Initialize content cleaner.

        Args:
            config: Configuration dictionary with:
                - full_entity_decoding: bool (default: True)
        """
        super().__init__(config)
        self.full_entity_decoding = self.config.get("full_entity_decoding", True)

    def process(self, text: Any) -> str:
        """Clean raw text.

        Args:
            text: Raw text, possibly with markup.

        Returns:
            Cleaned text.
        """
        return clean_html(text, full_entity_decoding=self.full_entity_decoding)

    def get_processor_name(self) -> str:
        return "ContentCleaner"
