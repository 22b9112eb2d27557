# -*- coding: utf-8 -*-
"""Length-bounded truncation that keeps words, URLs and emails readable.

Budgets are in characters. The ellipsis counts against the budget, so the
result never exceeds ``max_length`` except when word preservation has to keep
an unbreakable first word whole (the result is never empty while the input
still has a token) or the budget cannot hold a character plus a hyphen.
"""

import re
from enum import Enum
from typing import Any

from src.processors.base_processor import BaseProcessor
from src.processors.models import TruncationResult
from src.processors.patterns import (
    DEFAULT_PATTERNS,
    EMAIL_PATTERN,
    URL_PATTERN,
    ContentCategory,
    PatternLibrary,
)

ELLIPSIS = "..."
HYPHEN = "-"

# Minimum room (after the separating space) before an overflowing word is split
MIN_BREAK_SPACE = 10
# Character mode looks back this far for a space or punctuation mark
LOOKBACK_WINDOW = 20
# Syllable search window, counted back from the hyphen position
SYLLABLE_WINDOW = 5

WORD_PATTERN = re.compile(r"\S+")
SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
URL_SEPARATORS = ("/", "?", "&", "=")
PUNCTUATION = ".,;:!?"
VOWELS = frozenset("aeiouAEIOU")
CONSONANTS = frozenset("bcdfghjklmnpqrstvwxyzBCDFGHJKLMNPQRSTVWXYZ")


class WordKind(Enum):
    URL = "url"
    EMAIL = "email"
    GENERIC = "generic"


def classify_word(word: str) -> WordKind:
    """Pick the hyphenation strategy for a token."""
    if URL_PATTERN.search(word):
        return WordKind.URL
    if EMAIL_PATTERN.search(word):
        return WordKind.EMAIL
    return WordKind.GENERIC


def break_long_word(word: str, max_length: int, kind: WordKind | None = None) -> str:
    """Break a token so it fits ``max_length`` characters, marker included.

    Args:
        word: Token without whitespace.
        max_length: Room available for the token.
        kind: Token shape, detected when omitted.

    Returns:
        The token itself if it fits, else a prefix ending with a hyphen.
    """
    if len(word) <= max_length:
        return word

    kind = kind or classify_word(word)
    if kind is WordKind.URL:
        broken = _break_url(word, max_length)
    elif kind is WordKind.EMAIL:
        broken = _break_email(word, max_length)
    else:
        broken = None

    return broken if broken is not None else _break_generic(word, max_length)


def _break_url(url: str, max_length: int) -> str | None:
    scheme = SCHEME_PATTERN.match(url)
    if scheme and len(scheme.group(0)) < max_length - 5:
        # Scheme stays whole; keep as much of the host/path as fits
        return url[: max_length - 1] + HYPHEN

    limit = max_length - 1
    if limit <= 0:
        return None
    for separator in URL_SEPARATORS:
        index = url.rfind(separator, 0, limit)
        if index >= MIN_BREAK_SPACE:
            return url[: index + 1] + HYPHEN

    return None


def _break_email(email: str, max_length: int) -> str | None:
    at_index = email.find("@")
    limit = max_length - 1
    if limit <= 0:
        return None
    if 0 < at_index < limit:
        return email[:limit] + HYPHEN

    last_dot = email.rfind(".", 0, limit)
    if last_dot > at_index >= 0:
        return email[: last_dot + 1] + HYPHEN

    return None


def _break_generic(word: str, max_length: int) -> str:
    break_point = max(max_length - 1, 1)

    # Crude syllable boundary: a vowel followed by a consonant. Keeping
    # word[:i + 1] plus the hyphen must fit, so i stops at break_point - 1.
    for i in range(min(break_point - 1, len(word) - 2), max(break_point - SYLLABLE_WINDOW, 1) - 1, -1):
        if word[i] in VOWELS and word[i + 1] in CONSONANTS:
            return word[: i + 1] + HYPHEN

    return word[:break_point] + HYPHEN


def _source_end(match: re.Match, piece: str) -> int:
    """Offset in the source just past the characters kept in piece."""
    if piece == match.group(0):
        return match.end()
    # The hyphen marker is not source text
    return match.start() + len(piece) - len(HYPHEN)


def smart_character_truncate(text: str, max_length: int) -> str:
    """Cut near ``max_length`` at whitespace or after punctuation.

    Args:
        text: Text to cut.
        max_length: Maximum number of characters to keep.

    Returns:
        Prefix of ``text`` at most ``max_length`` long.
    """
    if len(text) <= max_length:
        return text

    search_start = max(0, max_length - LOOKBACK_WINDOW)

    for i in range(max_length, search_start - 1, -1):
        if text[i].isspace():
            return text[:i]

    for i in range(max_length - 1, search_start - 1, -1):
        if text[i] in PUNCTUATION:
            return text[: i + 1]

    return text[:max_length]


class TruncationEngine(BaseProcessor):
    """Word-preserving truncation with long-token hyphenation."""

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        patterns: PatternLibrary | None = None,
    ):
        """Initialize truncation engine.

        Args:
            config: Configuration dictionary with defaults used by process():
                - max_length: int (default: 120)
                - preserve_words: bool (default: True)
                - show_ellipsis: bool (default: True)
                - break_long_words: bool (default: False)
            patterns: Pattern library used to report preserved keywords.
        """
        super().__init__(config)
        self.max_length = self.config.get("max_length", 120)
        self.preserve_words = self.config.get("preserve_words", True)
        self.show_ellipsis = self.config.get("show_ellipsis", True)
        self.break_long_words = self.config.get("break_long_words", False)
        self.patterns = patterns or DEFAULT_PATTERNS

    def process(self, text: Any) -> TruncationResult:
        return self.truncate(
            text,
            self.max_length,
            preserve_words=self.preserve_words,
            show_ellipsis=self.show_ellipsis,
            break_long_words=self.break_long_words,
        )

    def truncate(
        self,
        text: Any,
        max_length: int,
        preserve_words: bool = True,
        show_ellipsis: bool = True,
        break_long_words: bool = False,
    ) -> TruncationResult:
        """Truncate cleaned text to a character budget.

        Args:
            text: Cleaned text.
            max_length: Budget including the ellipsis.
            preserve_words: Keep whole words instead of cutting characters.
            show_ellipsis: Append "..." when truncated.
            break_long_words: Hyphenate tokens that would otherwise overflow.

        Returns:
            TruncationResult; text under budget comes back unchanged.
        """
        if not isinstance(text, str):
            text = ""

        if not text or len(text) <= max_length:
            return TruncationResult(truncated_text=text, is_truncated=False)

        ellipsis = ELLIPSIS if show_ellipsis else ""
        budget = max(max_length - len(ellipsis), 0)
        preserved_keywords: list[str] = []

        if preserve_words:
            truncated, consumed = self._truncate_words(text, budget, break_long_words)
            preserved_keywords = self.patterns.find_all(ContentCategory.IMPORTANT, truncated)
        elif break_long_words:
            truncated = smart_character_truncate(text, budget)
            consumed = len(truncated)
        else:
            truncated = text[:budget]
            consumed = len(truncated)

        return TruncationResult(
            truncated_text=truncated + ellipsis,
            is_truncated=True,
            preserved_keywords=preserved_keywords,
            hidden_content=text[consumed:],
        )

    @staticmethod
    def _truncate_words(text: str, budget: int, break_long_words: bool) -> tuple[str, int]:
        """Keep whole words that fit the budget.

        Returns:
            Kept text (words joined by single spaces) and the number of
            source characters it covers.
        """
        words = list(WORD_PATTERN.finditer(text))
        if not words:
            return "", 0

        current_length = 0
        kept: list[str] = []
        consumed = 0

        for i, match in enumerate(words):
            word = match.group(0)
            separator = 1 if i > 0 else 0
            if current_length + separator + len(word) > budget:
                if break_long_words and len(word) > budget - current_length:
                    remaining = budget - current_length - separator
                    if remaining > MIN_BREAK_SPACE:
                        kept.append(break_long_word(word, remaining))
                        consumed = _source_end(match, kept[-1])
                break
            current_length += separator + len(word)
            kept.append(word)
            consumed = match.end()

        if not kept:
            # Nothing fits: hyphenate the first word, or keep it whole
            first = words[0]
            piece = break_long_word(first.group(0), budget) if break_long_words else first.group(0)
            return piece, _source_end(first, piece)

        return " ".join(kept), consumed

    def get_processor_name(self) -> str:
        return "TruncationEngine"
