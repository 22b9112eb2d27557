# -*- coding: utf-8 -*-
"""Regular expressions for special content detection.

The phone and date grammars are loose: any run of five digit
groups counts as a phone number. Callers treat matches as display hints only.
"""

import re
from enum import Enum
from typing import Iterable


class ContentCategory(str, Enum):
    """Special content categories, in highlighting order."""

    URL = "url"
    EMAIL = "email"
    PHONE = "phone"
    DATE = "date"
    TIME = "time"
    IMPORTANT = "important"


IMPORTANT_WORDS: tuple[str, ...] = (
    "urgent",
    "important",
    "annulé",
    "reporté",
    "nouveau",
    "attention",
    "cancelled",
    "canceled",
    "postponed",
    "new",
    "modifié",
    "modified",
    "changed",
    "changé",
)

URL_PATTERN = re.compile(r"https?://[^\s<>\"']+", re.IGNORECASE)
EMAIL_PATTERN = re.compile(r"\b[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}\b")
PHONE_PATTERN = re.compile(
    r"\+?[0-9]{1,4}[-.\s]?[0-9]{1,4}[-.\s]?[0-9]{1,4}[-.\s]?[0-9]{1,4}[-.\s]?[0-9]{1,4}"
)
DATE_PATTERN = re.compile(r"\b\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4}\b")
TIME_PATTERN = re.compile(r"\b\d{1,2}[h:]\d{2}\b", re.IGNORECASE)

CSS_CLASSES: dict[ContentCategory, str] = {
    ContentCategory.URL: "text-formatter-url",
    ContentCategory.EMAIL: "text-formatter-email",
    ContentCategory.PHONE: "text-formatter-phone",
    ContentCategory.DATE: "text-formatter-date",
    ContentCategory.TIME: "text-formatter-time",
    ContentCategory.IMPORTANT: "text-formatter-important",
}


def build_important_words_pattern(words: Iterable[str]) -> re.Pattern:
    """Compile a whole-word, case-insensitive alternation of words.

    Args:
        words: Vocabulary entries.

    Returns:
        Compiled pattern.
    """
    # Longest first so "changed" wins over a shorter prefix entry
    alternation = "|".join(re.escape(w) for w in sorted(set(words), key=len, reverse=True))
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


class PatternLibrary:
    """Category to matcher mapping used by extraction and highlighting."""

    def __init__(
        self,
        extra_important_words: Iterable[str] | None = None,
        overrides: dict[ContentCategory, re.Pattern] | None = None,
    ):
        """Initialize pattern library.

        Args:
            extra_important_words: Words added to the built-in vocabulary.
            overrides: Replacement patterns per category.
        """
        vocabulary = list(IMPORTANT_WORDS) + [w.lower() for w in extra_important_words or []]
        self.patterns: dict[ContentCategory, re.Pattern] = {
            ContentCategory.URL: URL_PATTERN,
            ContentCategory.EMAIL: EMAIL_PATTERN,
            ContentCategory.PHONE: PHONE_PATTERN,
            ContentCategory.DATE: DATE_PATTERN,
            ContentCategory.TIME: TIME_PATTERN,
            ContentCategory.IMPORTANT: build_important_words_pattern(vocabulary),
        }
        self.patterns.update(overrides or {})

    def get(self, category: ContentCategory) -> re.Pattern:
        return self.patterns[category]

    def css_class(self, category: ContentCategory) -> str:
        return CSS_CLASSES[category]

    def find_all(self, category: ContentCategory, text: str) -> list[str]:
        """Find distinct matches of one category, in first-seen order.

        Args:
            category: Category to match.
            text: Text to scan.

        Returns:
            Deduplicated list of matched strings.
        """
        if not text:
            return []
        return list(dict.fromkeys(m.group(0) for m in self.patterns[category].finditer(text)))

    def matches_any(self, text: str) -> bool:
        return any(pattern.search(text) for pattern in self.patterns.values())

    def __iter__(self):
        return iter(self.patterns.items())


DEFAULT_PATTERNS = PatternLibrary()
