# -*- coding: utf-8 -*-
"""Special content extraction (links, contacts, dates, images)."""

import re
from typing import Any

from src.processors.base_processor import BaseProcessor
from src.processors.models import (
    ExtractedContact,
    ExtractedDate,
    ExtractedImage,
    ExtractedLink,
    SpecialContent,
)
from src.processors.patterns import DEFAULT_PATTERNS, ContentCategory, PatternLibrary

PHONE_SEPARATORS = re.compile(r"[-.\s]")
IMG_TAG_PATTERN = re.compile(r"<img[^>]*>", re.IGNORECASE)
IMG_SRC_PATTERN = re.compile(r"src\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE)
IMG_ALT_PATTERN = re.compile(r"alt\s*=\s*[\"']([^\"']*)[\"']", re.IGNORECASE)


def phone_to_tel(phone: str) -> str:
    """Strip separators from a phone match for tel: links."""
    return PHONE_SEPARATORS.sub("", phone)


class SpecialContentExtractor(BaseProcessor):
    """Finds URLs, emails, phones, dates, times and important words.

    Matching is heuristic; see ``src.processors.patterns``.
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        patterns: PatternLibrary | None = None,
    ):
        """Initialize extractor.

        Args:
            config: Configuration dictionary (unused keys are ignored).
            patterns: Pattern library, defaults to the built-in one.
        """
        super().__init__(config)
        self.patterns = patterns or DEFAULT_PATTERNS

    def process(self, text: Any) -> SpecialContent:
        return self.extract(text)

    def extract(self, text: Any) -> SpecialContent:
        """Extract deduplicated special content from cleaned text.

        Args:
            text: Cleaned text.

        Returns:
            SpecialContent with one list per category.
        """
        if not text or not isinstance(text, str):
            return SpecialContent()

        find = self.patterns.find_all
        return SpecialContent(
            urls=find(ContentCategory.URL, text),
            emails=find(ContentCategory.EMAIL, text),
            phones=find(ContentCategory.PHONE, text),
            dates=find(ContentCategory.DATE, text),
            times=find(ContentCategory.TIME, text),
            important_words=find(ContentCategory.IMPORTANT, text),
        )

    @staticmethod
    def has_special_content(special_content: SpecialContent) -> bool:
        return special_content.has_any()

    def has_special_content_patterns(self, text: Any) -> bool:
        """Check if any pattern matches the text.

        Args:
            text: Text to check.

        Returns:
            True if at least one category matches.
        """
        if not text or not isinstance(text, str):
            return False
        return self.patterns.matches_any(text)

    def extract_links(self, text: Any) -> list[ExtractedLink]:
        """Extract clickable links: URLs, then emails, then phones.

        Args:
            text: Cleaned text.

        Returns:
            List of ExtractedLink.
        """
        if not text or not isinstance(text, str):
            return []

        find = self.patterns.find_all
        links = [ExtractedLink(text=url, url=url, type="url") for url in find(ContentCategory.URL, text)]
        links.extend(
            ExtractedLink(text=email, url=f"mailto:{email}", type="email")
            for email in find(ContentCategory.EMAIL, text)
        )
        links.extend(
            ExtractedLink(text=phone, url=f"tel:{phone_to_tel(phone)}", type="phone")
            for phone in find(ContentCategory.PHONE, text)
        )
        return links

    def extract_dates(self, text: Any) -> list[ExtractedDate]:
        if not text or not isinstance(text, str):
            return []

        find = self.patterns.find_all
        dates = [ExtractedDate(text=d, type="date") for d in find(ContentCategory.DATE, text)]
        dates.extend(ExtractedDate(text=t, type="time") for t in find(ContentCategory.TIME, text))
        return dates

    def extract_contacts(self, text: Any) -> list[ExtractedContact]:
        if not text or not isinstance(text, str):
            return []

        find = self.patterns.find_all
        contacts = [
            ExtractedContact(text=email, type="email", value=email)
            for email in find(ContentCategory.EMAIL, text)
        ]
        contacts.extend(
            ExtractedContact(text=phone, type="phone", value=phone_to_tel(phone))
            for phone in find(ContentCategory.PHONE, text)
        )
        return contacts

    @staticmethod
    def extract_images(raw_text: Any) -> list[ExtractedImage]:
        """Extract <img> references from raw (uncleaned) markup.

        Images are read from the raw text so their URLs never reach the
        cleaned-text URL detection.

        Args:
            raw_text: Original description markup.

        Returns:
            List of ExtractedImage, skipping tags without a src.
        """
        if not raw_text or not isinstance(raw_text, str):
            return []

        images = []
        for tag_match in IMG_TAG_PATTERN.finditer(raw_text):
            tag = tag_match.group(0)
            src_match = IMG_SRC_PATTERN.search(tag)
            if not src_match:
                continue
            alt_match = IMG_ALT_PATTERN.search(tag)
            images.append(ExtractedImage(src=src_match.group(1), alt=alt_match.group(1) if alt_match else ""))
        return images

    def get_processor_name(self) -> str:
        return "SpecialContentExtractor"
