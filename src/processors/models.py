# -*- coding: utf-8 -*-
"""Data contracts for formatted event text."""

from typing import Literal

from pydantic import BaseModel, Field

ScreenSize = Literal["mobile", "tablet", "desktop", "tv"]
ParagraphSpacing = Literal["normal", "compact", "spacious"]
ListStyle = Literal["bullets", "numbers", "dashes"]


class TextFormatterOptions(BaseModel):
    """Truncation options for titles and descriptions.

    Fields left as None fall back to the defaults of the calling method
    (titles and descriptions use different defaults).
    """

    max_length: int | None = Field(default=None, ge=0)
    preserve_words: bool | None = None
    show_ellipsis: bool | None = None
    break_long_words: bool | None = None


class FormattingOptions(BaseModel):
    """Which special content categories to highlight."""

    highlight_urls: bool = True
    highlight_emails: bool = True
    highlight_phones: bool = True
    highlight_dates: bool = True
    highlight_times: bool = True
    highlight_important_words: bool = True
    create_clickable_links: bool = True


class AdvancedFormattingOptions(BaseModel):
    """Options for paragraph, list and line break processing."""

    preserve_line_breaks: bool = True
    format_paragraphs: bool = True
    format_lists: bool = True
    add_visual_bullets: bool = True
    paragraph_spacing: ParagraphSpacing = "normal"
    list_style: ListStyle = "bullets"
    max_paragraphs: int = Field(default=10, ge=0)


class FormattedText(BaseModel):
    """Display-ready text with truncation metadata."""

    content: str = ""
    is_truncated: bool = False
    original_length: int = Field(default=0, ge=0)
    has_special_content: bool = False


class SpecialContent(BaseModel):
    """Deduplicated special content found in cleaned text."""

    urls: list[str] = Field(default_factory=list)
    emails: list[str] = Field(default_factory=list)
    phones: list[str] = Field(default_factory=list)
    dates: list[str] = Field(default_factory=list)
    times: list[str] = Field(default_factory=list)
    important_words: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    def has_any(self) -> bool:
        """Check whether any category is non-empty.

        Returns:
            True if at least one match was found.
        """
        return any(
            (self.urls, self.emails, self.phones, self.dates, self.times, self.important_words)
        )


class TruncationResult(BaseModel):
    """Outcome of a truncation pass."""

    truncated_text: str
    is_truncated: bool
    preserved_keywords: list[str] = Field(default_factory=list)
    hidden_content: str = ""

    model_config = {"frozen": True}


class ListItem(BaseModel):
    type: Literal["bullet", "numbered"]
    content: str
    level: int = Field(default=0, ge=0)
    index: int = Field(default=0, ge=0)


class EmphasisSpan(BaseModel):
    start: int = Field(ge=0)
    end: int = Field(ge=0)
    type: Literal["bold", "italic", "important"] = "important"


class TextFormatting(BaseModel):
    """Structure extracted from a raw description."""

    paragraphs: list[str] = Field(default_factory=list)
    lists: list[ListItem] = Field(default_factory=list)
    emphasis: list[EmphasisSpan] = Field(default_factory=list)
    line_breaks: list[int] = Field(default_factory=list)


class ExtractedLink(BaseModel):
    text: str
    url: str
    type: Literal["url", "email", "phone"]


class ExtractedDate(BaseModel):
    text: str
    type: Literal["date", "time", "datetime"]


class ExtractedContact(BaseModel):
    text: str
    type: Literal["email", "phone"]
    value: str


class ExtractedImage(BaseModel):
    src: str
    alt: str = ""


class ProcessedContent(BaseModel):
    """Full analysis of an event description."""

    clean_text: str = ""
    links: list[ExtractedLink] = Field(default_factory=list)
    dates: list[ExtractedDate] = Field(default_factory=list)
    contacts: list[ExtractedContact] = Field(default_factory=list)
    images: list[ExtractedImage] = Field(default_factory=list)
    formatting: TextFormatting = Field(default_factory=TextFormatting)


class TextOverflowAnalysis(BaseModel):
    """Overflow characteristics used to pick truncation settings."""

    has_overflow: bool = False
    estimated_lines: int = 0
    word_count: int = 0
    character_count: int = 0
    has_long_words: bool = False
    has_special_content: bool = False
    break_points: list[int] = Field(default_factory=list)


class TruncationSuggestions(BaseModel):
    """Per-screen truncation options."""

    mobile: TextFormatterOptions
    tablet: TextFormatterOptions
    desktop: TextFormatterOptions
    tv: TextFormatterOptions

    def for_screen(self, screen: ScreenSize) -> TextFormatterOptions:
        """Get the options for one screen size.

        Args:
            screen: Screen size name.

        Returns:
            Options bundle for that screen.
        """
        return getattr(self, screen)
