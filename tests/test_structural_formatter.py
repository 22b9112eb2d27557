# -*- coding: utf-8 -*-
"""Tests for paragraph, list and line break formatting."""

import pytest

from src.processors.content_cleaner import clean_html
from src.processors.models import AdvancedFormattingOptions, ProcessedContent
from src.processors.structural_formatter import StructuralFormatter, calculate_indent_level

BULLET = '<span class="text-formatter-bullet">•</span>'


@pytest.fixture
def formatter():
    """StructuralFormatter with default cleaning and highlighting."""
    return StructuralFormatter()


def render(formatter, raw, **options):
    """Format and render raw text the way the facade does."""
    opts = AdvancedFormattingOptions(**options)
    content = ProcessedContent(clean_text=clean_html(raw), formatting=formatter.format(raw, opts))
    return formatter.render(content, opts, original_text=raw)


def test_format_bullet_list(formatter):
    """Test two dash bullets at level 0."""
    formatting = formatter.format("- a\n- b")

    assert len(formatting.lists) == 2
    assert all(item.type == "bullet" for item in formatting.lists)
    assert all(item.level == 0 for item in formatting.lists)
    assert [item.index for item in formatting.lists] == [0, 1]


def test_format_numbered_list(formatter):
    """Test numbered and lettered items."""
    formatting = formatter.format("1. First\n2) <b>Second</b>\na. Third\nPlain line")

    assert [(i.type, i.content) for i in formatting.lists] == [
        ("numbered", "First"),
        ("numbered", "Second"),
        ("numbered", "Third"),
    ]


def test_format_list_levels(formatter):
    """Test indentation levels from spaces and tabs."""
    formatting = formatter.format("• top\n  ◦ nested\n\t▪ tabbed\n    * deep")
    assert [item.level for item in formatting.lists] == [0, 1, 1, 2]


def test_calculate_indent_level():
    """Test one level per tab or two spaces."""
    assert calculate_indent_level("no indent") == 0
    assert calculate_indent_level("   three spaces") == 1
    assert calculate_indent_level("\t\t  mixed") == 3


def test_format_paragraphs(formatter):
    """Test paragraphs are split on blank lines and cleaned."""
    formatting = formatter.format("First paragraph.\n\nSecond <b>paragraph</b>.\n \nThird")
    assert formatting.paragraphs == ["First paragraph.", "Second paragraph.", "Third"]


def test_format_max_paragraphs(formatter):
    """Test the paragraph cap."""
    formatting = formatter.format("One\n\nTwo\n\nThree", AdvancedFormattingOptions(max_paragraphs=2))
    assert formatting.paragraphs == ["One", "Two"]


def test_format_line_breaks(formatter):
    """Test offsets of each line start after the first."""
    assert formatter.format("ab\ncd\r\nef").line_breaks == [3, 7]
    assert formatter.format("single line").line_breaks == []


def test_format_emphasis(formatter):
    """Test first occurrence of each important word."""
    emphasis = formatter.format("Concert annulé, nouveau lieu").emphasis
    assert [(e.start, e.end, e.type) for e in emphasis] == [(8, 14, "important"), (16, 23, "important")]


def test_format_disabled_options(formatter):
    """Test structures can be turned off."""
    options = AdvancedFormattingOptions(format_paragraphs=False, format_lists=False, preserve_line_breaks=False)
    formatting = formatter.format("- a\n- b\n\nText", options)

    assert formatting.paragraphs == []
    assert formatting.lists == []
    assert formatting.line_breaks == []


def test_format_empty(formatter):
    """Test empty and invalid input."""
    assert formatter.format("").paragraphs == []
    assert formatter.format(None).lists == []


def test_render_bullet_list(formatter):
    """Test list items render with bullets and level classes."""
    html = render(formatter, "- Item <b>one</b>\n- Item two")
    item = '<div class="text-formatter-list text-formatter-list-bullets text-formatter-list-level-0">'

    assert html == (
        f'{item}{BULLET}<span class="text-formatter-list-content">Item one</span></div>'
        f'{item}{BULLET}<span class="text-formatter-list-content">Item two</span></div>'
    )


def test_render_dashes_and_no_bullets(formatter):
    """Test list style and visual bullet options."""
    assert '<span class="text-formatter-bullet">–</span>' in render(formatter, "- a\n- b", list_style="dashes")
    assert "text-formatter-bullet" not in render(formatter, "- a\n- b", add_visual_bullets=False)


def test_render_numbered_items_have_no_bullet(formatter):
    """Test numbered items never get a bullet symbol."""
    html = render(formatter, "1. One\n2. Two")

    assert "text-formatter-bullet" not in html
    assert html.count("text-formatter-list-content") == 2


def test_render_lists_then_remaining_paragraphs(formatter):
    """Test paragraphs beyond the list count follow the lists."""
    html = render(formatter, "Intro\n\n- a\n- b\n\nOutro\n\nEnd")

    assert html.startswith('<div class="text-formatter-list')
    assert html.endswith(
        '<p class="text-formatter-paragraph-normal">Outro</p>'
        '<p class="text-formatter-paragraph-normal">End</p>'
    )


def test_render_paragraphs(formatter):
    """Test several paragraphs render as <p> with spacing class."""
    html = render(formatter, "Intro text.\n\nSecond part.", paragraph_spacing="compact")
    assert html == (
        '<p class="text-formatter-paragraph-compact">Intro text.</p>'
        '<p class="text-formatter-paragraph-compact">Second part.</p>'
    )


def test_render_keeps_line_breaks(formatter):
    """Test simple multi-line text keeps its line breaks."""
    html = render(formatter, "Line one\nLine two at 9h00")
    assert html == 'Line one<br>Line two at <span class="text-formatter-time">9h00</span>'


def test_render_line_breaks_drop_multiline_scripts_and_styles(formatter):
    """Test blocks spanning several lines are removed with their content."""
    raw = "<script>\nalert('x')\n</script>\n<style>\n.a{color:red}\n</style>\nHello"
    html = render(formatter, raw)

    assert html == "<br><br>Hello"
    assert "alert" not in html
    assert "color" not in html


def test_format_drops_multiline_comments(formatter):
    """Test list lines inside a comment are not extracted."""
    formatting = formatter.format("<!--\n- hidden\n-->\n- shown", AdvancedFormattingOptions())

    assert [item.content for item in formatting.lists] == ["shown"]


def test_render_single_paragraph(formatter):
    """Test a single line is highlighted as is."""
    html = render(formatter, "Just one line, <i>urgent</i>")
    assert html == 'Just one line, <span class="text-formatter-important">urgent</span>'


def test_render_falls_back_to_clean_text(formatter):
    """Test cleaned text is used when no structure was extracted."""
    options = AdvancedFormattingOptions(format_paragraphs=False, format_lists=False, preserve_line_breaks=False)
    content = ProcessedContent(clean_text="Plain text", formatting=formatter.format("Plain text", options))
    assert formatter.render(content, options) == "Plain text"


def test_structural_formatter_process():
    """Test process() uses configuration as options."""
    formatter = StructuralFormatter(config={"format_lists": False})

    assert formatter.process("- a\n- b").lists == []
    assert formatter.get_processor_name() == "StructuralFormatter"
