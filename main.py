# -*- coding: utf-8 -*-
"""Command line entry point for event text formatting."""

import json
import sys
from pathlib import Path
from typing import Any, Optional

import typer
from loguru import logger

from src.processors.models import AdvancedFormattingOptions
from src.processors.processing_context import ProcessingContext
from src.processors.text_formatter import TextFormatter
from src.utils.config_loader import ConfigLoader
from src.utils.logger import setup_logger
from src.utils.resize_coordinator import classify_screen

SCREEN_CHOICES = ("mobile", "tablet", "desktop", "tv")

app = typer.Typer(
    name="agenda-text",
    help="Format event titles and descriptions for display screens.",
    no_args_is_help=True,
)


def load_events(path: Path) -> list[dict[str, Any]]:
    """Load events from a JSON file.

    Args:
        path: File holding a list of events, or an object with an "events" list.

    Returns:
        List of event dictionaries.

    Raises:
        ValueError: If the file does not hold a list of events.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("events")
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of events in {path}")
    return [event for event in data if isinstance(event, dict)]


def format_events(
    events: list[dict[str, Any]],
    formatter: TextFormatter,
    screen: str = "desktop",
    advanced: bool = False,
) -> list[dict[str, Any]]:
    """Format every event for one screen size.

    Args:
        events: Event dictionaries with title, description and location.
        formatter: Text formatter.
        screen: Screen size name.
        advanced: Render descriptions with paragraphs, lists and highlights.

    Returns:
        One dictionary per event with the formatted fields.
    """
    results = []
    for event in events:
        title = event.get("title")
        description = event.get("description")

        title_options = formatter.get_truncation_suggestions(title, "title").for_screen(screen)
        description_options = formatter.get_truncation_suggestions(description, "description").for_screen(screen)

        formatted_title = formatter.format_title(title, title_options)
        formatted_description = formatter.format_description(description, description_options)

        result = {
            "title": formatted_title.content,
            "title_truncated": formatted_title.is_truncated,
            "description": formatted_description.content,
            "description_truncated": formatted_description.is_truncated,
            "location": formatter.format_title(event.get("location"), {"max_length": 80}).content,
            "links": [link.model_dump() for link in formatter.extract_links(formatter.clean_html_content(description))],
        }
        if advanced:
            result["description_html"] = formatter.format_advanced_description(
                description, AdvancedFormattingOptions()
            )
        results.append(result)

    return results


@app.command("format")
def format_command(
    events_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with events."),
    screen: Optional[str] = typer.Option(None, help="Screen size: mobile | tablet | desktop | tv."),
    width: Optional[int] = typer.Option(None, help="Viewport width in pixels, used when --screen is not given."),
    advanced: bool = typer.Option(False, help="Include rendered description markup."),
    config_dir: Optional[Path] = typer.Option(None, help="Configuration directory."),
    log_level: Optional[str] = typer.Option(None, help="Log level, defaults to the configured one."),
) -> None:
    """Format events for a screen size and print them as JSON."""
    loader = ConfigLoader(str(config_dir) if config_dir else None)
    logging_config = loader.get_config().get("logging", {})
    setup_logger(
        __name__,
        log_level=log_level or logging_config.get("level", "INFO"),
        log_file=logging_config.get("file"),
        sink=sys.stderr,
    )

    screen = screen or classify_screen(width)
    if screen not in SCREEN_CHOICES:
        logger.error(f"Unknown screen size: {screen}")
        raise typer.Exit(1)

    formatter = TextFormatter(ProcessingContext.from_config(loader))
    try:
        events = load_events(events_file)
        results = format_events(events, formatter, screen=screen, advanced=advanced)
        logger.info(f"Formatted {len(results)} events for {screen}")
        logger.debug(f"Cache stats: {formatter.context.cache.get_stats()}")
        typer.echo(json.dumps(results, ensure_ascii=False, indent=2))
    except (OSError, ValueError) as e:
        logger.error(f"Failed to format events: {e}")
        raise typer.Exit(1)
    finally:
        formatter.destroy()


@app.command("analyze")
def analyze_command(
    text: str = typer.Argument(..., help="Text to analyze."),
    context: str = typer.Option("description", help="Preset: title | description | preview."),
    container_width: Optional[int] = typer.Option(None, help="Container width in pixels."),
) -> None:
    """Print overflow analysis and per-screen truncation suggestions."""
    formatter = TextFormatter()
    try:
        analysis = formatter.analyze_text_overflow(text, container_width=container_width)
        suggestions = formatter.get_truncation_suggestions(text, context)
        output = {
            "analysis": analysis.model_dump(exclude={"break_points"}),
            "suggestions": suggestions.model_dump(),
        }
        typer.echo(json.dumps(output, ensure_ascii=False, indent=2))
    finally:
        formatter.destroy()


def main() -> None:
    app()


if __name__ == "__main__":
    main()
