"""
wikiclient CLI

Commands:
- search / geosearch / random: Find article titles
- languages: List site languages
- summary / content / sections / section / coordinates: Read one article
- items: Stream one of an article's paginated collections
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, TypeVar

import typer

from wikiclient.client import DEFAULT_USER_AGENT, Wikipedia
from wikiclient.config import WikipediaConfig
from wikiclient.errors import InvalidParameter, WikipediaError
from wikiclient.http import HttpxTransport
from wikiclient.page import Page
from wikiclient.pagination import Collection

T = TypeVar("T")

app = typer.Typer(add_completion=False, help="Query Wikipedia from the command line")

LOGGER = logging.getLogger("wikiclient")


# Attributes every LogRecord carries; anything else on a record came from `extra=`.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

# Keys present on every line; null when the event did not set them.
CONTEXT_FIELDS = ("page", "collection")

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class JsonFormatter(logging.Formatter):
    """
    One JSON object per log line.

    Each line has `ts` (taken from the record, UTC), `level`, `event` (the
    snake_case message), `logger` and the CONTEXT_FIELDS, followed by any
    `extra=` fields. Values json cannot encode are written as their repr.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "event": record.getMessage(),
            "logger": record.name,
        }
        payload.update(dict.fromkeys(CONTEXT_FIELDS))
        for key, value in vars(record).items():
            if key in _RECORD_ATTRS or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=repr)


def setup_logging(level: str) -> logging.Logger:
    """Send wikiclient's log events to stderr as JSON lines at `level`."""
    logger = logging.getLogger("wikiclient")
    logger.setLevel(_LEVELS.get(level.upper(), logging.WARNING))
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logger.handlers[:] = [handler]
    logger.propagate = False
    return logger


class State:
    wiki: Wikipedia | None = None


STATE = State()


@app.callback()
def main_callback(
    language: str = typer.Option("en", "--language", "-l", help="Wiki language code"),
    base_url: str | None = typer.Option(
        None, "--base-url", help="API URL template; '{language}' is replaced by --language"
    ),
    user_agent: str = typer.Option(DEFAULT_USER_AGENT, "--user-agent", help="User-Agent header"),
    timeout: float = typer.Option(10.0, "--timeout", help="Request timeout in seconds"),
    log_level: str = typer.Option(
        "WARNING", "--log-level", help="Logging verbosity (DEBUG, INFO, WARNING, ERROR)"
    ),
) -> None:
    """Configure the client shared by all commands."""
    global LOGGER
    LOGGER = setup_logging(log_level)

    config = WikipediaConfig(language=language)
    if base_url:
        config.set_base_url(base_url)
    STATE.wiki = Wikipedia(HttpxTransport(timeout=timeout), config, user_agent=user_agent)


def _wiki() -> Wikipedia:
    if STATE.wiki is None:
        STATE.wiki = Wikipedia()
    return STATE.wiki


def _page(title: str | None, pageid: str | None) -> Page:
    if (title is None) == (pageid is None):
        typer.echo("Error: pass exactly one of TITLE or --pageid", err=True)
        raise typer.Exit(code=2)
    if pageid is not None:
        return _wiki().page_from_pageid(pageid)
    return _wiki().page_from_title(title)


def _run(fn: Callable[[], T]) -> T:
    """Call `fn`, turning client errors into exit codes."""
    try:
        return fn()
    except InvalidParameter as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)
    except WikipediaError as e:
        LOGGER.error("command_failed", extra={"error": str(e), "error_type": type(e).__name__})
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


@app.command("search")
def search_cmd(
    query: str = typer.Argument(..., help="Search text"),
    results: int = typer.Option(10, "--results", "-n", help="Maximum number of titles"),
) -> None:
    """Print titles of pages matching QUERY."""
    wiki = _wiki()
    try:
        wiki.config.search_results = results
    except ValueError as e:
        typer.echo(f"Error: invalid --results: {e}", err=True)
        raise typer.Exit(code=2)
    for title in _run(lambda: wiki.search(query)):
        typer.echo(title)


@app.command("geosearch")
def geosearch_cmd(
    latitude: float = typer.Argument(..., help="Latitude in degrees"),
    longitude: float = typer.Argument(..., help="Longitude in degrees"),
    radius: int = typer.Option(1000, "--radius", "-r", help="Radius in meters (10-10000)"),
) -> None:
    """Print titles of pages near a point."""
    for title in _run(lambda: _wiki().geosearch(latitude, longitude, radius)):
        typer.echo(title)


@app.command("random")
def random_cmd(
    count: int = typer.Option(1, "--count", "-c", help="Number of titles"),
) -> None:
    """Print random article titles."""
    for title in _run(lambda: _wiki().random_count(count)):
        typer.echo(title)


@app.command("languages")
def languages_cmd() -> None:
    """Print the site's language codes and names."""
    for code, name in _run(_wiki().get_languages):
        typer.echo(f"{code}\t{name}")


@app.command("summary")
def summary_cmd(
    title: str | None = typer.Argument(None, help="Article title"),
    pageid: str | None = typer.Option(None, "--pageid", help="Article page id"),
) -> None:
    """Print the introduction of an article."""
    typer.echo(_run(_page(title, pageid).get_summary))


@app.command("content")
def content_cmd(
    title: str | None = typer.Argument(None, help="Article title"),
    pageid: str | None = typer.Option(None, "--pageid", help="Article page id"),
    html: bool = typer.Option(False, "--html", help="Print rendered HTML instead of text"),
) -> None:
    """Print the full content of an article."""
    page = _page(title, pageid)
    typer.echo(_run(page.get_html_content if html else page.get_content))


@app.command("sections")
def sections_cmd(
    title: str | None = typer.Argument(None, help="Article title"),
    pageid: str | None = typer.Option(None, "--pageid", help="Article page id"),
) -> None:
    """Print the section headings of an article."""
    for line in _run(_page(title, pageid).get_sections):
        typer.echo(line)


@app.command("section")
def section_cmd(
    title: str = typer.Argument(..., help="Article title"),
    section: str = typer.Argument(..., help="Section heading"),
) -> None:
    """Print the text of one section."""
    text = _run(lambda: _page(title, None).get_section_content(section))
    if text is None:
        typer.echo(f"Section not found: {section}", err=True)
        raise typer.Exit(code=1)
    typer.echo(text.strip())


@app.command("coordinates")
def coordinates_cmd(
    title: str | None = typer.Argument(None, help="Article title"),
    pageid: str | None = typer.Option(None, "--pageid", help="Article page id"),
) -> None:
    """Print the latitude and longitude of an article."""
    coords = _run(_page(title, pageid).get_coordinates)
    if coords is None:
        typer.echo("No coordinates.", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"{coords[0]}\t{coords[1]}")


@app.command("items")
def items_cmd(
    collection: Collection = typer.Argument(..., help="Collection to list"),
    title: str | None = typer.Argument(None, help="Article title"),
    pageid: str | None = typer.Option(None, "--pageid", help="Article page id"),
    limit: int | None = typer.Option(None, "--limit", help="Stop after this many items"),
    page_size: str | None = typer.Option(
        None, "--page-size", help="Items per request (integer or 'max')"
    ),
    strict: bool = typer.Option(
        False, "--strict/--lenient", help="Fail if a later page cannot be fetched"
    ),
) -> None:
    """
    Stream one of an article's collections as JSON lines.

    Example:
        wikiclient items links Argentina --limit 20
    """
    wiki = _wiki()
    if page_size is not None:
        try:
            if collection is Collection.IMAGES:
                wiki.config.images_results = page_size
            elif collection is Collection.CATEGORIES:
                wiki.config.categories_results = page_size
            else:
                wiki.config.links_results = page_size
        except ValueError as e:
            typer.echo(f"Error: invalid --page-size: {e}", err=True)
            raise typer.Exit(code=2)

    page = _page(title, pageid)
    engine = _run(lambda: page.iter_collection(collection, strict=strict))

    count = 0
    while limit is None or count < limit:
        item = _run(lambda: next(engine, None))
        if item is None:
            break
        typer.echo(item.model_dump_json())
        count += 1

    if engine.error is not None:
        typer.echo(f"Warning: stopped early: {engine.error}", err=True)
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
