"""
Per-article operations.

A Page is addressed by title or page id. Single-shot operations ask the
server to resolve redirects; when it reports one, the operation is re-issued
in full against the redirect target. Collections (images, links, ...) are
returned as lazy PaginationEngine iterators.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .errors import MissingPath
from .models import Category, Identifier, Image, LangLink, Link, Reference
from .navigation import find_path, first_page, first_page_key, get_path
from .pagination import COLLECTIONS, Collection, PaginationEngine, fetch_collection_page
from .query import Continuation, build_params
from .redirects import RedirectChain, redirect_target

if TYPE_CHECKING:
    from .client import Wikipedia

LOGGER = logging.getLogger("wikiclient.page")

INFO_PARAMS = [
    ("prop", "info|pageprops"),
    ("inprop", "url"),
    ("ppprop", "disambiguation"),
    ("redirects", ""),
]
CONTENT_PARAMS = [
    ("prop", "extracts|revisions"),
    ("explaintext", ""),
    ("rvprop", "ids"),
    ("redirects", ""),
]
HTML_CONTENT_PARAMS = [
    ("prop", "revisions"),
    ("rvprop", "content"),
    ("rvlimit", "1"),
    ("rvparse", ""),
    ("redirects", ""),
]
SUMMARY_PARAMS = [
    ("prop", "extracts"),
    ("explaintext", ""),
    ("exintro", ""),
    ("redirects", ""),
]
COORDINATES_PARAMS = [
    ("prop", "coordinates"),
    ("colimit", "max"),
    ("redirects", ""),
]


class Page:
    """
    A Wikipedia article.

    Pages compare equal when they are addressed the same way (same title, or
    same page id); a title and a page id are never equal.
    """

    def __init__(
        self,
        wikipedia: Wikipedia,
        identifier: Identifier,
        *,
        redirects: RedirectChain | None = None,
    ) -> None:
        self.wikipedia = wikipedia
        self.identifier = identifier
        if redirects is None:
            redirects = RedirectChain(
                max_redirects=wikipedia.max_redirects,
                origin=identifier.value if identifier.is_title else None,
            )
        self._redirects = redirects

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Page):
            return NotImplemented
        return self.identifier == other.identifier

    def __hash__(self) -> int:
        return hash(self.identifier)

    def __repr__(self) -> str:
        return f"Page({self.identifier.param}={self.identifier.value!r})"

    # ------------------------------------------------------------------
    # Single-shot operations
    # ------------------------------------------------------------------

    def _request(self, operation_params: list[tuple[str, str]]) -> tuple[Any, Page | None]:
        """
        Run a redirect-resolving query for this page.

        Returns the parsed response and, when the server declared a redirect,
        the Page to re-issue the operation against.
        """
        data = self.wikipedia.query(
            build_params(operation_params, identifier=self.identifier.query_param())
        )
        target = redirect_target(data)
        if target is None:
            return data, None
        chain = self._redirects.follow(target)
        return data, Page(self.wikipedia, Identifier.by_title(target), redirects=chain)

    def _first_page_str(self, data: Any, *path: str | int) -> str:
        value = find_path(first_page(data), *path)
        if not isinstance(value, str):
            raise MissingPath(".".join(("query", "pages", "*") + tuple(str(p) for p in path)))
        return value

    def get_pageid(self) -> str:
        """Return the page id, querying the server if the page was addressed by title."""
        if not self.identifier.is_title:
            return self.identifier.value
        data, redirected = self._request(INFO_PARAMS)
        if redirected is not None:
            return redirected.get_pageid()
        return first_page_key(data)

    def get_title(self) -> str:
        """Return the title, querying the server if the page was addressed by id."""
        if self.identifier.is_title:
            return self.identifier.value
        data, redirected = self._request(INFO_PARAMS)
        if redirected is not None:
            return redirected.get_title()
        return self._first_page_str(data, "title")

    def get_content(self) -> str:
        """Return the plain-text content of the article."""
        data, redirected = self._request(CONTENT_PARAMS)
        if redirected is not None:
            return redirected.get_content()
        return self._first_page_str(data, "extract")

    def get_html_content(self) -> str:
        """Return the rendered HTML of the latest revision."""
        data, redirected = self._request(HTML_CONTENT_PARAMS)
        if redirected is not None:
            return redirected.get_html_content()
        return self._first_page_str(data, "revisions", 0, "*")

    def get_summary(self) -> str:
        """Return the plain-text introduction of the article."""
        data, redirected = self._request(SUMMARY_PARAMS)
        if redirected is not None:
            return redirected.get_summary()
        return self._first_page_str(data, "extract")

    def get_coordinates(self) -> tuple[float, float] | None:
        """
        Return the article's (latitude, longitude), or None if it has none.

        Raises:
            MissingPath: If a coordinate entry lacks numeric lat/lon
        """
        data, redirected = self._request(COORDINATES_PARAMS)
        if redirected is not None:
            return redirected.get_coordinates()

        coord = find_path(first_page(data), "coordinates", 0)
        if not isinstance(coord, dict):
            return None
        lat, lon = coord.get("lat"), coord.get("lon")
        for name, value in (("lat", lat), ("lon", lon)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise MissingPath(f"query.pages.*.coordinates.0.{name}")
        return (float(lat), float(lon))

    def get_sections(self) -> list[str]:
        """Return the section headings of the article, in order."""
        pageid = self.get_pageid()
        data = self.wikipedia.query(
            build_params(
                [("prop", "sections")],
                action="parse",
                identifier=("pageid", pageid),
            )
        )
        sections = get_path(data, "parse", "sections")
        if not isinstance(sections, list):
            raise MissingPath("parse.sections")
        lines = (find_path(s, "line") for s in sections)
        return [line for line in lines if isinstance(line, str)]

    def get_section_content(self, title: str) -> str | None:
        """
        Return the text of the section headed `title`.

        The text runs from the end of the "== title ==" heading to the next
        "==" marker (or the end of the content).

        Returns:
            Section text, or None if the heading does not occur
        """
        header = f"== {title} =="
        content = self.get_content()
        index = content.find(header)
        if index == -1:
            LOGGER.debug("section_not_found", extra={"section": title, "page": repr(self)})
            return None
        start = index + len(header)
        end = content.find("==", start)
        if end == -1:
            end = len(content)
        return content[start:end]

    # ------------------------------------------------------------------
    # Paginated collections
    # ------------------------------------------------------------------

    def iter_collection(self, collection: Collection, *, strict: bool = False) -> PaginationEngine[Any]:
        """
        Return a lazy iterator over every item of `collection`.

        The first page is requested immediately; see PaginationEngine for how
        later pages and mid-stream errors are handled.
        """
        spec = COLLECTIONS[collection]

        def fetch(continuation: Continuation | None) -> tuple[list[Any], Continuation | None]:
            return fetch_collection_page(self.wikipedia, self.identifier, collection, continuation)

        return PaginationEngine(fetch, spec.decoder, strict=strict, name=collection.value)

    def get_images(self, *, strict: bool = False) -> PaginationEngine[Image]:
        """Iterate over all images used on the page."""
        return self.iter_collection(Collection.IMAGES, strict=strict)

    def get_references(self, *, strict: bool = False) -> PaginationEngine[Reference]:
        """Iterate over all external links (references) of the page."""
        return self.iter_collection(Collection.REFERENCES, strict=strict)

    def get_links(self, *, strict: bool = False) -> PaginationEngine[Link]:
        """Iterate over all internal links of the page."""
        return self.iter_collection(Collection.LINKS, strict=strict)

    def get_categories(self, *, strict: bool = False) -> PaginationEngine[Category]:
        """Iterate over all categories of the page."""
        return self.iter_collection(Collection.CATEGORIES, strict=strict)

    def get_langlinks(self, *, strict: bool = False) -> PaginationEngine[LangLink]:
        """Iterate over the page's titles in other languages."""
        return self.iter_collection(Collection.LANGLINKS, strict=strict)
