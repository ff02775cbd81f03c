"""
Wikipedia API client.

Holds the transport and configuration, and exposes the site-wide operations
(search, geosearch, random titles, language list). Per-article operations live
on Page, created with `page_from_title` or `page_from_pageid`.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from .config import WikipediaConfig
from .errors import InvalidParameter
from .http import HttpxTransport, Transport
from .models import Identifier
from .navigation import extract_list, extract_titles, find_path
from .page import Page
from .query import build_params, execute
from .redirects import DEFAULT_MAX_REDIRECTS

DEFAULT_USER_AGENT = "wikiclient (https://github.com/wikiclient/wikiclient)"

LOGGER = logging.getLogger("wikiclient")


def _language(value: Any) -> tuple[str, str] | None:
    code = find_path(value, "code")
    name = find_path(value, "*")
    if isinstance(code, str) and isinstance(name, str):
        return (code, name)
    return None


class Wikipedia:
    """
    Entry point for querying a MediaWiki site.

    Parameters:
        client: Transport used for every request (default: HttpxTransport)
        config: URL and page-size settings (default: English Wikipedia)
        user_agent: User agent installed on `client` at construction
        max_redirects: Redirect hops followed by single-page operations

    Example:
        >>> wiki = Wikipedia()
        >>> wiki.search("keyboard")[:1]
        ['Computer keyboard']
        >>> wiki.page_from_title("Bikeshedding").get_summary()
        'The law of triviality is ...'
    """

    def __init__(
        self,
        client: Transport | None = None,
        config: WikipediaConfig | None = None,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
    ) -> None:
        self.client: Transport = client if client is not None else HttpxTransport()
        self.client.set_user_agent(user_agent)
        self.config = config if config is not None else WikipediaConfig()
        self.max_redirects = max_redirects

    def base_url(self) -> str:
        """Return the API URL."""
        return self.config.base_url()

    def set_base_url(self, base_url: str) -> None:
        """Update the URL template; see WikipediaConfig.set_base_url."""
        self.config.set_base_url(base_url)

    def query(self, params: Sequence[tuple[str, str]]) -> Any:
        """
        Send one request and return the parsed JSON response.

        Raises:
            TransportFailure: If the request fails
            DecodeFailure: If the response is not JSON
        """
        return execute(self.client, self.base_url(), params)

    def search(self, query: str) -> list[str]:
        """
        Search for `query` and return matching page titles.

        Returns at most `config.search_results` titles.
        """
        data = self.query(
            build_params(
                [
                    ("list", "search"),
                    ("srprop", ""),
                    ("srlimit", str(self.config.search_results)),
                    ("srsearch", query),
                ]
            )
        )
        return extract_titles(data, "search")

    def geosearch(self, latitude: float, longitude: float, radius: int) -> list[str]:
        """
        Return titles of pages within `radius` meters of a point.

        Parameters:
            latitude: Degrees, -90 to 90
            longitude: Degrees, -180 to 180
            radius: Meters, 10 to 10000

        Raises:
            InvalidParameter: If any argument is out of range (no request is made)

        Example:
            >>> wiki.geosearch(40.750556, -73.993611, 20)
            ['Madison Square Garden', ...]
        """
        if not -90.0 <= latitude <= 90.0:
            raise InvalidParameter("latitude")
        if not -180.0 <= longitude <= 180.0:
            raise InvalidParameter("longitude")
        if not 10 <= radius <= 10000:
            raise InvalidParameter("radius")

        data = self.query(
            build_params(
                [
                    ("list", "geosearch"),
                    ("gsradius", str(radius)),
                    ("gscoord", f"{latitude}|{longitude}"),
                    ("gslimit", str(self.config.search_results)),
                ]
            )
        )
        return extract_titles(data, "geosearch")

    def random_count(self, count: int) -> list[str]:
        """Return `count` random article titles."""
        if count < 1:
            raise InvalidParameter("count")
        data = self.query(
            build_params(
                [
                    ("list", "random"),
                    ("rnnamespace", "0"),
                    ("rnlimit", str(count)),
                ]
            )
        )
        return extract_titles(data, "random")

    def random(self) -> str | None:
        """Return one random article title, or None if the API returned none."""
        titles = self.random_count(1)
        return titles[0] if titles else None

    def get_languages(self) -> list[tuple[str, str]]:
        """
        List the languages the site knows about.

        Returns:
            (code, name) pairs, e.g. [("en", "English"), ("es", "español")]
        """
        data = self.query(
            build_params([("meta", "siteinfo"), ("siprop", "languages")])
        )
        return extract_list(data, "languages", _language)

    def page_from_title(self, title: str) -> Page:
        """Create a Page addressed by title."""
        return Page(self, Identifier.by_title(title))

    def page_from_pageid(self, pageid: str) -> Page:
        """Create a Page addressed by page id."""
        return Page(self, Identifier.by_pageid(pageid))
