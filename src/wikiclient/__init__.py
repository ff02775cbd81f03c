"""
Client for the MediaWiki query API.

Basic usage:
    >>> from wikiclient import Wikipedia
    >>>
    >>> wiki = Wikipedia()
    >>> page = wiki.page_from_title("Bikeshedding")
    >>> print(page.get_summary())

Paginated collections are lazy iterators:
    >>> for link in page.get_links():
    ...     print(link.title)

Plugging in another transport (anything with `get` and `set_user_agent`):
    >>> wiki = Wikipedia(client=MyTransport())
"""

from .client import DEFAULT_USER_AGENT, Wikipedia
from .config import WikipediaConfig
from .errors import (
    ContinuationLoop,
    DecodeFailure,
    InvalidParameter,
    MissingPath,
    RedirectLoop,
    TransportFailure,
    WikipediaError,
)
from .http import HttpxTransport, Transport
from .models import Category, Identifier, Image, LangLink, Link, Reference
from .page import Page
from .pagination import Collection, EngineState, PaginationEngine

__all__ = [
    # Client
    "Wikipedia",
    "WikipediaConfig",
    "Page",
    "DEFAULT_USER_AGENT",
    # Transport
    "Transport",
    "HttpxTransport",
    # Pagination
    "PaginationEngine",
    "EngineState",
    "Collection",
    # Models
    "Identifier",
    "Image",
    "Reference",
    "Link",
    "Category",
    "LangLink",
    # Errors
    "WikipediaError",
    "TransportFailure",
    "DecodeFailure",
    "MissingPath",
    "InvalidParameter",
    "RedirectLoop",
    "ContinuationLoop",
]
