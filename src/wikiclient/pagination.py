"""
Continuation-driven pagination.

The API returns long collections in bounded pages. Each page carries an
optional `continue` object; echoing it back yields the next page, and its
absence marks the end. PaginationEngine turns that into a single lazy Python
iterator of typed items.

Basic usage:
    >>> page = wiki.page_from_title("Argentina")
    >>> for image in page.get_images():
    ...     print(image.url)

Stopping early fetches nothing more:
    >>> first_five = page.get_links().take(5)
"""

from __future__ import annotations

import enum
import logging
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterator, TypeVar

from .config import WikipediaConfig
from .errors import ContinuationLoop, WikipediaError
from .models import Category, Identifier, Image, LangLink, Link, Reference
from .navigation import extract_pages, parse_continuation
from .query import Continuation, build_params

if TYPE_CHECKING:
    from .client import Wikipedia

T = TypeVar("T")

LOGGER = logging.getLogger("wikiclient.pagination")

RawPage = tuple[list[Any], Continuation | None]
PageFetcher = Callable[[Continuation | None], RawPage]


class Collection(enum.Enum):
    """Paginated per-page collections."""

    IMAGES = "images"
    REFERENCES = "references"
    LINKS = "links"
    CATEGORIES = "categories"
    LANGLINKS = "langlinks"


@dataclass(frozen=True)
class CollectionSpec:
    """
    How to request and decode one collection.

    Attributes:
        params: Builds the operation parameters from the client config
        item_key: Key of the item array inside the returned page; None when
            every returned page is itself an item (generator queries)
        decoder: Maps one raw element to a record, or None to drop it
    """

    params: Callable[[WikipediaConfig], list[tuple[str, str]]]
    item_key: str | None
    decoder: Callable[[Any], Any]


COLLECTIONS: dict[Collection, CollectionSpec] = {
    Collection.IMAGES: CollectionSpec(
        params=lambda c: [
            ("generator", "images"),
            ("gimlimit", c.images_results),
            ("prop", "imageinfo"),
            ("iiprop", "url"),
        ],
        item_key=None,
        decoder=Image.from_value,
    ),
    Collection.REFERENCES: CollectionSpec(
        params=lambda c: [("prop", "extlinks"), ("ellimit", c.links_results)],
        item_key="extlinks",
        decoder=Reference.from_value,
    ),
    Collection.LINKS: CollectionSpec(
        params=lambda c: [
            ("prop", "links"),
            ("plnamespace", "0"),
            ("pllimit", c.links_results),
        ],
        item_key="links",
        decoder=Link.from_value,
    ),
    Collection.CATEGORIES: CollectionSpec(
        params=lambda c: [("prop", "categories"), ("cllimit", c.categories_results)],
        item_key="categories",
        decoder=Category.from_value,
    ),
    Collection.LANGLINKS: CollectionSpec(
        params=lambda c: [("prop", "langlinks"), ("lllimit", c.links_results)],
        item_key="langlinks",
        decoder=LangLink.from_value,
    ),
}


def fetch_collection_page(
    wikipedia: Wikipedia,
    identifier: Identifier,
    collection: Collection,
    continuation: Continuation | None,
) -> RawPage:
    """
    Request one page of `collection` for the page at `identifier`.

    Parameters:
        wikipedia: Client providing config and transport
        identifier: Page the collection belongs to
        collection: Which collection to request
        continuation: Parameters from the previous page, None for the first

    Returns:
        Tuple of (raw items, next continuation or None)

    Raises:
        TransportFailure, DecodeFailure: If the request fails
        MissingPath: If the response has no query.pages object
    """
    spec = COLLECTIONS[collection]
    params = build_params(
        spec.params(wikipedia.config),
        identifier=identifier.query_param(),
        paginated=True,
        continuation=continuation,
    )
    data = wikipedia.query(params)
    pages = extract_pages(data)
    next_cont = parse_continuation(data)

    if spec.item_key is None:
        return pages, next_cont

    if not pages:
        return [], None
    items = pages[0].get(spec.item_key) if isinstance(pages[0], dict) else None
    return (items if isinstance(items, list) else []), next_cont


class EngineState(enum.Enum):
    FRESH = "fresh"
    FETCHING = "fetching"
    READY = "ready"
    EXHAUSTED = "exhausted"


class PaginationEngine(Iterator[T]):
    """
    Lazy iterator over every item of a paginated collection.

    The first page is requested on construction (errors there propagate).
    Later pages are requested only when the buffered page has been drained
    and the caller asks for another item, so at most one page is held.

    The stream ends when a fetched page carries no continuation. A page with
    zero items but a continuation triggers another request.

    If a later page fails to load, the iterator ends and the error is kept on
    `error`; with `strict=True` it is raised from `__next__` instead. Either
    way the engine is exhausted afterwards and never requests again.

    Every continuation sent is remembered for the life of the engine, so a
    token the server repeats, even many pages later, is never requested
    twice. That history grows by one small tuple per page fetched.

    Instances are single-pass and not safe to advance from several threads
    at once.
    """

    def __init__(
        self,
        fetch: PageFetcher,
        decode: Callable[[Any], T | None],
        *,
        strict: bool = False,
        name: str = "",
    ) -> None:
        self._fetch_page = fetch
        self._decode = decode
        self.strict = strict
        self.name = name
        self._buffer: deque[Any] = deque()
        self._continuation: Continuation | None = None
        self._consumed: set[tuple[tuple[str, str], ...]] = set()
        self._state = EngineState.FRESH
        self._error: WikipediaError | None = None
        self.pages_fetched = 0

        # First page: failures here are the caller's to handle.
        self._fetch(None)

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def error(self) -> WikipediaError | None:
        """Error that ended the stream early, if any."""
        return self._error

    @property
    def exhausted(self) -> bool:
        return self._state is EngineState.EXHAUSTED

    def _fetch(self, continuation: Continuation | None) -> None:
        if continuation is not None:
            self._consumed.add(tuple(continuation))
        self._state = EngineState.FETCHING
        try:
            items, next_cont = self._fetch_page(continuation)
        except BaseException:
            # Failed or interrupted mid-fetch: never resume from a half-applied state.
            self._state = EngineState.EXHAUSTED
            raise
        self.pages_fetched += 1
        self._buffer = deque(items)
        self._continuation = next_cont
        self._state = EngineState.READY
        LOGGER.debug(
            "page_fetched",
            extra={
                "collection": self.name,
                "items": len(items),
                "has_continuation": next_cont is not None,
                "page": self.pages_fetched,
            },
        )

    def _abort(self, error: WikipediaError) -> None:
        self._state = EngineState.EXHAUSTED
        self._buffer.clear()
        self._continuation = None
        self._error = error
        LOGGER.warning(
            "pagination_aborted",
            extra={
                "collection": self.name,
                "error": str(error),
                "pages_fetched": self.pages_fetched,
            },
        )
        if self.strict:
            raise error

    def __iter__(self) -> PaginationEngine[T]:
        return self

    def __next__(self) -> T:
        while self._state is not EngineState.EXHAUSTED:
            while self._buffer:
                item = self._decode(self._buffer.popleft())
                if item is not None:
                    return item

            cont = self._continuation
            if cont is None:
                self._state = EngineState.EXHAUSTED
                break

            if tuple(cont) in self._consumed:
                self._abort(ContinuationLoop(cont))
                break

            try:
                self._fetch(cont)
            except WikipediaError as e:
                self._abort(e)
                break

        raise StopIteration

    def collect(self) -> list[T]:
        """Consume the remaining items into a list."""
        return list(self)

    def take(self, n: int) -> list[T]:
        """Return at most `n` further items, fetching only what is needed."""
        out: list[T] = []
        while len(out) < n:
            try:
                out.append(next(self))
            except StopIteration:
                break
        return out
