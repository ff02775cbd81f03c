"""
Path extraction from parsed API responses.

Responses are generic JSON trees. These helpers locate values at fixed paths
(query.pages, query.<list>, continue) and raise MissingPath when the tree does
not have the expected shape.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from .errors import MissingPath

T = TypeVar("T")

Segment = str | int


def _dotted(segments: tuple[Segment, ...]) -> str:
    return ".".join(str(s) for s in segments)


def find_path(data: Any, *segments: Segment) -> Any | None:
    """
    Walk `segments` into `data`, returning None if any step is missing.

    String segments index objects, integer segments index arrays.

    Example:
        >>> find_path({"query": {"redirects": [{"to": "B"}]}}, "query", "redirects", 0, "to")
        'B'
        >>> find_path({"query": {}}, "query", "pages") is None
        True
    """
    node = data
    for seg in segments:
        if isinstance(seg, int):
            if not isinstance(node, list) or not -len(node) <= seg < len(node):
                return None
            node = node[seg]
        else:
            if not isinstance(node, dict) or seg not in node:
                return None
            node = node[seg]
    return node


def get_path(data: Any, *segments: Segment) -> Any:
    """
    Walk `segments` into `data`.

    Raises:
        MissingPath: If any segment is absent or of the wrong shape
    """
    node = find_path(data, *segments)
    if node is None:
        raise MissingPath(_dotted(segments))
    return node


def extract_list(
    data: Any,
    list_name: str,
    decoder: Callable[[Any], T | None],
) -> list[T]:
    """
    Decode every element of `query.<list_name>`.

    Elements the decoder rejects (returns None for) are dropped; order is
    preserved.

    Raises:
        MissingPath: If query.<list_name> is absent or not an array
    """
    items = get_path(data, "query", list_name)
    if not isinstance(items, list):
        raise MissingPath(f"query.{list_name}")
    result: list[T] = []
    for raw in items:
        item = decoder(raw)
        if item is not None:
            result.append(item)
    return result


def _title(value: Any) -> str | None:
    title = find_path(value, "title")
    return title if isinstance(title, str) else None


def extract_titles(data: Any, list_name: str) -> list[str]:
    """Return the `title` of every element of `query.<list_name>`."""
    return extract_list(data, list_name, _title)


def extract_pages(data: Any) -> list[Any]:
    """
    Return the values of the `query.pages` object, in document order.

    The keys (page ids or negative placeholders) are not semantic.

    Raises:
        MissingPath: If query.pages is absent or not an object
    """
    pages = get_path(data, "query", "pages")
    if not isinstance(pages, dict):
        raise MissingPath("query.pages")
    return list(pages.values())


def first_page(data: Any) -> Any | None:
    """Return the first value of `query.pages`, or None if there is none."""
    pages = find_path(data, "query", "pages")
    if not isinstance(pages, dict) or not pages:
        return None
    return next(iter(pages.values()))


def first_page_key(data: Any) -> str:
    """
    Return the first key of `query.pages`.

    Raises:
        MissingPath: If query.pages is absent, not an object, or empty
    """
    pages = get_path(data, "query", "pages")
    if not isinstance(pages, dict) or not pages:
        raise MissingPath("query.pages")
    return next(iter(pages))


def _continuation_value(key: str, value: Any) -> str:
    if value is None:
        return ""
    # bool is a subclass of int, so it has to be checked first
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, str):
        return value
    raise MissingPath(f"continue.{key}", f"Unsupported continuation value for {key!r}")


def parse_continuation(data: Any) -> list[tuple[str, str]] | None:
    """
    Extract the `continue` parameters of a response.

    Values are converted to strings: null -> "", booleans -> "1"/"0",
    numbers -> decimal text, strings unchanged.

    Returns:
        Ordered (key, value) pairs, or None when the response has no
        `continue` object (the end of the sequence)

    Raises:
        MissingPath: If a continuation value is an array or object

    Example:
        >>> parse_continuation({"continue": {"lol": "1", "n": 2, "b": True}})
        [('lol', '1'), ('n', '2'), ('b', '1')]
        >>> parse_continuation({"query": {}}) is None
        True
    """
    cont = find_path(data, "continue")
    if not isinstance(cont, dict):
        return None
    return [(key, _continuation_value(key, value)) for key, value in cont.items()]
