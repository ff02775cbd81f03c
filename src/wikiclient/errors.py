"""
Exception taxonomy for the Wikipedia client.

Every failure raised by the client derives from WikipediaError, so callers can
catch one type at the boundary and still branch on the concrete cause.
"""

from __future__ import annotations


class WikipediaError(Exception):
    """Base class for all client errors."""


class TransportFailure(WikipediaError):
    """The transport could not complete the request (connection or HTTP status)."""


class DecodeFailure(WikipediaError):
    """The response body is not valid JSON."""


class MissingPath(WikipediaError):
    """
    A well-formed response lacks an expected key or has the wrong shape.

    Attributes:
        path: Dotted path that could not be resolved (e.g. "query.pages")
    """

    def __init__(self, path: str, message: str | None = None) -> None:
        self.path = path
        super().__init__(message or f"Missing or malformed JSON path: {path}")


class InvalidParameter(WikipediaError, ValueError):
    """
    A caller-supplied value is outside its documented range.

    Attributes:
        parameter: Name of the offending parameter
    """

    def __init__(self, parameter: str, message: str | None = None) -> None:
        self.parameter = parameter
        super().__init__(message or f"Invalid parameter: {parameter}")


class RedirectLoop(WikipediaError):
    """
    Redirect resolution exceeded the hop limit or revisited a title.

    Attributes:
        chain: Titles visited, in order
    """

    def __init__(self, chain: tuple[str, ...], message: str) -> None:
        self.chain = chain
        super().__init__(message)


class ContinuationLoop(WikipediaError):
    """The server returned a continuation that was already consumed."""

    def __init__(self, continuation: list[tuple[str, str]]) -> None:
        self.continuation = continuation
        super().__init__(f"Continuation repeated by server: {continuation!r}")
