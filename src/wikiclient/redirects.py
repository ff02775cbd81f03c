"""
Server-declared redirect handling.

Single-page operations request `redirects` resolution; when the response names
a redirect target, the whole operation is re-issued against that title.
RedirectChain bounds how far that can go.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .errors import RedirectLoop
from .navigation import find_path

DEFAULT_MAX_REDIRECTS = 10

LOGGER = logging.getLogger("wikiclient.redirects")


def redirect_target(data: Any) -> str | None:
    """
    Return the redirect target declared by a response, if any.

    Example:
        >>> redirect_target({"query": {"redirects": [{"from": "A", "to": "B"}]}})
        'B'
        >>> redirect_target({"query": {"pages": {}}}) is None
        True
    """
    target = find_path(data, "query", "redirects", 0, "to")
    return target if isinstance(target, str) else None


@dataclass(frozen=True)
class RedirectChain:
    """
    Titles visited while resolving redirects for one operation.

    Attributes:
        titles: Redirect targets followed so far, in order
        max_redirects: Maximum number of hops allowed
        origin: Title the operation started from, if it was addressed by
            title. A redirect back to it is a cycle but it is not a hop.
    """

    titles: tuple[str, ...] = ()
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    origin: str | None = None

    @property
    def depth(self) -> int:
        return len(self.titles)

    def follow(self, target: str) -> RedirectChain:
        """
        Return the chain extended by `target`.

        Raises:
            RedirectLoop: If `target` was already visited or the hop limit
                would be exceeded
        """
        if target == self.origin or target in self.titles:
            raise RedirectLoop(
                self.titles + (target,), f"Redirect cycle detected at {target!r}"
            )
        if self.depth >= self.max_redirects:
            raise RedirectLoop(
                self.titles + (target,),
                f"Exceeded {self.max_redirects} redirects while resolving {target!r}",
            )
        LOGGER.info("redirect_followed", extra={"target": target, "depth": self.depth + 1})
        return RedirectChain(
            titles=self.titles + (target,),
            max_redirects=self.max_redirects,
            origin=self.origin,
        )
