from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Sequence

import httpx

from .errors import TransportFailure

DEFAULT_TIMEOUT = 10.0

LOGGER = logging.getLogger("wikiclient.http")


class Transport(Protocol):
    """Minimal interface for something that can perform one API request."""

    user_agent: str

    def set_user_agent(self, user_agent: str) -> None:
        ...

    def get(self, base_url: str, params: Sequence[tuple[str, str]]) -> str:
        ...


@dataclass
class HttpxTransport:
    """httpx-backed transport.

    Sends a GET to `base_url` with the parameters in the given order and
    returns the response text. Connection errors and non-2xx statuses are
    raised as TransportFailure.

    A shared `client` may be passed to reuse connections; otherwise a new
    httpx.Client is opened per request. Either way redirects are followed and
    `timeout` applies. `transport` is handed to that client
    and exists mainly so tests can plug in httpx.MockTransport.
    """

    user_agent: str = ""
    timeout: float = DEFAULT_TIMEOUT
    client: httpx.Client | None = None
    transport: httpx.BaseTransport | None = None

    def set_user_agent(self, user_agent: str) -> None:
        self.user_agent = user_agent

    def get(self, base_url: str, params: Sequence[tuple[str, str]]) -> str:
        headers = {"User-Agent": self.user_agent}
        try:
            if self.client is not None:
                resp = self.client.get(
                    base_url,
                    params=list(params),
                    headers=headers,
                    follow_redirects=True,
                    timeout=self.timeout,
                )
                resp.raise_for_status()
                return resp.text

            with httpx.Client(
                timeout=self.timeout, follow_redirects=True, transport=self.transport
            ) as client:
                resp = client.get(base_url, params=list(params), headers=headers)
                resp.raise_for_status()
                return resp.text
        except httpx.HTTPError as e:
            LOGGER.debug("http_error", extra={"base_url": base_url, "error": str(e)})
            raise TransportFailure(f"Request to {base_url} failed: {e}") from e
