"""
Request composition and execution.

Builds the ordered parameter list for one API call and runs it through a
transport, returning the parsed JSON tree.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Sequence

from .errors import DecodeFailure, TransportFailure, WikipediaError
from .http import Transport

LOGGER = logging.getLogger("wikiclient.query")

Params = list[tuple[str, str]]
Continuation = list[tuple[str, str]]

CONTINUE_SENTINEL = ("continue", "")


def build_params(
    operation_params: Sequence[tuple[str, str]],
    *,
    action: str = "query",
    identifier: tuple[str, str] | None = None,
    paginated: bool = False,
    continuation: Continuation | None = None,
) -> Params:
    """
    Compose the parameter list for one request.

    Order is: operation parameters, then format/action, then the identifier
    pair, then continuation parameters. A paginated request without a
    continuation ends with the `continue=""` sentinel that starts a new
    continuation sequence on the server.

    Parameters:
        operation_params: Parameters specific to the operation
        action: API action ("query" or "parse")
        identifier: Pair addressing the page, e.g. ("titles", "Foo")
        paginated: Whether this is a continuation-driven request
        continuation: Parameters returned by the previous page, if any

    Returns:
        Ordered list of (name, value) pairs

    Example:
        >>> build_params([("prop", "links")], identifier=("titles", "World"), paginated=True)
        [('prop', 'links'), ('format', 'json'), ('action', 'query'), ('titles', 'World'), ('continue', '')]
    """
    params: Params = list(operation_params)
    params.append(("format", "json"))
    params.append(("action", action))
    if identifier is not None:
        params.append(identifier)
    if continuation is not None:
        params.extend(continuation)
    elif paginated:
        params.append(CONTINUE_SENTINEL)
    return params


def execute(transport: Transport, base_url: str, params: Sequence[tuple[str, str]]) -> Any:
    """
    Run one request and parse the response.

    Parameters:
        transport: Transport performing the GET
        base_url: API endpoint
        params: Ordered request parameters

    Returns:
        Parsed JSON value

    Raises:
        TransportFailure: If the transport fails or reports a bad status
        DecodeFailure: If the response text is not valid JSON
    """
    LOGGER.debug(
        "api_request",
        extra={"base_url": base_url, "params": [name for name, _ in params]},
    )
    try:
        text = transport.get(base_url, params)
    except WikipediaError:
        raise
    except Exception as e:
        # Third-party transports may raise anything; normalize it.
        raise TransportFailure(f"Request to {base_url} failed: {e}") from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeFailure(f"Invalid JSON from {base_url}: {e}") from e
