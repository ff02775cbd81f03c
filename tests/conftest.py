"""Shared test doubles for the Wikipedia client."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence
import json

import pytest

from wikiclient import Wikipedia


FIXTURES_DIR = Path(__file__).parent / "fixtures"


class RecordingTransport:
    """
    Transport that records every call and replays scripted responses.

    Responses are consumed in order; an Exception instance in the queue is
    raised instead of returned.
    """

    def __init__(self, responses: list[str | Exception] | None = None) -> None:
        self.user_agent: str | None = None
        self.urls: list[str] = []
        self.arguments: list[list[tuple[str, str]]] = []
        self.responses: list[str | Exception] = list(responses or [])

    def set_user_agent(self, user_agent: str) -> None:
        self.user_agent = user_agent

    def push(self, response: str | dict | Exception) -> None:
        if isinstance(response, dict):
            response = json.dumps(response)
        self.responses.append(response)

    def get(self, base_url: str, params: Sequence[tuple[str, str]]) -> str:
        self.urls.append(base_url)
        self.arguments.append([(k, v) for k, v in params])
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def load_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def wiki(transport: RecordingTransport) -> Wikipedia:
    return Wikipedia(transport)
