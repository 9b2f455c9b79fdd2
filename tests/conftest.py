"""
Shared fixtures for the idmgmt tests.
"""

import json
from typing import Any, List, Optional

import httpx
import pytest


BASE_URL = "https://tenant.test/api/v2"


class RecordingTransport:
    """Mock transport that records requests and replays a canned response."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.payload: Any = {}
        self.error: Optional[Exception] = None
        self.transport = httpx.MockTransport(self._handle)

    def respond(self, status_code: int = 200, payload: Any = None):
        self.status_code = status_code
        self.payload = payload

    def fail_with(self, error: Exception):
        self.error = error

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content) if self.last.content else None

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.payload is None:
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json=self.payload)


@pytest.fixture
def recorder():
    """Recording httpx transport."""
    return RecordingTransport()


@pytest.fixture
def options(recorder):
    """Manager options wired to the recording transport."""
    return {
        "base_url": BASE_URL,
        "headers": {"Authorization": "Bearer test-token"},
        "transport": recorder.transport,
    }
