"""Shared fixtures: a fake Metal API built on httpx.MockTransport."""
from __future__ import annotations

import sys
from pathlib import Path

import httpx
import pytest

repo_root = Path(__file__).resolve().parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from metal_client import ClientConfig, Metal  # noqa: E402

API_KEY = "api-key"
CLIENT_ID = "client-id"


class FakeApi:
    """Replays queued responses (or raises queued exceptions) and records every request."""

    def __init__(self, *responses: httpx.Response | Exception):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            return httpx.Response(200, json={"data": {}})
        nxt = self.responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


@pytest.fixture
def fake_api():
    return FakeApi


@pytest.fixture
def make_client():
    def _make(api: FakeApi, **cfg) -> Metal:
        cfg.setdefault("api_key", API_KEY)
        cfg.setdefault("client_id", CLIENT_ID)
        return Metal(ClientConfig(**cfg), transport=api.transport)

    return _make
