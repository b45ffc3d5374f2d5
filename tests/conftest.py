"""Pytest configuration and fixtures."""

import json
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from core.config import AuthSettings, Config, UpstreamSettings
from services.forwarder import Forwarder
from services.upstream import UpstreamClient

WEBHOOK_URL = "https://hooks.example.com/webhook"


class RecordingLogger:
    """RequestLogger that keeps calls in memory."""

    def __init__(self):
        self.incoming: list[tuple] = []
        self.forwards: list[tuple] = []
        self.responses: list[tuple] = []
        self.errors: list[tuple] = []

    def log_incoming(self, method: str, path: str, headers: dict[str, str], body: Any) -> None:
        self.incoming.append((method, path, headers, body))

    def log_forward(self, method: str, url: str, headers: dict[str, str], body: str | None) -> None:
        self.forwards.append((method, url, headers, body))

    def log_response(self, method: str, url: str, status: int, message: str) -> None:
        self.responses.append((method, url, status, message))

    def log_error(self, route: str, status: int, message: str) -> None:
        self.errors.append((route, status, message))


class FakeUpstream:
    """Records every request and answers with a canned response."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.content: bytes = json.dumps({"message": "hi"}).encode()
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, content=self.content)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_config(
    webhook_url: str = WEBHOOK_URL,
    api_key: str = "",
    username: str = "",
    password: str = "",
) -> Config:
    return Config(
        upstream=UpstreamSettings(webhook_url=webhook_url, username=username, password=password),
        auth=AuthSettings(api_key=api_key),
    )


@pytest.fixture
def config():
    """Default config: no API key, no upstream credentials."""
    return make_config()


@pytest.fixture
def request_logger():
    return RecordingLogger()


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def forwarder_factory(upstream, request_logger):
    """Build a Forwarder around the fake upstream for a given config."""
    def factory(config: Config) -> Forwarder:
        client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
        return Forwarder(config=config, logger=request_logger, upstream=UpstreamClient(client))

    return factory


@pytest.fixture
def forwarder(forwarder_factory, config):
    return forwarder_factory(config)


@pytest.fixture
def client_factory(upstream, request_logger):
    """Build a TestClient for the full app with the fake upstream."""
    opened: list[TestClient] = []

    def factory(config: Config) -> TestClient:
        app = create_app(config, request_logger, transport=httpx.MockTransport(upstream))
        test_client = TestClient(app)
        test_client.__enter__()
        opened.append(test_client)
        return test_client

    yield factory

    for test_client in opened:
        test_client.__exit__(None, None, None)


@pytest.fixture
def client(client_factory, config):
    """FastAPI test client."""
    return client_factory(config)
