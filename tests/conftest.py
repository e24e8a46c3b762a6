"""Shared fixtures for the svcutils test-suite."""

import socket
from collections.abc import Callable

import httpx
import pytest

from svcutils.http import CookieStore


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it handled."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request):
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    @property
    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def cookie_store() -> CookieStore:
    return CookieStore()


@pytest.fixture
def unused_port() -> int:
    """A local TCP port nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """Factory building a RecordingTransport around a handler."""
    return RecordingTransport
