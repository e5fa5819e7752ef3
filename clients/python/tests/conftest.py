"""Shared fixtures for HelixDB client tests."""

from collections.abc import Callable, Iterator

import httpx
import pytest

from helixdb import HelixClient

BASE_URL = "http://helix.test:6969"

ClientFactory = Callable[[httpx.Response | Exception], tuple[HelixClient, "Recorder"]]


class Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, response: httpx.Response | Exception):
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


@pytest.fixture
def make_client() -> Iterator[ClientFactory]:
    clients = []

    def factory(response: httpx.Response | Exception) -> tuple[HelixClient, Recorder]:
        recorder = Recorder(response)
        http = httpx.Client(transport=httpx.MockTransport(recorder))
        client = HelixClient(BASE_URL, http_client=http)
        clients.append(client)
        return client, recorder

    yield factory

    for client in clients:
        client.close()
