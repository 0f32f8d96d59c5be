"""
Integration test fixtures and configuration.

Integration tests drive the Lambda handler end to end against moto-backed
AWS services and a URL-routing fake HTTP source.
"""

from typing import Callable, Dict
from unittest.mock import MagicMock

import pytest
import requests

from tests.utils.fakes import build_response


class RemoteSource:
    """
    Fake HTTP server keyed by URL.

    Each route holds either a response factory or an exception to raise.
    Unknown URLs behave like a refused connection.
    """

    def __init__(self) -> None:
        self.routes: Dict[str, Callable[[], requests.Response] | Exception] = {}
        self.requested: list[str] = []
        self.session = MagicMock(spec=requests.Session)
        self.session.get.side_effect = self._get

    def serve(self, url: str, **response_kwargs) -> None:
        self.routes[url] = lambda: build_response(url=url, **response_kwargs)

    def fail(self, url: str, error: Exception) -> None:
        self.routes[url] = error

    def _get(self, url: str, **kwargs) -> requests.Response:
        self.requested.append(url)
        route = self.routes.get(url)
        if route is None:
            raise requests.ConnectionError(f"Failed to establish a new connection to {url}")
        if isinstance(route, Exception):
            raise route
        return route()


@pytest.fixture
def remote_source(monkeypatch) -> RemoteSource:
    """Route every submission download through a RemoteSource."""
    source = RemoteSource()
    monkeypatch.setattr("submissions.tools.fetch._get_session", lambda: source.session)
    return source
