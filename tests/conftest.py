"""Pytest configuration and shared fixtures."""

from typing import Callable, Dict

import httpx
import pytest

from feed_articles.config import Settings


@pytest.fixture
def settings():
    """Settings independent of the FEED_* environment."""
    return Settings()


@pytest.fixture
def mock_client() -> Callable[[Dict[str, httpx.Response]], httpx.AsyncClient]:
    """
    Build an AsyncClient whose responses come from a URL -> Response map.

    URLs missing from the map fail with a connection error.
    """
    def _build(routes: Dict[str, httpx.Response]) -> httpx.AsyncClient:
        def handler(request: httpx.Request) -> httpx.Response:
            response = routes.get(str(request.url))
            if response is None:
                raise httpx.ConnectError("Name or service not known", request=request)
            # fresh copy so a route can be served more than once
            return httpx.Response(response.status_code, content=response.content, headers=response.headers)

        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _build
