"""
Switchyard — Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Inventory:
    ├── make_scope:     builds a raw ASGI HTTP scope from a URL, headers and client
    ├── make_request:   same, wrapped in a Starlette Request
    ├── make_emitter:   mock ResponseEmitter with a canned EmitResult
    ├── asgi_channel:   (receive, send, messages) triple capturing ASGI output
    ├── templates_dir:  Jinja2 templates for error::404 and layout::default
    └── test_client:    HTTPX AsyncClient bound to a freshly created app
"""

import os
from typing import Dict, List, Optional, Tuple
from unittest.mock import MagicMock
from urllib.parse import urlsplit

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request

# Override settings for testing BEFORE any app imports
os.environ["LOG_LEVEL"] = "WARNING"

from switchyard.config import Settings  # noqa: E402
from switchyard.emitter.base import EmitResult, ResponseEmitter  # noqa: E402


def build_scope(
    url: str = "http://localhost/foo/bar",
    method: str = "GET",
    headers: Optional[Dict[str, str]] = None,
    client: Optional[Tuple[str, int]] = ("127.0.0.1", 50000),
) -> dict:
    parts = urlsplit(url)
    raw_headers = []
    if parts.netloc:
        raw_headers.append((b"host", parts.netloc.encode("latin-1")))
    for name, value in (headers or {}).items():
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

    server = None
    if parts.hostname:
        server = (parts.hostname, parts.port or (443 if parts.scheme == "https" else 80))

    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "scheme": parts.scheme or "http",
        "path": parts.path or "/",
        "raw_path": (parts.path or "/").encode("latin-1"),
        "query_string": parts.query.encode("latin-1"),
        "root_path": "",
        "headers": raw_headers,
        "client": client,
        "server": server,
    }


@pytest.fixture
def make_scope():
    return build_scope


@pytest.fixture
def make_request():
    """
    Usage:
        request = make_request(
            "http://localhost/foo/bar",
            headers={"X-Forwarded-Host": "api.example.com"},
            client=("192.168.1.1", 50000),
        )
    """
    def _make_request(url: str = "http://localhost/foo/bar", **kwargs) -> Request:
        return Request(build_scope(url, **kwargs))

    return _make_request


@pytest.fixture
def make_emitter():
    """Mock emitter; `emit` is an AsyncMock returning `result`."""
    def _make_emitter(result=EmitResult.HANDLED) -> MagicMock:
        emitter = MagicMock(spec=ResponseEmitter)
        emitter.emit.return_value = result
        return emitter

    return _make_emitter


@pytest.fixture
def asgi_channel():
    messages: List[dict] = []

    async def receive() -> dict:
        return {"type": "http.request", "body": b"", "more_body": False}

    async def send(message: dict) -> None:
        messages.append(message)

    return receive, send, messages


@pytest.fixture
def templates_dir(tmp_path):
    (tmp_path / "layout").mkdir()
    (tmp_path / "layout" / "default.html").write_text(
        "<html><body>{% block content %}{% endblock %}</body></html>"
    )
    (tmp_path / "error").mkdir()
    (tmp_path / "error" / "404.html").write_text(
        "{% extends layout|template %}"
        "{% block content %}Nothing at {{ request.url.path }}{% endblock %}"
    )
    return tmp_path


@pytest.fixture
def settings():
    return Settings()


@pytest_asyncio.fixture
async def test_client(settings):
    """
    HTTPX AsyncClient talking to an app created from the `settings` fixture.

    Override `settings` in a test module to change the wiring.
    """
    from switchyard.main import create_app

    app = create_app(settings)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
