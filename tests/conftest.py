"""Shared pytest fixtures for polyapi tests."""

from __future__ import annotations

import json
import threading
from collections.abc import Iterator
from datetime import datetime, timedelta
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any
from unittest.mock import patch

import pytest
from polyapi.config import Settings
from polyapi.db.reference_store import ReferenceStore
from polyapi.menus.common import Session


@pytest.fixture
def store() -> Iterator[ReferenceStore]:
    """Provide a fresh in-memory reference store."""
    with ReferenceStore.open(None) as s:
        yield s


@pytest.fixture
def ticking_clock() -> Iterator[list[datetime]]:
    """Make the store clock advance one second on every read.

    Yields the list of timestamps handed out so far.
    """
    issued: list[datetime] = []
    start = datetime(2024, 8, 26, 14, 25, 0)

    def _tick() -> datetime:
        issued.append(start + timedelta(seconds=len(issued)))
        return issued[-1]

    with patch("polyapi.db.reference_store._utcnow", side_effect=_tick):
        yield issued


@pytest.fixture
def session(store: ReferenceStore) -> Session:
    return Session(store=store, settings=Settings(http_timeout=5.0))


# -- Fake HTTP server for the API adapters ------------------------------------


class FakeApi:
    """Canned JSON responses keyed by request path, plus a request log."""

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, Any]] = {}
        self.requests: list[dict[str, Any]] = []
        self.url = ""

    def add(self, path: str, body: Any, status: int = 200) -> None:
        """Serve ``body`` for GET ``path``. Strings are sent verbatim."""
        self.routes[path] = (status, body)

    def handler_class(self) -> type[BaseHTTPRequestHandler]:
        api = self

        class Handler(BaseHTTPRequestHandler):
            def do_GET(self) -> None:
                path, _, query = self.path.partition("?")
                api.requests.append(
                    {
                        "path": path,
                        "query": query,
                        "user_agent": self.headers.get("User-Agent", ""),
                    }
                )
                status, body = api.routes.get(path, (404, {"detail": "Not Found"}))
                payload = (body if isinstance(body, str) else json.dumps(body)).encode()

                self.send_response(status)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(payload)))
                self.end_headers()
                self.wfile.write(payload)

            def log_message(self, *_args: Any) -> None:
                pass  # silence request logging

        return Handler


@pytest.fixture()
def fake_api() -> Iterator[FakeApi]:
    """Start a local HTTP server that answers with registered JSON bodies."""
    api = FakeApi()
    server = HTTPServer(("127.0.0.1", 0), api.handler_class())
    api.url = f"http://127.0.0.1:{server.server_address[1]}"
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield api
    server.shutdown()
    server.server_close()
