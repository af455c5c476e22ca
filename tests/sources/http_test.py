"""Tests for the shared HTTP helper."""

from __future__ import annotations

import socket

import pytest
from polyapi.sources.http import USER_AGENT, ApiError, _loggable, get_json


def _unused_port() -> int:
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestGetJson:
    def test_decodes_body(self, fake_api):
        fake_api.add("/ok", {"value": 1})

        assert get_json(f"{fake_api.url}/ok") == {"value": 1}

    def test_sends_user_agent(self, fake_api):
        fake_api.add("/ok", {})

        get_json(f"{fake_api.url}/ok")

        assert fake_api.requests[0]["user_agent"] == USER_AGENT

    def test_not_found_raises(self, fake_api):
        with pytest.raises(ApiError, match="404"):
            get_json(f"{fake_api.url}/missing")

    def test_connection_refused_raises(self):
        with pytest.raises(ApiError, match="failed"):
            get_json(f"http://127.0.0.1:{_unused_port()}/", timeout=2)


class TestLoggable:
    def test_masks_api_keys(self):
        params = {"function": "OVERVIEW", "apikey": "secret"}
        assert _loggable(params) == {"function": "OVERVIEW", "apikey": "***"}

    def test_none(self):
        assert _loggable(None) == {}
