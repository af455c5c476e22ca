"""Shared HTTP helper for the public API clients.

Every client issues a single blocking GET and decodes a JSON body.
Transport failures, non-2xx responses and undecodable bodies are all
raised as :class:`ApiError` so that the menu loop can report them and
carry on.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from polyapi.config import DEFAULT_HTTP_TIMEOUT

logger = logging.getLogger(__name__)

# api.weather.gov rejects requests without a User-Agent
USER_AGENT = "polyapi/0.1 (terminal client)"

_SECRET_PARAMS = {"apikey", "api_key"}


class ApiError(RuntimeError):
    """A public API call failed or returned something unusable."""


def _loggable(params: dict[str, Any] | None) -> dict[str, Any]:
    if not params:
        return {}
    return {k: ("***" if k in _SECRET_PARAMS else v) for k, v in params.items()}


def get_json(
    url: str,
    params: dict[str, Any] | None = None,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> Any:
    """GET a URL and decode its JSON body.

    Args:
        url: Absolute URL.
        params: Optional query parameters (URL-encoded by requests).
        timeout: Seconds to wait for the server.

    Returns:
        The decoded JSON document.

    Raises:
        ApiError: On connection errors, non-2xx status or invalid JSON.

    """
    logger.debug("GET %s params=%s", url, _loggable(params))
    try:
        resp = requests.get(
            url,
            params=params,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            timeout=timeout,
        )
    except requests.RequestException as exc:
        msg = f"GET {url} failed: {exc}"
        raise ApiError(msg) from exc

    if not resp.ok:
        msg = f"GET {url} returned {resp.status_code}: {resp.text[:200]}"
        raise ApiError(msg)

    try:
        return resp.json()
    except ValueError as exc:
        msg = f"GET {url} returned invalid JSON: {exc}"
        raise ApiError(msg) from exc
