"""Runtime settings read from the environment.

Variables:
    POLYAPI_DB_PATH       Location of the reference store file.
    POLYAPI_HTTP_TIMEOUT  Request timeout in seconds (default 30).
    POLYAPI_VERBOSE       "1", "true" or "yes" enables DEBUG logging.

API credentials (``ALPHAVANTAGE_API_KEY``) are not part of the settings.
They are read at the point of use so that a missing key aborts only
the operation that needs it.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from polyapi.db.connection import DEFAULT_DB_PATH

DEFAULT_HTTP_TIMEOUT = 30.0

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    db_path: Path = DEFAULT_DB_PATH
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    verbose: bool = False


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from environment variables.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.

    Returns:
        Populated settings; unset variables fall back to defaults.

    Raises:
        ValueError: If POLYAPI_HTTP_TIMEOUT is not a positive number.

    """
    env = os.environ if environ is None else environ

    db_path = Path(env.get("POLYAPI_DB_PATH") or DEFAULT_DB_PATH)

    raw_timeout = env.get("POLYAPI_HTTP_TIMEOUT", "").strip()
    timeout = DEFAULT_HTTP_TIMEOUT
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError as exc:
            msg = f"POLYAPI_HTTP_TIMEOUT must be a number, got {raw_timeout!r}"
            raise ValueError(msg) from exc
        if timeout <= 0:
            msg = f"POLYAPI_HTTP_TIMEOUT must be positive, got {raw_timeout!r}"
            raise ValueError(msg)

    verbose = env.get("POLYAPI_VERBOSE", "").strip().lower() in _TRUTHY

    return Settings(db_path=db_path, http_timeout=timeout, verbose=verbose)
