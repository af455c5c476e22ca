"""US Census Bureau geocoder adapter.

Resolves a one-line street address to its normalized form and
coordinates. Only the best (first) match is used.

Note:
    No API key is required. Benchmark 4 is the current public
    address range dataset.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from polyapi.config import DEFAULT_HTTP_TIMEOUT
from polyapi.sources.http import ApiError, get_json

logger = logging.getLogger(__name__)

CENSUS_BASE_URL = "https://geocoding.geo.census.gov/geocoder"

_BENCHMARK = "4"


@dataclass(frozen=True)
class GeocodeMatch:
    matched_address: str
    lat: float
    lon: float


def geocode_address(
    address: str,
    base_url: str = CENSUS_BASE_URL,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> GeocodeMatch | None:
    """Look up the coordinates of a street address.

    Args:
        address: Free-form address, e.g. "432 Park Ave, 10022".
        base_url: Geocoder root URL.
        timeout: Request timeout in seconds.

    Returns:
        The first address match, or None if the geocoder found nothing.

    Raises:
        ValueError: If address is empty.
        ApiError: If the request fails or the response is malformed.

    """
    if not address or not address.strip():
        msg = "address must be a non-empty string"
        raise ValueError(msg)

    data = get_json(
        f"{base_url}/locations/onelineaddress",
        params={
            "address": address.strip(),
            "benchmark": _BENCHMARK,
            "format": "json",
        },
        timeout=timeout,
    )

    try:
        matches = data["result"]["addressMatches"]
    except (KeyError, TypeError) as exc:
        msg = f"Unexpected geocoder response: missing {exc}"
        raise ApiError(msg) from exc

    if not matches:
        logger.info("No geocoder match for %r", address)
        return None

    best = matches[0]
    try:
        # The geocoder reports x = longitude, y = latitude
        return GeocodeMatch(
            matched_address=str(best["matchedAddress"]),
            lat=float(best["coordinates"]["y"]),
            lon=float(best["coordinates"]["x"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        msg = f"Unexpected geocoder match: {exc}"
        raise ApiError(msg) from exc
