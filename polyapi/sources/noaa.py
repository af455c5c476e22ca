"""NOAA National Weather Service (api.weather.gov) adapter.

A forecast lookup takes two hops: ``/points/{lat},{lon}`` returns the
grid-specific forecast URLs, which are then fetched as-is. Observation
stations near the point and their latest observation are separate
endpoints.

Note:
    No API key is required, but the service rejects requests that do
    not send a User-Agent (see ``polyapi.sources.http``).

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from polyapi.config import DEFAULT_HTTP_TIMEOUT
from polyapi.sources.http import ApiError, get_json

logger = logging.getLogger(__name__)

NOAA_BASE_URL = "https://api.weather.gov"

DEFAULT_STATION_LIMIT = 4


@dataclass(frozen=True)
class GridPoint:
    forecast_url: str
    forecast_hourly_url: str


@dataclass(frozen=True)
class ForecastPeriod:
    number: int
    name: str
    start_time: str
    is_daytime: bool
    temperature: int
    temperature_unit: str
    short_forecast: str
    detailed_forecast: str


@dataclass(frozen=True)
class Station:
    name: str
    identifier: str
    lat: float
    lon: float


@dataclass(frozen=True)
class Observation:
    """Latest station observation. Measurements NOAA reports as null are None.

    Temperatures are in Celsius, wind speed in km/h, pressure in Pa.
    """

    timestamp: str
    description: str
    temperature: float | None = None
    dewpoint: float | None = None
    wind_speed: float | None = None
    wind_direction: float | None = None
    relative_humidity: float | None = None
    barometric_pressure: float | None = None


def _point_coords(lat: float, lon: float) -> str:
    # api.weather.gov redirects requests with more than four decimals
    return f"{lat:.4f},{lon:.4f}"


def get_point(
    lat: float,
    lon: float,
    base_url: str = NOAA_BASE_URL,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> GridPoint:
    """Resolve coordinates to the forecast endpoints for their grid cell.

    Raises:
        ApiError: If the point is outside NOAA coverage or the request fails.

    """
    data = get_json(
        f"{base_url}/points/{_point_coords(lat, lon)}", timeout=timeout
    )
    try:
        props = data["properties"]
        return GridPoint(
            forecast_url=props["forecast"],
            forecast_hourly_url=props["forecastHourly"],
        )
    except (KeyError, TypeError) as exc:
        msg = f"Unexpected NOAA points response: missing {exc}"
        raise ApiError(msg) from exc


def _parse_periods(data: Any) -> list[ForecastPeriod]:
    try:
        raw_periods = data["properties"]["periods"]
        return [
            ForecastPeriod(
                number=int(p["number"]),
                name=str(p.get("name", "")),
                start_time=str(p["startTime"]),
                is_daytime=bool(p.get("isDaytime", False)),
                temperature=int(p["temperature"]),
                temperature_unit=str(p.get("temperatureUnit", "")),
                short_forecast=str(p.get("shortForecast", "")),
                detailed_forecast=str(p.get("detailedForecast", "")),
            )
            for p in raw_periods
        ]
    except (KeyError, TypeError, ValueError) as exc:
        msg = f"Unexpected NOAA forecast response: {exc}"
        raise ApiError(msg) from exc


def get_forecast(
    forecast_url: str,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> list[ForecastPeriod]:
    """Fetch the 12-hour-period forecast from a grid point's forecast URL."""
    return _parse_periods(get_json(forecast_url, timeout=timeout))


def get_hourly_forecast(
    forecast_hourly_url: str,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> list[ForecastPeriod]:
    """Fetch the hourly forecast from a grid point's hourly forecast URL."""
    return _parse_periods(get_json(forecast_hourly_url, timeout=timeout))


def current_temperature(periods: list[ForecastPeriod]) -> str | None:
    """Return the first period's temperature with its unit, e.g. "72F".

    Returns:
        The temperature text, or None if there are no periods.

    """
    if not periods:
        return None
    first = periods[0]
    return f"{first.temperature}{first.temperature_unit}"


def get_nearest_stations(
    lat: float,
    lon: float,
    limit: int = DEFAULT_STATION_LIMIT,
    base_url: str = NOAA_BASE_URL,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> list[Station]:
    """List observation stations near a point, nearest first.

    Args:
        lat: Latitude of the point.
        lon: Longitude of the point.
        limit: Maximum number of stations to return.
        base_url: API root URL.
        timeout: Request timeout in seconds.

    Returns:
        Up to ``limit`` stations.

    Raises:
        ValueError: If limit is not positive.
        ApiError: If the request fails or the response is malformed.

    """
    if limit < 1:
        msg = f"limit must be positive, got {limit}"
        raise ValueError(msg)

    data = get_json(
        f"{base_url}/points/{_point_coords(lat, lon)}/stations", timeout=timeout
    )
    try:
        features = data["features"][:limit]
        # GeoJSON coordinates are [lon, lat]
        return [
            Station(
                name=str(f["properties"]["name"]),
                identifier=str(f["properties"]["stationIdentifier"]),
                lat=float(f["geometry"]["coordinates"][1]),
                lon=float(f["geometry"]["coordinates"][0]),
            )
            for f in features
        ]
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        msg = f"Unexpected NOAA stations response: {exc}"
        raise ApiError(msg) from exc


def _measurement(props: dict[str, Any], key: str) -> float | None:
    value = (props.get(key) or {}).get("value")
    return None if value is None else float(value)


def get_latest_observation(
    station_id: str,
    base_url: str = NOAA_BASE_URL,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> Observation:
    """Fetch the most recent observation reported by a station.

    Raises:
        ValueError: If station_id is empty.
        ApiError: If the request fails or the response is malformed.

    """
    if not station_id or not station_id.strip():
        msg = "station_id must be a non-empty string"
        raise ValueError(msg)

    data = get_json(
        f"{base_url}/stations/{station_id.strip()}/observations/latest",
        timeout=timeout,
    )
    try:
        props = data["properties"]
        return Observation(
            timestamp=str(props.get("timestamp") or ""),
            description=str(props.get("textDescription") or ""),
            temperature=_measurement(props, "temperature"),
            dewpoint=_measurement(props, "dewpoint"),
            wind_speed=_measurement(props, "windSpeed"),
            wind_direction=_measurement(props, "windDirection"),
            relative_humidity=_measurement(props, "relativeHumidity"),
            barometric_pressure=_measurement(props, "barometricPressure"),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        msg = f"Unexpected NOAA observation response: {exc}"
        raise ApiError(msg) from exc
