"""Display helpers shared by the menus.

Timestamps arrive either as ISO-8601 text from the APIs (with or
without a UTC offset) or as ``datetime`` values from the reference
store; both are accepted.
"""

from __future__ import annotations

from datetime import datetime

UNKNOWN_DATE = "Unknown Date"
UNKNOWN_TIME = "Unknown Time"


def _parse_timestamp(timestamp: str | datetime | None) -> datetime | None:
    if timestamp is None or timestamp == "":
        return None
    if isinstance(timestamp, datetime):
        return timestamp
    try:
        return datetime.fromisoformat(timestamp)
    except ValueError:
        return None


def extract_date(timestamp: str | datetime | None) -> str:
    """Return the YYYY-MM-DD part of a timestamp, or "Unknown Date"."""
    parsed = _parse_timestamp(timestamp)
    return parsed.strftime("%Y-%m-%d") if parsed else UNKNOWN_DATE


def format_time(timestamp: str | datetime | None) -> str:
    """Return the clock time of a timestamp as "03:04 PM", or "Unknown Time"."""
    parsed = _parse_timestamp(timestamp)
    return parsed.strftime("%I:%M %p") if parsed else UNKNOWN_TIME


def google_maps_url(lat: float, lon: float) -> str:
    return f"https://www.google.com/maps/search/?api=1&query={lat:f},{lon:f}"


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32


def format_billions(value: str) -> str:
    """Format a raw figure such as "383285000000" as "383.29B".

    Alpha Vantage reports unavailable figures as "None" or "-"; those
    come back as "N/A".
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "N/A"
    return f"{number / 1e9:.2f}B"
