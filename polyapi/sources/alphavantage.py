"""Alpha Vantage stock quote and company overview adapter.

Fetches the latest global quote and the fundamental overview for a
ticker symbol. The overview supplies the descriptive fields cached in
the tickers table; the quote supplies the last price.

Note:
    Requires a free API key from https://www.alphavantage.co/support/#api-key
    read from the ALPHAVANTAGE_API_KEY environment variable.
    The free tier allows 25 requests per day. When the quota is used up
    the API answers 200 with an "Information" (or older "Note") message
    instead of data.

"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

from polyapi.config import DEFAULT_HTTP_TIMEOUT
from polyapi.sources.http import ApiError, get_json

logger = logging.getLogger(__name__)

ALPHAVANTAGE_URL = "https://www.alphavantage.co/query"

API_KEY_ENV = "ALPHAVANTAGE_API_KEY"

QUOTA_MESSAGE = (
    "Daily API quota exceeded. Please refer to Alpha Vantage's "
    "premium plans for higher limits."
)

# Overview key -> reference store column
OVERVIEW_FIELDS: dict[str, str] = {
    "Name": "company_name",
    "Sector": "sector",
    "Industry": "industry",
    "Exchange": "exchange",
    "Address": "address",
    "OfficialSite": "official_site",
    "RevenueTTM": "revenue_ttm",
    "MarketCapitalization": "market_cap",
    "FiscalYearEnd": "fiscal_year_end",
}


class QuotaExceededError(ApiError):
    """The daily request allowance for the API key is used up."""


@dataclass(frozen=True)
class Quote:
    symbol: str
    price: str
    open: str
    high: str
    low: str
    previous_close: str
    change: str
    change_percent: str


def resolve_api_key(api_key: str | None = None) -> str:
    """Return the API key to use.

    Args:
        api_key: Explicit key. Falls back to ALPHAVANTAGE_API_KEY env var.

    Raises:
        ValueError: If no key is provided or found in the environment.

    """
    key = api_key or os.environ.get(API_KEY_ENV)
    if not key:
        msg = f"{API_KEY_ENV} environment variable is not set."
        raise ValueError(msg)
    return key


def _query(
    function: str,
    symbol: str,
    api_key: str | None,
    base_url: str,
    timeout: float,
) -> dict[str, Any]:
    if not symbol or not symbol.strip():
        msg = "symbol must be a non-empty string"
        raise ValueError(msg)

    key = resolve_api_key(api_key)
    data = get_json(
        base_url,
        params={
            "function": function,
            "symbol": symbol.strip().upper(),
            "apikey": key,
        },
        timeout=timeout,
    )
    if not isinstance(data, dict):
        msg = f"Unexpected Alpha Vantage {function} response"
        raise ApiError(msg)
    if "Information" in data or "Note" in data:
        logger.warning(
            "Alpha Vantage quota message: %s",
            data.get("Information") or data.get("Note"),
        )
        raise QuotaExceededError(QUOTA_MESSAGE)
    if "Error Message" in data:
        msg = f"Alpha Vantage {function} error: {data['Error Message']}"
        raise ApiError(msg)
    return data


def get_quote(
    symbol: str,
    api_key: str | None = None,
    base_url: str = ALPHAVANTAGE_URL,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> Quote | None:
    """Fetch the latest quote for a symbol.

    Args:
        symbol: Ticker symbol (e.g., "AAPL", "GOOG").
        api_key: Alpha Vantage key. Falls back to ALPHAVANTAGE_API_KEY env var.
        base_url: Query endpoint.
        timeout: Request timeout in seconds.

    Returns:
        The quote, or None if Alpha Vantage does not know the symbol.

    Raises:
        ValueError: If symbol is empty or the API key is missing.
        QuotaExceededError: If the daily quota is exhausted.
        ApiError: If the request fails.

    """
    data = _query("GLOBAL_QUOTE", symbol, api_key, base_url, timeout)
    raw = data.get("Global Quote") or {}
    if not raw.get("01. symbol"):
        logger.info("No quote for %s", symbol)
        return None

    return Quote(
        symbol=raw["01. symbol"],
        price=raw.get("05. price", ""),
        open=raw.get("02. open", ""),
        high=raw.get("03. high", ""),
        low=raw.get("04. low", ""),
        previous_close=raw.get("08. previous close", ""),
        change=raw.get("09. change", ""),
        change_percent=raw.get("10. change percent", ""),
    )


def get_overview(
    symbol: str,
    api_key: str | None = None,
    base_url: str = ALPHAVANTAGE_URL,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> dict[str, str]:
    """Fetch the company overview for a symbol.

    Returns:
        Flat mapping of overview attributes (all values as text).
        Empty dict if Alpha Vantage has no overview for the symbol.

    Raises:
        ValueError: If symbol is empty or the API key is missing.
        QuotaExceededError: If the daily quota is exhausted.
        ApiError: If the request fails.

    """
    data = _query("OVERVIEW", symbol, api_key, base_url, timeout)
    return {str(k): "" if v is None else str(v) for k, v in data.items()}


def overview_to_ticker_fields(overview: dict[str, str]) -> dict[str, str]:
    """Pick the overview fields the reference store keeps.

    Returns:
        Keyword arguments for ``ReferenceStore.insert_ticker`` (minus
        ticker and last_price). Missing fields become empty strings.

    """
    return {
        column: overview.get(key, "") for key, column in OVERVIEW_FIELDS.items()
    }
