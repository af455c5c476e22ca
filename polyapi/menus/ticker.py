"""Stock quote menus.

A new symbol is quoted and its company overview is appended to the
reference store as a fresh ticker row. Re-using a cached symbol quotes
it again and writes the new price to every row carrying that symbol.
"""

from __future__ import annotations

import logging

from polyapi.db.reference_store import TickerRecord
from polyapi.formatting import extract_date, format_billions, format_time
from polyapi.menus.common import Session, choose_row, choose_row_action, prompt
from polyapi.sources import alphavantage

logger = logging.getLogger(__name__)

ACTION_INSERT = "insert"
ACTION_UPDATE = "update"


def print_quote(quote: alphavantage.Quote) -> None:
    print(
        f"Symbol: {quote.symbol} Price: {quote.price} Open: {quote.open} "
        f"Change: {quote.change} Change Percent: {quote.change_percent}"
    )
    print(
        f"   High: {quote.high} Low: {quote.low} "
        f"Previous Close: {quote.previous_close}"
    )


def print_overview(overview: dict[str, str]) -> None:
    get = overview.get
    print(f"\n   Exchange: {get('Exchange', '')}")
    print(f"   Sector: {get('Sector', '')}")
    print(f"   Industry: {get('Industry', '')}")
    print(f"   Fiscal Year End: {get('FiscalYearEnd', '')}")
    print(f"   Latest Quarter: {get('LatestQuarter', '')}")

    print(f"\n   Address: {get('Address', '')}")

    print(f"\n   Official Website: {get('OfficialSite', '')}")

    print(f"\n   Market Cap (B): {format_billions(get('MarketCapitalization', ''))}")
    print(f"   Revenue TTM (B): {format_billions(get('RevenueTTM', ''))}")
    print(f"   Dividend Date: {get('DividendDate', '')}")

    print(f"\n   52 Week High: {get('52WeekHigh', '')}")
    print(f"   52 Week Low: {get('52WeekLow', '')}")
    print(f"   Analyst Target Price: {get('AnalystTargetPrice', '')}")

    print(f"\n   PE Ratio: {get('PERatio', '')}")
    print(f"   Beta: {get('Beta', '')}")
    print(f"   Forward PE: {get('ForwardPE', '')}")
    print(f"   Trailing PE: {get('TrailingPE', '')}")
    print()


def quote_symbol(session: Session, symbol: str, action: str) -> None:
    """Quote a symbol, record it in the store, and print its overview.

    Args:
        session: Active CLI session.
        symbol: Ticker symbol to look up.
        action: ACTION_INSERT appends a new ticker row; ACTION_UPDATE
            writes the new price to the existing rows for the symbol.

    Raises:
        ValueError: If action is unknown or the API key is missing.
        polyapi.sources.http.ApiError: If a request fails.

    """
    if action not in (ACTION_INSERT, ACTION_UPDATE):
        msg = f"Unknown ticker action: {action}"
        raise ValueError(msg)

    quote = alphavantage.get_quote(symbol, timeout=session.timeout)
    if quote is None:
        print(f"Invalid ticker symbol: {symbol}")
        print()
        return
    print_quote(quote)

    overview = alphavantage.get_overview(quote.symbol, timeout=session.timeout)

    if action == ACTION_INSERT:
        session.store.insert_ticker(
            ticker=quote.symbol,
            last_price=quote.price,
            **alphavantage.overview_to_ticker_fields(overview),
        )
    else:
        updated = session.store.update_ticker_last_price(quote.symbol, quote.price)
        logger.debug("Refreshed %d row(s) for %s", updated, quote.symbol)

    print_overview(overview)


def enter_new_ticker(session: Session) -> None:
    # Fail before prompting when there is no key to query with
    alphavantage.resolve_api_key()

    symbol = prompt(
        "\nEnter a ticker symbol: (e.g., AAPL, GOOG) [Ctrl+D to cancel] "
    )
    if symbol is None:
        print("Cancelled")
        print()
        return
    if not symbol:
        print("No ticker symbol entered")
        return
    quote_symbol(session, symbol, ACTION_INSERT)


def _ticker_line(index: int, record: TickerRecord) -> str:
    updated = ""
    if record.updated_at:
        updated = (
            f"{extract_date(record.updated_at)} at {format_time(record.updated_at)}"
        )
    return (
        f"{index}. {record.company_name} ({record.ticker}:{record.exchange}) "
        f"{record.last_price} on {updated}"
    )


def reuse_ticker(session: Session) -> None:
    """Pick a cached ticker symbol to re-quote or delete."""
    tickers = session.store.list_tickers_distinct()
    if not tickers:
        print("No stock tickers found")
        print()
        return

    print("Previous ticker symbols")
    print()
    for i, record in enumerate(tickers, start=1):
        print(_ticker_line(i, record))

    index = choose_row(len(tickers))
    if index is None:
        return
    chosen = tickers[index]

    action = choose_row_action()
    if action == "reuse":
        quote_symbol(session, chosen.ticker, ACTION_UPDATE)
    elif action == "delete":
        print()
        if session.store.delete_ticker(chosen.id):
            print("Ticker symbol deleted successfully.")
        else:
            print("Ticker symbol not found.")


def ticker_menu(session: Session) -> None:
    print("\nTicker menu:")
    print()
    print("1. Enter a new ticker symbol")
    print("2. Re-use/delete a previous ticker symbol")
    print()
    option = prompt("Enter your option: ")
    print()

    if option == "1":
        enter_new_ticker(session)
    elif option == "2":
        reuse_ticker(session)
    elif option is not None:
        print("Invalid option")
