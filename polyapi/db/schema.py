"""DuckDB schema definitions for the polyapi reference store.

Contains DDL statements for the two cache tables:
- addresses: Geocoded addresses with the last seen temperature
- tickers: Ticker symbols with company overview and last price

The schema is additive-only. Columns introduced after the first release
are listed in EXPECTED_COLUMNS so that older database files can be
upgraded in place (see ``polyapi.db.connection.ensure_columns``).

"""

from __future__ import annotations

# ── Addresses ──

CREATE_ADDRESSES_SEQUENCE = """
CREATE SEQUENCE IF NOT EXISTS addresses_id_seq START 1;
"""

CREATE_ADDRESSES = """
CREATE TABLE IF NOT EXISTS addresses (
    id                INTEGER PRIMARY KEY DEFAULT nextval('addresses_id_seq'),
    address           VARCHAR NOT NULL,
    lat               DOUBLE NOT NULL,
    lon               DOUBLE NOT NULL,
    last_temperature  VARCHAR,
    created_at        TIMESTAMP,
    updated_at        TIMESTAMP
);
"""

# ── Tickers ──

CREATE_TICKERS_SEQUENCE = """
CREATE SEQUENCE IF NOT EXISTS tickers_id_seq START 1;
"""

# Overview figures are kept as text: Alpha Vantage reports "None" for
# fields it does not have.
CREATE_TICKERS = """
CREATE TABLE IF NOT EXISTS tickers (
    id               INTEGER PRIMARY KEY DEFAULT nextval('tickers_id_seq'),
    ticker           VARCHAR NOT NULL,
    company_name     VARCHAR NOT NULL,
    sector           VARCHAR NOT NULL,
    industry         VARCHAR NOT NULL,
    exchange         VARCHAR NOT NULL,
    address          VARCHAR NOT NULL,
    official_site    VARCHAR NOT NULL,
    revenue_ttm      VARCHAR NOT NULL,
    market_cap       VARCHAR NOT NULL,
    fiscal_year_end  VARCHAR NOT NULL,
    last_price       VARCHAR NOT NULL,
    created_at       TIMESTAMP,
    updated_at       TIMESTAMP
);
"""

# All DDL statements in creation order
ALL_TABLES: list[str] = [
    CREATE_ADDRESSES_SEQUENCE,
    CREATE_ADDRESSES,
    CREATE_TICKERS_SEQUENCE,
    CREATE_TICKERS,
]

# Columns that may be missing from files written by earlier versions,
# as (column name, column type) per table. Added columns start out NULL.
EXPECTED_COLUMNS: dict[str, list[tuple[str, str]]] = {
    "addresses": [
        ("last_temperature", "VARCHAR"),
        ("created_at", "TIMESTAMP"),
        ("updated_at", "TIMESTAMP"),
    ],
    "tickers": [
        ("sector", "VARCHAR"),
        ("industry", "VARCHAR"),
        ("address", "VARCHAR"),
        ("official_site", "VARCHAR"),
        ("revenue_ttm", "VARCHAR"),
        ("market_cap", "VARCHAR"),
        ("fiscal_year_end", "VARCHAR"),
        ("created_at", "TIMESTAMP"),
        ("updated_at", "TIMESTAMP"),
    ],
}
