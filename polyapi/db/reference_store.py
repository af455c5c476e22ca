"""Reference store: DuckDB CRUD for cached addresses and ticker symbols.

Rows are appended on first lookup and never deduplicated at insert
time. The "distinct" listings group by address text or ticker symbol
at query time and pick the most recently inserted row of each group.

Only the volatile fields are ever rewritten after insert: the last
temperature of an address and the last price of a ticker, each
together with ``updated_at``.

Storage errors (``duckdb.Error``) are not caught here. Callers treat
them as fatal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, Any

from polyapi.db.connection import DEFAULT_DB_PATH, init_reference_db

if TYPE_CHECKING:
    import duckdb

logger = logging.getLogger(__name__)

_ADDRESS_COLUMNS = "id, address, lat, lon, last_temperature, created_at, updated_at"

_TICKER_COLUMNS = (
    "id, ticker, company_name, sector, industry, exchange, address, "
    "official_site, revenue_ttm, market_cap, fiscal_year_end, last_price, "
    "created_at, updated_at"
)


def _utcnow() -> datetime:
    """Return the current UTC time as a naive datetime."""
    return datetime.now(UTC).replace(tzinfo=None)


@dataclass(frozen=True)
class AddressRecord:
    """Snapshot of one row of the addresses table."""

    id: int
    address: str
    lat: float
    lon: float
    last_temperature: str | None
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True)
class TickerRecord:
    """Snapshot of one row of the tickers table."""

    id: int
    ticker: str
    company_name: str
    sector: str
    industry: str
    exchange: str
    address: str
    official_site: str
    revenue_ttm: str
    market_cap: str
    fiscal_year_end: str
    last_price: str
    created_at: datetime | None
    updated_at: datetime | None


def _affected(result: Any) -> int:
    """Read the affected-row count DuckDB returns for a DML statement."""
    row = result.fetchone()
    return int(row[0]) if row else 0


class ReferenceStore:
    """Persistent cache of user-resolved addresses and ticker symbols.

    Open once at process start with :meth:`open` and release with
    :meth:`close` (or use the store as a context manager).
    """

    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self.conn = conn

    @classmethod
    def open(cls, db_path: str | Path | None = DEFAULT_DB_PATH) -> ReferenceStore:
        """Open (creating if absent) the store and upgrade its schema.

        Args:
            db_path: Path to the .duckdb file. None opens an in-memory store.

        Returns:
            Ready-to-use store.

        Raises:
            duckdb.Error: If the file cannot be created or opened.

        """
        return cls(init_reference_db(db_path))

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> ReferenceStore:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ── addresses ─────────────────────────────────────────────────

    def insert_address(self, address: str, lat: float, lon: float) -> int:
        """Append an address row with no temperature yet.

        Duplicate address text is allowed and produces a new row.

        Returns:
            The id assigned to the new row.

        """
        now = _utcnow()
        row = self.conn.execute(
            """
            INSERT INTO addresses (address, lat, lon, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            RETURNING id
            """,
            [address, lat, lon, now, now],
        ).fetchone()
        address_id = int(row[0])
        logger.info("Inserted address %d: %s", address_id, address)
        return address_id

    def update_address_temperature(
        self, address_id: int, temperature: str
    ) -> bool:
        """Record the latest temperature for an address.

        Returns:
            True if the row exists and was updated, False otherwise.

        """
        count = _affected(
            self.conn.execute(
                "UPDATE addresses SET last_temperature = ?, updated_at = ? "
                "WHERE id = ?",
                [temperature, _utcnow(), address_id],
            )
        )
        if count:
            logger.info("Address %d temperature set to %s", address_id, temperature)
        else:
            logger.warning("No address with id %d to update", address_id)
        return count > 0

    def get_address(self, address_id: int) -> AddressRecord | None:
        row = self.conn.execute(
            f"SELECT {_ADDRESS_COLUMNS} FROM addresses WHERE id = ?",  # noqa: S608
            [address_id],
        ).fetchone()
        return AddressRecord(*row) if row else None

    def list_addresses_distinct(self) -> list[AddressRecord]:
        """Return one row per distinct address text, ordered by id."""
        rows = self.conn.execute(
            f"""
            SELECT {_ADDRESS_COLUMNS}
            FROM addresses
            QUALIFY row_number() OVER (PARTITION BY address ORDER BY id DESC) = 1
            ORDER BY id
            """  # noqa: S608
        ).fetchall()
        return [AddressRecord(*row) for row in rows]

    def delete_address(self, address_id: int) -> int:
        """Delete an address by id.

        Returns:
            Number of rows removed: 1 if deleted, 0 if not found.

        """
        count = _affected(
            self.conn.execute("DELETE FROM addresses WHERE id = ?", [address_id])
        )
        logger.info("Deleted %d address row(s) for id %d", count, address_id)
        return count

    # ── tickers ───────────────────────────────────────────────────

    def insert_ticker(
        self,
        ticker: str,
        company_name: str,
        sector: str,
        industry: str,
        exchange: str,
        address: str,
        official_site: str,
        revenue_ttm: str,
        market_cap: str,
        fiscal_year_end: str,
        last_price: str,
    ) -> int:
        """Append a ticker row from a quote and company overview.

        Symbols are not deduplicated: inserting a known symbol again
        adds another row.

        Returns:
            The id assigned to the new row.

        """
        now = _utcnow()
        row = self.conn.execute(
            """
            INSERT INTO tickers (
                ticker, company_name, sector, industry, exchange, address,
                official_site, revenue_ttm, market_cap, fiscal_year_end,
                last_price, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            RETURNING id
            """,
            [
                ticker,
                company_name,
                sector,
                industry,
                exchange,
                address,
                official_site,
                revenue_ttm,
                market_cap,
                fiscal_year_end,
                last_price,
                now,
                now,
            ],
        ).fetchone()
        ticker_id = int(row[0])
        logger.info("Inserted ticker %d: %s", ticker_id, ticker)
        return ticker_id

    def update_ticker_last_price(self, ticker: str, last_price: str) -> int:
        """Set the last price on every row carrying this symbol.

        Returns:
            Number of rows updated (0 if the symbol is unknown).

        """
        count = _affected(
            self.conn.execute(
                "UPDATE tickers SET last_price = ?, updated_at = ? WHERE ticker = ?",
                [last_price, _utcnow(), ticker],
            )
        )
        logger.info(
            "Updated last price of %s to %s on %d row(s)", ticker, last_price, count
        )
        return count

    def get_ticker(self, ticker_id: int) -> TickerRecord | None:
        row = self.conn.execute(
            f"SELECT {_TICKER_COLUMNS} FROM tickers WHERE id = ?",  # noqa: S608
            [ticker_id],
        ).fetchone()
        return TickerRecord(*row) if row else None

    def list_tickers_distinct(self) -> list[TickerRecord]:
        """Return one row per distinct ticker symbol, ordered by id."""
        rows = self.conn.execute(
            f"""
            SELECT {_TICKER_COLUMNS}
            FROM tickers
            QUALIFY row_number() OVER (PARTITION BY ticker ORDER BY id DESC) = 1
            ORDER BY id
            """  # noqa: S608
        ).fetchall()
        return [TickerRecord(*row) for row in rows]

    def delete_ticker(self, ticker_id: int) -> int:
        """Delete a ticker row by id.

        Returns:
            Number of rows removed: 1 if deleted, 0 if not found.

        """
        count = _affected(
            self.conn.execute("DELETE FROM tickers WHERE id = ?", [ticker_id])
        )
        logger.info("Deleted %d ticker row(s) for id %d", count, ticker_id)
        return count
