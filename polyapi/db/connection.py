"""DuckDB connection management for polyapi.

Handles database initialization, schema creation, in-place schema
upgrades, and connection lifecycle. The reference store lives in a
single file relative to the working directory::

    ./db/
      polyapi.duckdb

"""

from __future__ import annotations

import logging
from pathlib import Path

import duckdb

from polyapi.db.schema import ALL_TABLES, EXPECTED_COLUMNS

logger = logging.getLogger(__name__)

# Default database file (can be overridden with POLYAPI_DB_PATH)
DEFAULT_DB_PATH = Path("db") / "polyapi.duckdb"


def get_connection(
    db_path: str | Path | None = None,
    read_only: bool = False,
) -> duckdb.DuckDBPyConnection:
    """Open a DuckDB connection.

    Args:
        db_path: Path to the .duckdb file. If None, uses in-memory database.
        read_only: Open in read-only mode.

    Returns:
        Active DuckDB connection.

    """
    if db_path is None:
        return duckdb.connect(":memory:")

    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return duckdb.connect(str(path), read_only=read_only)


def table_columns(conn: duckdb.DuckDBPyConnection, table: str) -> set[str]:
    """Return the names of the columns currently defined on a table."""
    rows = conn.execute(
        "SELECT column_name FROM information_schema.columns WHERE table_name = ?",
        [table],
    ).fetchall()
    return {row[0] for row in rows}


def ensure_columns(conn: duckdb.DuckDBPyConnection) -> list[str]:
    """Add any expected column that a pre-existing table is missing.

    Never drops or renames columns. Existing rows keep their values and
    the new column starts out NULL. Safe to call repeatedly.

    Args:
        conn: Active DuckDB connection with the tables already created.

    Returns:
        List of "table.column" names that were added.

    """
    added: list[str] = []
    for table, columns in EXPECTED_COLUMNS.items():
        existing = table_columns(conn, table)
        for name, col_type in columns:
            if name in existing:
                continue
            conn.execute(f"ALTER TABLE {table} ADD COLUMN {name} {col_type}")
            added.append(f"{table}.{name}")
            logger.info("Added column %s to %s", name, table)
    return added


def init_reference_db(
    db_path: str | Path | None = DEFAULT_DB_PATH,
) -> duckdb.DuckDBPyConnection:
    """Initialize the reference store database with schema.

    Creates tables: addresses, tickers. Upgrades older files in place.

    Args:
        db_path: Path to the .duckdb file. None opens an in-memory database.

    Returns:
        Initialized DuckDB connection.

    """
    conn = get_connection(db_path)
    for ddl in ALL_TABLES:
        conn.execute(ddl)
    ensure_columns(conn)
    logger.info("Reference database initialized at %s", db_path or ":memory:")
    return conn


def init_memory_db() -> duckdb.DuckDBPyConnection:
    """Create an in-memory database with full schema.

    Useful for testing and ephemeral operations.

    Returns:
        In-memory DuckDB connection with all tables created.

    """
    return init_reference_db(None)
