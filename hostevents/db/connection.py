"""Database connection management."""
from contextlib import contextmanager
from typing import Any, Iterator

import psycopg
from psycopg.rows import dict_row

from ..config import DatabaseSettings
from ..errors import DatabaseConnectionError, InvalidQueryInput, QueryError
from ..log import debug_log


def get_connection(settings: DatabaseSettings) -> psycopg.Connection[Any]:
    """Open a connection to the events database."""
    debug_log(f"connecting to {settings.describe()}")
    try:
        return psycopg.connect(**settings.conninfo())
    except psycopg.Error as e:
        raise DatabaseConnectionError(str(e).strip()) from e


@contextmanager
def get_cursor(settings: DatabaseSettings) -> Iterator[psycopg.Cursor[Any]]:
    """
    Context manager for database operations on a scoped connection.

    Rows are returned as dicts. Driver errors raised inside the block are
    re-raised as QueryError (InvalidQueryInput for rejected values).
    """
    conn = get_connection(settings)
    try:
        cursor = conn.cursor(row_factory=dict_row)
        yield cursor
        conn.commit()
    except psycopg.Error as e:
        if not conn.closed:
            conn.rollback()
        if isinstance(e, psycopg.DataError):
            raise InvalidQueryInput(str(e).strip()) from e
        raise QueryError(str(e).strip()) from e
    except Exception:
        if not conn.closed:
            conn.rollback()
        raise
    finally:
        conn.close()


def check_connection(settings: DatabaseSettings) -> None:
    """Connect and run a trivial statement; raises on failure."""
    with get_cursor(settings) as cur:
        cur.execute("SELECT 1")
        cur.fetchone()
