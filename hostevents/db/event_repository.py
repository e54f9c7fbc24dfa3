"""Repository for event data access."""
import datetime
from typing import Any, Dict, List, Optional
from ..config import DatabaseSettings
from ..models import Event
from .connection import get_cursor

SELECT_IN_PERIOD = (
    'SELECT "at", "host", "evt" FROM "public"."events" '
    'WHERE "at" BETWEEN %(from)s AND %(to)s'
)
SELECT_IN_PERIOD_FOR_HOST = SELECT_IN_PERIOD + ' AND "host" = %(host)s'

INSERT_EVENT = 'INSERT INTO "public"."events" ("at", "host", "evt") VALUES (%s, %s, %s)'


class EventRepository:
    """Read and write access to the events table."""

    def __init__(self, settings: DatabaseSettings) -> None:
        self.settings = settings

    def find_events_in_period(self, start: Any, end: Any,
                              host: Optional[str] = None) -> List[Event]:
        """
        Find all events with start <= at <= end, optionally for one host.

        start and end are bound as given; the database decides whether they
        are valid timestamps. An empty host means no host filter. Rows come
        back in whatever order the database returns them.
        """
        params: Dict[str, Any] = {"from": start, "to": end}
        if host:
            sql = SELECT_IN_PERIOD_FOR_HOST
            params["host"] = host
        else:
            sql = SELECT_IN_PERIOD

        with get_cursor(self.settings) as cur:
            cur.execute(sql, params)
            rows = cur.fetchall()

        return [Event(at=r["at"], host=r["host"], evt=r["evt"]) for r in rows]

    def insert(self, at: datetime.datetime, host: str, evt: str) -> None:
        """Insert a new event."""
        with get_cursor(self.settings) as cur:
            cur.execute(INSERT_EVENT, (at, host, evt))
