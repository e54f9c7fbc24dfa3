"""
Data models for the application.
"""
import datetime
from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class Event:
    """Represents a single row of the events table."""
    at: Any
    host: str
    evt: Any

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict with keys at, host, evt."""
        at = self.at
        if isinstance(at, (datetime.datetime, datetime.date)):
            at = at.isoformat()
        return {"at": at, "host": self.host, "evt": self.evt}
