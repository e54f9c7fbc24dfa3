"""
Records power-state events for this machine.

Events go straight to the database when it is reachable. Otherwise they are
appended to a spool file as "<unix seconds> <evt>" lines and replayed by a
retry timer once the database is back.
"""
import datetime
import os
import threading
from typing import Optional
from .config import RETRY_INTERVAL, SPOOL_PATH
from .db import EventRepository
from .errors import DatabaseConnectionError, QueryError
from .log import debug_log, log, log_error

VALID_EVENTS = ('on', 'off')


class EventRecorder:
    """Writes events to the database with a local spool fallback."""

    def __init__(self, repository: EventRepository, hostname: str,
                 spool_path: str = SPOOL_PATH,
                 retry_interval: float = RETRY_INTERVAL,
                 state_path: Optional[str] = None) -> None:
        self.repository = repository
        self.hostname = hostname
        self.spool_path = spool_path
        self.retry_interval = retry_interval
        # Last recorded event type survives restarts in this file
        self.state_path = state_path or spool_path + ".last"
        self.last_event_type: Optional[str] = self._load_last_event_type()
        self._retry_timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    def _load_last_event_type(self) -> Optional[str]:
        try:
            with open(self.state_path, 'r') as f:
                return f.read().strip() or None
        except FileNotFoundError:
            return None

    def _set_last_event_type(self, evt: str) -> None:
        self.last_event_type = evt
        directory = os.path.dirname(self.state_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.state_path, 'w') as f:
            f.write(evt + "\n")

    def record(self, evt: str, at: Optional[datetime.datetime] = None) -> bool:
        """
        Record an event, skipping it if it repeats the previous one.

        Returns False for a skipped duplicate, True otherwise (also when the
        event was only spooled).
        """
        if self.last_event_type == evt:
            log(f"Event ignored (duplicate): {evt}")
            return False

        if at is None:
            at = datetime.datetime.now(datetime.timezone.utc)

        try:
            self.repository.insert(at, self.hostname, evt)
        except (DatabaseConnectionError, QueryError) as e:
            log(f"Database insert failed: {e} - saving locally")
            self._append_to_spool(f"{int(at.timestamp())} {evt}\n")
            self.start_retry_timer()
            self._set_last_event_type(evt)
            log(f"Event stored locally: {evt} at {at.isoformat(timespec='seconds')}")
            return True

        self._set_last_event_type(evt)
        log(f"Event recorded: {evt} at {at.isoformat(timespec='seconds')}")
        return True

    def watch(self, stop: threading.Event) -> None:
        """
        Record "on", keep retrying the spool until stop is set, then record "off".

        Runs in the foreground for the lifetime of the monitored machine.
        """
        self.record("on")
        try:
            self.flush_spool()
        except (DatabaseConnectionError, QueryError) as e:
            log(f"Spool not flushed: {e}")
            self.start_retry_timer()

        log("Watching; waiting for shutdown signal")
        stop.wait()

        self.record("off")
        self.stop()

    def _append_to_spool(self, line: str) -> None:
        directory = os.path.dirname(self.spool_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with self._lock:
            with open(self.spool_path, 'a') as f:
                f.write(line)

    def flush_spool(self) -> int:
        """
        Insert spooled events into the database and empty the spool.

        Unparsable lines are skipped. The first insert failure is raised and
        the spool is left as it was.

        Returns:
            Number of events inserted
        """
        with self._lock:
            try:
                with open(self.spool_path, 'r') as f:
                    lines = f.read().splitlines()
            except FileNotFoundError:
                return 0

            inserted = 0
            for line in lines:
                line = line.strip()
                if not line:
                    continue

                parsed = parse_spool_line(line)
                if parsed is None:
                    log(f"Cannot parse spool line: {line}")
                    continue

                at, evt = parsed
                self.repository.insert(at, self.hostname, evt)
                inserted += 1

            if lines:
                with open(self.spool_path, 'w') as f:
                    f.write("")
            debug_log(f"flushed {inserted} spooled events")
            return inserted

    def start_retry_timer(self) -> None:
        """Schedule a spool flush unless one is already pending."""
        if self._retry_timer is not None:
            return
        self._schedule()

    def _schedule(self) -> None:
        self._retry_timer = threading.Timer(self.retry_interval, self._retry)
        self._retry_timer.daemon = True
        self._retry_timer.start()

    def _retry(self) -> None:
        """Timer callback: flush, reschedule on failure."""
        try:
            count = self.flush_spool()
        except (DatabaseConnectionError, QueryError) as e:
            log_error("spool retry", e)
            self._schedule()
            return

        self._retry_timer = None
        log(f"Stored events processed successfully ({count})")

    def stop(self) -> None:
        """Cancel a pending retry."""
        if self._retry_timer is not None:
            self._retry_timer.cancel()
            self._retry_timer = None


def parse_spool_line(line: str) -> Optional[tuple[datetime.datetime, str]]:
    """Parse "<unix seconds> <evt>"; None if the line is malformed."""
    parts = line.split()
    if len(parts) < 2:
        return None
    try:
        seconds = int(parts[0])
    except ValueError:
        return None
    return datetime.datetime.fromtimestamp(seconds, tz=datetime.timezone.utc), parts[1]
