#!/usr/bin/env python3
"""
Command line entrypoint: serve the query API, record or watch events, replay the spool.
"""
import argparse
import signal
import sys
import threading
from typing import List, Optional
from . import config
from .config import load_settings
from .db import EventRepository, check_connection
from .errors import ConfigError, DatabaseConnectionError, QueryError
from .log import log
from .recorder import EventRecorder, VALID_EVENTS
from .web import run


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hostevents", description=__doc__)
    parser.add_argument("--config", default=config.CONFIG_PATH,
                        help="path to the JSON connection settings")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the /fetch HTTP endpoint")
    serve.add_argument("--host", default=config.WEB_HOST)
    serve.add_argument("--port", type=int, default=None)

    record = sub.add_parser("record", help="record an event for this machine")
    record.add_argument("evt", choices=VALID_EVENTS)

    sub.add_parser("watch", help="record on now and off at shutdown, retrying the spool meanwhile")
    sub.add_parser("flush", help="insert spooled events into the database")
    sub.add_parser("check", help="test the database connection")
    return parser


def install_stop_handlers() -> threading.Event:
    """Return an Event set by SIGTERM or SIGINT."""
    stop = threading.Event()

    def _handle(signum: int, frame: object) -> None:
        log(f"Received signal {signum}, shutting down")
        stop.set()

    signal.signal(signal.SIGTERM, _handle)
    signal.signal(signal.SIGINT, _handle)
    return stop


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.command == "serve":
        run(settings, host=args.host, port=args.port)
        return 0

    if args.command == "check":
        try:
            check_connection(settings)
        except (DatabaseConnectionError, QueryError) as e:
            print(f"Database connection failed: {e}", file=sys.stderr)
            return 1
        log(f"Database connection OK ({settings.describe()})")
        return 0

    recorder = EventRecorder(EventRepository(settings), settings.hostname,
                             spool_path=config.SPOOL_PATH)

    if args.command == "watch":
        stop = install_stop_handlers()
        recorder.watch(stop)
        return 0

    if args.command == "record":
        recorder.record(args.evt)
        # A one-shot process has no time for the retry timer
        recorder.stop()

    try:
        count = recorder.flush_spool()
    except (DatabaseConnectionError, QueryError) as e:
        log(f"Spool not flushed: {e}")
        return 0 if args.command == "record" else 1

    if count or args.command == "flush":
        log(f"Flushed {count} spooled events")
    return 0


if __name__ == "__main__":
    sys.exit(main())
