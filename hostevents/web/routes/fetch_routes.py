"""
hostevents/web/routes/fetch_routes.py

Flask route handler for the event query endpoint.
"""
from flask import Flask, Response, jsonify, request
from typing import Any, List, Optional
from ...db import EventRepository
from ...errors import DatabaseConnectionError, InvalidQueryInput, QueryError
from ...log import debug_log, log_error


class EventQueryRoutes:
    """Serves GET /fetch from an EventRepository."""

    def __init__(self, repository: EventRepository) -> None:
        self.repository = repository

    def handle(self, start: str, end: str, host: Optional[str] = None) -> List[dict[str, Any]]:
        """Run the range query and return JSON-ready rows."""
        events = self.repository.find_events_in_period(start, end, host or None)
        return [event.to_dict() for event in events]

    def api_fetch(self) -> Any:
        """Events between from and to, optionally for one host."""
        start = request.args.get('from')
        end = request.args.get('to')
        host = request.args.get('host', '')

        if not start or not end:
            return jsonify({"error": "Missing from or to parameter"}), 400

        debug_log(f"fetch from={start} to={end} host={host!r}")
        try:
            rows = self.handle(start, end, host)
        except DatabaseConnectionError as e:
            log_error("api_fetch", e)
            return Response(f"Database connection failed: {e}", mimetype='text/plain')
        except InvalidQueryInput as e:
            log_error("api_fetch", e)
            return jsonify({"error": str(e)}), 400
        except QueryError as e:
            log_error("api_fetch", e)
            return jsonify({"error": str(e)}), 500

        return jsonify(rows)


def register_routes(app: Flask, repository: EventRepository) -> EventQueryRoutes:
    """Register the event query route with Flask app."""
    routes = EventQueryRoutes(repository)
    app.add_url_rule("/fetch", view_func=routes.api_fetch, methods=['GET'])
    return routes
