"""
Flask server exposing the events table.
"""
from flask import Flask
from typing import Optional
from ..config import DatabaseSettings, WEB_HOST, WEB_PORT
from ..db import EventRepository
from ..log import log


def create_app(settings: DatabaseSettings,
               repository: Optional[EventRepository] = None) -> Flask:
    """
    Create Flask app serving the event query endpoint.

    Args:
        settings: Connection parameters for the events database
        repository: Optional repository to use instead of one built from settings
    """
    app = Flask(__name__)
    app.config["HOSTEVENTS_SETTINGS"] = settings
    # Keep column order (at, host, evt) in the JSON objects
    app.json.sort_keys = False  # type: ignore[attr-defined]

    from .routes import fetch_routes
    fetch_routes.register_routes(app, repository or EventRepository(settings))

    return app


def run(settings: DatabaseSettings, host: str = WEB_HOST, port: Optional[int] = None) -> None:
    """
    Run the Flask development server until interrupted.

    Binds exactly the requested port (WEB_PORT by default); a busy port is an
    error, not a reason to listen elsewhere.
    """
    app = create_app(settings)
    port = port or WEB_PORT
    log(f"Serving events from {settings.describe()} on http://{host}:{port}/fetch")
    app.run(host=host, port=port, debug=False, use_reloader=False)
