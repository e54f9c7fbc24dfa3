import os
import json
import socket
from dataclasses import dataclass, field
from typing import Any, Dict

from .errors import ConfigError

# Connection settings file, same keys as the monitoring agent's config.json
CONFIG_PATH: str = os.path.expanduser(os.environ.get("HOSTEVENTS_CONFIG", "~/.config/hostevents/config.json"))

# Events that could not be written to the database wait here
SPOOL_PATH: str = os.path.expanduser(os.environ.get("HOSTEVENTS_SPOOL", "~/.local/share/hostevents/events.txt"))
RETRY_INTERVAL: float = 60.0  # seconds

WEB_HOST: str = os.environ.get("HOSTEVENTS_WEB_HOST", "127.0.0.1")
WEB_PORT: int = int(os.environ.get("HOSTEVENTS_WEB_PORT", "5050"))

# Debug mode - logs detailed information to DEBUG_LOG_PATH
DEBUG_MODE: bool = os.environ.get("HOSTEVENTS_DEBUG", "0") == "1"
DEBUG_LOG_PATH: str = os.path.expanduser("~/.local/share/hostevents/debug.log")

# Environment variables overriding file values
ENV_OVERRIDES = {
    "host": "HOSTEVENTS_DB_HOST",
    "port": "HOSTEVENTS_DB_PORT",
    "database": "HOSTEVENTS_DB_NAME",
    "user": "HOSTEVENTS_DB_USER",
    "password": "HOSTEVENTS_DB_PASSWORD",
    "hostname": "HOSTEVENTS_HOSTNAME",
}


@dataclass
class DatabaseSettings:
    """Connection parameters for the events database."""
    host: str = "localhost"
    port: int = 5432
    database: str = "postgres"
    user: str = "postgres"
    password: str = field(default="", repr=False)
    # Name recorded in the host column for events from this machine
    hostname: str = field(default_factory=socket.gethostname)

    def conninfo(self) -> Dict[str, Any]:
        """Keyword arguments for psycopg.connect()."""
        return {
            "host": self.host,
            "port": self.port,
            "dbname": self.database,
            "user": self.user,
            "password": self.password,
        }

    def describe(self) -> str:
        """Printable summary without credentials."""
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


def _load_file(path: str) -> Dict[str, Any]:
    """Load the JSON settings file, empty dict if it does not exist."""
    if not os.path.exists(path):
        return {}
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        raise ConfigError(f"Cannot read configuration {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration {path} must contain a JSON object")
    return data


def load_settings(path: str = CONFIG_PATH) -> DatabaseSettings:
    """
    Build DatabaseSettings from the JSON file and environment.

    Environment variables listed in ENV_OVERRIDES win over file values.
    Missing keys fall back to the DatabaseSettings defaults.
    """
    values = _load_file(path)

    for key, env_name in ENV_OVERRIDES.items():
        if env_name in os.environ:
            values[key] = os.environ[env_name]

    known = {k: v for k, v in values.items() if k in ENV_OVERRIDES}
    if "port" in known:
        try:
            known["port"] = int(known["port"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid port: {known['port']!r}") from e

    return DatabaseSettings(**known)
