"""Exceptions raised by the hostevents layers."""


class HostEventsError(Exception):
    """Base class for all hostevents errors."""


class ConfigError(HostEventsError):
    """Configuration file could not be read or parsed."""


class DatabaseConnectionError(HostEventsError):
    """Connection to the events database could not be established."""


class QueryError(HostEventsError):
    """A statement failed while executing against the events table."""


class InvalidQueryInput(QueryError):
    """The database rejected a bound value (e.g. a malformed timestamp)."""
