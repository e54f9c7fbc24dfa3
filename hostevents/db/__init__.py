"""Database layer."""
from .connection import get_connection, get_cursor, check_connection
from .event_repository import EventRepository

__all__ = ['get_connection', 'get_cursor', 'check_connection', 'EventRepository']
