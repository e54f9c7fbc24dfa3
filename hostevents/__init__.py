"""Query and record host power-state events stored in PostgreSQL."""
__version__ = "1.0.0"
