"""Unit tests for database connection handling."""
import unittest
from unittest.mock import MagicMock, patch
import psycopg
from hostevents.config import DatabaseSettings
from hostevents.db import connection
from hostevents.errors import DatabaseConnectionError, InvalidQueryInput, QueryError


class TestConnection(unittest.TestCase):
    """Test scoped connections and error translation."""

    def setUp(self) -> None:
        self.settings = DatabaseSettings(host="db", port=5433, database="mon",
                                         user="u", password="secret", hostname="pc")
        self.conn = MagicMock()
        self.conn.closed = False
        self.cursor = self.conn.cursor.return_value
        self.connect_patcher = patch.object(connection.psycopg, 'connect', return_value=self.conn)
        self.mock_connect = self.connect_patcher.start()

    def tearDown(self) -> None:
        self.connect_patcher.stop()

    def test_connect_uses_settings(self) -> None:
        """Settings map to driver keyword arguments."""
        connection.get_connection(self.settings)

        self.mock_connect.assert_called_once_with(
            host="db", port=5433, dbname="mon", user="u", password="secret"
        )

    def test_connect_failure(self) -> None:
        """Driver errors during setup become DatabaseConnectionError."""
        self.mock_connect.side_effect = psycopg.OperationalError("connection refused")

        with self.assertRaises(DatabaseConnectionError) as ctx:
            connection.get_connection(self.settings)
        self.assertEqual(str(ctx.exception), "connection refused")

    def test_cursor_commits_and_closes(self) -> None:
        """Successful block commits and releases the connection."""
        with connection.get_cursor(self.settings) as cur:
            self.assertIs(cur, self.cursor)

        self.conn.commit.assert_called_once()
        self.conn.rollback.assert_not_called()
        self.conn.close.assert_called_once()

    def test_data_error_becomes_invalid_input(self) -> None:
        """Rejected values raise InvalidQueryInput after rollback."""
        with self.assertRaises(InvalidQueryInput):
            with connection.get_cursor(self.settings):
                raise psycopg.DataError("invalid input syntax for type timestamp")

        self.conn.rollback.assert_called_once()
        self.conn.close.assert_called_once()

    def test_other_driver_error_becomes_query_error(self) -> None:
        """Execution failures raise QueryError."""
        with self.assertRaises(QueryError) as ctx:
            with connection.get_cursor(self.settings):
                raise psycopg.ProgrammingError('relation "events" does not exist')

        self.assertNotIsInstance(ctx.exception, InvalidQueryInput)
        self.conn.close.assert_called_once()

    def test_broken_connection_not_rolled_back(self) -> None:
        """A connection lost mid-query is closed without rollback."""
        self.conn.closed = True
        with self.assertRaises(QueryError):
            with connection.get_cursor(self.settings):
                raise psycopg.OperationalError("server closed the connection unexpectedly")

        self.conn.rollback.assert_not_called()

    def test_other_exceptions_propagate(self) -> None:
        """Non-driver errors are not wrapped."""
        with self.assertRaises(KeyError):
            with connection.get_cursor(self.settings):
                raise KeyError("at")

        self.conn.rollback.assert_called_once()

    def test_check_connection(self) -> None:
        """check_connection runs SELECT 1."""
        connection.check_connection(self.settings)

        self.cursor.execute.assert_called_once_with("SELECT 1")


if __name__ == "__main__":
    unittest.main()
