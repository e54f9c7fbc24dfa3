"""Unit tests for settings loading."""
import json
import os
import tempfile
import unittest
from unittest.mock import patch
from hostevents.config import DatabaseSettings, load_settings
from hostevents.errors import ConfigError


class TestLoadSettings(unittest.TestCase):
    """Test JSON file and environment handling."""

    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, "config.json")
        # Isolate from the developer's environment
        self.env_patcher = patch.dict(os.environ, {}, clear=True)
        self.env_patcher.start()

    def tearDown(self) -> None:
        self.env_patcher.stop()
        self.tmpdir.cleanup()

    def _write(self, content: str) -> None:
        with open(self.path, "w") as f:
            f.write(content)

    def test_missing_file_gives_defaults(self) -> None:
        """No file = default connection values."""
        settings = load_settings(self.path)

        self.assertEqual(settings.host, "localhost")
        self.assertEqual(settings.port, 5432)

    def test_file_values(self) -> None:
        """Keys from the agent config file are read; unknown keys ignored."""
        self._write(json.dumps({
            "host": "db.lan", "port": 5433, "user": "mon", "password": "pw",
            "database": "monitoring", "hostname": "pc-7", "extra": True,
        }))

        settings = load_settings(self.path)

        self.assertEqual(settings, DatabaseSettings(
            host="db.lan", port=5433, database="monitoring",
            user="mon", password="pw", hostname="pc-7"))

    def test_environment_overrides_file(self) -> None:
        """HOSTEVENTS_* variables win over file values."""
        self._write(json.dumps({"host": "db.lan", "port": 5433}))

        with patch.dict(os.environ, {"HOSTEVENTS_DB_HOST": "other", "HOSTEVENTS_DB_PORT": "6000"}):
            settings = load_settings(self.path)

        self.assertEqual(settings.host, "other")
        self.assertEqual(settings.port, 6000)

    def test_broken_file(self) -> None:
        """Invalid JSON raises ConfigError."""
        self._write("{not json")

        with self.assertRaises(ConfigError):
            load_settings(self.path)

    def test_invalid_port(self) -> None:
        """Non-numeric port raises ConfigError."""
        self._write(json.dumps({"port": "abc"}))

        with self.assertRaises(ConfigError):
            load_settings(self.path)

    def test_password_hidden(self) -> None:
        """Password does not appear in repr or describe()."""
        settings = DatabaseSettings(password="hunter2")

        self.assertNotIn("hunter2", repr(settings))
        self.assertNotIn("hunter2", settings.describe())


if __name__ == "__main__":
    unittest.main()
