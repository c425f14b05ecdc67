"""
Tests for settings loading from the environment and .env files.
"""

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from myffcs.config import load_settings
from myffcs.reminders import FIVE_MINUTE_WINDOW, TEN_MINUTE_WINDOW


class TestSettings(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.env_file = Path(self.tmp.name) / ".env"
        self.env_file.write_text("", encoding="utf-8")

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_defaults(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = load_settings(self.env_file)

        self.assertFalse(settings.has_remote)
        self.assertEqual(settings.vapid_subject, "mailto:example@test.com")
        self.assertEqual(settings.log_level, "INFO")
        self.assertEqual(settings.weekend_fallback, "Monday")
        self.assertEqual(settings.user_id, "local")
        self.assertIs(settings.reminder_policy, FIVE_MINUTE_WINDOW)

    def test_environment_values(self) -> None:
        env = {
            "SUPABASE_URL": "https://db.example.co",
            "SUPABASE_SERVICE_ROLE_KEY": "key",
            "MYFFCS_DATA_DIR": self.tmp.name,
            "MYFFCS_LOG_LEVEL": "debug",
            "MYFFCS_REMINDER_PRESET": "10min",
            "MYFFCS_WEEKEND_FALLBACK": "sat",
            "MYFFCS_USER_ID": "u1",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            settings = load_settings(self.env_file)

        self.assertTrue(settings.has_remote)
        self.assertEqual(settings.data_dir, Path(self.tmp.name))
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertIs(settings.reminder_policy, TEN_MINUTE_WINDOW)
        self.assertEqual(settings.weekend_fallback, "Saturday")
        self.assertEqual(settings.user_id, "u1")

    def test_empty_fallback_disables_it(self) -> None:
        with mock.patch.dict(os.environ, {"MYFFCS_WEEKEND_FALLBACK": ""}, clear=True):
            self.assertIsNone(load_settings(self.env_file).weekend_fallback)

    def test_env_file_is_read(self) -> None:
        self.env_file.write_text("VAPID_PRIVATE_KEY=from-file\nVAPID_SUBJECT=mailto:me@uni.edu\n", encoding="utf-8")
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = load_settings(self.env_file)

        self.assertEqual(settings.vapid_private_key, "from-file")
        self.assertEqual(settings.vapid_subject, "mailto:me@uni.edu")

    def test_invalid_values(self) -> None:
        with mock.patch.dict(os.environ, {"MYFFCS_REMINDER_PRESET": "hourly"}, clear=True):
            with self.assertRaises(ValueError):
                load_settings(self.env_file)
        with mock.patch.dict(os.environ, {"MYFFCS_WEEKEND_FALLBACK": "Funday"}, clear=True):
            with self.assertRaises(ValueError):
                load_settings(self.env_file)


if __name__ == "__main__":
    unittest.main()
