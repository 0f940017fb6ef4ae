"""
Unit tests for environment-based settings.
"""

import os
import unittest
from pathlib import Path
from unittest import mock

from coursetracker.config import Settings
from coursetracker.storage import default_data_path


class TestSettings(unittest.TestCase):
    def test_defaults(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            s = Settings.from_env()
        self.assertEqual(s.data_file, default_data_path())
        self.assertIsNone(s.api_url)
        self.assertEqual(s.page_size, 10)
        self.assertFalse(s.seed_demo)

    def test_environment_overrides(self) -> None:
        env = {
            "COURSETRACKER_DATA_FILE": "/tmp/my-courses.json",
            "COURSETRACKER_API_URL": "http://localhost:5000",
            "COURSETRACKER_PAGE_SIZE": "25",
            "COURSETRACKER_TIMEOUT": "2.5",
            "COURSETRACKER_SEED_DEMO": "yes",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            s = Settings.from_env()
        self.assertEqual(s.data_file, Path("/tmp/my-courses.json"))
        self.assertEqual(s.api_url, "http://localhost:5000")
        self.assertEqual(s.page_size, 25)
        self.assertEqual(s.timeout, 2.5)
        self.assertTrue(s.seed_demo)

    def test_bad_page_size(self) -> None:
        with mock.patch.dict(os.environ, {"COURSETRACKER_PAGE_SIZE": "zero"}, clear=True):
            with self.assertRaises(ValueError):
                Settings.from_env()
        with mock.patch.dict(os.environ, {"COURSETRACKER_PAGE_SIZE": "0"}, clear=True):
            with self.assertRaises(ValueError):
                Settings.from_env()


if __name__ == "__main__":
    unittest.main()
