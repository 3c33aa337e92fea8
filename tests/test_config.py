"""Tests for environment-driven settings."""

import os
import unittest
from unittest import mock

from medgames.config import ConfigError, load_settings
from medgames.data.dailymed import DAILYMED_BASE_URL

CLEAN_ENV = {
    "MISTRAL_API_KEY": "",
    "MISTRAL_MODEL": "",
    "DAILYMED_BASE_URL": "",
    "DAILYMED_REQUEST_DELAY": "",
    "DAILYMED_TIMEOUT": "",
}


class SettingsTests(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, CLEAN_ENV):
            settings = load_settings()
        self.assertIsNone(settings.mistral_api_key)
        self.assertEqual(settings.dailymed_base_url, DAILYMED_BASE_URL)
        self.assertEqual(settings.request_delay, 0.3)
        self.assertEqual(settings.timeout, 10.0)

    def test_overrides(self):
        env = dict(CLEAN_ENV, MISTRAL_API_KEY="key", DAILYMED_REQUEST_DELAY="0", DAILYMED_TIMEOUT="2.5")
        with mock.patch.dict(os.environ, env):
            settings = load_settings()
        self.assertEqual(settings.mistral_api_key, "key")
        self.assertEqual(settings.request_delay, 0.0)
        self.assertEqual(settings.timeout, 2.5)

    def test_invalid_values(self):
        for value in ["-1", "soon"]:
            with self.subTest(value=value):
                with mock.patch.dict(os.environ, dict(CLEAN_ENV, DAILYMED_REQUEST_DELAY=value)):
                    with self.assertRaises(ConfigError):
                        load_settings()


if __name__ == "__main__":
    unittest.main()
