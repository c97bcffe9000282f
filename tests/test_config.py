import os
import unittest
from unittest import mock

from config import FRONTEND_ORIGINS, MAX_LEADERBOARD_LIMIT, Settings


class SettingsFromEnvTests(unittest.TestCase):
    @mock.patch.dict(os.environ, {}, clear=True)
    def test_defaults(self) -> None:
        settings = Settings.from_env()
        self.assertEqual(settings.mongodb_db, "santas-scanner")
        self.assertEqual(settings.allowed_origins, FRONTEND_ORIGINS)
        self.assertEqual(settings.cors_max_age, 84600)
        self.assertEqual(settings.leaderboard_limit, 100)
        self.assertEqual(settings.port, 3000)
        self.assertIsNone(settings.questions_file)

    @mock.patch.dict(
        os.environ,
        {"ALLOWED_ORIGINS": "https://preview.example.com/, http://localhost:5173,,https://preview.example.com"},
        clear=True,
    )
    def test_extra_origins_are_merged_without_duplicates(self) -> None:
        origins = Settings.from_env().allowed_origins
        self.assertEqual(origins[: len(FRONTEND_ORIGINS)], FRONTEND_ORIGINS)
        self.assertEqual(origins[len(FRONTEND_ORIGINS):], ["https://preview.example.com"])

    @mock.patch.dict(
        os.environ,
        {"PORT": "8080", "GEO_TIMEOUT": "2.5", "MONGODB_TIMEOUT_MS": " 1500 ", "LOG_LEVEL": "debug"},
        clear=True,
    )
    def test_numeric_values_are_parsed(self) -> None:
        settings = Settings.from_env()
        self.assertEqual(settings.port, 8080)
        self.assertEqual(settings.geo_timeout, 2.5)
        self.assertEqual(settings.mongodb_timeout_ms, 1500)
        self.assertEqual(settings.log_level, "DEBUG")

    def test_malformed_number_names_the_variable(self) -> None:
        for name in ("PORT", "CORS_MAX_AGE", "GEO_TIMEOUT", "LEADERBOARD_LIMIT", "MONGODB_TIMEOUT_MS"):
            with mock.patch.dict(os.environ, {name: "abc"}, clear=True):
                with self.assertRaises(ValueError) as ctx:
                    Settings.from_env()
                self.assertIn(name, str(ctx.exception))

    @mock.patch.dict(os.environ, {"LEADERBOARD_LIMIT": "500"}, clear=True)
    def test_leaderboard_limit_is_capped(self) -> None:
        self.assertEqual(Settings.from_env().leaderboard_limit, MAX_LEADERBOARD_LIMIT)

    @mock.patch.dict(os.environ, {"LEADERBOARD_LIMIT": "25"}, clear=True)
    def test_smaller_leaderboard_limit_is_kept(self) -> None:
        self.assertEqual(Settings.from_env().leaderboard_limit, 25)


if __name__ == "__main__":
    unittest.main()
