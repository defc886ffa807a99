"""
Settings tests focusing on behavior, not implementation.
"""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from settings import DEFAULT_SERVER, Settings, _load_env_file


class TestSettingsBehavior(unittest.TestCase):
    def test_defaults(self):
        settings = Settings(environ={})

        self.assertEqual(settings.default_server, DEFAULT_SERVER)
        self.assertEqual(
            settings.credentials_path, Path.home() / ".design-reviewer.yaml"
        )
        self.assertEqual(settings.provider, "google")
        self.assertEqual(settings.login_timeout, 120)
        self.assertEqual(settings.max_entries, 1000)
        self.assertEqual(settings.max_decompressed_bytes, 500 * 1024 * 1024)

    def test_environment_overrides_defaults(self):
        settings = Settings(
            environ={
                "MOCKUP_REVIEW_SERVER": "https://review.example.com/",
                "MOCKUP_REVIEW_CONFIG": "/tmp/creds.yaml",
                "MOCKUP_REVIEW_STORAGE": "/srv/uploads",
                "MOCKUP_REVIEW_PROVIDER": "github",
            }
        )

        self.assertEqual(settings.default_server, "https://review.example.com")
        self.assertEqual(settings.credentials_path, Path("/tmp/creds.yaml"))
        self.assertEqual(settings.storage_root, Path("/srv/uploads"))
        self.assertEqual(settings.provider, "github")

    def test_explicit_arguments_win_over_environment(self):
        settings = Settings(
            default_server="http://explicit",
            environ={"MOCKUP_REVIEW_SERVER": "http://from-env"},
        )

        self.assertEqual(settings.default_server, "http://explicit")

    def test_resolve_server_order(self):
        settings = Settings(environ={})

        self.assertEqual(
            settings.resolve_server("http://override/", "http://stored"),
            "http://override",
        )
        self.assertEqual(settings.resolve_server(None, "http://stored"), "http://stored")
        self.assertEqual(settings.resolve_server(None, ""), DEFAULT_SERVER)


class TestEnvFileLoading(unittest.TestCase):
    def test_env_file_values_loaded_without_overriding_environment(self):
        with tempfile.NamedTemporaryFile("w", suffix=".env", delete=False) as f:
            f.write("# comment\n")
            f.write('MOCKUP_REVIEW_TEST_A="quoted value"\n')
            f.write("MOCKUP_REVIEW_TEST_B=from-file\n")
            f.write("not a pair\n")
            env_path = f.name

        try:
            with patch.dict(os.environ, {"MOCKUP_REVIEW_TEST_B": "from-env"}):
                _load_env_file(env_path)
                self.assertEqual(os.environ["MOCKUP_REVIEW_TEST_A"], "quoted value")
                self.assertEqual(os.environ["MOCKUP_REVIEW_TEST_B"], "from-env")
        finally:
            os.unlink(env_path)

    def test_missing_env_file_is_ignored(self):
        _load_env_file("/nonexistent/.env")


if __name__ == "__main__":
    unittest.main()
