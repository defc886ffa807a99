import os
import unittest
from unittest.mock import Mock

from api import AuthError, UploadResult
from auth import LoginResult, LoginTimeoutError
from cli_review import ReviewCLI
from credentials import StoredCredential
from guidelines import GUIDELINES_CONTENT, GUIDELINES_FILENAME
from .test_utils import TempDirTestCase


class TestReviewCLI(TempDirTestCase):
    def setUp(self):
        super().setUp()
        self.auth_client = Mock()
        self.upload_client = Mock()
        self.cli = ReviewCLI(
            settings=self.make_settings(),
            auth_client=self.auth_client,
            upload_client=self.upload_client,
        )

    def test_no_command_prints_help(self):
        self.assertEqual(self.cli.run([]), 1)

    def test_login_success(self):
        self.auth_client.login.return_value = LoginResult("http://r", "tok", "Ann")

        self.assertEqual(self.cli.run(["login", "--server", "http://r"]), 0)
        self.auth_client.login.assert_called_once_with("http://r")

    def test_login_timeout_returns_error_status(self):
        self.auth_client.login.side_effect = LoginTimeoutError("login timed out")

        self.assertEqual(self.cli.run(["login"]), 1)

    def test_push_passes_arguments(self):
        self.upload_client.push.return_value = UploadResult("d", "http://r", "p1", "v1", 1)

        status = self.cli.run(["push", "./design", "--name", "Demo", "--server", "http://r"])

        self.assertEqual(status, 0)
        self.upload_client.push.assert_called_once_with("./design", "Demo", "http://r")

    def test_push_client_error_returns_error_status(self):
        self.upload_client.push.side_effect = AuthError("Not logged in.")

        self.assertEqual(self.cli.run(["push", "./design"]), 1)

    def test_push_keyboard_interrupt(self):
        self.upload_client.push.side_effect = KeyboardInterrupt()

        self.assertEqual(self.cli.run(["push", "./design"]), 130)

    def test_logout_clears_token(self):
        self.cli.store.save(StoredCredential(server="http://r", token="tok"))

        self.assertEqual(self.cli.run(["logout"]), 0)
        self.assertEqual(self.cli.store.load(), StoredCredential(server="http://r"))

    def test_init_writes_guidelines_once(self):
        target = os.path.join(self.temp_dir, "design")
        os.makedirs(target)
        path = os.path.join(target, GUIDELINES_FILENAME)

        self.assertEqual(self.cli.run(["init", target]), 0)
        with open(path, encoding="utf-8") as f:
            self.assertEqual(f.read(), GUIDELINES_CONTENT)

        with open(path, "w", encoding="utf-8") as f:
            f.write("custom")
        self.assertEqual(self.cli.run(["init", target]), 0)
        with open(path, encoding="utf-8") as f:
            self.assertEqual(f.read(), "custom")

    def test_init_missing_directory(self):
        self.assertEqual(self.cli.run(["init", os.path.join(self.temp_dir, "nope")]), 1)


if __name__ == "__main__":
    unittest.main()
