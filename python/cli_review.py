#!/usr/bin/env python3
"""
Mockup Review CLI

Log in through the browser once, then push directories of HTML/CSS mockups to
the review server as new versions.

Usage:
    python3 cli_review.py login --server https://review.example.com
    python3 cli_review.py push ./my-design --name "Checkout flow"
    python3 cli_review.py init ./my-design
    python3 cli_review.py logout
"""

import argparse
import logging
import sys
from typing import Optional

from api import ReviewClientError, UploadClient
from auth import LoginError, LoopbackAuthClient, logout
from colored_logger import get_colored_logger, setup_colored_logging
from credentials import CredentialError, CredentialStore
from guidelines import GUIDELINES_FILENAME, write_guidelines
from settings import Settings

logger = get_colored_logger(__name__)


class ReviewCLI:
    """Command-line interface for pushing mockups to the review server."""

    def __init__(self, settings: Optional[Settings] = None, auth_client=None, upload_client=None):
        self.settings = settings or Settings.from_environment()
        self.store = CredentialStore(self.settings.credentials_path)
        self.auth_client = auth_client or LoopbackAuthClient(self.store, self.settings)
        self.upload_client = upload_client or UploadClient(self.store, self.settings)
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="mockup-review",
            description="Upload HTML/CSS mockups for review",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Log in via the browser (token is stored in ~/.design-reviewer.yaml)
  mockup-review login --server https://review.example.com

  # Upload a directory; the project name defaults to the directory name
  mockup-review push ./my-design

  # Write DESIGN_GUIDELINES.md for AI tools into a directory
  mockup-review init ./my-design
            """,
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable debug logging"
        )

        subparsers = parser.add_subparsers(dest="command", help="Available commands")

        login_parser = subparsers.add_parser("login", help="Log in via the browser")
        login_parser.add_argument("--server", help="Server URL")

        subparsers.add_parser("logout", help="Remove the stored token")

        push_parser = subparsers.add_parser("push", help="Upload a design directory")
        push_parser.add_argument("directory", help="Directory containing the mockup")
        push_parser.add_argument("--name", help="Project name (default: directory name)")
        push_parser.add_argument("--server", help="Server URL")

        init_parser = subparsers.add_parser(
            "init", help=f"Create {GUIDELINES_FILENAME} in a directory"
        )
        init_parser.add_argument(
            "directory", nargs="?", default=".", help="Target directory (default: .)"
        )

        return parser

    def run(self, args: Optional[list] = None) -> int:
        """Run the CLI with the given arguments."""
        parsed_args = self.parser.parse_args(args)

        if parsed_args.verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        handlers = {
            "login": self._handle_login,
            "logout": self._handle_logout,
            "push": self._handle_push,
            "init": self._handle_init,
        }

        try:
            return handlers[parsed_args.command](parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130
        except (ReviewClientError, LoginError, CredentialError, OSError) as e:
            logger.error("Error: %s", e)
            logger.debug("Full error details:", exc_info=True)
            return 1

    def _handle_login(self, args) -> int:
        result = self.auth_client.login(args.server)
        logger.success(result.message)
        return 0

    def _handle_logout(self, args) -> int:
        logout(self.store)
        logger.success("Logged out")
        return 0

    def _handle_push(self, args) -> int:
        result = self.upload_client.push(args.directory, args.name, args.server)
        for line in result.summary().splitlines():
            logger.success(line)
        return 0

    def _handle_init(self, args) -> int:
        if write_guidelines(args.directory):
            logger.success(
                "Created %s - include this file in your project so AI tools "
                "follow the rendering constraints.",
                GUIDELINES_FILENAME,
            )
        return 0


def main():
    """Main entry point for the CLI."""
    setup_colored_logging(level=logging.INFO)

    cli = ReviewCLI()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
