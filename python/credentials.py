"""
Local credential record for the review CLI.

The record is a small YAML document holding the server URL and the bearer
token obtained by ``login``. It is always rewritten as a whole and kept
readable by the owner only.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import yaml

from colored_logger import get_colored_logger

logger = get_colored_logger(__name__)

CREDENTIALS_FILE_MODE = 0o600


class CredentialError(Exception):
    """Raised when the credential record exists but cannot be parsed."""

    pass


@dataclass
class StoredCredential:
    server: str = ""
    token: str = ""

    @property
    def logged_in(self) -> bool:
        return bool(self.token)

    def to_dict(self) -> dict:
        # Empty fields are left out of the file
        data = {}
        if self.server:
            data["server"] = self.server
        if self.token:
            data["token"] = self.token
        return data


class CredentialStore:
    """Loads and saves the credential record at an injected path."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> StoredCredential:
        """Read the record; a missing file yields an empty credential."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except FileNotFoundError:
            return StoredCredential()
        except yaml.YAMLError as e:
            raise CredentialError(
                f"invalid credential file {self.path}: {e}"
            ) from e

        if raw is None:
            return StoredCredential()
        if not isinstance(raw, dict):
            raise CredentialError(f"invalid credential file {self.path}")

        return StoredCredential(
            server=str(raw.get("server") or ""),
            token=str(raw.get("token") or ""),
        )

    def save(self, credential: StoredCredential) -> None:
        """Rewrite the whole record with owner-only permissions."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = yaml.safe_dump(credential.to_dict(), default_flow_style=False)

        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CREDENTIALS_FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        # O_CREAT only applies the mode to new files
        os.chmod(self.path, CREDENTIALS_FILE_MODE)
        logger.debug("Credentials written to %s", self.path)

    def clear_token(self) -> StoredCredential:
        """Drop the token but keep the server URL."""
        credential = self.load()
        credential.token = ""
        self.save(credential)
        return credential
