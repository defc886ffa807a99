import logging
import os
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_SERVER = "http://localhost:8080"
DEFAULT_PROVIDER = "google"
CREDENTIALS_FILENAME = ".design-reviewer.yaml"

LOGIN_TIMEOUT_SECONDS = 120
REQUEST_TIMEOUT_SECONDS = 60

MAX_ARCHIVE_ENTRIES = 1000
MAX_DECOMPRESSED_BYTES = 500 * 1024 * 1024  # 500MB across the whole archive
MAX_UPLOAD_BYTES = 50 * 1024 * 1024  # 50MB request body


def _load_env_file(env_path: str) -> None:
    """
    Simple .env file parser that doesn't require external dependencies.
    Loads key=value pairs from .env file into os.environ.
    """
    if not os.path.isfile(env_path):
        return

    try:
        with open(env_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()

                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip()

                if (value.startswith('"') and value.endswith('"')) or (
                    value.startswith("'") and value.endswith("'")
                ):
                    value = value[1:-1]

                # Real environment wins over the .env file
                if key and key not in os.environ:
                    os.environ[key] = value

        logger.debug(".env file loaded from %s", env_path)

    except OSError as e:
        logger.warning("Failed to load .env file: %s", e)


class Settings:
    """
    Runtime configuration for the review client and the ingest side.

    Each value is taken from the explicit keyword argument if given, then from
    the ``MOCKUP_REVIEW_*`` environment variables, then from the defaults above.
    Tests pass ``environ={}`` and a temporary ``credentials_path`` so nothing
    leaks in from the developer's machine.
    """

    def __init__(
        self,
        default_server: Optional[str] = None,
        credentials_path: Optional[str] = None,
        storage_root: Optional[str] = None,
        provider: Optional[str] = None,
        login_timeout: float = LOGIN_TIMEOUT_SECONDS,
        request_timeout: float = REQUEST_TIMEOUT_SECONDS,
        max_entries: int = MAX_ARCHIVE_ENTRIES,
        max_decompressed_bytes: int = MAX_DECOMPRESSED_BYTES,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        env = os.environ if environ is None else environ

        self.default_server: str = (
            default_server or env.get("MOCKUP_REVIEW_SERVER") or DEFAULT_SERVER
        ).rstrip("/")
        self.credentials_path: Path = Path(
            credentials_path
            or env.get("MOCKUP_REVIEW_CONFIG")
            or Path.home() / CREDENTIALS_FILENAME
        )
        self.storage_root: Path = Path(
            storage_root or env.get("MOCKUP_REVIEW_STORAGE") or "uploads"
        )
        self.provider: str = (
            provider or env.get("MOCKUP_REVIEW_PROVIDER") or DEFAULT_PROVIDER
        )

        self.login_timeout = login_timeout
        self.request_timeout = request_timeout
        self.max_entries = max_entries
        self.max_decompressed_bytes = max_decompressed_bytes
        self.max_upload_bytes = max_upload_bytes

    @classmethod
    def from_environment(cls, env_file: Optional[str] = ".env", **overrides):
        """Load ``env_file`` into the environment, then build settings from it."""
        if env_file:
            _load_env_file(env_file)
        return cls(**overrides)

    def resolve_server(self, *candidates: Optional[str]) -> str:
        """Return the first non-empty candidate, else the default server."""
        for candidate in candidates:
            if candidate:
                return candidate.rstrip("/")
        return self.default_server

    def __repr__(self) -> str:
        return (
            f"Settings(default_server={self.default_server!r}, "
            f"credentials_path={str(self.credentials_path)!r}, "
            f"storage_root={str(self.storage_root)!r})"
        )
