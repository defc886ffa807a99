"""
Security validation components for uploaded mockup archives.

This module holds the limits applied to untrusted archives, the lexical
containment check that prevents zip-slip writes, and the exception types the
extractor raises when an archive breaks policy.
"""

import os
import zipfile
from typing import List

from colored_logger import get_colored_logger
from settings import MAX_ARCHIVE_ENTRIES, MAX_DECOMPRESSED_BYTES, Settings

logger = get_colored_logger(__name__)

HTML_SUFFIX = ".html"


class ExtractionError(Exception):
    """Base class for archives rejected by extraction policy."""

    pass


class FormatError(ExtractionError):
    """Raised when the upload is not a readable ZIP archive."""

    pass


class EmptyArchiveError(ExtractionError):
    """Raised when the archive has no entries at all."""

    pass


class TooManyEntriesError(ExtractionError):
    """Raised when the archive holds more entries than allowed."""

    pass


class ContentPolicyError(ExtractionError):
    """Raised when the archive has no .html page to review."""

    pass


class QuotaExceededError(ExtractionError):
    """Raised when the decompressed size crosses the archive budget."""

    pass


class InvalidVersionError(ValueError):
    """Raised when a version id would place its root outside storage."""

    pass


def is_html_name(name: str) -> bool:
    return name.lower().endswith(HTML_SUFFIX)


def is_within_root(target: str, root: str) -> bool:
    """
    Lexical containment check: ``target`` must equal ``root`` or sit below it.

    Both paths are normalised first; no filesystem access and no symlink
    resolution takes place.
    """
    clean_root = os.path.normpath(root)
    clean_target = os.path.normpath(target)
    return clean_target == clean_root or clean_target.startswith(
        clean_root + os.sep
    )


class SecurityValidator:
    """Applies the archive limits before anything touches the disk."""

    def __init__(
        self,
        max_entries: int = MAX_ARCHIVE_ENTRIES,
        max_decompressed_bytes: int = MAX_DECOMPRESSED_BYTES,
    ):
        self.max_entries = max_entries
        self.max_decompressed_bytes = max_decompressed_bytes

    @classmethod
    def from_settings(cls, settings: Settings) -> "SecurityValidator":
        return cls(
            max_entries=settings.max_entries,
            max_decompressed_bytes=settings.max_decompressed_bytes,
        )

    def check_entry_count(self, entries: List[zipfile.ZipInfo]) -> None:
        if not entries:
            raise EmptyArchiveError("zip is empty")

        if len(entries) > self.max_entries:
            logger.warning(
                "Archive rejected: %d entries (limit %d)",
                len(entries),
                self.max_entries,
            )
            raise TooManyEntriesError(
                f"zip contains too many files (max {self.max_entries})"
            )

    def check_has_html(self, entries: List[zipfile.ZipInfo]) -> None:
        for info in entries:
            if not info.is_dir() and is_html_name(info.filename):
                return
        raise ContentPolicyError("zip must contain at least one .html file")

    def validate_archive(self, entries: List[zipfile.ZipInfo]) -> None:
        """Run every pre-extraction check, in order."""
        self.check_entry_count(entries)
        self.check_has_html(entries)

    def validate_version_root(self, storage_root: str, version_id: str) -> str:
        """Return the version root, refusing ids that escape ``storage_root``."""
        if not version_id or version_id in (".", ".."):
            raise InvalidVersionError(f"invalid version id: {version_id!r}")

        version_root = os.path.normpath(os.path.join(storage_root, version_id))
        clean_storage = os.path.normpath(storage_root)
        if not version_root.startswith(clean_storage + os.sep):
            logger.warning("Version id escapes storage root: %r", version_id)
            raise InvalidVersionError(f"invalid version id: {version_id!r}")

        return version_root

    def safe_destination(self, version_root: str, entry_name: str):
        """
        Join an entry name onto the version root.

        Returns the destination path, or None when the entry would land
        outside the root (traversal sequences, absolute names).
        """
        target = os.path.normpath(os.path.join(version_root, entry_name))
        if not is_within_root(target, version_root):
            logger.warning("Path traversal attempt blocked: %s", entry_name)
            return None
        return target

    def remaining_budget(self, bytes_written: int) -> int:
        return self.max_decompressed_bytes - bytes_written

    def check_budget(self, bytes_written: int) -> None:
        if bytes_written > self.max_decompressed_bytes:
            logger.error(
                "Archive size limit exceeded (%d bytes), stopping",
                self.max_decompressed_bytes,
            )
            raise QuotaExceededError(
                f"decompressed size exceeds limit ({self.max_decompressed_bytes} bytes)"
            )
