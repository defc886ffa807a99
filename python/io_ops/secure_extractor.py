"""
Secure extraction of uploaded mockup archives into versioned storage.

The archive is untrusted. Before anything is written the extractor checks that
it parses, is non-empty, stays under the entry limit and contains an HTML page.
While writing, every entry is confined lexically to the version root and the
cumulative decompressed size is metered against a fixed budget.

Extraction is not transactional: if it fails part way, files already written
stay on disk and the caller must not publish the version.
"""

import io
import os
import zipfile
import zlib
from dataclasses import dataclass, field
from typing import List, Optional

from colored_logger import get_colored_logger
from settings import Settings
from .archive_security import FormatError, SecurityValidator
from .version_storage import VersionStorage

logger = get_colored_logger(__name__)

COPY_CHUNK_SIZE = 64 * 1024

# Raised by zipfile while decompressing a damaged or unsupported entry
_CORRUPT_ENTRY_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    NotImplementedError,  # unsupported compression method
    RuntimeError,  # encrypted entry
)


@dataclass
class ExtractionReport:
    version_id: str
    root: str
    files_written: int = 0
    bytes_written: int = 0
    skipped: List[str] = field(default_factory=list)


class SecureExtractor:
    """Unpacks ZIP uploads into ``<storage_root>/<version_id>``."""

    def __init__(
        self,
        storage: VersionStorage,
        validator: Optional[SecurityValidator] = None,
        chunk_size: int = COPY_CHUNK_SIZE,
    ):
        self.storage = storage
        self.validator = validator or SecurityValidator()
        self.chunk_size = max(1024, chunk_size)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SecureExtractor":
        """Extractor over ``settings.storage_root`` using the configured limits."""
        return cls(
            VersionStorage(settings.storage_root),
            SecurityValidator.from_settings(settings),
        )

    def extract(self, version_id: str, data: bytes) -> ExtractionReport:
        try:
            archive = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            raise FormatError(f"invalid zip archive: {e}") from e

        with archive:
            entries = archive.infolist()
            self.validator.validate_archive(entries)

            version_root = self.validator.validate_version_root(
                os.fspath(self.storage.storage_root), version_id
            )
            report = ExtractionReport(version_id=version_id, root=version_root)

            for info in entries:
                target = self.validator.safe_destination(version_root, info.filename)
                if target is None:
                    report.skipped.append(info.filename)
                    continue

                if info.is_dir():
                    os.makedirs(target, exist_ok=True)
                    continue

                if target == version_root:
                    logger.warning(
                        "File entry resolves to the version root, skipping: %r",
                        info.filename,
                    )
                    report.skipped.append(info.filename)
                    continue

                os.makedirs(os.path.dirname(target), exist_ok=True)
                written = self._copy_entry(archive, info, target, report.bytes_written)
                report.bytes_written += written
                report.files_written += 1
                self.validator.check_budget(report.bytes_written)

        logger.info(
            "Extracted version %s: %d files, %d bytes, %d skipped",
            version_id,
            report.files_written,
            report.bytes_written,
            len(report.skipped),
        )
        return report

    def _copy_entry(
        self,
        archive: zipfile.ZipFile,
        info: zipfile.ZipInfo,
        target: str,
        bytes_so_far: int,
    ) -> int:
        """
        Copy one entry, reading at most the remaining budget plus one byte.

        The extra byte is what lets check_budget() see the overflow without
        decompressing the rest of an oversized entry.
        """
        limit = self.validator.remaining_budget(bytes_so_far) + 1
        copied = 0

        try:
            with archive.open(info) as src, open(target, "wb") as dst:
                while copied < limit:
                    chunk = src.read(min(self.chunk_size, limit - copied))
                    if not chunk:
                        break
                    dst.write(chunk)
                    copied += len(chunk)
        except _CORRUPT_ENTRY_ERRORS as e:
            raise FormatError(f"corrupt archive entry {info.filename}: {e}") from e

        return copied
