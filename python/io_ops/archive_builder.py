"""
In-memory archive construction for mockup directories.

The producer's directory is walked once, every visible file is read fully into
memory, and the result is serialised as a deflated ZIP ready for upload.
Nothing is written to disk.
"""

import io
import os
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from colored_logger import get_colored_logger
from .archive_security import is_html_name

logger = get_colored_logger(__name__)

PathLike = Union[str, Path]


@dataclass
class ArchiveEntry:
    path: str  # forward-slash relative path
    content: bytes = b""
    is_dir: bool = False

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class MockupArchive:
    """Ordered relative-path -> bytes entries plus optional directory markers."""

    entries: List[ArchiveEntry] = field(default_factory=list)

    def __post_init__(self):
        self._file_paths = {e.path for e in self.entries if not e.is_dir}

    def add_file(self, path: str, content: bytes) -> None:
        if path in self._file_paths:
            raise ValueError(f"duplicate archive entry: {path}")
        self._file_paths.add(path)
        self.entries.append(ArchiveEntry(path, content))

    def add_directory(self, path: str) -> None:
        self.entries.append(ArchiveEntry(path.rstrip("/") + "/", is_dir=True))

    def paths(self) -> List[str]:
        return [e.path for e in self.entries]

    @property
    def file_count(self) -> int:
        return len(self._file_paths)

    @property
    def total_size(self) -> int:
        return sum(e.size for e in self.entries)

    def to_zip_bytes(self, compression_level: int = 6) -> bytes:
        """Serialise as a ZIP archive held in memory."""
        buffer = io.BytesIO()
        with zipfile.ZipFile(
            buffer,
            "w",
            zipfile.ZIP_DEFLATED,
            compresslevel=compression_level,
            allowZip64=True,
        ) as zipf:
            for entry in self.entries:
                if entry.is_dir:
                    zipf.writestr(zipfile.ZipInfo(entry.path), b"")
                else:
                    zipf.writestr(entry.path, entry.content)
        return buffer.getvalue()


def _raise_walk_error(error: OSError) -> None:
    raise error


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


class ArchiveBuilder:
    """Walks a directory and collects its visible files into a MockupArchive."""

    def __init__(self, include_directories: bool = False, compression_level: int = 6):
        self.include_directories = include_directories
        self.compression_level = compression_level

    def build(self, directory: PathLike) -> MockupArchive:
        """
        Build an archive from ``directory``.

        Dot-prefixed files are skipped and dot-prefixed directories are pruned
        with their whole subtree. Any I/O error aborts the build.
        """
        root = os.fspath(directory)
        if not os.path.isdir(root):
            raise NotADirectoryError(f"not a directory: {root}")

        archive = MockupArchive()

        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
            # Prune in place so os.walk never descends into hidden directories
            dirnames[:] = sorted(d for d in dirnames if not _is_hidden(d))

            rel_dir = os.path.relpath(dirpath, root)
            if self.include_directories and rel_dir != os.curdir:
                archive.add_directory(_to_archive_name(rel_dir))

            for filename in sorted(filenames):
                if _is_hidden(filename):
                    continue
                file_path = os.path.join(dirpath, filename)
                with open(file_path, "rb") as f:
                    content = f.read()
                archive.add_file(
                    _to_archive_name(os.path.relpath(file_path, root)), content
                )

        logger.debug(
            "Built archive from %s: %d files, %d bytes",
            root,
            archive.file_count,
            archive.total_size,
        )
        return archive

    def build_bytes(self, directory: PathLike) -> bytes:
        return self.build(directory).to_zip_bytes(self.compression_level)


def _to_archive_name(relative_path: str) -> str:
    return relative_path.replace(os.sep, "/")


def contains_html(directory: PathLike) -> bool:
    """True if any file anywhere under ``directory`` has a .html name."""
    for _, _, filenames in os.walk(os.fspath(directory)):
        if any(is_html_name(name) for name in filenames):
            return True
    return False


def default_project_name(directory: PathLike) -> Optional[str]:
    """Last path segment of ``directory``, ignoring trailing separators."""
    name = os.path.basename(os.path.normpath(os.path.abspath(os.fspath(directory))))
    return name or None
