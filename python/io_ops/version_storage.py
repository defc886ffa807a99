"""
Versioned storage layout for extracted mockups.

Every upload version owns one directory, ``<storage_root>/<version_id>``.
The helpers here only compute paths and list pages; access control and
re-validation of user supplied paths are the serving layer's job.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from colored_logger import get_colored_logger
from .archive_security import is_html_name

logger = get_colored_logger(__name__)


@dataclass(frozen=True)
class Version:
    version_id: str
    root: Path


class VersionStorage:
    """Maps version ids to directories under a single storage root."""

    def __init__(self, storage_root: Union[str, Path]):
        self.storage_root = Path(storage_root)
        self.storage_root.mkdir(parents=True, exist_ok=True)

    def version_root(self, version_id: str) -> Path:
        return self.storage_root / version_id

    def version(self, version_id: str) -> Version:
        return Version(version_id, self.version_root(version_id))

    def resolve_path(self, version_id: str, relative_path: str) -> Path:
        """
        Plain join of storage root, version id and ``relative_path``.

        No existence check and no traversal protection: callers handing in
        untrusted paths must validate the result themselves.
        """
        return Path(os.path.join(self.storage_root, version_id, relative_path))

    def list_html_files(self, version_id: str) -> List[str]:
        """
        Names of the .html files directly inside the version root.

        Raises FileNotFoundError if the version has never been extracted.
        """
        html_files = []
        with os.scandir(self.version_root(version_id)) as entries:
            for entry in entries:
                if not entry.is_dir() and is_html_name(entry.name):
                    html_files.append(entry.name)
        return sorted(html_files)
