# Archive safety rules and the extraction error taxonomy
from .archive_security import (
    SecurityValidator,
    ExtractionError,
    FormatError,
    EmptyArchiveError,
    TooManyEntriesError,
    ContentPolicyError,
    QuotaExceededError,
    InvalidVersionError,
    is_within_root,
)
from .archive_builder import (
    ArchiveBuilder,
    ArchiveEntry,
    MockupArchive,
    contains_html,
    default_project_name,
)
from .version_storage import Version, VersionStorage
from .secure_extractor import SecureExtractor, ExtractionReport

__all__ = [
    # Security components
    "SecurityValidator",
    "ExtractionError",
    "FormatError",
    "EmptyArchiveError",
    "TooManyEntriesError",
    "ContentPolicyError",
    "QuotaExceededError",
    "InvalidVersionError",
    "is_within_root",
    # Archive creation
    "ArchiveBuilder",
    "ArchiveEntry",
    "MockupArchive",
    "contains_html",
    "default_project_name",
    # Storage and extraction
    "Version",
    "VersionStorage",
    "SecureExtractor",
    "ExtractionReport",
]
