"""
Server-side entry point for uploads.

The HTTP layer hands the gate the Authorization header, the raw bytes of the
``file`` field and the ``name`` field. The gate authenticates the caller,
asks the project registry for a fresh version and extracts the archive into
that version's directory. Token verification and the registry are injected;
this module owns no database.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from colored_logger import get_colored_logger
from io_ops.archive_security import ExtractionError, InvalidVersionError
from io_ops.secure_extractor import ExtractionReport, SecureExtractor
from settings import MAX_UPLOAD_BYTES, Settings

logger = get_colored_logger(__name__)


@dataclass
class VersionAllocation:
    project_id: str
    version_id: str
    version_num: int


@dataclass
class IngestResponse:
    allocation: VersionAllocation
    report: ExtractionReport

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project_id": self.allocation.project_id,
            "version_id": self.allocation.version_id,
            "version_num": self.allocation.version_num,
            "url": f"/projects/{self.allocation.project_id}",
        }


class IngestError(Exception):
    """A rejected upload, carrying the HTTP status to answer with."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.message}


# verify_token(token) -> identity (e.g. an email) or None when rejected
TokenVerifier = Callable[[str], Optional[str]]
# allocate_version(project_name, identity) -> VersionAllocation
VersionAllocator = Callable[[str, str], VersionAllocation]


class IngestGate:
    def __init__(
        self,
        extractor: SecureExtractor,
        verify_token: TokenVerifier,
        allocate_version: VersionAllocator,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
    ):
        self.extractor = extractor
        self.verify_token = verify_token
        self.allocate_version = allocate_version
        self.max_upload_bytes = max_upload_bytes

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        verify_token: TokenVerifier,
        allocate_version: VersionAllocator,
    ) -> "IngestGate":
        """Gate writing under ``settings.storage_root`` with the configured limits."""
        return cls(
            SecureExtractor.from_settings(settings),
            verify_token,
            allocate_version,
            max_upload_bytes=settings.max_upload_bytes,
        )

    def authenticate(self, authorization: Optional[str]) -> str:
        scheme, _, token = (authorization or "").partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise IngestError(401, "unauthorized")

        identity = self.verify_token(token.strip())
        if identity is None:
            raise IngestError(401, "unauthorized")
        return identity

    def handle_upload(
        self, authorization: Optional[str], file_bytes: Optional[bytes], name: str
    ) -> IngestResponse:
        identity = self.authenticate(authorization)

        if file_bytes is None:
            raise IngestError(400, "missing file field")
        if len(file_bytes) > self.max_upload_bytes:
            raise IngestError(
                413, f"upload exceeds {self.max_upload_bytes // (1024 * 1024)}MB limit"
            )
        if not name:
            raise IngestError(400, "missing name field")

        allocation = self.allocate_version(name, identity)

        try:
            report = self.extractor.extract(allocation.version_id, file_bytes)
        except (ExtractionError, InvalidVersionError, OSError) as e:
            logger.warning(
                "Upload of %s (version %s) rejected: %s",
                name,
                allocation.version_id,
                e,
            )
            raise IngestError(400, f"failed to save upload: {e}") from e

        logger.info(
            "Stored %s v%d as version %s",
            name,
            allocation.version_num,
            allocation.version_id,
        )
        return IngestResponse(allocation, report)
