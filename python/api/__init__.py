from .errors import (
    ReviewClientError,
    AuthError,
    ValidationError,
    TransportError,
    ServerError,
)
from .upload_client import UploadClient, UploadResult
from .ingest_gate import IngestGate, IngestError, IngestResponse, VersionAllocation

__all__ = [
    "ReviewClientError",
    "AuthError",
    "ValidationError",
    "TransportError",
    "ServerError",
    "UploadClient",
    "UploadResult",
    "IngestGate",
    "IngestError",
    "IngestResponse",
    "VersionAllocation",
]
