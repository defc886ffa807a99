import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from colored_logger import get_colored_logger
from credentials import CredentialStore
from io_ops.archive_builder import ArchiveBuilder, contains_html, default_project_name
from settings import Settings
from .errors import AuthError, ServerError, TransportError, ValidationError

logger = get_colored_logger(__name__)


@dataclass
class UploadResult:
    name: str
    server: str
    project_id: str
    version_id: str
    version_num: int

    @property
    def review_url(self) -> str:
        return f"{self.server}/projects/{self.project_id}"

    def summary(self) -> str:
        return f"Uploaded {self.name} v{self.version_num}\nReview URL: {self.review_url}"


class UploadClient:
    UPLOAD_PATH = "/api/upload"
    USER_AGENT = "MockupReviewCLI/1.0"

    def __init__(
        self,
        store: CredentialStore,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
        builder: Optional[ArchiveBuilder] = None,
    ):
        self.store = store
        self.settings = settings or Settings()
        self.session = session or requests.Session()
        self.builder = builder or ArchiveBuilder()

    def push(
        self, directory: str, name: Optional[str] = None, server: Optional[str] = None
    ) -> UploadResult:
        """
        Archive ``directory`` and upload it as a new version of ``name``.

        Every precondition is checked before the first request is made.
        """
        credential = self.store.load()
        if not credential.token:
            raise AuthError("Not logged in. Run `mockup-review login` first.")

        if not os.path.isdir(directory):
            raise ValidationError(f"directory does not exist: {directory}")

        if not contains_html(directory):
            raise ValidationError("Directory must contain at least one .html file")

        name = name or default_project_name(directory)
        server_url = self.settings.resolve_server(server, credential.server)

        try:
            archive = self.builder.build(directory)
        except OSError as e:
            raise ValidationError(f"failed to create zip: {e}") from e
        payload = archive.to_zip_bytes(self.builder.compression_level)

        logger.debug(
            "Uploading %s (%d files, %d bytes zipped) to %s",
            name,
            archive.file_count,
            len(payload),
            server_url,
        )
        response = self._post_archive(server_url, credential.token, name, payload)
        data = self._parse_response(response)

        try:
            return UploadResult(
                name=name,
                server=server_url,
                project_id=str(data["project_id"]),
                version_id=str(data["version_id"]),
                version_num=int(data["version_num"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ServerError(
                f"unexpected upload response: {data!r}", response.status_code
            ) from e

    def _post_archive(
        self, server_url: str, token: str, name: str, payload: bytes
    ) -> requests.Response:
        headers = {
            "Authorization": f"Bearer {token}",
            "User-Agent": self.USER_AGENT,
        }
        files = {"file": ("upload.zip", payload, "application/zip")}

        try:
            return self.session.post(
                server_url + self.UPLOAD_PATH,
                headers=headers,
                files=files,
                data={"name": name},
                timeout=self.settings.request_timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.debug("Upload request to %s failed: %s", server_url, e)
            raise TransportError(f"upload failed: {e}") from e

    def _parse_response(self, response: requests.Response) -> Dict[str, Any]:
        body = response.text or ""

        if not 200 <= response.status_code < 300:
            raise ServerError(_error_message(body), response.status_code)

        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise ServerError(
                f"invalid JSON in upload response: {e}", response.status_code
            ) from e
        if not isinstance(data, dict):
            raise ServerError(
                f"unexpected upload response: {data!r}", response.status_code
            )
        return data


def _error_message(body: str) -> str:
    """Prefer a JSON ``error`` field, then the trimmed body, then a fallback."""
    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        data = None

    if isinstance(data, dict) and isinstance(data.get("error"), str):
        return data["error"]

    return body.strip() or "upload failed"
