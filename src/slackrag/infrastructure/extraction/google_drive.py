"""Google Drive / Docs extraction with a service account."""

import asyncio
import logging
import re
import threading
from typing import Any

import httplib2
from google.oauth2 import service_account
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from slackrag.application.ports import ExtractedContent, Generator
from slackrag.domain.exceptions import ExtractionError, SourcePermissionError
from slackrag.infrastructure.extraction.base import summarized
from slackrag.infrastructure.extraction.pdf import pdf_text

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/drive.readonly"]

# Google-native type -> export MIME type
EXPORT_TYPES: dict[str, str] = {
    "application/vnd.google-apps.document": "text/plain",
    "application/vnd.google-apps.spreadsheet": "text/csv",
    "application/vnd.google-apps.presentation": "text/plain",
}

_FILE_ID_RES = (
    re.compile(r"/d/([a-zA-Z0-9_-]{10,})"),
    re.compile(r"[?&]id=([a-zA-Z0-9_-]{10,})"),
)


def file_id_from_url(url: str) -> str | None:
    for pattern in _FILE_ID_RES:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


class GoogleDriveExtractor:
    """Export Docs/Sheets/Slides as text; download PDFs and plain text files."""

    def __init__(
        self,
        summarizer: Generator,
        credentials_file: str | None = None,
        timeout: float = 30.0,
        service: Any = None,
    ) -> None:
        self._summarizer = summarizer
        self._credentials_file = credentials_file
        self._timeout = timeout
        self._service = service
        self._credentials: Any = None
        self._lock = threading.Lock()

    def _load_credentials(self) -> Any:
        with self._lock:
            if self._credentials is None:
                if not self._credentials_file:
                    raise ExtractionError("Google Drive is not configured")
                self._credentials = service_account.Credentials.from_service_account_file(
                    self._credentials_file, scopes=SCOPES
                )
            return self._credentials

    def _drive(self) -> Any:
        """Fresh Drive service per read: an httplib2.Http must not cross threads."""
        if self._service is not None:
            return self._service
        http = AuthorizedHttp(self._load_credentials(), http=httplib2.Http(timeout=self._timeout))
        return build("drive", "v3", http=http, cache_discovery=False)

    def _read(self, file_id: str) -> tuple[str, str]:
        """Blocking Drive calls: returns (file name, text)."""
        files = self._drive().files()
        meta = files.get(fileId=file_id, fields="id,name,mimeType", supportsAllDrives=True).execute()
        mime = meta.get("mimeType", "")
        name = meta.get("name", file_id)
        if mime in EXPORT_TYPES:
            data = files.export(fileId=file_id, mimeType=EXPORT_TYPES[mime]).execute()
            return name, data.decode("utf-8", errors="replace")
        if mime == "application/pdf":
            return name, pdf_text(files.get_media(fileId=file_id).execute())
        if mime.startswith("text/"):
            return name, files.get_media(fileId=file_id).execute().decode("utf-8", errors="replace")
        raise ExtractionError(f"Unsupported Google Drive file type: {mime}")

    async def extract(self, url: str) -> ExtractedContent:
        file_id = file_id_from_url(url)
        if not file_id:
            raise ExtractionError("Could not extract file ID from URL")
        try:
            name, text = await asyncio.to_thread(self._read, file_id)
        except HttpError as e:
            status = getattr(e.resp, "status", None)
            if status in (403, 404):
                raise SourcePermissionError(
                    f"Google Drive Permission denied for {url}", source="this Google Drive file"
                ) from e
            raise ExtractionError(f"Google Drive Error: {e}") from e
        extracted = await summarized(self._summarizer, text, url)
        return ExtractedContent(content=extracted.content, summary=f"{name} : {extracted.summary}")
