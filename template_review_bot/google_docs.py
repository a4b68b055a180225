from __future__ import annotations

import logging
import re
from typing import List

from google.auth.exceptions import GoogleAuthError
from googleapiclient.discovery import Resource
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from httplib2 import HttpLib2Error
from pydantic import ValidationError

from .config import GoogleConfig
from .credentials import DOCS_SCOPES, build_credentials
from .errors import AdapterError
from .models import Document

LOGGER = logging.getLogger(__name__)

_DOCUMENT_ID_PATTERN = re.compile(r"/document/d/([a-zA-Z0-9_-]+)")


def extract_document_id(url: str) -> str | None:
    """Return the Google Docs id from a document URL, or None if it has none."""

    match = _DOCUMENT_ID_PATTERN.search(url or "")
    return match.group(1) if match else None


def extract_document_ids(text: str) -> List[str]:
    """Return every document id mentioned in free text, first occurrence order."""

    seen: List[str] = []
    for doc_id in _DOCUMENT_ID_PATTERN.findall(text or ""):
        if doc_id not in seen:
            seen.append(doc_id)
    return seen


class GoogleDocsClient:
    """Read-only access to Google Docs content."""

    def __init__(self, conf: GoogleConfig) -> None:
        self._conf = conf

    def _service_client(self) -> Resource:
        creds = build_credentials(self._conf, DOCS_SCOPES)
        return build("docs", "v1", credentials=creds, cache_discovery=False)

    def read_document_text(self, document_id: str) -> str:
        """Fetch a document and flatten its paragraph text runs to plain text."""

        try:
            service = self._service_client()
            raw = service.documents().get(documentId=document_id).execute()
            document = Document.model_validate(raw or {})
        except (HttpError, GoogleAuthError, HttpLib2Error, ValidationError, ValueError, OSError) as exc:
            LOGGER.error("Error reading Google Doc %s: %s", document_id, exc)
            raise AdapterError(f"Failed to read document: {exc}") from exc
        except AdapterError as exc:
            LOGGER.error("Error reading Google Doc %s: %s", document_id, exc)
            raise AdapterError(f"Failed to read document: {exc.message}") from exc

        text = document.plain_text()
        LOGGER.debug("Read %s characters from document %s", len(text), document_id)
        return text
