from __future__ import annotations

from typing import Callable, Iterable

import logging

from google.auth.exceptions import GoogleAuthError
from googleapiclient.discovery import Resource
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import HttpRequest
from httplib2 import HttpLib2Error
from pydantic import ValidationError

from .config import GoogleConfig
from .credentials import SHEETS_SCOPES, build_credentials, describe_credentials
from .errors import AdapterError, BotError
from .models import CellRange, RowSet, ValueRange

LOGGER = logging.getLogger(__name__)

_ADAPTER_EXCEPTIONS = (HttpError, GoogleAuthError, HttpLib2Error, ValueError, OSError)


class GoogleSheetsClient:
    """Thin wrapper around the Google Sheets API for this project."""

    def __init__(self, conf: GoogleConfig) -> None:
        self._conf = conf

    def _service_client(self) -> Resource:
        creds = build_credentials(self._conf, SHEETS_SCOPES)
        return build("sheets", "v4", credentials=creds, cache_discovery=False)

    # Reading -----------------------------------------------------------------
    def read_range(self, spreadsheet_id: str, a1_range: str) -> RowSet:
        """Return the value grid for a range, or an empty list when it holds no data."""

        target = CellRange(spreadsheet_id, a1_range)

        def _build_request() -> HttpRequest:
            service = self._service_client()
            return (
                service.spreadsheets()
                .values()
                .get(spreadsheetId=target.spreadsheet_id, range=target.a1_range)
            )

        result = self._execute(_build_request, target, operation="read range")
        try:
            return ValueRange.model_validate(result or {}).values
        except ValidationError as exc:
            raise AdapterError(f"Unexpected Sheets response for {target.a1_range}: {exc}") from exc

    # Writing -----------------------------------------------------------------
    def append_rows(
        self, spreadsheet_id: str, a1_range: str, rows: Iterable[Iterable[str]]
    ) -> dict:
        """Append rows after existing data; values are parsed as if typed by a user."""

        target = CellRange(spreadsheet_id, a1_range)
        payload = {"values": [list(row) for row in rows]}

        def _append_request() -> HttpRequest:
            service = self._service_client()
            return (
                service.spreadsheets()
                .values()
                .append(
                    spreadsheetId=target.spreadsheet_id,
                    range=target.a1_range,
                    valueInputOption="USER_ENTERED",
                    body=payload,
                )
            )

        return self._execute(_append_request, target, operation="append rows") or {}

    # Internal ----------------------------------------------------------------
    def _execute(
        self,
        request_builder: Callable[[], HttpRequest],
        target: CellRange,
        *,
        operation: str,
    ) -> dict:
        """Execute a single Sheets API request, wrapping failures in AdapterError."""

        try:
            return request_builder().execute()
        except BotError:
            LOGGER.error("Credentials check: %s", describe_credentials(self._conf))
            raise
        except _ADAPTER_EXCEPTIONS as exc:
            LOGGER.error(
                "Sheets API %s failed for %s!%s: %s",
                operation,
                target.spreadsheet_id,
                target.a1_range,
                exc,
            )
            LOGGER.error("Credentials check: %s", describe_credentials(self._conf))
            raise AdapterError(f"Google Sheets {operation} failed: {exc}") from exc
