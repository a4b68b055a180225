from __future__ import annotations

from typing import Dict, Sequence

from google.oauth2.service_account import Credentials

from .config import GoogleConfig
from .errors import AdapterError, ConfigurationError

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
DOCS_SCOPES = [
    "https://www.googleapis.com/auth/documents.readonly",
    "https://www.googleapis.com/auth/drive.readonly",
]


def describe_credentials(conf: GoogleConfig) -> Dict[str, bool]:
    """Presence flags for the service account fields, safe to log."""

    return {
        "has_project_id": bool(conf.resolved_project_id),
        "has_client_email": bool(conf.resolved_client_email),
        "has_private_key": bool(conf.resolved_private_key),
    }


def build_credentials(conf: GoogleConfig, scopes: Sequence[str]) -> Credentials:
    """Create service account credentials from configured identity values."""

    info = {
        "type": "service_account",
        "project_id": conf.resolved_project_id,
        "client_email": conf.resolved_client_email,
        "private_key": conf.resolved_private_key,
        "token_uri": "https://oauth2.googleapis.com/token",
    }
    missing = [name for name in ("project_id", "client_email", "private_key") if not info[name]]
    if missing:
        raise ConfigurationError(
            "Google service account is not configured (missing: " + ", ".join(missing) + ")"
        )

    try:
        return Credentials.from_service_account_info(info, scopes=list(scopes))
    except ValueError as exc:
        raise AdapterError(f"Invalid Google service account credentials: {exc}") from exc
