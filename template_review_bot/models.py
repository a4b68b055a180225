from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

RowSet = List[List[str]]
ChatMessage = Dict[str, str]


@dataclass(frozen=True, slots=True)
class CellRange:
    """A spreadsheet plus an A1-style rectangular address."""

    spreadsheet_id: str
    a1_range: str


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True, slots=True)
class ApprovalRecord:
    """Row appended to the approvals sheet by /approved."""

    client_id: str
    doc_link: str
    reviewed_by: str
    template_key: str = "default"
    status: str = "APPROVED"
    version: str = "1.0"
    reviewed_at: str = field(default_factory=_utc_timestamp)
    notes: str = "Approved via Slack bot"

    def to_row(self) -> List[str]:
        return [
            self.client_id,
            self.template_key,
            self.status,
            self.doc_link,
            self.version,
            self.reviewed_by,
            self.reviewed_at,
            self.notes,
        ]


@dataclass(slots=True)
class CommandInvocation:
    """One slash command delivered by Slack, consumed by a single handler."""

    command: str
    text: str
    user_id: str
    user_name: str
    respond: Callable[..., Any]

    @classmethod
    def from_slack(cls, command: Dict[str, Any], respond: Callable[..., Any]) -> "CommandInvocation":
        return cls(
            command=command.get("command", ""),
            text=command.get("text") or "",
            user_id=command.get("user_id", ""),
            user_name=command.get("user_name", ""),
            respond=respond,
        )

    def reply(self, text: str, *, replace_original: bool = False) -> None:
        payload: Dict[str, Any] = {"response_type": "ephemeral", "text": text}
        if replace_original:
            payload["replace_original"] = True
        self.respond(**payload)


# Vendor payloads -------------------------------------------------------------
class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ValueRange(_Payload):
    """Response body of spreadsheets.values.get."""

    range: Optional[str] = None
    major_dimension: Optional[str] = Field(None, alias="majorDimension")
    values: RowSet = Field(default_factory=list)


class TextRun(_Payload):
    content: Optional[str] = None


class ParagraphElement(_Payload):
    text_run: Optional[TextRun] = Field(None, alias="textRun")


class Paragraph(_Payload):
    elements: List[ParagraphElement] = Field(default_factory=list)


class StructuralElement(_Payload):
    paragraph: Optional[Paragraph] = None


class Body(_Payload):
    content: List[StructuralElement] = Field(default_factory=list)


class Document(_Payload):
    """Subset of the Docs v1 document resource used for text extraction."""

    document_id: Optional[str] = Field(None, alias="documentId")
    title: Optional[str] = None
    body: Optional[Body] = None

    def plain_text(self) -> str:
        if self.body is None:
            return ""
        parts: List[str] = []
        for element in self.body.content:
            if element.paragraph is None:
                continue
            for paragraph_element in element.paragraph.elements:
                if paragraph_element.text_run is not None:
                    parts.append(paragraph_element.text_run.content or "")
        return "".join(parts).strip()
