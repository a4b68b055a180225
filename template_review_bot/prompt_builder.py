from __future__ import annotations

from textwrap import dedent
from typing import List, Mapping, Sequence

from .models import ChatMessage

RUBRIC_HEADER = "Template Review Criteria:"

HELLO_PROMPT = 'Say "OpenAI connected!" in a fun way'

ANSWER_SYSTEM_PROMPT = (
    "You are a helpful assistant for template review and document questions. "
    "Provide clear, concise answers."
)

REVIEW_SYSTEM_PROMPT = dedent(
    """
    You are a professional document reviewer. Review documents against the provided template standards.

    Always respond with:
    1. OVERALL RESULT: PASS or FAIL
    2. DETAILED CHECKLIST: Specific criteria checked
    3. RECOMMENDATIONS: Actionable next steps

    Be professional and thorough.
    """
).strip()


def _cell(row: Sequence[str], idx: int) -> str:
    if idx < len(row) and row[idx] is not None:
        return str(row[idx]).strip()
    return ""


def build_rubric(rows: Sequence[Sequence[str]]) -> str:
    """Turn template map rows (key, name, version, rules, rubric) into review criteria.

    Rows without a template key are skipped. Blank rules and rubric cells are
    left out instead of rendering empty lines.
    """

    lines = [RUBRIC_HEADER]
    for row in rows:
        key = _cell(row, 0)
        if not key:
            continue
        name = _cell(row, 1) or key
        version = _cell(row, 2) or "1.0"
        lines.append(f"- {name}: Version {version}")
        rules = _cell(row, 3)
        if rules:
            lines.append(f"  Rules: {rules}")
        rubric = _cell(row, 4)
        if rubric:
            lines.append(f"  Rubric: {rubric}")
    return "\n".join(lines) + "\n"


def build_hello_messages() -> List[ChatMessage]:
    return [{"role": "user", "content": HELLO_PROMPT}]


def build_answer_messages(question: str) -> List[ChatMessage]:
    return [
        {"role": "system", "content": ANSWER_SYSTEM_PROMPT},
        {"role": "user", "content": question},
    ]


def build_review_messages(
    rubric: str,
    document_links: str,
    document_texts: Mapping[str, str] | None = None,
) -> List[ChatMessage]:
    """Compose the review request.

    Without document texts the model is asked for a review framework based on
    the links alone, since it cannot open them itself.
    """

    sections = [
        "Please review these documents against our template standards:",
        "",
        "TEMPLATE STANDARDS:",
        rubric.rstrip("\n"),
        "",
        "DOCUMENTS TO REVIEW:",
        document_links,
        "",
    ]
    if document_texts:
        sections.append("DOCUMENT CONTENT:")
        for doc_id, text in document_texts.items():
            sections.extend([f"--- {doc_id} ---", text, ""])
        sections.append("Review the document content above against every template standard.")
    else:
        sections.append(
            "Note: Since I cannot access the document content directly, please provide a "
            "comprehensive review framework based on the template standards and suggest "
            "what to check in these documents."
        )

    return [
        {"role": "system", "content": REVIEW_SYSTEM_PROMPT},
        {"role": "user", "content": "\n".join(sections)},
    ]
