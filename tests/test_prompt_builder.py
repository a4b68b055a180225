from template_review_bot.prompt_builder import (
    RUBRIC_HEADER,
    build_answer_messages,
    build_review_messages,
    build_rubric,
)


def test_rubric_skips_rows_without_template_key():
    rows = [
        ["", "Orphan", "3.0", "Orphan rules", "Orphan rubric"],
        ["resume", "Resume", "2.0", "One page", "Clarity"],
    ]

    rubric = build_rubric(rows)

    assert rubric == (
        "Template Review Criteria:\n"
        "- Resume: Version 2.0\n"
        "  Rules: One page\n"
        "  Rubric: Clarity\n"
    )


def test_rubric_defaults_and_omits_blank_optional_fields():
    rows = [["cover", "", "", "  ", ""], ["memo", "Memo", "1.5"]]

    assert build_rubric(rows) == (
        "Template Review Criteria:\n"
        "- cover: Version 1.0\n"
        "- Memo: Version 1.5\n"
    )


def test_rubric_for_empty_sheet_is_header_only():
    assert build_rubric([]) == RUBRIC_HEADER + "\n"


def test_answer_messages():
    messages = build_answer_messages("Why?")

    assert messages[0]["role"] == "system"
    assert messages[1] == {"role": "user", "content": "Why?"}


def test_review_messages_link_only():
    messages = build_review_messages("Template Review Criteria:\n", "https://x/document/d/a")

    system, user = messages
    assert "OVERALL RESULT: PASS or FAIL" in system["content"]
    assert "DETAILED CHECKLIST" in system["content"]
    assert "RECOMMENDATIONS" in system["content"]
    assert "TEMPLATE STANDARDS:\nTemplate Review Criteria:" in user["content"]
    assert "DOCUMENTS TO REVIEW:\nhttps://x/document/d/a" in user["content"]
    assert "cannot access the document content directly" in user["content"]
    assert "DOCUMENT CONTENT" not in user["content"]


def test_review_messages_with_document_text_keeps_order():
    messages = build_review_messages("R\n", "links", {"b": "second doc", "a": "first doc"})

    content = messages[1]["content"]
    assert content.index("--- b ---") < content.index("--- a ---")
    assert "cannot access the document content directly" not in content
