from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Tuple

from .config import AppConfig
from .errors import AdapterError, BotError, ConfigurationError, UsageError
from .google_docs import GoogleDocsClient, extract_document_ids
from .google_sheets import GoogleSheetsClient
from .llm_client import CompletionClient
from .models import ApprovalRecord, CommandInvocation
from .prompt_builder import (
    build_answer_messages,
    build_hello_messages,
    build_review_messages,
    build_rubric,
)

LOGGER = logging.getLogger(__name__)

HELLO_RANGE = "A1:E10"
REVIEW_RANGE = "A2:E10"  # row 1 is the header
APPROVAL_RANGE = "A:H"

HELLO_MAX_TOKENS = 50
ANSWER_MAX_TOKENS = 300
REVIEW_MAX_TOKENS = 400

HELP_TEXT = """🤖 *Template Review Bot - Help*

*Available Commands:*

📋 `/review [document_links]`
Review client templates against predefined standards
Example: `/review https://docs.google.com/document/d/abc123`

🤖 `/answer [your_question]`
Get AI-powered answers to template questions
Example: `/answer How should I format resume headers?`

✅ `/approved [sheet_id] [doc_link] [template_key]`
Save approved documents to Master DB
Example: `/approved 1ABC123XYZ https://docs.google.com/document/d/abc123 resume`

🔧 `/hello`
Test all system connections

❓ `/help`
Show this help message

*Need Support?* Contact your system administrator."""

APPROVED_USAGE = (
    "❌ Please provide sheet ID and document link.\n"
    "Example: `/approved 1kepJ6yKQUxt4N8uRcVCOAz4Do5_PpU6AUqwsSS0ZNyw "
    "https://docs.google.com/document/d/abc123`"
)
ANSWER_USAGE = "❓ Please ask a question.\nExample: `/answer How do I format a resume template?`"
ANSWER_NOT_CONFIGURED = (
    "🤖 *AI Answer Service*\n\n"
    "❌ OpenAI API key not configured. Please add your API key to use this feature.\n\n"
    "_This command will provide AI-powered answers to your questions once the API key is set up._"
)
REVIEW_USAGE = (
    "❌ Please provide document links to review.\n"
    "Example: `/review https://docs.google.com/document/d/your-doc-id`"
)


class CommandHandlers:
    """One method per slash command; each runs to completion for a single invocation."""

    def __init__(
        self,
        config: AppConfig,
        sheets: GoogleSheetsClient,
        docs: GoogleDocsClient,
        completions: CompletionClient,
    ) -> None:
        self._config = config
        self._sheets = sheets
        self._docs = docs
        self._completions = completions

    @classmethod
    def from_config(cls, config: AppConfig) -> "CommandHandlers":
        return cls(
            config,
            GoogleSheetsClient(config.google),
            GoogleDocsClient(config.google),
            CompletionClient(config.openai),
        )

    # /hello ------------------------------------------------------------------
    def hello(self, invocation: CommandInvocation) -> None:
        greeting = f"Hello <@{invocation.user_id}>! 🎉"
        invocation.reply(f"{greeting} Testing connections... ⏳")

        lines = [greeting, "", "✅ Bot working!"]
        try:
            rows = self._sheets.read_range(self._config.template_map_spreadsheet_id, HELLO_RANGE)
        except BotError as exc:
            LOGGER.warning("/hello sheet check failed: %s", exc.message)
            lines.append(f"❌ Google Sheets error: {exc.message}")
        else:
            lines.append(f"✅ Google Sheets: {len(rows)} rows found")

        try:
            ai_message = self._completions.complete(build_hello_messages(), HELLO_MAX_TOKENS)
        except BotError as exc:
            LOGGER.warning("/hello completion check failed: %s", exc.message)
            lines.append(f"❌ OpenAI error: {exc.message}")
        else:
            lines.append(f"✅ OpenAI: {ai_message}")

        invocation.reply("\n".join(lines), replace_original=True)

    # /help -------------------------------------------------------------------
    def help(self, invocation: CommandInvocation) -> None:
        invocation.reply(HELP_TEXT)

    # /approved ---------------------------------------------------------------
    def approved(self, invocation: CommandInvocation) -> None:
        try:
            sheet_id, record = self._parse_approval(invocation)
        except UsageError as exc:
            invocation.reply(exc.message)
            return

        invocation.reply("📝 Saving approval... ⏳")

        try:
            self._sheets.append_rows(sheet_id, APPROVAL_RANGE, [record.to_row()])
        except BotError as exc:
            LOGGER.warning("/approved failed for sheet %s: %s", sheet_id, exc.message)
            invocation.reply(f"❌ Failed to save approval: {exc.message}", replace_original=True)
            return

        LOGGER.info("Approval saved to %s by %s", sheet_id, record.reviewed_by)
        invocation.reply(
            "✅ *Document Approved & Saved!*\n\n"
            f"📄 Document: {record.doc_link}\n"
            f"📊 Sheet: {sheet_id}\n"
            f"👤 Approved by: {record.reviewed_by}\n"
            f"⏰ Time: {datetime.now().strftime('%d.%m.%Y %H:%M:%S')}",
            replace_original=True,
        )

    def _parse_approval(self, invocation: CommandInvocation) -> Tuple[str, ApprovalRecord]:
        params = invocation.text.split()
        if len(params) < 2:
            raise UsageError(APPROVED_USAGE)

        sheet_id, doc_link, *rest = params
        return sheet_id, ApprovalRecord(
            client_id=self._config.resolved_client_id,
            template_key=rest[0] if rest else "default",
            doc_link=doc_link,
            reviewed_by=invocation.user_name,
        )

    # /answer -----------------------------------------------------------------
    def answer(self, invocation: CommandInvocation) -> None:
        try:
            question = self._validate_question(invocation.text)
        except (ConfigurationError, UsageError) as exc:
            invocation.reply(exc.message)
            return

        invocation.reply(f"🤖 Generating AI answer... ⏳\n\nQuestion: {question}")
        try:
            answer = self._completions.complete(build_answer_messages(question), ANSWER_MAX_TOKENS)
        except BotError as exc:
            LOGGER.warning("/answer failed: %s", exc.message)
            invocation.reply(f"❌ AI service error: {exc.message}", replace_original=True)
            return

        invocation.reply(
            f"🤖 *AI Answer*\n\n*Question:* {question}\n\n*Answer:* {answer}",
            replace_original=True,
        )

    def _validate_question(self, text: str) -> str:
        if not self._completions.is_configured:
            raise ConfigurationError(ANSWER_NOT_CONFIGURED)
        question = text.strip()
        if not question:
            raise UsageError(ANSWER_USAGE)
        return question

    # /review -----------------------------------------------------------------
    def review(self, invocation: CommandInvocation) -> None:
        document_links = invocation.text.strip()
        if not document_links:
            invocation.reply(REVIEW_USAGE)
            return

        invocation.reply(
            f"📋 Analyzing documents with enhanced AI review... ⏳\n\nDocuments: {document_links}"
        )

        try:
            template_rows = self._sheets.read_range(
                self._config.template_map_spreadsheet_id, REVIEW_RANGE
            )
            rubric = build_rubric(template_rows)
            document_texts = self._collect_document_texts(document_links)
            review = self._completions.complete(
                build_review_messages(rubric, document_links, document_texts),
                REVIEW_MAX_TOKENS,
            )
        except BotError as exc:
            LOGGER.warning("/review failed: %s", exc.message)
            invocation.reply(f"❌ Review failed: {exc.message}", replace_original=True)
            return

        invocation.reply(
            "📋 *Enhanced Document Review Results*\n\n"
            f"*Documents Analyzed:* {document_links}\n\n"
            f"*Template Standards Applied:*\n{rubric}\n"
            f"*AI Review Framework:*\n{review}\n\n"
            "_Enhanced review using template rubric from Master Database._",
            replace_original=True,
        )

    def _collect_document_texts(self, document_links: str) -> Dict[str, str]:
        review_conf = self._config.review
        if not review_conf.include_document_text:
            return {}

        texts: Dict[str, str] = {}
        for doc_id in extract_document_ids(document_links):
            try:
                text = self._docs.read_document_text(doc_id)
            except AdapterError as exc:
                LOGGER.warning("Skipping document %s: %s", doc_id, exc.message)
                texts[doc_id] = f"[Document could not be read: {exc.message}]"
                continue
            texts[doc_id] = text[: review_conf.max_document_chars]
        return texts
