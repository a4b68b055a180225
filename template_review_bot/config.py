from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

DEFAULT_TEMPLATE_MAP_ID = "1kepJ6yKQUxt4N8uRcVCOAz4Do5_PpU6AUqwsSS0ZNyw"
OPENAI_KEY_PLACEHOLDER = "sk-your-openai-key-here"


def _resolve(value: str | None, env_name: str | None) -> str | None:
    if value:
        return value
    if env_name:
        return os.environ.get(env_name) or None
    return None


class SlackConfig(BaseModel):
    bot_token: str | None = Field(None, description="Explicit Slack bot token")
    bot_token_env: str | None = Field(
        "SLACK_BOT_TOKEN",
        description="Environment variable with the Slack bot token",
    )
    signing_secret: str | None = Field(None, description="Explicit Slack signing secret")
    signing_secret_env: str | None = Field(
        "SLACK_SIGNING_SECRET",
        description="Environment variable with the Slack signing secret",
    )
    port: int | None = Field(None, gt=0, lt=65536, description="HTTP listening port")
    port_env: str | None = Field("PORT", description="Environment variable with the port")

    @property
    def resolved_bot_token(self) -> str | None:
        return _resolve(self.bot_token, self.bot_token_env)

    @property
    def resolved_signing_secret(self) -> str | None:
        return _resolve(self.signing_secret, self.signing_secret_env)

    @property
    def resolved_port(self) -> int:
        if self.port:
            return self.port
        raw = _resolve(None, self.port_env)
        if raw:
            try:
                return int(raw)
            except ValueError as exc:
                raise ValueError(f"Invalid port value in ${self.port_env}: {raw!r}") from exc
        return 3000


class GoogleConfig(BaseModel):
    """Service account identity used for Sheets and Docs calls."""

    project_id: str | None = Field(None, description="Google Cloud project id")
    project_id_env: str | None = Field("GOOGLE_PROJECT_ID")
    client_email: str | None = Field(None, description="Service account e-mail")
    client_email_env: str | None = Field("GOOGLE_CLIENT_EMAIL")
    private_key: str | None = Field(
        None,
        description="PEM private key; newline-escaped form is accepted",
    )
    private_key_env: str | None = Field("GOOGLE_PRIVATE_KEY")

    @property
    def resolved_project_id(self) -> str | None:
        return _resolve(self.project_id, self.project_id_env)

    @property
    def resolved_client_email(self) -> str | None:
        return _resolve(self.client_email, self.client_email_env)

    @property
    def resolved_private_key(self) -> str | None:
        key = _resolve(self.private_key, self.private_key_env)
        if key is None:
            return None
        return key.replace("\\n", "\n")


class OpenAIConfig(BaseModel):
    model: str = Field("gpt-3.5-turbo", description="Chat completion model identifier")
    api_key: str | None = Field(
        None,
        description="Explicit API key; if omitted the key is read from api_key_env",
    )
    api_key_env: str | None = Field(
        "OPENAI_API_KEY",
        description="Environment variable with the API key",
    )
    base_url: str | None = Field(None, description="Optional override for the API base URL")
    organization: str | None = Field(None, description="Optional OpenAI organization identifier")
    request_timeout: int = Field(60, gt=0, description="Timeout in seconds for API requests")

    @property
    def resolved_api_key(self) -> str | None:
        key = _resolve(self.api_key, self.api_key_env)
        if not key or key.strip() == OPENAI_KEY_PLACEHOLDER:
            return None
        return key


class ReviewConfig(BaseModel):
    include_document_text: bool = Field(
        False,
        description="Fetch linked Google Docs and include their text in /review prompts",
    )
    max_document_chars: int = Field(
        4000,
        gt=0,
        description="Per-document character cap for text sent to the completion service",
    )


class AppConfig(BaseModel):
    slack: SlackConfig = Field(default_factory=SlackConfig)
    google: GoogleConfig = Field(default_factory=GoogleConfig)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    review: ReviewConfig = Field(default_factory=ReviewConfig)
    template_map_spreadsheet_id: str = Field(
        DEFAULT_TEMPLATE_MAP_ID,
        description="Spreadsheet holding review rubrics per template key",
    )
    default_client_id: Optional[str] = Field(
        None,
        description="Client id written to approval rows; falls back to default_client_id_env",
    )
    default_client_id_env: str | None = Field("DEFAULT_CLIENT_ID")

    @field_validator("template_map_spreadsheet_id")
    @classmethod
    def _strip_spreadsheet_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("template_map_spreadsheet_id must not be empty")
        return value

    @property
    def resolved_client_id(self) -> str:
        return _resolve(self.default_client_id, self.default_client_id_env) or "client1"


def _load_env_files(config_path: Path | None) -> None:
    """Load environment variables from .env files."""

    load_dotenv(override=False)

    if config_path is not None:
        config_env = config_path.parent / ".env"
        if config_env.exists():
            load_dotenv(dotenv_path=config_env, override=False)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from an optional YAML file and the environment."""

    config_path = Path(path).expanduser().resolve() if path is not None else None
    _load_env_files(config_path)

    data: dict = {}
    if config_path is not None:
        if not config_path.exists():
            msg = f"Configuration file not found: {config_path}"
            raise FileNotFoundError(msg)

        with config_path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}

        if not isinstance(data, dict):
            msg = f"Configuration file must contain a mapping: {config_path}"
            raise ValueError(msg)

    try:
        return AppConfig.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc
