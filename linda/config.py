"""Configuration management with Pydantic Settings + optional YAML."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True)


DEFAULT_OPENAI_URL = "https://api.openai.com/v1"


class LLMConfig(_Section):
    provider: Literal["openai", "anthropic"] = "openai"
    model: str = "gpt-4o-mini"
    api_key: str = ""
    base_url: str = DEFAULT_OPENAI_URL  # any OpenAI-compatible endpoint
    max_tokens: int = 1024
    temperature: float = 0.2
    timeout: float = 60.0
    max_retries: int = 2

    @property
    def requires_api_key(self) -> bool:
        """Only Anthropic and the hosted OpenAI endpoint need a key; custom ``base_url`` servers may not."""
        return self.provider == "anthropic" or self.base_url.rstrip("/") == DEFAULT_OPENAI_URL


class WebhookConfig(_Section):
    secret: str = ""
    bind: str = "0.0.0.0"
    port: int = 8420
    path: str = "/api/webhook"

    @field_validator("path")
    @classmethod
    def _leading_slash(cls, value: str) -> str:
        return value if value.startswith("/") else f"/{value}"


class GitHubConfig(_Section):
    token: str = ""
    owner: str = ""
    owner_is_org: bool = False
    api_url: str = "https://api.github.com"
    default_branch: str = "main"


class GoogleConfig(_Section):
    """Service-account credentials plus the activity log destination."""
    client_email: str = ""
    private_key: str = ""
    spreadsheet_id: str = ""
    sheet_range: str = "Logs!A:D"

    @field_validator("private_key")
    @classmethod
    def _unescape_newlines(cls, value: str) -> str:
        # Keys pasted into env files usually carry literal "\n" sequences
        return value.replace("\\n", "\n")

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_email and self.private_key)


class SearchConfig(_Section):
    api_key: str = ""
    endpoint: str = "https://api.tavily.com/search"
    max_results: int = 5


class TelegramConfig(_Section):
    bot_token: str = ""
    chat_id: str = ""
    api_url: str = "https://api.telegram.org"
    message_limit: int = 4096

    @property
    def configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)


class AgentConfig(_Section):
    use_tools: bool = False
    max_tool_iterations: int = 6
    doc_char_limit: int = 8000
    dispatch_timeout: float = 120.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LINDA_",
        env_nested_delimiter="__",
        case_sensitive=False,
        frozen=True,
    )

    llm: LLMConfig = LLMConfig()
    webhook: WebhookConfig = WebhookConfig()
    github: GitHubConfig = GitHubConfig()
    google: GoogleConfig = GoogleConfig()
    search: SearchConfig = SearchConfig()
    telegram: TelegramConfig = TelegramConfig()
    agent: AgentConfig = AgentConfig()
    http_timeout: float = 30.0
    log_level: str = "INFO"
    log_json: bool = False


def _default_config_path() -> Path:
    env = os.environ.get("LINDA_CONFIG_DIR")
    if env:
        return Path(env) / "config.yaml"
    xdg = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg) / "linda" / "config.yaml"


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from env vars, optionally overlaying a YAML config."""
    yaml_data: dict[str, Any] = {}

    if config_path is None:
        config_path = os.environ.get("LINDA_CONFIG")
    if config_path is None:
        default = _default_config_path()
        if default.exists():
            config_path = default

    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                yaml_data = yaml.safe_load(f) or {}

    # Init kwargs normally outrank the environment; put env back on top of YAML
    env_settings = Settings()
    overrides = env_settings.model_dump(exclude_unset=True)
    return Settings(**_deep_merge(yaml_data, overrides))


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result
