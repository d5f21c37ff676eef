from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    # Secrets
    LINE_CHANNEL_SECRET: str = Field(..., description="LINE channel secret (webhook signing key)")
    LINE_CHANNEL_TOKEN: str = Field(..., description="LINE channel access token")
    OPENAI_API_KEY: str = Field(..., description="OpenAI API Key")
    KAGI_API_KEY: str = Field(..., description="Kagi Universal Summarizer API key")

    # Endpoints
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    KAGI_SUMMARIZE_URL: str = "https://kagi.com/api/v0/summarize"
    RSS_FEED_URL: str = "https://www.daemonology.net/hn-daily/index.rss"
    LINE_REPLY_URL: str = "https://api.line.me/v2/bot/message/reply"
    LINE_PUSH_URL: str = "https://api.line.me/v2/bot/message/push"
    LINE_BROADCAST_URL: str = "https://api.line.me/v2/bot/message/broadcast"

    # Models
    MODEL: str = "gpt-4o-mini"
    MODEL_TRANSLATE: str = "gpt-4o-mini"
    KAGI_ENGINE: str = "cecil"
    KAGI_TARGET_LANGUAGE: str = "EN"

    # Summaries are not translated when the user writes in English or in this language
    DEFAULT_LANGUAGE: str = "zh-tw"

    HTTP_TIMEOUT: float = Field(30.0, description="Overall timeout per outbound request (seconds)")
    HTTP_CONNECT_TIMEOUT: float = Field(10.0, description="Connect timeout per outbound request (seconds)")
    PROMPTS_DIR: str = "data/prompts"
    LOG_LEVEL: str = "INFO"

    # When set, /conversation and /broadcast/* require "Authorization: Bearer <token>"
    ADMIN_TOKEN: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

@lru_cache()
def get_settings() -> Settings:
    return Settings()
