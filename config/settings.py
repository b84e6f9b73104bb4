"""
Centralized configuration for the conversational search engine.

All settings are loaded from environment variables (prefix ``ASSISTANT_``)
via .env file. Per-engine overrides live in ``config.engine_config``.
"""

from functools import lru_cache
from typing import Dict, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="ASSISTANT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service
    service_name: str = Field(default="Conversational Search Engine")
    api_version: str = Field(default="1.0.0")
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    catalog_path: Optional[str] = Field(default=None)

    # Locale
    language: str = Field(default="id")  # id | en
    locale: str = Field(default="id-ID")
    currency_symbol: str = Field(default="Rp")

    # Results
    result_limit: int = Field(default=5)
    sub_search_joiner: str = Field(default=". ")
    min_score: float = Field(default=5.0)
    min_score_conversational: float = Field(default=3.0)
    index_threshold: float = Field(default=0.45)

    # Intent
    classifier_threshold: float = Field(default=0.7)
    classifier_fallback_threshold: float = Field(default=0.6)

    # Conversation context
    context_ttl_seconds: float = Field(default=300.0)
    max_interactions: int = Field(default=20)
    lock_confidence: int = Field(default=80)
    unlock_confidence: int = Field(default=30)
    anaphora_max_length: int = Field(default=25)
    session_idle_seconds: float = Field(default=1800.0)
    session_prune_interval: float = Field(default=60.0)

    # Scoring
    crawler_category: str = Field(default="Page")

    # Remote retrieval
    remote_urls: List[str] = Field(default_factory=list)
    remote_headers: Dict[str, str] = Field(default_factory=dict)
    remote_timeout: float = Field(default=5.0)

    # Security
    max_query_length: int = Field(default=500)
    strict_mode: bool = Field(default=False)

    # Logging
    log_level: str = Field(default="INFO")
    debug: bool = Field(default=False)


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
