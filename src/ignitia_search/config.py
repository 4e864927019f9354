from __future__ import annotations

from typing import Dict, Literal, Optional

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import Field


class AppConfig(BaseModel):
    """Application-specific configuration values."""

    name: str = "Ignitia Search"
    env: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    # Transport settings for FastMCP: "stdio" (default), "http", or "sse"
    transport: Literal["stdio", "http", "sse"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000


class FieldWeights(BaseModel):
    """Static boost applied to term frequencies of each document field."""

    title: float = 3.0
    description: float = 2.0
    body: float = 1.0

    @model_validator(mode="after")
    def _check_order(self) -> "FieldWeights":
        if self.body <= 0:
            raise ValueError("field weights must be positive")
        if not (self.title > self.description > self.body):
            raise ValueError("field weights must satisfy title > description > body")
        return self

    def by_field(self) -> Dict[Field, float]:
        return {Field.TITLE: self.title, Field.DESCRIPTION: self.description, Field.BODY: self.body}


class SearchConfig(BaseModel):
    """Search index location and search box behaviour."""

    # URL (http/https) or filesystem path of the prebuilt index
    index_url: str = "/search_index.en.js"
    # Directory that site-absolute paths such as "/search_index.en.js" resolve against
    site_root: Optional[str] = None
    timeout: float = 20.0
    debounce_ms: int = 300
    min_query_length: int = 2
    max_results: int = 8
    snippet_window: int = 120
    snippet_lead: int = 40
    ellipsis: str = "..."
    weights: FieldWeights = FieldWeights()

    @model_validator(mode="after")
    def _check_bounds(self) -> "SearchConfig":
        if self.debounce_ms < 0:
            raise ValueError("debounce_ms must not be negative")
        if self.min_query_length < 1:
            raise ValueError("min_query_length must be at least 1")
        if self.max_results < 1:
            raise ValueError("max_results must be at least 1")
        if not (0 <= self.snippet_lead < self.snippet_window):
            raise ValueError("snippet_lead must be within the snippet window")
        return self


class Settings(BaseSettings):
    """Top-level settings loaded from environment variables and .env only."""

    model_config = SettingsConfigDict(
        env_prefix="IGNITIA_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    app: AppConfig = AppConfig()
    search: SearchConfig = SearchConfig()


def load_settings() -> Settings:
    """Load settings from environment variables and .env only."""
    return Settings()  # type: ignore[call-arg]
