"""Library configuration objects based on Pydantic settings."""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseModel):
    """Chat model and embedding provider configuration."""

    provider: Literal["ollama"] = "ollama"
    ollama_host: str = "http://localhost:11434"
    chat_model: str = "qwen3:4b"
    temperature: float = 0.1
    top_p: float = 0.9
    request_timeout: float = 60.0
    verbose: bool = False
    embedding_provider: Literal["ollama", "deterministic"] = "ollama"
    embedding_model: str = "qwen3-embedding:0.6b"
    embedding_dimension: int | None = None


class VectorSearchSettings(BaseModel):
    """Field and index names used by the Atlas vector search adapter."""

    index_name: str = "default"
    text_key: str = "text"
    embedding_key: str = "embedding"


class LoggingSettings(BaseModel):
    """Logging output options."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_output: bool = True


class Settings(BaseSettings):
    """Aggregate settings for llmkit."""

    llm: LLMSettings = Field(default_factory=LLMSettings)
    vector_search: VectorSearchSettings = Field(default_factory=VectorSearchSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix="llmkit_",
        env_file=".env",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def load_settings() -> Settings:
    """Load settings with caching."""

    return Settings()


__all__ = [
    "Settings",
    "LLMSettings",
    "VectorSearchSettings",
    "LoggingSettings",
    "load_settings",
]
