# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for deployment-specific settings. Explicit
arguments passed to ReadNext.create() take precedence over these values.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === SUMMARIZATION LLM ===
    llm_provider: str = "openai"
    llm_model: str = "gpt-4o-mini"
    llm_temperature: float = 0.0
    llm_max_tokens: int = 4096

    # Provider API keys
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    ollama_base_url: str = "http://localhost:11434"

    # Empty = built-in prompt (pipeline/prompts/summarizer.txt)
    summarization_prompt: str = ""

    # === EMBEDDINGS ===
    embedding_provider: str = "openai"
    embedding_model: str = "text-embedding-ada-002"
    embedding_dimensions: int = 1536
    embedding_ollama_model: str = "nomic-embed-text"

    # === Cache ===
    # None = <tempdir>/read-next-cache
    cache_dir: Path | None = None

    # === Scheduling ===
    parallel: int = 1
    # None = wait indefinitely on external calls
    call_timeout_s: float | None = None

    # === Vector database ===
    vector_db_type: Literal["faiss", "chromadb"] = "faiss"
    # None = inside cache_dir
    vector_db_path: Path | None = None
    vector_db_url: str = ""
    vector_db_collection: str = "read-next"

    # === Suggestions ===
    suggest_default_limit: int = 10
    suggest_strict_limit: bool = False

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text", "pretty"] = "pretty"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("parallel")
    @classmethod
    def validate_parallel(cls, v: int) -> int:  # noqa: N805
        """PARALLEL must be at least 1 (1 = sequential)."""
        if v < 1:
            raise ValueError("parallel must be >= 1")
        return v

    @field_validator("call_timeout_s")
    @classmethod
    def validate_call_timeout(cls, v: float | None) -> float | None:  # noqa: N805
        if v is not None and v <= 0:
            raise ValueError("call_timeout_s must be > 0 when set")
        return v

    @field_validator("suggest_default_limit")
    @classmethod
    def validate_suggest_limit(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("suggest_default_limit must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.vector_db_url and "://" not in self.vector_db_url:
            errors.append("VECTOR_DB_URL must include a scheme (e.g. http://host:8000)")

        if self.vector_db_url and self.vector_db_type != "chromadb":
            errors.append("VECTOR_DB_URL is only supported with VECTOR_DB_TYPE=chromadb")

        if "ollama" in (self.llm_provider, self.embedding_provider) and not self.ollama_base_url:
            errors.append("Ollama provider requires OLLAMA_BASE_URL")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-call config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
