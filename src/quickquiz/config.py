"""
quickquiz configuration

Model choices, remote store endpoints, and ingestion concurrency live here.
Environment variables override defaults for deployment flexibility.
"""

import os
from dataclasses import dataclass, field
from typing import Literal, Optional


@dataclass
class GenerationConfig:
    """Text generation settings"""
    provider: Literal["openai", "claude", "mock"] = os.getenv("QUICKQUIZ_PROVIDER", "openai")
    model: str = os.getenv("QUICKQUIZ_MODEL", "")  # Empty = use provider default
    temperature: float = float(os.getenv("QUICKQUIZ_TEMPERATURE", "0.7"))
    max_tokens: int = int(os.getenv("QUICKQUIZ_MAX_TOKENS", "4096"))

    # Default models per provider
    PROVIDER_DEFAULTS = {
        "openai": "gpt-4o-mini",
        "claude": "claude-sonnet-4-20250514",
        "mock": "mock-model-v1",
    }

    def get_model(self, provider: Optional[str] = None) -> str:
        """Configured model, or the default of provider (the configured one if not given)."""
        return self.model or self.PROVIDER_DEFAULTS.get(provider or self.provider, "")


@dataclass
class StoreConfig:
    """Remote quiz store"""
    base_url: str = os.getenv("QUICKQUIZ_API_URL", "http://localhost:8080")
    quizzes_path: str = os.getenv("QUICKQUIZ_QUIZZES_PATH", "/api/quizzes")
    questions_path: str = os.getenv("QUICKQUIZ_QUESTIONS_PATH", "/api/questions")
    options_path: str = os.getenv("QUICKQUIZ_OPTIONS_PATH", "/api/options")
    timeout_seconds: float = float(os.getenv("QUICKQUIZ_API_TIMEOUT", "30.0"))
    verify_tls: bool = os.getenv("QUICKQUIZ_API_VERIFY_TLS", "true").strip().lower() not in {"0", "false", "no"}


@dataclass
class IngestConfig:
    """How hard we hit the remote store during ingestion"""
    max_concurrent_questions: int = int(os.getenv("MAX_CONCURRENT_QUESTIONS", "4"))
    max_concurrent_options: int = int(os.getenv("MAX_CONCURRENT_OPTIONS", "8"))


@dataclass
class Config:
    """Master config: import this"""
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    ingest: IngestConfig = field(default_factory=IngestConfig)

    # Quick presets
    @classmethod
    def sequential_mode(cls) -> "Config":
        """One create request in flight at a time"""
        cfg = cls()
        cfg.ingest.max_concurrent_questions = 1
        cfg.ingest.max_concurrent_options = 1
        return cfg

    @classmethod
    def mock_mode(cls) -> "Config":
        """For development/testing, no API keys needed"""
        cfg = cls()
        cfg.generation.provider = "mock"
        cfg.generation.model = ""
        return cfg


# Singleton
config = Config()
