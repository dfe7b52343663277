from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
import os


def _base_dir() -> Path:
    return Path(os.getenv("RECAP_HOME", str(Path.home() / ".recap")))


class Settings(BaseSettings):
    app_name: str = "Recap"

    base_dir: Path = Field(default_factory=_base_dir)
    data_dir: Path = Field(default_factory=lambda: _base_dir() / "data")
    audio_dir: Path = Field(default_factory=lambda: _base_dir() / "recordings")
    logs_dir: Path = Field(default_factory=lambda: _base_dir() / "logs")

    database_path: Path = Field(default_factory=lambda: _base_dir() / "data" / "recap.db")

    # Hosted providers (OpenAI-compatible endpoints, Groq by default)
    provider_base_url: str = "https://api.groq.com/openai/v1"
    api_key: str = Field(default="", validation_alias=AliasChoices("RECAP_API_KEY", "GROQ_API_KEY"))

    transcription_model: str = "whisper-large-v3"
    # Empty string -> let the provider auto-detect
    transcription_language: str = "en"
    transcription_timeout_s: float = 300.0

    summarization_model: str = "llama-3.1-8b-instant"
    summarization_temperature: float = 0.1
    summarization_max_tokens: int = 2000
    summarization_timeout_s: float = 120.0

    share_link_ttl_days: int = 30
    public_base_url: str = "http://localhost:3000"

    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    class Config:
        env_prefix = "RECAP_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    def ensure_dirs(self) -> None:
        for d in [self.base_dir, self.data_dir, self.audio_dir, self.logs_dir]:
            d.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_settings() -> Settings:
    return Settings()
