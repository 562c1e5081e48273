"""
Application Settings for FitCoach

Centralized configuration using Pydantic Settings with .env support.
All environment variables are validated at startup.
"""

from functools import lru_cache
from typing import Literal, Optional
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    LLM_PROVIDER controls which service handles plan generation and chat:
    - openai: any OpenAI-compatible chat completions API (default)
    - ollama: Local inference (no API costs)
    - gemini: Google Gemini via the google.genai SDK
    """

    # Application Settings
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # CORS Configuration
    frontend_url: str = "http://localhost:5173"
    allowed_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]

    # Session Authentication
    session_cookie_name: str = "fitcoach_session"
    session_ttl_seconds: int = 7 * 24 * 3600
    session_sweep_interval_seconds: int = 24 * 3600

    # UNIFIED LLM Provider Configuration
    llm_provider: Literal["openai", "ollama", "gemini"] = "openai"

    # OpenAI-compatible Configuration (for llm_provider=openai)
    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"

    # Ollama Configuration (for llm_provider=ollama)
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.1:8b"

    # Google AI Configuration (accepts GOOGLE_API_KEY or GEMINI_API_KEY)
    google_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash"

    # Chat sampling: favors varied, low-repetition coaching replies
    chat_temperature: float = 0.85
    chat_top_p: float = 0.95
    chat_max_tokens: int = 2000
    chat_frequency_penalty: float = 0.3
    chat_presence_penalty: float = 0.4
    chat_stream_timeout_seconds: float = 120.0
    default_language: Literal["en", "ar"] = "en"

    # Plan generation
    plan_temperature: float = 0.7
    llm_request_timeout_seconds: float = 60.0

    # Database Configuration (SQLModel/SQLAlchemy)
    database_url: Optional[str] = None
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_pool_timeout: int = 30
    database_echo: bool = False
    database_auto_create: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def normalize_api_keys(self) -> "Settings":
        """Normalize gemini_api_key to google_api_key."""
        if not self.google_api_key and self.gemini_api_key:
            self.google_api_key = self.gemini_api_key
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience export for direct import
settings = get_settings()
