"""
Application configuration management using Pydantic Settings.

This module provides a type-safe, centralized configuration system
that loads from environment variables with sensible defaults.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """
    Application configuration loaded from environment variables.

    All settings can be overridden via .env file or environment variables.
    Settings are validated at startup using Pydantic.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # ===== Supabase Configuration =====
    SUPABASE_URL: str | None = Field(
        default=None,
        description="Supabase project URL"
    )

    SUPABASE_ANON_KEY: str | None = Field(
        default=None,
        description="Supabase anon/public key (for user-scoped requests)"
    )

    SUPABASE_SERVICE_KEY: str | None = Field(
        default=None,
        description="Supabase service role key (for server-side operations, bypasses RLS)"
    )

    # ===== AI Gateway =====
    AI_GATEWAY_URL: str = Field(
        default="https://ai.gateway.lovable.dev/v1",
        description="Base URL of the OpenAI-compatible chat completion gateway"
    )

    AI_GATEWAY_API_KEY: str | None = Field(
        default=None,
        description="Bearer key for the AI gateway"
    )

    AI_MODEL: str = Field(
        default="google/gemini-2.5-flash",
        description="Model used for every writing assistant action"
    )

    AI_TEMPERATURE: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="LLM temperature for creativity control"
    )

    AI_CONTEXT_CHARS: int = Field(
        default=500,
        ge=50,
        le=10000,
        description="Trailing characters of the chapter sent as autocomplete context"
    )

    TRANSCRIPTION_MODEL: str = Field(
        default="whisper-1",
        description="Speech-to-text model for voice dictation"
    )

    # ===== Autosave =====
    BUFFER_COMMIT_DELAY_MS: int = Field(
        default=1000,
        ge=0,
        le=60000,
        description="Idle time before the edit buffer is committed into the chapter list"
    )

    REMOTE_SAVE_DELAY_MS: int = Field(
        default=2000,
        ge=0,
        le=600000,
        description="Idle time before the chapter list is written to the manuscript record"
    )

    # ===== Application Settings =====
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment mode: development or production"
    )

    DEV_MODE: bool = Field(
        default=True,
        description="Allow requests without an Authorization header (mapped to a dev user)"
    )

    @field_validator('DEV_MODE', mode='before')
    @classmethod
    def parse_bool_string(cls, v):
        """Parse boolean from string values (hosting env vars are strings)."""
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            return v.lower() in ("true", "1", "yes", "on")
        return False

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="API server host"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1024,
        le=65535,
        description="API server port"
    )

    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins. Use '*' for all (dev only)."
    )

    # ===== Computed Properties =====

    @property
    def buffer_commit_delay(self) -> float:
        """Buffer commit debounce in seconds."""
        return self.BUFFER_COMMIT_DELAY_MS / 1000

    @property
    def remote_save_delay(self) -> float:
        """Remote save debounce in seconds."""
        return self.REMOTE_SAVE_DELAY_MS / 1000

    @property
    def allowed_origins_list(self) -> list[str]:
        """Get list of allowed CORS origins."""
        if self.ALLOWED_ORIGINS == "*":
            return ["*"]
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    @property
    def supabase_configured(self) -> bool:
        """Check if Supabase is properly configured."""
        return (
            self.SUPABASE_URL is not None
            and self.SUPABASE_ANON_KEY is not None
            and self.SUPABASE_SERVICE_KEY is not None
        )

    @property
    def ai_configured(self) -> bool:
        """Check if the AI gateway can be called."""
        return self.AI_GATEWAY_API_KEY is not None


# Global configuration instance
# Import this in other modules: from scribe.config import config
config = AppConfig()


if __name__ == "__main__":
    print("Configuration loaded successfully!")
    print(f"AI model: {config.AI_MODEL}")
    print(f"Autosave: buffer {config.BUFFER_COMMIT_DELAY_MS}ms, remote {config.REMOTE_SAVE_DELAY_MS}ms")
    print(f"AI gateway: {'✓' if config.ai_configured else '✗'}")
    print(f"Supabase: {'✓' if config.supabase_configured else '✗'}")
