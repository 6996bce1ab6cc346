"""Application configuration settings."""
import re
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field, field_validator, model_validator
from typing import List, Optional

# Get the server directory path
SERVER_DIR = Path(__file__).parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Unipile messaging gateway
    UNIPILE_DSN: str
    UNIPILE_TOKEN: str
    GATEWAY_TIMEOUT: int = 30

    # LLM Configuration
    USE_CLOUD_LLM: bool = True
    LLM_ENDPOINT: str = "https://api.openai.com"
    LLM_MODEL: str = "gpt-4o-mini"
    LLM_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("LLM_API_KEY", "OPENAI_API_KEY"),
    )
    LLM_MAX_TOKENS: int = 100
    LLM_TIMEOUT: int = 30
    BRAND_DESCRIPTION: str = "a restaurant brand"

    # Instagram account handshake
    AUTH_TIMEOUT_SECONDS: int = 60

    # Inbound heuristics
    DEDUP_WINDOW_SECONDS: float = 30.0
    PLACEHOLDER_NAME_PATTERN: str = r"^\d+$"

    # The bot's own Instagram identity; its echoed sends are ignored
    BOT_DISPLAY_NAME: str = "Ghost Runner"
    BOT_PROVIDER_ID: str = "17845578411552197"

    # Session persistence
    SESSION_FILE: str = "session.json"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # CORS: explicit list of allowed origins
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
    ]

    @field_validator("UNIPILE_DSN")
    @classmethod
    def _normalize_dsn(cls, v: str) -> str:
        # The Unipile dashboard shows the DSN without a scheme
        v = v.strip().rstrip("/")
        if not v.startswith("http"):
            v = f"https://{v}"
        return v

    @model_validator(mode="after")
    def _validate_heuristics(self) -> "Settings":
        if self.DEDUP_WINDOW_SECONDS < 0:
            raise ValueError("DEDUP_WINDOW_SECONDS must not be negative")
        try:
            re.compile(self.PLACEHOLDER_NAME_PATTERN)
        except re.error as e:
            raise ValueError(f"PLACEHOLDER_NAME_PATTERN is not a valid regex: {e}")
        return self

    class Config:
        env_file = str(SERVER_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"
        populate_by_name = True


# Global settings instance
settings = Settings()
