"""Configuration management for ProdStack."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # In sandboxed environments, .env might not be accessible
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Supabase configuration (required)
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(..., description="Supabase service role key")

    # Environment
    PRODSTACK_ENV: str = Field(default="dev", description="Environment: dev, staging, prod")

    # Upstream AI gateway (OpenAI-compatible chat completions)
    AI_GATEWAY_API_KEY: str | None = Field(default=None, description="AI gateway API key")
    AI_GATEWAY_URL: str = Field(
        default="https://ai.gateway.lovable.dev/v1", description="AI gateway base URL"
    )
    DOCUMENT_MODEL: str = Field(
        default="google/gemini-2.5-flash", description="Model for document generation"
    )
    DOCUMENT_TEMPERATURE: float = Field(default=0.7, description="Sampling temperature")
    DOCUMENT_MAX_TOKENS: int = Field(default=4000, description="Max tokens per document")

    # Client-side generation
    PRODSTACK_API_URL: str = Field(
        default="http://localhost:8000/v1", description="Base URL of the document API"
    )
    GENERATION_MAX_RETRIES: int = Field(
        default=3, description="Retries after a rate-limited generation attempt"
    )
    GENERATION_RETRY_BASE_MS: int = Field(
        default=1000, description="Backoff base; delay is 2^retry * base"
    )
    CLIENT_TIMEOUT_SECONDS: float = Field(
        default=120.0, description="HTTP timeout for generation requests"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    return Settings()
