"""Configuration management for fr8coach."""

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
    """Application settings loaded from environment variables.

    Nothing here is required at startup. Missing secrets are detected per
    request so that the gate can fail closed instead of crashing the process.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Site credential gate
    SITE_USER: str = Field(default="user", description="Basic-Auth username")
    SITE_PASSWORD: str = Field(default="", description="Site password; empty fails closed")

    # Supabase knowledge store
    SUPABASE_URL: str = Field(default="", description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(default="", description="Supabase service role key")

    # OpenAI model provider
    OPENAI_API_KEY: str = Field(default="", description="OpenAI API key")
    OPENAI_MODEL: str = Field(default="gpt-4o-mini", description="Chat model for coaching replies")

    # SerpAPI contact lookup (optional)
    SERPAPI_API_KEY: str = Field(default="", description="SerpAPI key; empty disables contact lookup")

    # Environment
    FR8_ENV: str = Field(default="dev", description="Environment: dev, staging, prod")

    # Completion
    COACH_TEMPERATURE: float = Field(default=0.2, description="Sampling temperature")
    COACH_MAX_TOKENS: int = Field(default=700, description="Output token ceiling")
    COACH_REQUEST_TIMEOUT_SECONDS: float = Field(
        default=25.0, description="Timeout for the whole coaching pipeline"
    )

    # Prompt bounds
    HISTORY_WINDOW: int = Field(default=8, description="Trailing history turns sent to the model")
    HISTORY_MAX_CHARS: int = Field(default=2000, description="Max chars per history turn")
    NOTE_MAX_CHARS: int = Field(default=1200, description="Max chars per rendered note")

    # Knowledge retrieval
    NOTES_TABLE: str = Field(default="knowledge_notes", description="Knowledge note table")
    COACH_PRIMARY_TOPIC: str = Field(default="coaching", description="Primary note topic")
    COACH_INDUSTRY_TOPIC: str = Field(default="industry", description="Secondary note topic")
    PRIMARY_NOTE_SLOTS: int = Field(default=4, description="Slots for primary/fallback notes")
    INDUSTRY_NOTE_SLOTS: int = Field(default=2, description="Slots for industry notes")

    # Contact lookup
    CONTACT_MAX_RESULTS: int = Field(default=5, description="Max contacts surfaced per reply")
    SEARCH_TIMEOUT_SECONDS: int = Field(default=15, description="SerpAPI request timeout")

    # Cards
    CARDS_LIMIT: int = Field(default=50, description="Max cards returned by /api/cards")

    # Static email-domain -> brokerage label mapping
    TENANT_LABELS: dict[str, str] = Field(
        default_factory=dict, description="JSON map of email domain to brokerage label"
    )

    @property
    def gate_configured(self) -> bool:
        """Check if the site password is set."""
        return bool(self.SITE_PASSWORD)

    @property
    def supabase_configured(self) -> bool:
        """Check if the knowledge store is reachable in principle."""
        return bool(self.SUPABASE_URL and self.SUPABASE_SERVICE_ROLE_KEY)

    @property
    def search_configured(self) -> bool:
        """Check if SerpAPI is configured for contact lookup."""
        return bool(self.SERPAPI_API_KEY)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance
    """
    return Settings()
