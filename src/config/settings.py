"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Share of provider_timeout available to the HTTP clients behind a call
CLIENT_BUDGET_SHARE = 0.8


class LLMSettings(BaseSettings):
    """Inference service (LLM) configuration."""

    model_config = SettingsConfigDict(env_prefix="LLM_")

    enabled: bool = True
    provider: Literal["ollama"] = "ollama"
    model_name: str = "llama3.1:8b"
    host: str = "http://localhost:11434"
    timeout: float = 30.0
    max_tokens: int = 1024
    temperature: float = 0.3

    # Circuit breaker settings
    failure_threshold: int = 3
    cooldown_seconds: int = 60

    # Retry settings
    max_retries: int = 2
    retry_delay: float = 0.5
    retry_multiplier: float = 2.0

    # Startup settings
    warmup_on_start: bool = False

    @property
    def attempts(self) -> int:
        return max(self.max_retries, 1)

    @property
    def max_backoff(self) -> float:
        return self.retry_delay * (self.retry_multiplier**3)

    def backoff_total(self) -> float:
        """Seconds slept between attempts when every attempt fails."""
        return sum(
            min(max(self.retry_delay * 2 ** (n - 1), self.retry_delay), self.max_backoff)
            for n in range(1, self.attempts)
        )

    def call_budget(self) -> float:
        """Worst-case seconds for one call, every retry included."""
        return self.timeout * self.attempts + self.backoff_total()


class InsightSettings(BaseSettings):
    """Insight aggregation and ranking configuration."""

    model_config = SettingsConfigDict(env_prefix="INSIGHTS_")

    default_limit: int = 10
    category_limit: int = 50

    # Per-call bound on every provider / inference call (seconds); the LLM and
    # weather client timeouts are fitted inside it
    provider_timeout: float = 5.0

    # Confidence stamped on basic-tier (rule based) insights
    fallback_confidence: float = Field(default=0.6, ge=0.0, le=1.0)

    # Minimum enhanced-tier confidence per signal type
    weather_min_confidence: float = Field(default=0.6, ge=0.0, le=1.0)
    financial_min_confidence: float = Field(default=0.7, ge=0.0, le=1.0)
    growth_min_confidence: float = Field(default=0.6, ge=0.0, le=1.0)

    # Task recommendation source budget
    task_min_priority_score: float = 0.7
    max_task_insights: int = 3

    # Expense windows (days back from today)
    recent_window_days: int = 30
    history_window_days: int = 180

    # Reject `execute` actions on insights that cannot be executed
    strict_actions: bool = True

    # Drop insights whose expires_at has passed
    drop_expired: bool = True


class WeatherSettings(BaseSettings):
    """Weather provider configuration."""

    model_config = SettingsConfigDict(env_prefix="WEATHER_")

    base_url: str = "https://api.open-meteo.com/v1/forecast"
    geocoding_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    timeout: float = 10.0
    geocode_cache_size: int = 256


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "farm_insights.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Farm Insights Engine"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    llm: LLMSettings = Field(default_factory=LLMSettings)
    insights: InsightSettings = Field(default_factory=InsightSettings)
    weather: WeatherSettings = Field(default_factory=WeatherSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings

    @model_validator(mode="after")
    def fit_client_timeouts(self) -> "Settings":
        """Shrink client timeouts so a whole call finishes inside provider_timeout."""
        budget = self.insights.provider_timeout * CLIENT_BUDGET_SHARE

        # Geocoding and forecast requests run back to back
        self.weather.timeout = min(self.weather.timeout, budget / 2)

        llm = self.llm
        if llm.call_budget() > budget:
            per_attempt = (budget - llm.backoff_total()) / llm.attempts
            if per_attempt <= 0:
                llm.max_retries = 1
                per_attempt = budget
            llm.timeout = per_attempt
        return self


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
