"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ChatSettings(BaseSettings):
    """Optional generative-AI chat configuration.

    Chat is only usable when both ``endpoint`` and ``model_name`` are set.
    """

    model_config = SettingsConfigDict(env_prefix="GENAI_")

    provider: Literal["azure_openai", "openai"] = "azure_openai"
    endpoint: str = ""
    model_name: str = ""
    api_key: str | None = None
    api_version: str = "2024-02-01"

    # Upper bound for one whole chat exchange, tool rounds included
    timeout: float = 30.0
    max_tokens: int = 800
    temperature: float = 0.7

    # Function calling
    enable_tools: bool = True
    max_tool_rounds: int = 5

    # Retry settings
    max_retries: int = 2
    retry_delay: float = 0.5
    retry_multiplier: float = 2.0


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "expenses.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class ExpenseSettings(BaseSettings):
    """Expense workflow rules."""

    model_config = SettingsConfigDict(env_prefix="EXPENSE_")

    supported_currencies: list[str] = ["GBP", "USD", "EUR"]
    default_currency: str = "GBP"
    reviewer_roles: list[str] = ["Manager"]


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

    app_name: str = "Expense Management"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    chat: ChatSettings = Field(default_factory=ChatSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    expenses: ExpenseSettings = Field(default_factory=ExpenseSettings)
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
