from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).parent.parent.parent / ".env"),
        env_prefix="LEDGER_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str | None = None

    # Database
    database_url: str = "sqlite+aiosqlite:///./ledger.db"
    db_echo: bool = False

    # Money / amounts
    currency: str = "INR"
    currency_minor_unit: int = Field(default=2, ge=0, le=6)

    # "strict": dangling account/category references fail with NotFoundError.
    # "soft": dangling references are dropped to None and the write proceeds.
    reference_policy: Literal["strict", "soft"] = "strict"

    # Budgets / reminders
    default_alert_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    recurring_reminder_days: int = Field(default=2, ge=0)

    # Placeholder labels for orphaned references in read views
    uncategorized_label: str = "Uncategorized"
    unknown_label: str = "Unknown"


def get_settings(**overrides) -> Settings:
    """Build a settings object, letting callers (and tests) override fields."""
    return Settings(**overrides)


settings = Settings()
