"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def split_csv(value: str) -> List[str]:
    """Split a comma-separated setting, dropping blank items."""
    return [item.strip() for item in (value or "").split(",") if item.strip()]


class Settings(BaseSettings):
    # Deployment profiles, comma-separated (e.g. "dev,test")
    profiles_active: str = ""
    default_profile: str = "dev"

    # SQLite (dev profile)
    sqlite_path: str = "immigration_tracker.db"

    # PostgreSQL (prod profile)
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "tracker_user"
    postgres_password: str = "password"
    postgres_db: str = "immigration_tracker"

    # Deadline reminders, days before due date
    reminder_days: str = "30,14,7,3,1"

    # App
    debug: bool = False

    @field_validator("reminder_days")
    @classmethod
    def check_reminder_days(cls, value: str) -> str:
        for item in split_csv(value):
            if not item.isdecimal():
                raise ValueError(f"reminder_days must be comma-separated whole days, got '{item}'")
        return value

    def get_active_profiles(self) -> List[str]:
        """Active profile names in the order they were configured."""
        return split_csv(self.profiles_active)

    def get_reminder_days(self) -> List[int]:
        return [int(day) for day in split_csv(self.reminder_days)]

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def sqlite_url(self) -> str:
        return f"sqlite:///{self.sqlite_path}"

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
