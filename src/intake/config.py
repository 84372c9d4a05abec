"""
Intake - Configuration and settings.

All settings come from the environment (or a local .env file).
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class IntakeSettings(BaseSettings):
    """
    Application settings.

    Only the Supabase URL and anon key are required. Everything else has a
    default that matches the hosted project.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Supabase
    supabase_url: str
    supabase_anon_key: str

    # Application
    intake_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Remote collection + storage
    projects_table: str = "projects"
    storage_bucket: str = "project-files"
    upload_prefix: str = "public"

    # Step cookie (survives reloads in the same browser)
    step_cookie_name: str = "step"
    step_cookie_max_age_days: int = 30

    # Where the thank-you screen sends people
    home_url: str = "https://dylanreed.dev"

    # Tag partial + final rows with the wizard session id
    correlate_submissions: bool = False

    # Also delete the stored blob when a file is removed from the list
    delete_removed_files: bool = False

    @property
    def step_cookie_max_age(self) -> int:
        """Cookie lifetime in seconds."""
        return self.step_cookie_max_age_days * 24 * 60 * 60


@lru_cache
def get_settings() -> IntakeSettings:
    """Get cached settings instance."""
    return IntakeSettings()
