import logging
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Store parameters that must all be present before any store operation
REQUIRED_STORE_SETTINGS = ("supabase_url", "supabase_key")


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Supabase Configuration
    supabase_url: Optional[str] = Field(
        None, description="URL for the Supabase project."
    )
    supabase_key: Optional[str] = Field(
        None, description="Anon key for the Supabase project."
    )

    # Gemini Configuration
    gemini_api_key: Optional[str] = Field(
        None, description="API key for the Gemini generateContent endpoint."
    )
    gemini_model: str = Field(
        "gemini-1.5-flash", description="Model identifier used for summaries."
    )
    gemini_base_url: str = Field(
        "https://generativelanguage.googleapis.com/v1beta",
        description="Root URL of the generative-language API.",
    )
    request_timeout: float = Field(
        30.0, gt=0, description="Timeout in seconds for outbound HTTP requests."
    )

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    def missing_store_settings(self) -> List[str]:
        """Returns the environment variable names of unset store parameters."""
        return [
            name.upper() for name in REQUIRED_STORE_SETTINGS if not getattr(self, name)
        ]

    @property
    def store_config_error(self) -> str:
        """Aggregated message for missing store settings, empty when configured."""
        missing = self.missing_store_settings()
        if not missing:
            return ""
        return f"Missing Supabase environment variables: {', '.join(missing)}."

    @property
    def store_configured(self) -> bool:
        return not self.missing_store_settings()


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()
