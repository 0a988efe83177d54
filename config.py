from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal
from functools import lru_cache


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Payments Engine"
    app_version: str = "1.0.0"
    debug: bool = False

    # Logging settings
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    # CSV input settings
    csv_has_headers: bool = True
    csv_delimiter: str = ","

    # Amounts with more than four fractional digits: rejected if set, rounded half-even otherwise
    strict_amount_precision: bool = False

    # Feature flags
    enable_detailed_logging: bool = True

    model_config = SettingsConfigDict(
        env_prefix="PAYMENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Environment-specific configurations
class DevelopmentSettings(Settings):
    debug: bool = True
    log_level: str = "DEBUG"
    log_format: Literal["json", "text"] = "text"
    enable_detailed_logging: bool = True


class ProductionSettings(Settings):
    debug: bool = False
    log_level: str = "WARNING"
    enable_detailed_logging: bool = False


class TestingSettings(Settings):
    debug: bool = True
    log_level: str = "WARNING"  # Reduce noise in tests
    enable_detailed_logging: bool = False


def get_settings_for_environment(env: str = "development") -> Settings:
    """Get settings for specific environment."""
    settings_map = {
        "development": DevelopmentSettings,
        "production": ProductionSettings,
        "testing": TestingSettings,
    }

    settings_class = settings_map.get(env.lower(), Settings)
    return settings_class()
