"""Configuration management for homekeeper."""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # SQLite Configuration
    sqlite_db_path: str = Field(default="./data/homekeeper.db", description="Path to the SQLite database file")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="development", description="Deployment environment tag")

    # Calendar Configuration
    timezone: str = Field(default="UTC", description="IANA timezone used for local calendar dates")

    # Schedule Check Configuration
    schedule_check_hour: int = Field(default=0, ge=0, le=23, description="Hour of the daily schedule check")
    schedule_check_minute: int = Field(default=5, ge=0, le=59, description="Minute of the daily schedule check")
    enable_scheduler: bool = Field(default=True, description="Start the background scheduler on app startup")

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            msg = f"Unknown timezone: {value}"
            raise ValueError(msg) from e
        return value

    @property
    def tz(self) -> ZoneInfo:
        """Timezone that defines the local calendar day."""
        return ZoneInfo(self.timezone)


# Application Constants
class Constants:
    """Application-wide constants."""

    # Recurrence
    MILLISECONDS_PER_DAY: int = 24 * 60 * 60 * 1000

    # HTTP Status Codes
    HTTP_OK: int = 200
    HTTP_BAD_REQUEST: int = 400
    HTTP_FORBIDDEN: int = 403
    HTTP_NOT_FOUND: int = 404
    HTTP_SERVICE_UNAVAILABLE: int = 503

    # Scheduler Job IDs
    SCHEDULE_CHECK_JOB_ID: str = "daily_schedule_check"

    # Pagination Defaults
    DEFAULT_PER_PAGE_LIMIT: int = 100  # Default pagination limit for list queries

    # Batch lookups
    USER_LOOKUP_CHUNK_SIZE: int = 50  # Max ids per OR-group lookup query
    IN_FILTER_CHUNK_SIZE: int = 200  # SQLite rejects expression trees deeper than 1000

    # Room color palette (Tailwind 200 shades)
    ROOM_COLORS: tuple[str, ...] = (
        "red-200",
        "orange-200",
        "amber-200",
        "yellow-200",
        "lime-200",
        "green-200",
        "emerald-200",
        "teal-200",
        "cyan-200",
        "sky-200",
        "blue-200",
        "indigo-200",
        "violet-200",
        "purple-200",
        "fuchsia-200",
        "pink-200",
        "rose-200",
    )


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
