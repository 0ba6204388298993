# ==============================================================================
# Application Configuration
# ==============================================================================
"""
Configuration management using pydantic-settings.

All configuration is loaded from environment variables, with support for
.env files via python-dotenv. Variable names follow the deployed service:
DB_USERNAME, DB_PASSWORD, DB_DATABASE, DB_HOST, DB_PORT, DB_SSLMODE,
VOICE_CHANNEL_USER_TABLE and API_SERVER.
"""

from datetime import date, datetime, timedelta, timezone
from functools import lru_cache
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from voicetime.core.aggregator import AggregationWindow
from voicetime.core.formatting import DurationFormat
from voicetime.core.models import FailurePolicy, GroupingKey

# Load .env file before any settings are instantiated
load_dotenv()


class PostgresSettings(BaseSettings):
    """PostgreSQL connection settings."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    host: str = Field(default="localhost", description="PostgreSQL host")
    port: int = Field(default=5432, description="PostgreSQL port")
    username: str = Field(default="postgres", description="PostgreSQL username")
    password: str = Field(default="", description="PostgreSQL password")
    database: str = Field(default="postgres", description="Database name")
    sslmode: str = Field(default="require", description="SSL mode")

    @property
    def connection_string(self) -> str:
        """Build PostgreSQL connection string."""
        return (
            f"postgresql://{self.username}:{self.password}@"
            f"{self.host}:{self.port}/{self.database}?sslmode={self.sslmode}"
        )


class ActivitySettings(BaseSettings):
    """Where voice-channel activity rows are read from."""

    model_config = SettingsConfigDict(env_prefix="VOICE_CHANNEL_USER_")

    table: str = Field(
        default="voice_channel_users",
        description="Table (optionally schema-qualified) holding activity rows",
    )
    clan_id: Optional[int] = Field(
        default=None, description="Only read rows for this clan (all clans if unset)"
    )


class AggregationSettings(BaseSettings):
    """Parameters of the daily window aggregation."""

    model_config = SettingsConfigDict(env_prefix="AGGREGATION_")

    window_start_hours: float = Field(
        default=3.0, description="Window start as hours after UTC midnight"
    )
    window_end_hours: float = Field(
        default=5.0, description="Window end as hours after UTC midnight"
    )
    days_ago: int = Field(
        default=6, description="Default target date as days before today (UTC)"
    )
    duration_format: Literal["hms", "minutes"] = Field(
        default="hms", description="How totalTime is rendered (hms or minutes)"
    )
    failure_policy: Literal["fail_fast", "isolate_subject"] = Field(
        default="fail_fast",
        description="Reaction to malformed timestamps (fail_fast or isolate_subject)",
    )
    group_by: Literal["display_name", "user_id"] = Field(
        default="display_name",
        description="Subject key used to partition events (display_name or user_id)",
    )

    @property
    def window(self) -> AggregationWindow:
        """Build the aggregation window. Raises ConfigurationError if invalid."""
        return AggregationWindow.from_hours(self.window_start_hours, self.window_end_hours)

    @property
    def format(self) -> DurationFormat:
        return DurationFormat(self.duration_format)

    @property
    def policy(self) -> FailurePolicy:
        return FailurePolicy(self.failure_policy)

    @property
    def grouping(self) -> GroupingKey:
        return GroupingKey(self.group_by)

    def default_target_date(self, today: date | None = None) -> date:
        """Target date used when none is given on the command line."""
        today = today or datetime.now(timezone.utc).date()
        return today - timedelta(days=self.days_ago)


class ApiSettings(BaseSettings):
    """Report API delivery settings."""

    model_config = SettingsConfigDict(env_prefix="API_")

    server: Optional[str] = Field(default=None, description="Report endpoint URL")
    security_code: str = Field(default="", description="Value of the securityCode header")
    user_agent: str = Field(default="voicetime", description="User-Agent header")
    timeout_seconds: float = Field(default=10.0, description="Request timeout in seconds")

    @property
    def is_configured(self) -> bool:
        """Check if a report endpoint is configured."""
        return bool(self.server)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        extra="ignore",
    )

    # Nested settings
    postgres: PostgresSettings = Field(default_factory=PostgresSettings)
    activity: ActivitySettings = Field(default_factory=ActivitySettings)
    aggregation: AggregationSettings = Field(default_factory=AggregationSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)

    # General settings
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="WARNING", description="Logging level")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once and cached for subsequent calls.
    """
    return Settings()
