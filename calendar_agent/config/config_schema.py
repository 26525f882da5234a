"""Pydantic models for configuration validation."""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator


class GoogleCalendarConfig(BaseModel):
    """Google Calendar backend configuration."""

    access_token: Optional[str] = Field(default=None, description="OAuth bearer token from the session layer")
    credentials_path: Optional[str] = Field(default=None, description="Path to OAuth client secrets JSON file")
    token_path: Optional[str] = Field(default=None, description="Path where authorized user tokens are cached")
    service_account_email: Optional[str] = Field(default=None, description="Service account email")
    service_account_key: Optional[str] = Field(default=None, description="Service account key")
    calendar_ids: List[str] = Field(
        default_factory=lambda: ["primary"],
        description="Calendars to search, in order",
    )
    create_calendar_id: str = Field(default="primary", description="Calendar that receives new events")

    @field_validator("calendar_ids")
    @classmethod
    def dedupe_calendar_ids(cls, v: List[str]) -> List[str]:
        """Drop blank and repeated calendar ids, keeping order."""
        ids = [cid.strip() for cid in v if cid and cid.strip()]
        return list(dict.fromkeys(ids)) or ["primary"]

    def has_credentials(self) -> bool:
        return bool(
            self.access_token
            or self.credentials_path
            or self.token_path
            or (self.service_account_email and self.service_account_key)
        )


class SearchConfig(BaseModel):
    """Calendar search configuration."""

    window_mode: Literal["precise", "padded"] = Field(
        default="precise",
        description="'precise' for calendar-aligned windows, 'padded' for buffered keyword windows",
    )
    max_results: int = Field(default=50, ge=1, le=2500, description="Maximum events per sub-search")
    concurrent: bool = Field(default=True, description="Run sub-searches concurrently")


class AgentPreferencesConfig(BaseModel):
    """Agent preferences configuration."""

    timezone: str = Field(
        default="UTC",
        description="Default timezone (e.g., 'America/New_York', 'UTC', 'Asia/Tokyo')"
    )

    @model_validator(mode='after')
    def validate_timezone(self) -> 'AgentPreferencesConfig':
        """Validate timezone string using zoneinfo."""
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(
                f"Invalid timezone: '{self.timezone}'. "
                f"Must be a valid IANA timezone (e.g., 'America/New_York', 'UTC', 'Asia/Tokyo')"
            )
        return self


class AgentConfig(BaseModel):
    """Agent configuration."""

    preferences: AgentPreferencesConfig = Field(
        default_factory=AgentPreferencesConfig,
        description="Agent preferences (timezone)"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    verbosity: int = Field(default=0, ge=0, le=3, description="0=WARNING, 1=INFO, 2+=DEBUG")
    log_file: Optional[str] = Field(default=None, description="Log file path (default: logs/log_<timestamp>.log)")


class AppConfig(BaseModel):
    """Main application configuration."""

    google_calendar: Optional[GoogleCalendarConfig] = Field(
        default=None, description="Google Calendar configuration"
    )
    search: SearchConfig = Field(default_factory=SearchConfig, description="Search configuration")
    agent: AgentConfig = Field(
        default_factory=AgentConfig,
        description="Agent configuration and preferences"
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")

    def validate(self) -> None:
        """Validate configuration consistency."""
        if self.google_calendar and not self.google_calendar.has_credentials():
            raise ValueError(
                "google_calendar requires access_token, credentials_path, token_path, "
                "or service_account_email with service_account_key"
            )
