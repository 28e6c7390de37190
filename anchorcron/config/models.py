"""Configuration models for anchorcron."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from anchorcron.registry.models import RECURRENCE_INTERVALS


class SiteConfig(BaseModel):
    """Identity of the hosting site."""

    identity: str = Field(default="http://localhost", description="Canonical base URL of the site.")
    timezone: str = Field(default="UTC", description="IANA time zone used for the 03:00 base time.")


class StaggerConfig(BaseModel):
    """Scan-job staggering configuration."""

    enabled: bool = Field(default=True, description="Default for the persisted enabled flag on activation.")
    cooldown_hours: float = Field(default=20.0, gt=0.0, le=168.0)
    spread_minutes: int = Field(default=360, ge=1, le=1440)
    base_hour: int = Field(default=3, ge=0, le=23)
    min_lead_seconds: int = Field(default=60, ge=0)
    subsystem_marker: str = Field(default="wordfence", min_length=1)
    short_code: str = Field(default="wf", min_length=1)
    scan_marker: str = Field(default="scan", min_length=1)
    maintenance_hook: str = Field(default="anchor_weekly_maintenance", min_length=1)
    maintenance_recurrence: str = Field(default="weekly")

    @field_validator("maintenance_recurrence")
    @classmethod
    def recurrence_must_be_known(cls, v: str) -> str:
        if v not in RECURRENCE_INTERVALS:
            known = ", ".join(sorted(RECURRENCE_INTERVALS))
            raise ValueError(f"maintenance_recurrence must be one of: {known}")
        return v

    @property
    def cooldown_seconds(self) -> int:
        return int(self.cooldown_hours * 3600)


class DatabaseConfig(BaseModel):
    """Database configuration for the SQL-backed stores."""

    url: str | None = Field(
        default=None,
        description="SQLAlchemy URL; unset falls back to ANCHORCRON_DATABASE_URL, then a local SQLite file.",
    )
    echo: bool = Field(default=False)


class AnchorCronConfig(BaseSettings):
    """Root configuration model for anchorcron."""

    site: SiteConfig = Field(default_factory=SiteConfig)
    stagger: StaggerConfig = Field(default_factory=StaggerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    model_config = SettingsConfigDict(
        env_prefix="ANCHORCRON_",
        env_nested_delimiter="__",
        extra="ignore",
    )
