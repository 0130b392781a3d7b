"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator


class Units(StrEnum):
    IMPERIAL = "imperial"
    METRIC = "metric"
    STANDARD = "standard"


class NotifyMode(StrEnum):
    DRY_RUN = "dry-run"
    PUSHBULLET = "pushbullet"


class LocationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    name: str = "Home"
    lat: float = Field(default=40.7128, ge=-90.0, le=90.0)
    lon: float = Field(default=-74.0060, ge=-180.0, le=180.0)
    # IANA zone used to assign samples to calendar days; host local time if unset
    timezone: str | None = None

    @field_validator("timezone")
    @classmethod
    def _known_zone(cls, v: str | None) -> str | None:
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown time zone: {v}") from e
        return v

    def tzinfo(self) -> ZoneInfo | None:
        return ZoneInfo(self.timezone) if self.timezone else None


class OpenWeatherConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://api.openweathermap.org"
    units: Units = Units.IMPERIAL
    timeout_seconds: float = Field(default=30.0, gt=0.0)
    max_retries: int = Field(default=0, ge=0)
    retry_base_delay: float = Field(default=5.0, ge=0.0)


class NotifyConfig(BaseModel):
    model_config = {"extra": "forbid"}

    mode: NotifyMode = NotifyMode.DRY_RUN


class OpsConfig(BaseModel):
    model_config = {"extra": "forbid"}

    check_interval_minutes: int = Field(default=180, ge=1)


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    location: LocationConfig = LocationConfig()
    openweather: OpenWeatherConfig = OpenWeatherConfig()
    notify: NotifyConfig = NotifyConfig()
    ops: OpsConfig = OpsConfig()
