"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field


class NoaaConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://api.weather.gov"
    user_agent: str = "nimbus-weather/0.1.0"
    timeout_seconds: float = Field(default=20.0, gt=0.0)


class PwsConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://api.weather.com"
    timeout_seconds: float = Field(default=15.0, gt=0.0)
    station_id: str = ""
    api_key: str = ""


class StorageConfig(BaseModel):
    model_config = {"extra": "forbid"}

    db_path: str = "data/nimbus.db"


class DisplayConfig(BaseModel):
    model_config = {"extra": "forbid"}

    stale_after_seconds: int = Field(default=900, ge=1)
    location_placeholder: str = "Current Location"


class NimbusConfig(BaseModel):
    model_config = {"extra": "forbid"}

    noaa: NoaaConfig = NoaaConfig()
    pws: PwsConfig = PwsConfig()
    storage: StorageConfig = StorageConfig()
    display: DisplayConfig = DisplayConfig()
