"""Normalized current-conditions snapshot, the record kept in the snapshot cache."""

from datetime import datetime

from pydantic import BaseModel

from nimbus.models.common import SourceSelector


class ObservationSnapshot(BaseModel):
    model_config = {"frozen": True}

    source: SourceSelector
    captured_at: datetime
    temperature_f: float | None = None
    humidity_pct: float | None = None
    wind_speed_mph: float | None = None
    wind_gust_mph: float | None = None
    wind_direction: str = ""
    wind_direction_degrees: int | None = None
    pressure_inhg: float | None = None
    precipitation_in: float | None = None
    conditions: str = ""
    station_id: str = ""
    station_name: str = ""
    latitude: float | None = None
    longitude: float | None = None
