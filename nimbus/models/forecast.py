"""NOAA forecast and alert data models."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class RawPeriod:
    number: int
    name: str
    start_time: datetime
    is_daytime: bool
    temperature: int | None
    temperature_unit: str
    wind_speed: str
    wind_direction: str
    short_forecast: str
    detailed_forecast: str = ""
    precipitation_probability: int | None = None  # 0-100


@dataclass(frozen=True)
class DailyForecast:
    """A daytime period with the night that immediately follows it, if any."""

    day: RawPeriod
    night: RawPeriod | None = None

    @property
    def id(self) -> int:
        return self.day.number

    @property
    def name(self) -> str:
        return self.day.name

    @property
    def start_date(self) -> date:
        return self.day.start_time.date()

    @property
    def date_text(self) -> str:
        d = self.start_date
        return f"{d.month}/{d.day}"

    @property
    def high_text(self) -> str:
        return _degrees_text(self.day.temperature)

    @property
    def low_text(self) -> str:
        # Without a night period the day temperature stands in for the low.
        if self.night is not None:
            return _degrees_text(self.night.temperature)
        return _degrees_text(self.day.temperature)


@dataclass(frozen=True)
class Alert:
    id: str
    event: str
    headline: str | None = None
    severity: str | None = None
    urgency: str | None = None
    area_desc: str | None = None
    description: str | None = None
    instruction: str | None = None
    effective: str | None = None
    sent: str | None = None


def _degrees_text(value: int | None) -> str:
    if value is None:
        return "--"
    return f"{value}°"
