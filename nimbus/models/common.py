"""Common types and helpers shared across models."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum


class SourceSelector(StrEnum):
    AUTOMATIC_STATION = "noaa"
    PERSONAL_STATION = "pws"


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def query_text(self) -> str:
        """Render as the `lat,lon` pair NOAA expects in paths and queries."""
        return f"{self.latitude:.4f},{self.longitude:.4f}"


def utc_now() -> datetime:
    return datetime.now(UTC)


def parse_timestamp(iso_str: str | None) -> datetime | None:
    """Parse an ISO timestamp, handling various formats."""
    if not iso_str:
        return None
    try:
        dt = datetime.fromisoformat(iso_str)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return dt
    except (ValueError, TypeError):
        return None
