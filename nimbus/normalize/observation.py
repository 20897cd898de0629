"""Normalize a NOAA latest-observation payload into an ObservationSnapshot."""

from datetime import datetime

from nimbus.ingest.errors import UpstreamDecodeError
from nimbus.ingest.noaa_client import StationObservation
from nimbus.models.common import SourceSelector, parse_timestamp
from nimbus.models.observation import ObservationSnapshot
from nimbus.normalize.units import (
    celsius_to_fahrenheit,
    degrees_to_compass,
    pascals_to_inches_mercury,
    speed_to_mph,
)


def normalize_noaa_observation(
    result: StationObservation, fetched_at: datetime
) -> ObservationSnapshot:
    """Convert NOAA's metric measurements to display units.

    Missing or null measurements stay None. Wind direction text is left
    empty when the station reports no direction.
    """
    props = result.properties
    try:
        temp_c = _value(props, "temperature")
        pa = _value(props, "barometricPressure")
        direction = _value(props, "windDirection")
        degrees = int(round(direction)) if direction is not None else None

        return ObservationSnapshot(
            source=SourceSelector.AUTOMATIC_STATION,
            captured_at=parse_timestamp(props.get("timestamp")) or fetched_at,
            temperature_f=celsius_to_fahrenheit(temp_c) if temp_c is not None else None,
            humidity_pct=_value(props, "relativeHumidity"),
            wind_speed_mph=_speed(props, "windSpeed"),
            wind_gust_mph=_speed(props, "windGust"),
            wind_direction=degrees_to_compass(degrees) if degrees is not None else "",
            wind_direction_degrees=degrees,
            pressure_inhg=pascals_to_inches_mercury(pa) if pa is not None else None,
            conditions=(props.get("textDescription") or "").strip(),
            station_id=result.station.station_id,
            station_name=result.station.name or "",
        )
    except (TypeError, ValueError, AttributeError, OverflowError) as e:
        raise UpstreamDecodeError(
            f"Malformed observation from {result.station.station_id}: {e}"
        ) from e


def _value(props: dict, key: str) -> float | None:
    measurement = props.get(key)
    if not isinstance(measurement, dict):
        return None
    value = measurement.get("value")
    return float(value) if value is not None else None


def _speed(props: dict, key: str) -> float | None:
    value = _value(props, key)
    if value is None:
        return None
    return speed_to_mph(value, props[key].get("unitCode"))
