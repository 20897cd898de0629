"""NOAA 7-day forecast client: grid point lookup, then the period list."""

import logging

from nimbus.ingest.errors import UpstreamDecodeError
from nimbus.ingest.noaa_client import NoaaClient, require
from nimbus.models.common import Coordinate, parse_timestamp
from nimbus.models.forecast import RawPeriod

logger = logging.getLogger(__name__)


class ForecastClient:
    def __init__(self, noaa_client: NoaaClient):
        self.noaa = noaa_client

    async def get_periods(self, coord: Coordinate) -> list[RawPeriod]:
        point = await self.noaa.get_point(coord)
        data = await self.noaa.get_json(point.forecast_url)
        raw_periods = require(require(data, "properties"), "periods")
        periods = [_parse_period(p) for p in raw_periods]
        logger.info("Fetched %d forecast periods for %s", len(periods), coord.query_text())
        return periods


def _parse_period(p: dict) -> RawPeriod:
    start = parse_timestamp(require(p, "startTime"))
    if start is None:
        raise UpstreamDecodeError(f"Bad startTime in period {p.get('number')}")

    temperature = p.get("temperature")
    pop = p.get("probabilityOfPrecipitation") or {}
    pop_value = pop.get("value") if isinstance(pop, dict) else None
    try:
        return RawPeriod(
            number=int(require(p, "number")),
            name=p.get("name") or "",
            start_time=start,
            is_daytime=bool(require(p, "isDaytime")),
            temperature=int(temperature) if temperature is not None else None,
            temperature_unit=p.get("temperatureUnit") or "F",
            wind_speed=p.get("windSpeed") or "",
            wind_direction=p.get("windDirection") or "",
            short_forecast=p.get("shortForecast") or "",
            detailed_forecast=p.get("detailedForecast") or "",
            precipitation_probability=int(pop_value) if pop_value is not None else None,
        )
    except (TypeError, ValueError) as e:
        raise UpstreamDecodeError(f"Malformed forecast period: {e}") from e
