"""Personal weather station client (weather.com PWS observations API)."""

import logging

import httpx

from nimbus.ingest.errors import BadStatusError, NoObservationsError, UpstreamDecodeError
from nimbus.ingest.noaa_client import require
from nimbus.models.common import SourceSelector, parse_timestamp, utc_now
from nimbus.models.observation import ObservationSnapshot
from nimbus.normalize.units import degrees_to_compass

logger = logging.getLogger(__name__)

PWS_BASE_URL = "https://api.weather.com"
DEFAULT_TIMEOUT = 15.0


class PwsClient:
    def __init__(
        self,
        base_url: str = PWS_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = "nimbus-weather/0.1.0",
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent

    async def fetch_current(self, station_id: str, api_key: str) -> ObservationSnapshot:
        """Fetch the station's current observation in imperial units."""
        url = f"{self.base_url}/v2/pws/observations/current"
        params = {
            "stationId": station_id,
            "format": "json",
            "units": "e",
            "apiKey": api_key,
        }
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
        }
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.get(url, params=params, headers=headers)

        if not resp.is_success:
            # Never log params here: the query string carries the API key.
            logger.warning("PWS station %s returned %d", station_id, resp.status_code)
            raise BadStatusError(resp.status_code, url)
        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamDecodeError("Invalid JSON from PWS API") from e

        observations = require(data, "observations")
        if not observations:
            raise NoObservationsError(f"No observations for station {station_id}")
        return _to_snapshot(observations[0], station_id)


def _to_snapshot(obs: dict, station_id: str) -> ObservationSnapshot:
    imperial = require(obs, "imperial")
    try:
        wind_deg = int(require(obs, "winddir"))
        return ObservationSnapshot(
            source=SourceSelector.PERSONAL_STATION,
            captured_at=parse_timestamp(obs.get("obsTimeUtc")) or utc_now(),
            temperature_f=float(require(imperial, "temp")),
            humidity_pct=float(require(obs, "humidity")),
            wind_speed_mph=float(imperial.get("windSpeed") or 0.0),
            wind_gust_mph=float(imperial.get("windGust") or 0.0),
            wind_direction=degrees_to_compass(wind_deg),
            wind_direction_degrees=wind_deg,
            pressure_inhg=_optional_float(imperial.get("pressure")),
            precipitation_in=_optional_float(imperial.get("precipTotal")),
            station_id=obs.get("stationID") or station_id,
            station_name=obs.get("neighborhood") or "",
            latitude=_optional_float(obs.get("lat")),
            longitude=_optional_float(obs.get("lon")),
        )
    except (TypeError, ValueError) as e:
        raise UpstreamDecodeError(f"Malformed PWS observation: {e}") from e


def _optional_float(value) -> float | None:
    return float(value) if value is not None else None
