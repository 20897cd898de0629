"""NOAA/NWS API client: grid point, station and latest-observation lookups."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from nimbus.ingest.errors import BadStatusError, NoStationsError, UpstreamDecodeError
from nimbus.models.common import Coordinate

logger = logging.getLogger(__name__)

NOAA_BASE_URL = "https://api.weather.gov"
DEFAULT_USER_AGENT = "nimbus-weather/0.1.0"
GEO_JSON = "application/geo+json"
DEFAULT_TIMEOUT = 20.0


@dataclass(frozen=True)
class GridPoint:
    forecast_url: str
    observation_stations_url: str


@dataclass(frozen=True)
class Station:
    station_id: str
    name: str | None = None


@dataclass(frozen=True)
class StationObservation:
    station: Station
    properties: dict


class NoaaClient:
    def __init__(
        self,
        base_url: str = NOAA_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self._client = client

    async def get_json(self, url: str, params: dict | None = None) -> dict:
        """GET a NOAA resource and decode its JSON body.

        Any non-2xx status raises BadStatusError; transport failures and
        timeouts propagate as httpx.RequestError.
        """
        headers = {"User-Agent": self.user_agent, "Accept": GEO_JSON}
        if self._client is not None:
            resp = await self._client.get(
                url, params=params, headers=headers, timeout=self.timeout
            )
        else:
            async with httpx.AsyncClient(
                timeout=self.timeout, follow_redirects=True
            ) as client:
                resp = await client.get(url, params=params, headers=headers)

        if not resp.is_success:
            logger.warning("NOAA %s returned %d", url, resp.status_code)
            raise BadStatusError(resp.status_code, url)
        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamDecodeError(f"Invalid JSON from {url}") from e
        if not isinstance(data, dict):
            raise UpstreamDecodeError(f"Expected a JSON object from {url}")
        return data

    async def get_point(self, coord: Coordinate) -> GridPoint:
        url = f"{self.base_url}/points/{coord.query_text()}"
        data = await self.get_json(url)
        props = require(data, "properties")
        return GridPoint(
            forecast_url=require(props, "forecast"),
            observation_stations_url=require(props, "observationStations"),
        )

    async def get_observation_stations(self, url: str) -> list[Station]:
        data = await self.get_json(url)
        stations = []
        for feature in require(data, "features"):
            props = require(feature, "properties")
            stations.append(
                Station(
                    station_id=require(props, "stationIdentifier"),
                    name=props.get("name"),
                )
            )
        return stations

    async def get_latest_observation(self, station_id: str) -> dict:
        url = f"{self.base_url}/stations/{station_id}/observations/latest"
        data = await self.get_json(url)
        props = require(data, "properties")
        if not isinstance(props, dict):
            raise UpstreamDecodeError(f"Observation properties missing for {station_id}")
        return props

    async def fetch_latest_observation(self, coord: Coordinate) -> StationObservation:
        """Resolve grid point, then nearest station, then its latest observation.

        The first station NOAA lists is used as-is. A failure at any of the
        three steps fails the whole lookup.
        """
        point = await self.get_point(coord)
        stations = await self.get_observation_stations(point.observation_stations_url)
        if not stations:
            raise NoStationsError(f"No observation stations near {coord.query_text()}")
        station = stations[0]
        logger.debug("Using station %s (%s)", station.station_id, station.name)
        props = await self.get_latest_observation(station.station_id)
        return StationObservation(station=station, properties=props)


def require(data: Any, key: str) -> Any:
    """Fetch a required key from a decoded JSON object."""
    try:
        value = data[key]
    except (KeyError, TypeError, IndexError) as e:
        raise UpstreamDecodeError(f"Missing field: {key}") from e
    if value is None:
        raise UpstreamDecodeError(f"Null field: {key}")
    return value
