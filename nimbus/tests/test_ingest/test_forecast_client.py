"""Tests for the forecast client."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest
import respx

from nimbus.ingest.errors import BadStatusError, UpstreamDecodeError
from nimbus.ingest.forecast_client import ForecastClient
from nimbus.ingest.noaa_client import NoaaClient
from nimbus.models.common import Coordinate

BASE = "https://test-noaa.example.com"
POINTS_URL = f"{BASE}/points/40.0000,-75.0000"
FORECAST_URL = f"{BASE}/gridpoints/PHI/49,75/forecast"
COORD = Coordinate(40.0, -75.0)


@pytest.fixture
def client(noaa: NoaaClient) -> ForecastClient:
    return ForecastClient(noaa)


class TestGetPeriods:
    @respx.mock
    @pytest.mark.asyncio
    async def test_parses_periods(self, client: ForecastClient, load_json):
        respx.get(POINTS_URL).mock(
            return_value=httpx.Response(200, json=load_json("noaa_points.json"))
        )
        respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(200, json=load_json("noaa_forecast.json"))
        )

        periods = await client.get_periods(COORD)

        assert len(periods) == 5
        first, sunday = periods[0], periods[1]
        assert first.name == "Tonight"
        assert first.is_daytime is False
        assert first.precipitation_probability is None
        assert sunday.number == 2
        assert sunday.temperature == 63
        assert sunday.precipitation_probability == 4
        assert sunday.wind_speed == "5 to 10 mph"
        assert sunday.start_time == datetime(
            2026, 10, 18, 6, 0, tzinfo=timezone(timedelta(hours=-4))
        )

    @respx.mock
    @pytest.mark.asyncio
    async def test_forecast_bad_status(self, client: ForecastClient, load_json):
        respx.get(POINTS_URL).mock(
            return_value=httpx.Response(200, json=load_json("noaa_points.json"))
        )
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(503))

        with pytest.raises(BadStatusError):
            await client.get_periods(COORD)

    @respx.mock
    @pytest.mark.asyncio
    async def test_bad_start_time(self, client: ForecastClient, load_json):
        data = load_json("noaa_forecast.json")
        data["properties"]["periods"][0]["startTime"] = "not a time"
        respx.get(POINTS_URL).mock(
            return_value=httpx.Response(200, json=load_json("noaa_points.json"))
        )
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=data))

        with pytest.raises(UpstreamDecodeError):
            await client.get_periods(COORD)
