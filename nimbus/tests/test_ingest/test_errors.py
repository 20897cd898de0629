"""Tests for mapping failures to user-facing messages."""

import asyncio

import httpx
import pytest

from nimbus.ingest.errors import (
    BadStatusError,
    LocationUnavailableError,
    MissingConfigError,
    NoObservationsError,
    NoStationsError,
    SupersededError,
    UpstreamDecodeError,
    is_cancellation,
    user_message,
)


class TestUserMessage:
    @pytest.mark.parametrize(
        "exc",
        [
            BadStatusError(500),
            UpstreamDecodeError("bad"),
            NoStationsError("none"),
            NoObservationsError("none"),
        ],
    )
    def test_service_unavailable(self, exc):
        assert user_message(exc) == "Weather service unavailable."

    def test_location_unavailable(self):
        assert user_message(LocationUnavailableError("no fix")) == "Location unavailable."

    def test_missing_config(self):
        assert user_message(MissingConfigError("api_key")) == "Missing api_key in configuration"

    def test_timeout(self):
        assert user_message(httpx.ConnectTimeout("slow")) == "Network request timed out"

    def test_connect_error(self):
        assert user_message(httpx.ConnectError("refused")) == "Cannot reach server"

    def test_connection_lost(self):
        assert user_message(httpx.RemoteProtocolError("eof")) == "Network connection was lost"

    def test_other_transport_error(self):
        assert user_message(httpx.UnsupportedProtocol("ftp")) == "Network error"

    def test_unknown(self):
        assert user_message(RuntimeError("boom")) == "Something went wrong"

    def test_cancellation_is_silent(self):
        assert user_message(asyncio.CancelledError()) is None
        assert user_message(SupersededError("old")) is None


class TestErrorTypes:
    def test_bad_status_message(self):
        err = BadStatusError(503, "https://api.weather.gov/points/1,2")
        assert err.status_code == 503
        assert "503" in str(err)

    def test_is_cancellation(self):
        assert is_cancellation(asyncio.CancelledError())
        assert not is_cancellation(BadStatusError(500))
