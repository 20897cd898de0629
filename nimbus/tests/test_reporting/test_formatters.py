"""Tests for display formatters."""

import json
from datetime import UTC, datetime

import pytest

from nimbus.models.common import SourceSelector
from nimbus.models.forecast import Alert, DailyForecast, RawPeriod
from nimbus.models.observation import ObservationSnapshot
from nimbus.pipeline.refresh_coordinator import CoordinatorState
from nimbus.reporting import formatters

CAPTURED = datetime(2026, 10, 18, 12, 54, tzinfo=UTC)


def _period(number: int = 2, name: str = "Sunday", pop: int | None = None) -> RawPeriod:
    return RawPeriod(
        number=number,
        name=name,
        start_time=datetime(2026, 10, 18, 10, 0, tzinfo=UTC),
        is_daytime=True,
        temperature=63,
        temperature_unit="F",
        wind_speed="5 mph",
        wind_direction="W",
        short_forecast="Sunny",
        precipitation_probability=pop,
    )


def _state(snapshot: ObservationSnapshot | None, error: str | None = None) -> CoordinatorState:
    return CoordinatorState(
        snapshot=snapshot,
        location_label="Philadelphia",
        pws_label="",
        error_message=error,
        is_fetching=False,
        last_updated=CAPTURED,
        last_success=CAPTURED,
        last_fetch_attempt=CAPTURED,
    )


class TestWindDisplay:
    def test_calm(self):
        assert formatters.wind_display(0.2, None) == "CALM"

    def test_gust_only(self):
        assert formatters.wind_display(0.0, 12.4) == "Gust 12"

    def test_direction_and_speed(self):
        assert formatters.wind_display(11.18, None, "W") == "W 11"

    def test_gust_shown_when_stronger(self):
        assert formatters.wind_display(11.0, 18.0, "W") == "W 11 G18"

    def test_gust_hidden_when_not_stronger(self):
        assert formatters.wind_display(11.0, 9.0, "W") == "W 11"


class TestPopText:
    @pytest.mark.parametrize(
        "value,expected",
        [(None, None), (0, None), (4, None), (5, "10%"), (20, "20%"), (47, "50%"), (96, "100%")],
    )
    def test_rounding(self, value, expected):
        assert formatters.pop_text(_period(pop=value)) == expected


class TestSimpleFormats:
    def test_abbreviated_day_name(self):
        assert formatters.abbreviated_day_name("Monday") == "Mon"
        assert formatters.abbreviated_day_name(" sunday ") == "Sun"
        assert formatters.abbreviated_day_name("Tonight") == "Tonight"

    def test_missing_values(self):
        assert formatters.format_temperature(None) == "—"
        assert formatters.format_pressure(None) == "—"

    def test_values(self):
        assert formatters.format_temperature(50.4) == "50°"
        assert formatters.format_humidity(67.8) == "68%"
        assert formatters.format_pressure(29.9197) == "29.92"
        assert formatters.format_precipitation(0.12) == "0.12 in"

    def test_halves_round_away_from_zero(self):
        assert formatters.format_temperature(50.5) == "51°"
        assert formatters.format_temperature(-2.5) == "-3°"
        assert formatters.format_temperature(-0.2) == "0°"
        assert formatters.format_humidity(72.5) == "73%"
        assert formatters.wind_display(10.5, 12.5, "N") == "N 11 G13"


class TestConditionsText:
    def test_full_block(self):
        snap = ObservationSnapshot(
            source=SourceSelector.AUTOMATIC_STATION,
            captured_at=CAPTURED,
            temperature_f=50.0,
            humidity_pct=67.8,
            wind_speed_mph=11.18,
            wind_direction="W",
            pressure_inhg=29.92,
            conditions="Partly Cloudy",
            station_id="KPNE",
        )
        text = formatters.format_conditions_text(_state(snap), "Updated 6 minutes ago", False)
        lines = text.splitlines()
        assert lines[0] == "=== Philadelphia (KPNE) ==="
        assert "Temperature: 50°" in lines
        assert "Wind: W 11" in lines
        assert "Conditions: Partly Cloudy" in lines
        assert "Precipitation" not in text
        assert lines[-1] == "Updated 6 minutes ago"

    def test_no_snapshot_with_error(self):
        text = formatters.format_conditions_text(
            _state(None, error="Weather service unavailable."), "—", False
        )
        assert "no conditions available" in text
        assert text.endswith("Error: Weather service unavailable.")

    def test_stale_marker(self):
        snap = ObservationSnapshot(source=SourceSelector.PERSONAL_STATION, captured_at=CAPTURED)
        text = formatters.format_conditions_text(_state(snap), "Updated 2 hours ago", True)
        assert "Updated 2 hours ago (stale)" in text


class TestForecastAndAlerts:
    def test_forecast_line(self):
        daily = [DailyForecast(day=_period(pop=47))]
        text = formatters.format_forecast_text(daily)
        assert text.startswith("Sun")
        assert "10/18" in text
        assert "H  63° L  63°" in text
        assert text.endswith("Sunny | 50%")

    def test_no_alerts(self):
        assert formatters.format_alerts_text([]) == "No active alerts"

    def test_alerts_text(self):
        alerts = [Alert(id="a1", event="Wind Advisory", severity="Moderate", area_desc="Philadelphia")]
        assert formatters.format_alerts_text(alerts) == "- Wind Advisory [Moderate]\n  Philadelphia"

    def test_alerts_json(self):
        alerts = [Alert(id="a1", event="Wind Advisory")]
        data = json.loads(formatters.format_alerts_json(alerts))
        assert data == [
            {
                "id": "a1",
                "event": "Wind Advisory",
                "headline": None,
                "severity": None,
                "urgency": None,
                "area_desc": None,
            }
        ]
