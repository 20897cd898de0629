"""Display formatters for conditions, forecasts and alerts."""

import json
import math

from nimbus.models.forecast import Alert, DailyForecast, RawPeriod
from nimbus.models.observation import ObservationSnapshot
from nimbus.pipeline.refresh_coordinator import CoordinatorState

MISSING = "—"

_WEEKDAYS = {
    "monday": "Mon",
    "tuesday": "Tue",
    "wednesday": "Wed",
    "thursday": "Thu",
    "friday": "Fri",
    "saturday": "Sat",
    "sunday": "Sun",
}


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (50.5 -> 51, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def format_temperature(temperature_f: float | None) -> str:
    if temperature_f is None:
        return MISSING
    return f"{round_half_away(temperature_f)}°"


def format_humidity(humidity_pct: float | None) -> str:
    if humidity_pct is None:
        return MISSING
    return f"{round_half_away(humidity_pct)}%"


def format_pressure(pressure_inhg: float | None) -> str:
    if pressure_inhg is None:
        return MISSING
    return f"{pressure_inhg:.2f}"


def format_precipitation(precipitation_in: float | None) -> str:
    if precipitation_in is None:
        return MISSING
    return f"{precipitation_in:.2f} in"


def wind_display(
    speed_mph: float | None, gust_mph: float | None, direction: str = ""
) -> str:
    """Compact wind text: "CALM", "Gust 12", "W 11" or "W 11 G18"."""
    wind = round_half_away(speed_mph or 0.0)
    gust = round_half_away(gust_mph or 0.0)
    if wind == 0 and gust == 0:
        return "CALM"
    if wind == 0:
        return f"Gust {gust}"
    prefix = f"{direction} " if direction else ""
    suffix = f" G{gust}" if gust > wind else ""
    return f"{prefix}{wind}{suffix}"


def pop_text(period: RawPeriod) -> str | None:
    """Probability of precipitation rounded to the nearest 10%; None when zero or absent."""
    value = period.precipitation_probability
    if value is None:
        return None
    rounded = ((value + 5) // 10) * 10
    if rounded <= 0:
        return None
    return f"{rounded}%"


def abbreviated_day_name(name: str) -> str:
    """Shorten weekday names ("Monday" -> "Mon"); leave others ("Tonight") as-is."""
    trimmed = name.strip()
    return _WEEKDAYS.get(trimmed.lower(), trimmed)


def format_conditions_text(
    state: CoordinatorState, updated_text: str, stale: bool
) -> str:
    """Plain text block for the current conditions."""
    snap = state.snapshot
    if snap is None:
        lines = [f"{state.location_label or MISSING}: no conditions available"]
    else:
        station = snap.station_name or snap.station_id or state.pws_label
        lines = [
            f"=== {state.location_label or MISSING} ({station}) ===",
            f"Temperature: {format_temperature(snap.temperature_f)}",
            f"Humidity: {format_humidity(snap.humidity_pct)}",
            f"Wind: {wind_display(snap.wind_speed_mph, snap.wind_gust_mph, snap.wind_direction)}",
            f"Pressure: {format_pressure(snap.pressure_inhg)}",
        ]
        if snap.precipitation_in is not None:
            lines.append(f"Precipitation: {format_precipitation(snap.precipitation_in)}")
        lines.append(f"Conditions: {snap.conditions or MISSING}")
    lines.append(updated_text + (" (stale)" if stale else ""))
    if state.error_message:
        lines.append(f"Error: {state.error_message}")
    return "\n".join(lines)


def format_snapshot_json(snapshot: ObservationSnapshot) -> str:
    """JSON snapshot for programmatic consumption."""
    return snapshot.model_dump_json(indent=2)


def format_forecast_text(daily: list[DailyForecast]) -> str:
    lines = []
    for d in daily:
        pop = pop_text(d.day)
        pop_part = f" | {pop}" if pop else ""
        lines.append(
            f"{abbreviated_day_name(d.name):<10} {d.date_text:>5}  "
            f"H {d.high_text:>4} L {d.low_text:>4}  {d.day.short_forecast}{pop_part}"
        )
    return "\n".join(lines)


def format_alerts_text(alerts: list[Alert]) -> str:
    if not alerts:
        return "No active alerts"
    lines = []
    for a in alerts:
        severity = f" [{a.severity}]" if a.severity else ""
        lines.append(f"- {a.event}{severity}")
        detail = a.headline or a.area_desc
        if detail:
            lines.append(f"  {detail}")
    return "\n".join(lines)


def format_alerts_json(alerts: list[Alert]) -> str:
    data = [
        {
            "id": a.id,
            "event": a.event,
            "headline": a.headline,
            "severity": a.severity,
            "urgency": a.urgency,
            "area_desc": a.area_desc,
        }
        for a in alerts
    ]
    return json.dumps(data, indent=2)
