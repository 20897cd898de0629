"""Staleness checks and "last updated" wording for displayed conditions."""

from datetime import datetime

from nimbus.models.common import utc_now

STALE_AFTER_SECONDS = 900
NO_DATA_TEXT = "—"
JUST_NOW_TEXT = "Updated just now"


def is_stale(
    last_updated: datetime | None,
    now: datetime | None = None,
    max_age_seconds: float = STALE_AFTER_SECONDS,
) -> bool:
    """True when more than `max_age_seconds` have passed since `last_updated`.

    Nothing to display is not "stale"; callers show the no-data text instead.
    """
    if last_updated is None:
        return False
    if now is None:
        now = utc_now()
    return (now - last_updated).total_seconds() > max_age_seconds


def last_updated_text(last_updated: datetime | None, now: datetime | None = None) -> str:
    if last_updated is None:
        return NO_DATA_TEXT
    if now is None:
        now = utc_now()
    delta = (now - last_updated).total_seconds()
    if delta < 60:
        return JUST_NOW_TEXT
    return f"Updated {_relative_phrase(delta)}"


def _relative_phrase(delta: float) -> str:
    minutes = int(delta // 60)
    if minutes < 60:
        return _plural(minutes, "minute")
    hours = minutes // 60
    if hours < 24:
        return _plural(hours, "hour")
    return _plural(hours // 24, "day")


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'} ago"
