"""Fold NOAA half-day forecast periods into daily summaries."""

from collections.abc import Sequence

from nimbus.models.forecast import DailyForecast, RawPeriod


def combine_day_night(periods: Sequence[RawPeriod]) -> list[DailyForecast]:
    """Pair each daytime period with the night period right after it.

    A day with no following night is emitted on its own. Night periods that
    are not consumed by a pair (for example a leading "Tonight") are skipped,
    so every entry starts from a daytime period and input order is kept.
    """
    out: list[DailyForecast] = []
    i = 0
    while i < len(periods):
        period = periods[i]
        if not period.is_daytime:
            i += 1
            continue

        nxt = periods[i + 1] if i + 1 < len(periods) else None
        night = nxt if nxt is not None and not nxt.is_daytime else None
        out.append(DailyForecast(day=period, night=night))
        i += 1 if night is None else 2
    return out
