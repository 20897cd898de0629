"""Forecast pipeline: 7-day periods folded into daily entries, plus active alerts."""

import logging

from nimbus.ingest.alerts_client import AlertsClient
from nimbus.ingest.forecast_client import ForecastClient
from nimbus.models.common import Coordinate
from nimbus.models.forecast import Alert, DailyForecast, RawPeriod
from nimbus.normalize.aggregator import combine_day_night

logger = logging.getLogger(__name__)

FORECAST_UNAVAILABLE = "Forecast unavailable at this time."
# Coordinates closer than this (degrees, each axis) count as the same place.
JITTER_DEGREES = 0.01


class ForecastPipeline:
    def __init__(self, forecast_client: ForecastClient, alerts_client: AlertsClient):
        self.forecast_client = forecast_client
        self.alerts_client = alerts_client
        self.periods: list[RawPeriod] = []
        self.daily: list[DailyForecast] = []
        self.alerts: list[Alert] = []
        self.error_message: str | None = None
        self.is_loading = False
        self._last_location: Coordinate | None = None

    async def load_if_needed(self, location: Coordinate) -> bool:
        """Refresh unless periods for (about) this location are already loaded.

        Alerts are refreshed either way, since they change independently.
        """
        if self.periods and self._same_place(location):
            await self._refresh_alerts(location)
            return True
        return await self.refresh(location)

    async def refresh(self, location: Coordinate) -> bool:
        """Load periods (required) and alerts (best effort).

        A period failure sets the error message and keeps the previous
        forecast. An alert failure is only logged.
        """
        self.is_loading = True
        try:
            try:
                periods = await self.forecast_client.get_periods(location)
            except Exception as e:
                logger.warning("Forecast fetch failed for %s: %s", location.query_text(), e)
                self.error_message = FORECAST_UNAVAILABLE
                return False

            self.periods = periods
            self.daily = combine_day_night(periods)
            self.error_message = None
            self._last_location = location
            await self._refresh_alerts(location)
            return True
        finally:
            self.is_loading = False

    async def _refresh_alerts(self, location: Coordinate) -> None:
        try:
            self.alerts = await self.alerts_client.get_active_alerts(location)
        except Exception as e:
            logger.warning("Alerts fetch failed for %s, keeping previous: %s", location.query_text(), e)

    def _same_place(self, location: Coordinate) -> bool:
        last = self._last_location
        if last is None:
            return False
        return (
            abs(last.latitude - location.latitude) < JITTER_DEGREES
            and abs(last.longitude - location.longitude) < JITTER_DEGREES
        )
