"""Refresh coordinator for current conditions.

All coordinator state is owned by a single asyncio event loop. At most one
fetch is in flight at a time:

* a non-forced refresh while a fetch is running returns False at once;
* a forced refresh cancels the running fetch, waits for it to settle and
  then starts a new one from the first upstream call.

Each fetch carries a generation number. A fetch writes display state and
the snapshot cache only while its generation is still the current one, and
checks that again before every write.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime

from nimbus.config.credentials import API_KEY, STATION_ID, ConfigLookup
from nimbus.ingest import staleness
from nimbus.ingest.errors import (
    LocationUnavailableError,
    MissingConfigError,
    SupersededError,
    user_message,
)
from nimbus.ingest.noaa_client import NoaaClient
from nimbus.ingest.pws_client import PwsClient
from nimbus.models.common import Coordinate, SourceSelector, utc_now
from nimbus.models.observation import ObservationSnapshot
from nimbus.normalize.observation import normalize_noaa_observation
from nimbus.storage.snapshot_cache import SnapshotStore

logger = logging.getLogger(__name__)

LOCATION_PLACEHOLDER = "Current Location"
PWS_LABEL_PLACEHOLDER = "--"


@dataclass
class RefreshState:
    is_fetching: bool = False
    in_flight: asyncio.Task | None = None
    pending_forced_refresh: bool = False
    last_fetch_attempt: datetime | None = None
    last_success: datetime | None = None


@dataclass(frozen=True)
class CoordinatorState:
    """Point-in-time view handed to subscribers and pollers."""

    snapshot: ObservationSnapshot | None
    location_label: str
    pws_label: str
    error_message: str | None
    is_fetching: bool
    last_updated: datetime | None
    last_success: datetime | None
    last_fetch_attempt: datetime | None


Listener = Callable[[CoordinatorState], None]
FetchStrategy = Callable[[Coordinate | None], Awaitable[ObservationSnapshot]]


class RefreshCoordinator:
    def __init__(
        self,
        noaa: NoaaClient,
        pws: PwsClient,
        cache: SnapshotStore,
        config: ConfigLookup,
        location_placeholder: str = LOCATION_PLACEHOLDER,
        stale_after_seconds: float = staleness.STALE_AFTER_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.noaa = noaa
        self.pws = pws
        self.cache = cache
        self.config = config
        self.location_placeholder = location_placeholder
        self.stale_after_seconds = stale_after_seconds
        self.clock = clock

        self._refresh = RefreshState()
        self._generation = 0
        self._snapshot: ObservationSnapshot | None = None
        self._location_label = ""
        self._pws_label = ""
        self._error_message: str | None = None
        self._last_updated: datetime | None = None
        self._listeners: list[Listener] = []
        self._strategies: dict[SourceSelector, FetchStrategy] = {
            SourceSelector.AUTOMATIC_STATION: self._fetch_noaa,
            SourceSelector.PERSONAL_STATION: self._fetch_pws,
        }

    # --- Observation ---

    @property
    def state(self) -> CoordinatorState:
        return CoordinatorState(
            snapshot=self._snapshot,
            location_label=self._location_label,
            pws_label=self._pws_label,
            error_message=self._error_message,
            is_fetching=self._refresh.is_fetching,
            last_updated=self._last_updated,
            last_success=self._refresh.last_success,
            last_fetch_attempt=self._refresh.last_fetch_attempt,
        )

    @property
    def pending_forced_refresh(self) -> bool:
        return self._refresh.pending_forced_refresh

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a state listener. Returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def is_stale(self, now: datetime | None = None) -> bool:
        return staleness.is_stale(self._last_updated, now, self.stale_after_seconds)

    def last_updated_text(self, now: datetime | None = None) -> str:
        return staleness.last_updated_text(self._last_updated, now)

    # --- Public API ---

    def load_cached(self) -> ObservationSnapshot | None:
        """Show the cached snapshot, if any, before the first network fetch."""
        snapshot = self.cache.load()
        if snapshot is None:
            return None
        self._snapshot = snapshot
        logger.info("Loaded cached snapshot captured at %s", snapshot.captured_at)
        self._publish()
        return snapshot

    async def refresh(
        self,
        source: SourceSelector,
        location: Coordinate | None = None,
        location_label: str | None = None,
        force: bool = False,
    ) -> bool:
        """Fetch current conditions from `source`. Returns True on success."""
        while self._refresh.in_flight is not None:
            if not force:
                logger.debug("Fetch already in flight, ignoring %s refresh", source)
                return False
            await self._supersede(self._refresh.in_flight)
        return await self._run(source, location, location_label, force)

    # --- Fetch lifecycle ---

    async def _supersede(self, task: asyncio.Task) -> None:
        logger.info("Forced refresh cancelling in-flight fetch")
        self._refresh.pending_forced_refresh = True
        self._generation += 1
        task.cancel()
        await asyncio.wait({task})

    async def _run(
        self,
        source: SourceSelector,
        location: Coordinate | None,
        location_label: str | None,
        force: bool,
    ) -> bool:
        self._generation += 1
        generation = self._generation
        self._refresh.pending_forced_refresh = False
        self._refresh.is_fetching = True
        self._refresh.last_fetch_attempt = self.clock()
        if source == SourceSelector.PERSONAL_STATION:
            self._pws_label = self.config.get(STATION_ID) or PWS_LABEL_PLACEHOLDER

        task = asyncio.create_task(
            self._fetch_and_apply(source, generation, location, location_label, force)
        )
        task.add_done_callback(self._on_settled)
        self._refresh.in_flight = task
        self._publish()

        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            # The caller itself went away: stop the fetch and drop its writes.
            if self._generation == generation:
                self._generation += 1
            task.cancel()
            raise

        if task.cancelled():
            logger.info("Fetch generation %d cancelled", generation)
            return False
        exc = task.exception()
        if exc is not None:
            self._fail(generation, exc)
            return False
        return task.result()

    async def _fetch_and_apply(
        self,
        source: SourceSelector,
        generation: int,
        location: Coordinate | None,
        location_label: str | None,
        force: bool,
    ) -> bool:
        snapshot = await self._strategies[source](location)

        # Cache first: a failed save leaves display state untouched.
        self._ensure_current(generation)
        self.cache.save(snapshot)

        self._ensure_current(generation)
        self._snapshot = snapshot
        now = self.clock()
        self._refresh.last_success = now
        self._refresh.last_fetch_attempt = now
        # A forced refresh always reads as "just now", whatever the station clock says.
        self._last_updated = now if force else snapshot.captured_at
        self._apply_location_label(location_label)
        self._error_message = None
        logger.info(
            "Refreshed %s conditions from %s (force=%s)",
            source, snapshot.station_id or "unknown station", force,
        )
        self._publish()
        return True

    def _on_settled(self, task: asyncio.Task) -> None:
        if self._refresh.in_flight is not task:
            return
        self._refresh.in_flight = None
        self._refresh.is_fetching = False
        self._refresh.pending_forced_refresh = False
        self._publish()

    def _ensure_current(self, generation: int) -> None:
        if generation != self._generation:
            raise SupersededError(f"generation {generation} superseded by {self._generation}")

    def _fail(self, generation: int, exc: BaseException) -> None:
        message = user_message(exc)
        if message is None or generation != self._generation:
            logger.info("Dropping result of superseded fetch: %s", exc)
            return
        logger.warning("Refresh failed (%s): %s", type(exc).__name__, exc)
        self._error_message = message
        self._publish()

    # --- Sources ---

    async def _fetch_noaa(self, location: Coordinate | None) -> ObservationSnapshot:
        if location is None:
            raise LocationUnavailableError("NOAA refresh needs a coordinate")
        result = await self.noaa.fetch_latest_observation(location)
        return normalize_noaa_observation(result, self.clock())

    async def _fetch_pws(self, location: Coordinate | None) -> ObservationSnapshot:
        station_id = self.config.get(STATION_ID)
        if not station_id:
            raise MissingConfigError(STATION_ID)
        api_key = self.config.get(API_KEY)
        if not api_key:
            raise MissingConfigError(API_KEY)
        return await self.pws.fetch_current(station_id, api_key)

    # --- Helpers ---

    def _apply_location_label(self, label: str | None) -> None:
        label = (label or "").strip()
        if label and label != self.location_placeholder:
            self._location_label = label
        elif not self._location_label:
            self._location_label = self.location_placeholder

    def _publish(self) -> None:
        state = self.state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("State listener %r failed", listener)
