"""Upstream failure types and their user-facing wording.

Clients raise these (or let httpx transport errors through) unchanged;
coordinators are the only callers of `user_message`.
"""

import asyncio

import httpx

SERVICE_UNAVAILABLE = "Weather service unavailable."
LOCATION_UNAVAILABLE = "Location unavailable."
FALLBACK_MESSAGE = "Something went wrong"


class NimbusError(Exception):
    """Base class for nimbus failures."""


class UpstreamError(NimbusError):
    """The upstream answered, but not with something usable."""


class BadStatusError(UpstreamError):
    def __init__(self, status_code: int, url: str = ""):
        self.status_code = status_code
        self.url = url
        super().__init__(f"HTTP {status_code} from {url}" if url else f"HTTP {status_code}")


class UpstreamDecodeError(UpstreamError):
    """Response body was not the JSON shape we rely on."""


class NoObservationsError(UpstreamError):
    """Personal station returned an empty observation list."""


class ResolutionError(NimbusError):
    """A coordinate could not be resolved to something observable."""


class NoStationsError(ResolutionError):
    """NOAA listed no observation stations for the grid point."""


class LocationUnavailableError(ResolutionError):
    """The NOAA path was asked to refresh without a coordinate."""


class SupersededError(NimbusError):
    """A newer refresh replaced this one before it could write its result."""


class MissingConfigError(NimbusError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Missing {key} in configuration")


def is_cancellation(exc: BaseException) -> bool:
    return isinstance(exc, (asyncio.CancelledError, SupersededError))


def user_message(exc: BaseException) -> str | None:
    """Short text to show for a failed refresh, or None when it should stay silent."""
    if is_cancellation(exc):
        return None
    if isinstance(exc, MissingConfigError):
        return str(exc)
    if isinstance(exc, LocationUnavailableError):
        return LOCATION_UNAVAILABLE
    if isinstance(exc, (UpstreamError, ResolutionError)):
        return SERVICE_UNAVAILABLE
    if isinstance(exc, httpx.TimeoutException):
        return "Network request timed out"
    if isinstance(exc, httpx.ConnectError):
        return "Cannot reach server"
    if isinstance(exc, (httpx.RemoteProtocolError, httpx.ReadError, httpx.WriteError)):
        return "Network connection was lost"
    if isinstance(exc, httpx.RequestError):
        return "Network error"
    return FALLBACK_MESSAGE
