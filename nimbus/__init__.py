"""nimbus: current conditions and forecasts from NOAA or a personal weather station."""

__version__ = "0.1.0"
