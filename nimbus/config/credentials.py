"""Lookup of the personal-station credentials.

Values the user stored in the settings table win; the YAML `pws` section is
the fallback. Blank values count as missing.
"""

import sqlite3
from typing import Protocol

from nimbus.config.schema import PwsConfig
from nimbus.storage import settings_repo

STATION_ID = "station_id"
API_KEY = "api_key"


class ConfigLookup(Protocol):
    def get(self, key: str) -> str | None: ...


class SettingsLookup:
    def __init__(self, conn: sqlite3.Connection | None, pws: PwsConfig):
        self.conn = conn
        self.pws = pws

    def get(self, key: str) -> str | None:
        if self.conn is not None:
            stored = (settings_repo.get_setting(self.conn, key) or "").strip()
            if stored:
                return stored
        fallback = str(getattr(self.pws, key, "") or "").strip()
        return fallback or None
