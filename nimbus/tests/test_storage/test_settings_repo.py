"""Tests for the settings repository."""

import sqlite3

from nimbus.storage import settings_repo


class TestSettingsRepo:
    def test_missing(self, db: sqlite3.Connection):
        assert settings_repo.get_setting(db, "station_id") is None

    def test_set_and_get(self, db: sqlite3.Connection):
        settings_repo.set_setting(db, "station_id", "KPAPHILA123")
        assert settings_repo.get_setting(db, "station_id") == "KPAPHILA123"

    def test_overwrite(self, db: sqlite3.Connection):
        settings_repo.set_setting(db, "api_key", "old")
        settings_repo.set_setting(db, "api_key", "new")
        assert settings_repo.get_setting(db, "api_key") == "new"

    def test_delete(self, db: sqlite3.Connection):
        settings_repo.set_setting(db, "api_key", "x")
        settings_repo.delete_setting(db, "api_key")
        assert settings_repo.get_setting(db, "api_key") is None

    def test_list(self, db: sqlite3.Connection):
        settings_repo.set_setting(db, "station_id", "S1")
        settings_repo.set_setting(db, "api_key", "K1")
        assert settings_repo.list_settings(db) == {"api_key": "K1", "station_id": "S1"}
