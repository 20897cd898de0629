"""Shared test fixtures."""

import json
import sqlite3
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
import yaml

from nimbus.ingest.noaa_client import NoaaClient
from nimbus.storage.database import connect, run_migrations


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def load_json(fixtures_dir: Path) -> Callable[[str], dict]:
    def _load(name: str) -> dict:
        with open(fixtures_dir / name) as f:
            return json.load(f)

    return _load


@pytest.fixture
def db(tmp_path: Path) -> Iterator[sqlite3.Connection]:
    """Temporary SQLite database with all migrations applied."""
    conn = connect(tmp_path / "test.db")
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def noaa() -> NoaaClient:
    return NoaaClient(base_url="https://test-noaa.example.com", timeout=2.0)


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "noaa": {"timeout_seconds": 10},
        "pws": {"station_id": "KPAPHILA123", "api_key": "yaml-key"},
        "storage": {"db_path": str(tmp_path / "nimbus.db")},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
