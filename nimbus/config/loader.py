"""YAML config loader with runtime get/set."""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from nimbus.config.schema import NimbusConfig

logger = logging.getLogger(__name__)


def load_config(path: str | Path | None) -> NimbusConfig:
    """Load and validate config from a YAML file.

    A missing path or empty file yields the defaults.
    """
    if path is None:
        return NimbusConfig()
    path = Path(path)
    if not path.exists():
        logger.info("No config at %s, using defaults", path)
        return NimbusConfig()
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    return NimbusConfig(**raw)


def get_config_value(config: NimbusConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'noaa.timeout_seconds'."""
    obj: Any = config
    for part in dotted_key.split("."):
        if hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict) and part in obj:
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def set_config_value(config: NimbusConfig, dotted_key: str, value: Any) -> NimbusConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new NimbusConfig instance.
    """
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target = data
    for part in parts[:-1]:
        if part not in target:
            raise KeyError(f"Config key not found: {dotted_key}")
        target = target[part]
    old_value = target.get(parts[-1])
    if isinstance(old_value, bool) and isinstance(value, str):
        value = value.lower() in ("1", "true", "yes", "on")
    elif isinstance(old_value, int) and isinstance(value, str):
        value = int(value)
    elif isinstance(old_value, float) and isinstance(value, str):
        value = float(value)
    target[parts[-1]] = value
    return NimbusConfig(**data)


def save_config(config: NimbusConfig, path: str | Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(json.loads(config.model_dump_json()), f, sort_keys=False)
