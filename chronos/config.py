"""Configuration loading for Chronos.

Settings live in a TOML file, ``~/.config/chronos/config.toml`` unless the
``CHRONOS_CONFIG`` environment variable points elsewhere. Every key is
optional; user values are merged over the defaults below.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Optional

import toml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CHRONOS_CONFIG"
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "chronos"

DEFAULTS = {
    "storage": {
        "db_path": str(DEFAULT_CONFIG_DIR / "journal.db"),
        # Images are stored inline, so snapshots grow with every screenshot
        "max_snapshot_bytes": 5 * 1024 * 1024,
    },
    "logging": {
        "level": "WARNING",
    },
}


def get_config_path() -> Path:
    """Get the configuration file path."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_DIR / "config.toml"


def _merge(base: dict, overrides: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[Path] = None) -> dict:
    """Load configuration merged over the defaults.

    Args:
        path: Config file to read. Defaults to ``get_config_path()``.

    Returns:
        Configuration dictionary. A missing or unreadable file yields
        the defaults.
    """
    path = path or get_config_path()
    if not path.exists():
        return copy.deepcopy(DEFAULTS)

    try:
        user_config = toml.load(path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning("Ignoring unreadable config file %s: %s", path, e)
        return copy.deepcopy(DEFAULTS)

    return _merge(DEFAULTS, user_config)


def get_db_path(config: dict) -> Path:
    """Journal database path from a loaded config."""
    return Path(config["storage"]["db_path"]).expanduser()
