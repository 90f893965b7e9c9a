"""Configuration loading for groww-ta.

Settings live in ``~/.config/growwta/config.toml``. Any key missing from
the file falls back to the defaults below. Interval range limits are not
configurable; see :mod:`growwta.validation`.
"""

import copy
import logging
from pathlib import Path
from typing import Optional

import toml

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "growwta"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.toml"

DEFAULT_CONFIG = {
    "data": {
        "db_path": str(CONFIG_DIR / "candles.db"),
        "exchange": "NSE",
        "segment": "CASH",
    },
    "logging": {
        "level": "WARNING",
    },
}


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration, merged over the defaults.

    Args:
        config_path: Optional path to a TOML file.

    Returns:
        Configuration dictionary. A missing or unreadable file yields the
        defaults.
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    if not path.exists():
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        user_config = toml.load(path)
    except (toml.TomlDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable config file %s: %s", path, e)
        return copy.deepcopy(DEFAULT_CONFIG)

    return _merge(DEFAULT_CONFIG, user_config)


def get_db_path(config: dict) -> Path:
    """Resolve the candle database path from config."""
    return Path(config["data"]["db_path"]).expanduser()
