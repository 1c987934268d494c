"""Config loading, defaults, environment overrides, and validation."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from logroller.policy import (
    DEFAULT_MAX_LOG_BACKUPS,
    DEFAULT_MAX_LOG_FILE_WEIGHT,
    RollingInterval,
    RollPolicy,
)
from logroller.utils import deep_merge, load_mapping, save_json

logger = logging.getLogger(__name__)

CONFIG_DIR = ".logroller"
CONFIG_FILE = "config.json"

DEFAULT_CONFIG: dict = {
    "version": 1,
    "rolling_interval": RollingInterval.DAY.value,
    "max_log_file_weight": DEFAULT_MAX_LOG_FILE_WEIGHT,
    "max_log_backups": DEFAULT_MAX_LOG_BACKUPS,
    "calendar_rollover": False,
}

# env var -> (config key, parser)
ENV_OVERRIDES: dict[str, tuple[str, type]] = {
    "LOGROLLER_ROLLING_INTERVAL": ("rolling_interval", str),
    "LOGROLLER_MAX_LOG_FILE_WEIGHT": ("max_log_file_weight", int),
    "LOGROLLER_MAX_LOG_BACKUPS": ("max_log_backups", int),
}


def config_path_for(directory: Path) -> Path:
    return directory / CONFIG_DIR / CONFIG_FILE


def get_config_path(start_dir: Path | None = None) -> Path:
    """Nearest .logroller/config.json at or above start_dir.

    Falls back to the location under start_dir when none exists yet.
    """
    start = start_dir or Path.cwd()
    found = (config_path_for(d) for d in (start, *start.parents))
    return next((p for p in found if p.is_file()), config_path_for(start))


def _apply_env_overrides(config: dict) -> dict:
    result = config.copy()
    for var, (key, parser) in ENV_OVERRIDES.items():
        raw = os.environ.get(var, "").strip()
        if not raw:
            continue
        try:
            result[key] = parser(raw)
        except ValueError:
            logger.warning("Ignoring %s=%r: not a valid %s", var, raw, parser.__name__)
    return result


def load_config(start_dir: Path | None = None, path: Path | None = None) -> dict:
    """Load config merged over defaults, then apply environment overrides.

    An explicit ``path`` may be JSON or YAML; otherwise the nearest
    .logroller/config.json above ``start_dir`` is used if there is one.
    """
    if path is not None and not path.exists():
        logger.warning("Config file not found: %s Using defaults.", path)
    config_path = path or get_config_path(start_dir)
    user_config = load_mapping(config_path)
    return _apply_env_overrides(deep_merge(DEFAULT_CONFIG, user_config))


def save_config(config: dict, target_dir: Path | None = None) -> Path:
    """Write config under target_dir (default cwd) and return its path."""
    config_path = config_path_for(target_dir or Path.cwd())
    save_json(config_path, config)
    return config_path


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_config(config: dict) -> list[str]:
    """Validate config, returning list of error messages (empty if valid)."""
    errors = []
    valid_intervals = {i.value for i in RollingInterval}
    interval = config.get("rolling_interval")
    if interval not in valid_intervals:
        errors.append(
            f"Invalid rolling_interval '{interval}' "
            f"(expected one of: {', '.join(sorted(valid_intervals))})"
        )
    weight = config.get("max_log_file_weight")
    if not _is_int(weight) or weight < 0:
        errors.append(f"max_log_file_weight must be a non-negative integer, got {weight!r}")
    backups = config.get("max_log_backups")
    if not _is_int(backups) or backups < 1:
        errors.append(f"max_log_backups must be a positive integer, got {backups!r}")
    if not isinstance(config.get("calendar_rollover", False), bool):
        errors.append("calendar_rollover must be true or false")
    return errors


def policy_from_config(config: dict) -> RollPolicy:
    """Build a RollPolicy, raising ValueError if the config is invalid."""
    errors = validate_config(config)
    if errors:
        raise ValueError("Invalid config: " + "; ".join(errors))
    return RollPolicy(
        rolling_interval=RollingInterval(config["rolling_interval"]),
        max_log_file_weight=config["max_log_file_weight"],
        max_log_backups=config["max_log_backups"],
        calendar_rollover=config.get("calendar_rollover", False),
    )
