"""Reading and writing config mappings on disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def load_mapping(path: Path) -> dict:
    """Read a JSON or YAML mapping, chosen by suffix.

    Missing files give an empty dict silently; unparsable files or files
    whose top level is not a mapping give an empty dict and a warning.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    try:
        data = yaml.safe_load(text) if path.suffix in YAML_SUFFIXES else json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Expected a mapping at the top of %s, got %s", path, type(data).__name__)
        return {}
    return data


def save_json(path: Path, data: dict) -> None:
    """Write data as indented JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def deep_merge(base: dict, override: dict) -> dict:
    """Return a copy of base with override layered on top; nested dicts merge."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = deep_merge(current, value)
        merged[key] = value
    return merged
