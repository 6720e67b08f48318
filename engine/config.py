"""Lightweight loader for planner configuration values."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "planner.json"
_CONFIG_DATA: Dict[str, Any] = {}
_LOADED = False


def _load() -> Dict[str, Any]:
    try:
        with _CONFIG_PATH.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", _CONFIG_PATH, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("config %s is not a JSON object; using defaults", _CONFIG_PATH)
        return {}
    return data


def _ensure_loaded() -> None:
    global _CONFIG_DATA, _LOADED
    if not _LOADED:
        _CONFIG_DATA = _load()
        _LOADED = True


def reload() -> None:
    """Drop the cached config so the next lookup re-reads the file."""
    global _CONFIG_DATA, _LOADED
    _CONFIG_DATA = {}
    _LOADED = False


def get(path: str, default: Any = None) -> Any:
    """Return a config value using dotted paths, or default when missing."""
    _ensure_loaded()
    if not path:
        return _CONFIG_DATA

    current: Any = _CONFIG_DATA
    for segment in path.split('.'):
        if isinstance(current, dict) and segment in current:
            current = current[segment]
        else:
            return default
    return current
