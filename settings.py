"""JSON-based settings for the year progress server."""

import json
import logging
import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

log = logging.getLogger(__name__)

SETTINGS_ENV = "YEAR_PROGRESS_SETTINGS"

_DEFAULTS = {
    "host": "127.0.0.1",
    "port": 8000,
    "default_width": 1170,
    "default_height": 2532,
    "max_dimension": 10000,
    "timezone": None,
    "font_regular": None,
    "font_italic": None,
    "log_level": "INFO",
}

_INT_KEYS = ("port", "default_width", "default_height", "max_dimension")
_STR_KEYS = ("host", "log_level")
_OPTIONAL_STR_KEYS = ("timezone", "font_regular", "font_italic")


def settings_path() -> str:
    """Return the settings file path ($YEAR_PROGRESS_SETTINGS or ~/.year-progress-settings.json)."""
    return os.environ.get(SETTINGS_ENV) or os.path.join(
        os.path.expanduser("~"), ".year-progress-settings.json")


def default_settings() -> dict:
    return dict(_DEFAULTS)


def _valid_timezone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def load_settings(path: str | None = None) -> dict:
    """Load settings from disk, returning defaults for missing or invalid keys."""
    settings = default_settings()
    path = path or settings_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except FileNotFoundError:
        return settings
    except (json.JSONDecodeError, OSError) as exc:
        log.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return settings
    if not isinstance(stored, dict):
        log.warning("Ignoring settings file %s: top level is not an object", path)
        return settings

    for key in _INT_KEYS:
        # bool is an int subclass; reject it explicitly
        if isinstance(stored.get(key), int) and not isinstance(stored[key], bool) and stored[key] > 0:
            settings[key] = stored[key]
    for key in _STR_KEYS:
        if isinstance(stored.get(key), str) and stored[key]:
            settings[key] = stored[key]
    for key in _OPTIONAL_STR_KEYS:
        if key in stored and (stored[key] is None or isinstance(stored[key], str)):
            settings[key] = stored[key] or None

    if settings["timezone"] and not _valid_timezone(settings["timezone"]):
        log.warning("Unknown timezone %r in %s, using the local zone", settings["timezone"], path)
        settings["timezone"] = None
    return settings


def save_settings(settings: dict, path: str | None = None) -> None:
    """Persist settings to disk."""
    with open(path or settings_path(), "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)
