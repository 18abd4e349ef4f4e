"""SQLite-backed persistence for settings and scan history."""

from .history import HistoryStore
from .kv import PROFILE_KEY, SCANNED_DATA_KEY, THEME_KEY, KeyValueStore
from .schema import ensure_schema
from .settings import SettingsStore

__all__ = [
    "HistoryStore",
    "KeyValueStore",
    "SettingsStore",
    "ensure_schema",
    "PROFILE_KEY",
    "SCANNED_DATA_KEY",
    "THEME_KEY",
]
