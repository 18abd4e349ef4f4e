"""Persisted device settings: colour theme and the active station profile."""

from __future__ import annotations

import json
import logging

from ..events import EventListener, StoreErrorKind
from ..models import Profile
from ..stations import get_station
from .kv import PROFILE_KEY, THEME_KEY, KeyValueStore

logger = logging.getLogger(__name__)

THEMES = ("light", "dark")


class SettingsStore:
    """Manages ``app-theme`` and ``app-profile``."""

    def __init__(self, kv: KeyValueStore, *, listener: EventListener | None = None) -> None:
        self._kv = kv
        self._listener = listener or EventListener()
        self._theme = "light"
        self._profile = Profile()

    def load(self) -> None:
        theme = self._kv.get(THEME_KEY)
        self._theme = theme if theme in THEMES else "light"

        blob = self._kv.get(PROFILE_KEY)
        self._profile = Profile()
        if blob is None:
            return
        try:
            raw = json.loads(blob)
            if not isinstance(raw, dict):
                raise TypeError(f"expected an object, got {type(raw).__name__}")
            self._profile = Profile.from_dict(raw)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning("Discarding unreadable %s: %s", PROFILE_KEY, e)
            self._kv.remove(PROFILE_KEY)
            self._listener.on_store_error(StoreErrorKind.CORRUPT)

    @property
    def theme(self) -> str:
        return self._theme

    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme!r} (choose: light / dark)")
        self._theme = theme
        self._kv.set(THEME_KEY, theme)

    def toggle_theme(self) -> str:
        self.set_theme("dark" if self._theme == "light" else "light")
        return self._theme

    @property
    def profile(self) -> Profile:
        return self._profile

    def update_profile(self, profile: Profile) -> None:
        self._kv.set(PROFILE_KEY, json.dumps(profile.to_dict(), ensure_ascii=False))
        self._profile = profile
        logger.info("Active station set to %s", profile.station_id or "(none)")

    def select_station(self, station_id: str) -> Profile:
        """Bind this device to a known station.

        Raises:
            UnknownStationError: If the id is not in the reference data.
        """
        station = get_station(station_id)
        profile = Profile(station_id=station.id, station_name=station.name)
        self.update_profile(profile)
        return profile
