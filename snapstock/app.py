"""Application state shared by every component of a running app."""

from __future__ import annotations

from .aggregator import sorted_history, station_summary
from .camera import CameraDevice, create_device
from .config import SnapStockConfig, load_config
from .db import HistoryStore, KeyValueStore, SettingsStore
from .events import EventListener
from .flow import ScanningFlow
from .models import Profile, ScanSession, StationSummary


class AppState:
    """Explicit handle to config, persisted stores and the event listener.

    Components receive this object instead of looking anything up globally.
    """

    def __init__(
        self,
        config: SnapStockConfig,
        kv: KeyValueStore,
        *,
        listener: EventListener | None = None,
    ) -> None:
        self.config = config
        self.listener = listener or EventListener()
        self.kv = kv
        self.settings = SettingsStore(kv, listener=self.listener)
        self.history = HistoryStore(kv, listener=self.listener)

    @classmethod
    def open(
        cls,
        config: SnapStockConfig | None = None,
        *,
        listener: EventListener | None = None,
    ) -> AppState:
        """Open the configured database and load persisted state."""
        config = config or load_config()
        app = cls(config, KeyValueStore(config.storage.db_path), listener=listener)
        app.load()
        return app

    def load(self) -> None:
        self.settings.load()
        self.history.load()

    def close(self) -> None:
        self.kv.close()

    def __enter__(self) -> AppState:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @property
    def profile(self) -> Profile:
        return self.settings.profile

    @property
    def theme(self) -> str:
        return self.settings.theme

    def toggle_theme(self) -> str:
        return self.settings.toggle_theme()

    def select_station(self, station_id: str) -> Profile:
        return self.settings.select_station(station_id)

    def dashboard(self) -> StationSummary | None:
        """Figures for the active station, or None without a profile."""
        if not self.profile.is_active:
            return None
        return station_summary(
            self.history.snapshot(),
            self.profile.station_id,
            self.config.session.dashboard_item,
        )

    def history_sessions(self) -> list[ScanSession]:
        if not self.profile.is_active:
            return []
        return sorted_history(self.history.snapshot(), self.profile.station_id)

    def new_flow(self, device: CameraDevice | None = None) -> ScanningFlow:
        return ScanningFlow(self, device or create_device(self.config))
