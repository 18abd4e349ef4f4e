"""State enumerations and the outward notification interface."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import BatteryEntry, ScanSession


class CameraState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SCANNING = "scanning"
    PAUSED = "paused"
    ERROR = "error"


class ScanOutcome(str, enum.Enum):
    ACCEPTED = "accepted"
    DUPLICATE = "duplicate"
    DROPPED = "dropped"  # arrived while a previous decision was outstanding


class StoreErrorKind(str, enum.Enum):
    CORRUPT = "corrupt"


class NoticeLevel(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class EventListener:
    """Receives notifications from the scanning engine.

    Every method is a no-op; the view layer overrides what it renders.
    """

    def on_scan_accepted(self, entry: BatteryEntry) -> None:
        pass

    def on_scan_duplicate(self, entry: BatteryEntry) -> None:
        pass

    def on_camera_state_changed(self, state: CameraState) -> None:
        pass

    def on_session_committed(self, station_id: str, session: ScanSession) -> None:
        pass

    def on_store_error(self, kind: StoreErrorKind) -> None:
        pass

    def on_notice(self, level: NoticeLevel, message: str) -> None:
        pass
