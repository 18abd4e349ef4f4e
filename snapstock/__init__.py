"""Battery inventory scanning engine for charging stations."""

from .app import AppState
from .camera import CameraDevice, DeviceCapabilities, ScanRegion, create_device
from .camera.controller import CameraController
from .config import (
    CameraConfig,
    SessionConfig,
    SnapStockConfig,
    StorageConfig,
    load_config,
)
from .db import HistoryStore, KeyValueStore, SettingsStore
from .events import CameraState, EventListener, NoticeLevel, ScanOutcome, StoreErrorKind
from .flow import FlowStage, ScanningFlow
from .models import (
    BatteryEntry,
    InventoryItem,
    Profile,
    ScanSession,
    Station,
    StationSummary,
)
from .session import ScanGate, ScanSessionManager, parse_count
from .stations import get_station, list_stations

__all__ = [
    "AppState",
    "CameraController",
    "CameraDevice",
    "DeviceCapabilities",
    "ScanRegion",
    "create_device",
    "CameraConfig",
    "SessionConfig",
    "SnapStockConfig",
    "StorageConfig",
    "load_config",
    "HistoryStore",
    "KeyValueStore",
    "SettingsStore",
    "CameraState",
    "EventListener",
    "NoticeLevel",
    "ScanOutcome",
    "StoreErrorKind",
    "FlowStage",
    "ScanningFlow",
    "BatteryEntry",
    "InventoryItem",
    "Profile",
    "ScanSession",
    "Station",
    "StationSummary",
    "ScanGate",
    "ScanSessionManager",
    "parse_count",
    "get_station",
    "list_stations",
]
