"""Tests for AppState wiring and persistence across restarts."""

from snapstock.app import AppState
from snapstock.camera.opencv import OpenCVCameraDevice
from snapstock.config import SnapStockConfig, StorageConfig
from snapstock.db import SCANNED_DATA_KEY
from snapstock.flow import ScanningFlow
from snapstock.models import BatteryEntry, InventoryItem, ScanSession


def make_config(tmp_path):
    return SnapStockConfig(storage=StorageConfig(db_path=str(tmp_path / "app.db")))


def make_session(date, *battery_ids):
    return ScanSession(
        date=date,
        timestamp="09:00 am",
        items=(InventoryItem("Chargers", 3),),
        entries=tuple(BatteryEntry(b, "09:00 am") for b in battery_ids),
    )


def test_fresh_install(tmp_path):
    with AppState.open(make_config(tmp_path)) as app:
        assert app.theme == "light"
        assert app.profile.is_active is False
        assert app.dashboard() is None
        assert app.history_sessions() == []


def test_state_survives_restart(tmp_path):
    config = make_config(tmp_path)
    with AppState.open(config) as app:
        app.toggle_theme()
        app.select_station("De963991")
        app.history.commit("De963991", make_session("2025-01-10T08:00:00.000Z", "A", "B"))
        app.history.commit("De963991", make_session("2025-01-11T08:00:00.000Z", "B", "C"))

    with AppState.open(config) as app:
        assert app.theme == "dark"
        assert app.profile.station_name == "Hallo Majra"
        summary = app.dashboard()
        assert summary.unique_batteries == 3
        assert summary.latest_item_count == 3
        assert summary.session_count == 2
        assert [s.date for s in app.history_sessions()] == [
            "2025-01-11T08:00:00.000Z",
            "2025-01-10T08:00:00.000Z",
        ]


def test_corrupt_history_is_reset_on_open(tmp_path):
    config = make_config(tmp_path)
    with AppState.open(config) as app:
        app.kv.set(SCANNED_DATA_KEY, "not json at all")

    with AppState.open(config) as app:
        assert app.history.snapshot() == {}
        assert app.kv.get(SCANNED_DATA_KEY) is None


def test_new_flow_uses_configured_device(tmp_path):
    with AppState.open(make_config(tmp_path)) as app:
        flow = app.new_flow()
        assert isinstance(flow, ScanningFlow)
        assert isinstance(flow.camera.device, OpenCVCameraDevice)
        assert [i.name for i in flow.session.items] == ["Chargers"]
