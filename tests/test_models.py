"""Tests for data models, serialisation and station reference data."""

from datetime import datetime, timedelta, timezone

import pytest

from snapstock.exceptions import UnknownStationError
from snapstock.models import (
    BatteryEntry,
    InventoryItem,
    Profile,
    ScanSession,
    display_time,
    iso_timestamp,
    parse_iso,
    scanned_data_from_dict,
    scanned_data_to_dict,
)
from snapstock.stations import get_station, list_stations


class TestScanSession:
    def test_to_dict_uses_stored_field_names(self):
        session = ScanSession(
            date="2025-01-10T08:00:00.000Z",
            timestamp="01:30 pm",
            items=(InventoryItem("Chargers", 3),),
            entries=(BatteryEntry("BAT-001", "01:30 pm"),),
        )
        assert session.to_dict() == {
            "date": "2025-01-10T08:00:00.000Z",
            "timestamp": "01:30 pm",
            "items": [{"name": "Chargers", "count": 3}],
            "entries": [{"batteryId": "BAT-001", "timestamp": "01:30 pm"}],
        }

    def test_from_dict_missing_items(self):
        session = ScanSession.from_dict({"date": "2025-01-10", "entries": []})
        assert session.items == ()
        assert session.entries == ()
        assert session.timestamp == ""

    def test_from_dict_bad_counts_become_zero(self):
        session = ScanSession.from_dict({
            "date": "2025-01-10",
            "items": [
                {"name": "Chargers", "count": "7"},
                {"name": "Cables", "count": -2},
                {"name": "Racks", "count": True},
            ],
        })
        assert [i.count for i in session.items] == [0, 0, 0]

    def test_item_count_case_insensitive(self):
        session = ScanSession(
            date="d", timestamp="t", items=(InventoryItem("Chargers", 5),)
        )
        assert session.item_count("chargers") == 5
        assert session.item_count("cables") is None

    def test_scanned_data_round_trip(self):
        data = {
            "S1": [
                ScanSession(
                    date="2025-01-10T08:00:00.000Z",
                    timestamp="01:30 pm",
                    items=(InventoryItem("Chargers", 3),),
                    entries=(BatteryEntry("A", "01:30 pm"), BatteryEntry("B", "01:31 pm")),
                )
            ],
            "S2": [],
        }
        assert scanned_data_from_dict(scanned_data_to_dict(data)) == data


class TestProfile:
    def test_from_dict(self):
        profile = Profile.from_dict({"stationId": "De963991", "stationName": "Hallo Majra"})
        assert profile.is_active
        assert profile.to_dict() == {"stationId": "De963991", "stationName": "Hallo Majra"}

    def test_from_dict_missing_fields(self):
        assert Profile.from_dict({}) == Profile()


class TestTimestamps:
    def test_iso_timestamp_millis_and_z(self):
        now = datetime(2025, 1, 10, 8, 15, 30, 123456, tzinfo=timezone.utc)
        assert iso_timestamp(now) == "2025-01-10T08:15:30.123Z"

    def test_iso_timestamp_converts_to_utc(self):
        ist = timezone(timedelta(hours=5, minutes=30))
        now = datetime(2025, 1, 10, 13, 45, 0, tzinfo=ist)
        assert iso_timestamp(now) == "2025-01-10T08:15:00.000Z"

    def test_parse_iso(self):
        parsed = parse_iso("2025-01-10T08:15:30.123Z")
        assert parsed == datetime(2025, 1, 10, 8, 15, 30, 123000, tzinfo=timezone.utc)
        assert parse_iso("yesterday") is None
        assert parse_iso("") is None

    def test_display_time_format(self):
        text = display_time(datetime(2025, 1, 10, 8, 15, tzinfo=timezone.utc))
        hours, rest = text.split(":")
        assert len(hours) == 2
        assert rest[-2:] in ("am", "pm")


class TestStations:
    def test_list_stations(self):
        stations = list_stations()
        assert len(stations) == 8
        assert all(s.city == "Chandigarh" for s in stations)

    def test_get_station(self):
        assert get_station("De455892").name == "Sector 35"

    def test_get_unknown_station(self):
        with pytest.raises(UnknownStationError):
            get_station("missing")
