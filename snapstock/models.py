"""Data models for stations, scan sessions and their persisted form."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

ScannedData = dict[str, list["ScanSession"]]


@dataclass(frozen=True)
class Station:
    """A physical charging station (reference data, never edited)."""

    id: str
    name: str
    city: str


@dataclass(frozen=True)
class Profile:
    """The station currently bound to this device."""

    station_id: str = ""
    station_name: str = ""

    @property
    def is_active(self) -> bool:
        return bool(self.station_id)

    def to_dict(self) -> dict:
        return {"stationId": self.station_id, "stationName": self.station_name}

    @classmethod
    def from_dict(cls, data: dict) -> Profile:
        return cls(
            station_id=str(data.get("stationId") or ""),
            station_name=str(data.get("stationName") or ""),
        )


@dataclass(frozen=True)
class BatteryEntry:
    battery_id: str  # raw decoded payload
    timestamp: str  # display time, e.g. "02:35 pm"

    def to_dict(self) -> dict:
        return {"batteryId": self.battery_id, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: dict) -> BatteryEntry:
        return cls(
            battery_id=str(data["batteryId"]),
            timestamp=str(data.get("timestamp", "")),
        )


@dataclass(frozen=True)
class InventoryItem:
    name: str
    count: int

    def to_dict(self) -> dict:
        return {"name": self.name, "count": self.count}

    @classmethod
    def from_dict(cls, data: dict) -> InventoryItem:
        count = data.get("count", 0)
        if not isinstance(count, int) or isinstance(count, bool) or count < 0:
            count = 0
        return cls(name=str(data.get("name", "")), count=count)


@dataclass(frozen=True)
class ScanSession:
    """One committed round of counting and scanning. Never mutated."""

    date: str  # ISO-8601 UTC
    timestamp: str  # display time
    items: tuple[InventoryItem, ...] = ()
    entries: tuple[BatteryEntry, ...] = ()

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "timestamp": self.timestamp,
            "items": [i.to_dict() for i in self.items],
            "entries": [e.to_dict() for e in self.entries],
        }

    @classmethod
    def from_dict(cls, data: dict) -> ScanSession:
        # Older records may lack "items" (and occasionally "entries")
        items = data.get("items") or []
        entries = data.get("entries") or []
        return cls(
            date=str(data.get("date", "")),
            timestamp=str(data.get("timestamp", "")),
            items=tuple(
                InventoryItem.from_dict(i) for i in items if isinstance(i, dict)
            ),
            entries=tuple(
                BatteryEntry.from_dict(e)
                for e in entries
                if isinstance(e, dict) and "batteryId" in e
            ),
        )

    def item_count(self, name: str) -> int | None:
        """Count for ``name`` (case-insensitive), or None if not recorded."""
        wanted = name.lower()
        for item in self.items:
            if item.name.lower() == wanted:
                return item.count
        return None


@dataclass
class StationSummary:
    """Dashboard figures for one station."""

    station_id: str
    session_count: int = 0
    unique_batteries: int = 0
    latest_item_count: int = 0
    latest_session: ScanSession | None = field(default=None)


def scanned_data_to_dict(data: ScannedData) -> dict:
    return {
        station_id: [s.to_dict() for s in sessions]
        for station_id, sessions in data.items()
    }


def scanned_data_from_dict(raw: dict) -> ScannedData:
    """Normalize a decoded ``scanned-data`` blob.

    Stations whose value is not a list and sessions that are not objects are
    dropped, so the in-memory model never has optional core fields.
    """
    data: ScannedData = {}
    for station_id, sessions in raw.items():
        if not isinstance(sessions, list):
            continue
        data[str(station_id)] = [
            ScanSession.from_dict(s) for s in sessions if isinstance(s, dict)
        ]
    return data


def iso_timestamp(now: datetime) -> str:
    """Format ``now`` like ``2025-01-10T08:15:30.123Z``."""
    now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def display_time(now: datetime) -> str:
    """Format ``now`` as a short local clock time, e.g. ``02:35 pm``."""
    return now.astimezone().strftime("%I:%M %p").lower()


def parse_iso(value: str) -> datetime | None:
    """Parse an ISO-8601 date string, returning None if it is malformed."""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
