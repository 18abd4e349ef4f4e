"""Dashboard queries over a history snapshot.

All functions are pure and recompute from the full history on every call.
"""

from __future__ import annotations

from datetime import datetime, timezone

from .models import ScannedData, ScanSession, StationSummary, parse_iso

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _date_key(session: ScanSession) -> datetime:
    # Unparsable dates sort as oldest
    return parse_iso(session.date) or _EPOCH


def sorted_history(data: ScannedData, station_id: str) -> list[ScanSession]:
    """Sessions for a station, newest first by ``date``."""
    return sorted(data.get(station_id, []), key=_date_key, reverse=True)


def latest_session(data: ScannedData, station_id: str) -> ScanSession | None:
    sessions = data.get(station_id, [])
    if not sessions:
        return None
    return max(sessions, key=_date_key)


def unique_battery_count(data: ScannedData, station_id: str) -> int:
    """Distinct battery ids across every session of the station."""
    return len(
        {
            entry.battery_id
            for session in data.get(station_id, [])
            for entry in session.entries
        }
    )


def latest_item_count(data: ScannedData, station_id: str, item_name: str) -> int:
    session = latest_session(data, station_id)
    if session is None:
        return 0
    count = session.item_count(item_name)
    return count if count is not None else 0


def station_summary(
    data: ScannedData, station_id: str, item_name: str = "Chargers"
) -> StationSummary:
    return StationSummary(
        station_id=station_id,
        session_count=len(data.get(station_id, [])),
        unique_batteries=unique_battery_count(data, station_id),
        latest_item_count=latest_item_count(data, station_id, item_name),
        latest_session=latest_session(data, station_id),
    )
