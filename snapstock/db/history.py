"""Append-only, per-station history of committed scan sessions."""

from __future__ import annotations

import json
import logging

from ..events import EventListener, StoreErrorKind
from ..exceptions import NoActiveStationError
from ..models import (
    ScannedData,
    ScanSession,
    scanned_data_from_dict,
    scanned_data_to_dict,
)
from .kv import SCANNED_DATA_KEY, KeyValueStore

logger = logging.getLogger(__name__)


class HistoryStore:
    """Owns the ``scanned-data`` entry: station id → sessions, newest first.

    :meth:`commit` is the only write path; there is no update or delete.
    """

    def __init__(self, kv: KeyValueStore, *, listener: EventListener | None = None) -> None:
        self._kv = kv
        self._listener = listener or EventListener()
        self._data: ScannedData = {}

    def load(self) -> None:
        """Read the persisted history, discarding it if it is malformed."""
        blob = self._kv.get(SCANNED_DATA_KEY)
        if blob is None:
            self._data = {}
            return
        try:
            raw = json.loads(blob)
            if not isinstance(raw, dict):
                raise TypeError(f"expected an object, got {type(raw).__name__}")
            self._data = scanned_data_from_dict(raw)
        except (json.JSONDecodeError, TypeError, KeyError) as e:
            logger.warning("Discarding unreadable %s: %s", SCANNED_DATA_KEY, e)
            self._kv.remove(SCANNED_DATA_KEY)
            self._data = {}
            self._listener.on_store_error(StoreErrorKind.CORRUPT)
            return
        logger.info(
            "Loaded history for %d station(s), %d session(s)",
            len(self._data),
            sum(len(s) for s in self._data.values()),
        )

    def flush(self) -> None:
        """Write the whole store through to persistence."""
        blob = json.dumps(scanned_data_to_dict(self._data), ensure_ascii=False)
        self._kv.set(SCANNED_DATA_KEY, blob)

    def commit(self, station_id: str, session: ScanSession) -> None:
        """Prepend ``session`` to the station's history and persist it.

        Raises:
            NoActiveStationError: If ``station_id`` is empty.
        """
        if not station_id:
            raise NoActiveStationError("Cannot save, profile not set.")

        previous = self._data.get(station_id)
        self._data[station_id] = [session, *(previous or [])]
        try:
            self.flush()
        except Exception:
            # Keep memory and disk in step
            if previous is None:
                del self._data[station_id]
            else:
                self._data[station_id] = previous
            raise

        logger.info(
            "Committed session %s for station %s (%d entries)",
            session.date,
            station_id,
            len(session.entries),
        )
        self._listener.on_session_committed(station_id, session)

    def sessions_for(self, station_id: str) -> list[ScanSession]:
        return list(self._data.get(station_id, []))

    def stations(self) -> list[str]:
        return list(self._data)

    def snapshot(self) -> ScannedData:
        """Copy of the store for read-only queries."""
        return {k: list(v) for k, v in self._data.items()}
