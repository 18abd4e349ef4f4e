"""In-progress scan session: manual item counts and deduplicated battery scans."""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from .config import SessionConfig
from .events import EventListener, NoticeLevel, ScanOutcome
from .exceptions import (
    DuplicateItemError,
    InvalidCountError,
    ItemNotFoundError,
    ValidationError,
)
from .models import (
    BatteryEntry,
    InventoryItem,
    ScanSession,
    display_time,
    iso_timestamp,
)

logger = logging.getLogger(__name__)


class ScanGate(str, enum.Enum):
    """Guard serialising scan-accept decisions."""

    READY = "ready"
    AWAITING_ACK = "awaiting-ack"


@dataclass
class PendingItem:
    """An item whose count is still being entered (``None`` = unset)."""

    name: str
    count: int | None = None


def parse_count(text: str) -> int | None:
    """Convert raw text input to a count. Empty input means unset.

    Raises:
        InvalidCountError: If the text is not a non-negative integer.
    """
    text = text.strip()
    if text == "":
        return None
    try:
        value = int(text)
    except ValueError:
        raise InvalidCountError(text) from None
    if value < 0:
        raise InvalidCountError(value)
    return value


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScanSessionManager:
    """Owns the session in progress until it is finalized or discarded."""

    def __init__(
        self,
        config: SessionConfig | None = None,
        *,
        listener: EventListener | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config or SessionConfig()
        self._listener = listener or EventListener()
        self._clock = clock
        self._items: list[PendingItem] = []
        for name in self._config.default_items:
            name = name.strip()
            if not name or any(i.name.lower() == name.lower() for i in self._items):
                logger.warning("Skipping default item %r", name)
                continue
            self._items.append(PendingItem(name))
        self._entries: list[BatteryEntry] = []
        self._gate = ScanGate.READY
        self._release_handle: asyncio.TimerHandle | None = None
        self.on_ready: Callable[[], object] | None = None

    # -- manual item counts -------------------------------------------------

    @property
    def items(self) -> list[PendingItem]:
        return [PendingItem(i.name, i.count) for i in self._items]

    def _find(self, name: str) -> PendingItem:
        wanted = name.lower()
        for item in self._items:
            if item.name.lower() == wanted:
                return item
        raise ItemNotFoundError(name)

    def add_item(self, name: str) -> None:
        name = name.strip()
        if not name:
            raise ValidationError("Item name must not be empty")
        if any(i.name.lower() == name.lower() for i in self._items):
            self._listener.on_notice(
                NoticeLevel.ERROR, "An item with this name already exists."
            )
            raise DuplicateItemError(name)
        self._items.append(PendingItem(name))

    def set_item_count(self, name: str, count: int | None) -> None:
        if count is not None and (
            not isinstance(count, int) or isinstance(count, bool) or count < 0
        ):
            raise InvalidCountError(count)
        self._find(name).count = count

    def remove_item(self, name: str) -> None:
        self._items.remove(self._find(name))

    def can_start_scanning(self) -> bool:
        """True once every item has a count; gates entry into scanning."""
        return all(i.count is not None and i.count >= 0 for i in self._items)

    # -- battery scans ------------------------------------------------------

    @property
    def entries(self) -> list[BatteryEntry]:
        """Accepted entries, newest first."""
        return list(self._entries)

    @property
    def gate(self) -> ScanGate:
        return self._gate

    @property
    def processing(self) -> bool:
        return self._gate is ScanGate.AWAITING_ACK

    def on_scan_decoded(self, battery_id: str) -> ScanOutcome:
        """Decide whether a decoded payload becomes a new entry.

        Payloads arriving while a previous decision is outstanding are
        dropped. A duplicate releases the gate after the settle delay; an
        accepted entry holds it until :meth:`acknowledge_and_resume`.
        """
        if self._gate is ScanGate.AWAITING_ACK:
            return ScanOutcome.DROPPED

        self._gate = ScanGate.AWAITING_ACK
        now = self._clock()
        entry = BatteryEntry(battery_id=battery_id, timestamp=display_time(now))

        if any(e.battery_id == battery_id for e in self._entries):
            logger.debug("Duplicate scan: %s", battery_id)
            self._listener.on_scan_duplicate(entry)
            self._listener.on_notice(NoticeLevel.INFO, "Battery already scanned.")
            self._release_after_settle()
            return ScanOutcome.DUPLICATE

        self._entries.insert(0, entry)
        logger.info("Battery scanned: %s (%d in session)", battery_id, len(self._entries))
        self._listener.on_scan_accepted(entry)
        return ScanOutcome.ACCEPTED

    def acknowledge_and_resume(self) -> None:
        """Continue scanning after an accept has been confirmed."""
        if self._gate is ScanGate.AWAITING_ACK:
            self._release_after_settle()

    def _release_after_settle(self) -> None:
        if self._release_handle is not None:
            self._release_handle.cancel()
            self._release_handle = None

        delay = self._config.settle_delay
        if delay <= 0:
            self._release()
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Nothing to time the delay with outside an event loop
            logger.debug("No running event loop; releasing scan gate now")
            self._release()
            return
        self._release_handle = loop.call_later(delay, self._release)

    def _release(self) -> None:
        self._release_handle = None
        self._gate = ScanGate.READY
        if self.on_ready is not None:
            self.on_ready()

    def clear_entries(self, *, confirmed: bool) -> bool:
        """Drop every scanned entry. Items are kept.

        Nothing happens unless the caller passes ``confirmed=True``.
        """
        if not confirmed:
            return False
        self._entries.clear()
        self._listener.on_notice(NoticeLevel.INFO, "Session cleared.")
        return True

    # -- completion ---------------------------------------------------------

    def finalize(self) -> ScanSession | None:
        """Snapshot the session, or None if there is nothing worth saving.

        Does not modify the manager's state.
        """
        has_positive_count = any(i.count is not None and i.count > 0 for i in self._items)
        if not self._entries and not has_positive_count:
            return None

        items: list[InventoryItem] = []
        for item in self._items:
            count = item.count
            if count is None:
                if not self._config.coerce_unset_to_zero:
                    continue
                count = 0
            if count >= 0 and item.name != "":
                items.append(InventoryItem(name=item.name, count=count))

        now = self._clock()
        return ScanSession(
            date=iso_timestamp(now),
            timestamp=display_time(now),
            items=tuple(items),
            entries=tuple(self._entries),
        )

    def discard(self) -> None:
        """Throw away the in-progress session (cancellation)."""
        if self._release_handle is not None:
            self._release_handle.cancel()
            self._release_handle = None
        self._entries.clear()
        self._items.clear()
        self._gate = ScanGate.READY
