"""Exception hierarchy for snapstock."""

from __future__ import annotations


class SnapStockError(Exception):
    """Base exception for all snapstock errors."""


class ValidationError(SnapStockError):
    """Input rejected at the call boundary; the operation had no effect."""


class DuplicateItemError(ValidationError):
    """An inventory item with the same (case-insensitive) name exists."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"An item named {name!r} already exists")


class ItemNotFoundError(ValidationError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No item named {name!r}")


class InvalidCountError(ValidationError):
    """Counts must be non-negative integers or unset."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid item count: {value!r}")


class IncompleteCountsError(ValidationError):
    """Scanning was requested before every item had a count."""


class UnknownStationError(ValidationError):
    def __init__(self, station_id: str) -> None:
        self.station_id = station_id
        super().__init__(f"Unknown station: {station_id!r}")


class NoActiveStationError(SnapStockError):
    """No station is bound to this device; sessions cannot be saved."""


class CameraError(SnapStockError):
    """Camera device failure."""


class CameraStartError(CameraError):
    """The device could not be acquired (permission denied, missing, busy)."""


class TorchUnsupportedError(CameraError):
    """The running device has no controllable flashlight."""


class CodeNotFoundError(SnapStockError):
    """No QR code could be decoded from a still image."""
