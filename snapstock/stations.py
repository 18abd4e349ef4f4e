"""Station reference data."""

from __future__ import annotations

from .exceptions import UnknownStationError
from .models import Station

STATIONS: tuple[Station, ...] = (
    Station(id="De963991", name="Hallo Majra", city="Chandigarh"),
    Station(id="De425627", name="Raipur Khurd", city="Chandigarh"),
    Station(id="De988915", name="Sector 42", city="Chandigarh"),
    Station(id="De316535", name="Maloya", city="Chandigarh"),
    Station(id="De337282", name="Daria", city="Chandigarh"),
    Station(id="De258797", name="Sector 20", city="Chandigarh"),
    Station(id="De455892", name="Sector 35", city="Chandigarh"),
    Station(id="De297974", name="Sector 26", city="Chandigarh"),
)


def list_stations() -> list[Station]:
    return list(STATIONS)


def get_station(station_id: str) -> Station:
    """Look up a station by id.

    Raises:
        UnknownStationError: If no station has that id.
    """
    for station in STATIONS:
        if station.id == station_id:
            return station
    raise UnknownStationError(station_id)
