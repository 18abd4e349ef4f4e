"""Tests for SettingsStore (theme and station profile)."""

import json
from unittest.mock import MagicMock

import pytest

from snapstock.db import PROFILE_KEY, THEME_KEY, KeyValueStore, SettingsStore
from snapstock.events import StoreErrorKind
from snapstock.exceptions import UnknownStationError
from snapstock.models import Profile


@pytest.fixture
def kv(tmp_path):
    store = KeyValueStore(db_path=tmp_path / "test.db")
    yield store
    store.close()


@pytest.fixture
def settings(kv):
    store = SettingsStore(kv)
    store.load()
    return store


def test_defaults(settings):
    assert settings.theme == "light"
    assert settings.profile == Profile()
    assert settings.profile.is_active is False


def test_toggle_theme_persists(settings, kv):
    assert settings.toggle_theme() == "dark"
    assert kv.get(THEME_KEY) == "dark"
    assert settings.toggle_theme() == "light"
    assert kv.get(THEME_KEY) == "light"


def test_set_theme_rejects_unknown(settings, kv):
    with pytest.raises(ValueError, match="Unknown theme"):
        settings.set_theme("sepia")
    assert kv.get(THEME_KEY) is None


def test_unknown_stored_theme_falls_back(kv):
    kv.set(THEME_KEY, "neon")
    store = SettingsStore(kv)
    store.load()
    assert store.theme == "light"


def test_select_station(settings, kv):
    profile = settings.select_station("De988915")

    assert profile == Profile(station_id="De988915", station_name="Sector 42")
    assert json.loads(kv.get(PROFILE_KEY)) == {
        "stationId": "De988915",
        "stationName": "Sector 42",
    }


def test_select_unknown_station(settings, kv):
    with pytest.raises(UnknownStationError):
        settings.select_station("Nope")
    assert kv.get(PROFILE_KEY) is None


def test_profile_survives_reload(settings, kv):
    settings.select_station("De316535")

    reloaded = SettingsStore(kv)
    reloaded.load()
    assert reloaded.profile.station_name == "Maloya"


def test_corrupt_profile_is_discarded(kv):
    kv.set(PROFILE_KEY, "{{{")
    listener = MagicMock()
    store = SettingsStore(kv, listener=listener)
    store.load()

    assert store.profile == Profile()
    assert kv.get(PROFILE_KEY) is None
    listener.on_store_error.assert_called_once_with(StoreErrorKind.CORRUPT)
