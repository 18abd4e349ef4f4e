"""TOML configuration loader for the scanning engine."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class CameraConfig:
    backend: str = "opencv"
    index: int = 0
    facing_mode: str = "environment"
    fps: int = 10
    scan_region: int = 220  # square decode region, px


@dataclass
class SessionConfig:
    settle_delay: float = 0.1  # seconds
    default_items: list[str] = field(default_factory=lambda: ["Chargers"])
    coerce_unset_to_zero: bool = True
    dashboard_item: str = "Chargers"


@dataclass
class StorageConfig:
    db_path: str = "~/.config/snapstock/snapstock.db"


@dataclass
class SnapStockConfig:
    camera: CameraConfig = field(default_factory=CameraConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)


def load_config(path: str | Path | None = None) -> SnapStockConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    The database path can be overridden via SNAPSTOCK_DB_PATH.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    cam = raw.get("camera", {})
    ses = raw.get("session", {})
    sto = raw.get("storage", {})

    # Resolve database path: config file → environment variable → default
    db_path = (
        sto.get("db_path", "")
        or os.environ.get("SNAPSTOCK_DB_PATH", "")
        or StorageConfig().db_path
    )

    return SnapStockConfig(
        camera=CameraConfig(
            backend=cam.get("backend", "opencv"),
            index=cam.get("index", 0),
            facing_mode=cam.get("facing_mode", "environment"),
            fps=cam.get("fps", 10),
            scan_region=cam.get("scan_region", 220),
        ),
        session=SessionConfig(
            settle_delay=ses.get("settle_delay", 0.1),
            default_items=_check_items(ses.get("default_items", ["Chargers"])),
            coerce_unset_to_zero=ses.get("coerce_unset_to_zero", True),
            dashboard_item=ses.get("dashboard_item", "Chargers"),
        ),
        storage=StorageConfig(db_path=db_path),
    )


def _check_items(names: list[str]) -> list[str]:
    seen: set[str] = set()
    for name in names:
        key = name.strip().lower()
        if not key:
            raise ValueError("session.default_items must not contain empty names")
        if key in seen:
            raise ValueError(f"Duplicate item in session.default_items: {name!r}")
        seen.add(key)
    return list(names)
