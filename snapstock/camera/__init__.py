"""Camera driver contract, data types, and factory."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import SnapStockConfig

StillImage = str | Path | bytes
DecodeCallback = Callable[[str], None]
DecodeErrorCallback = Callable[[Exception], None]


@dataclass(frozen=True)
class ScanRegion:
    width: int
    height: int
    fps: int


@dataclass(frozen=True)
class DeviceCapabilities:
    torch: bool = False


class CameraDevice(ABC):
    """Abstract scanning device (camera + QR decoder)."""

    @abstractmethod
    async def start(
        self,
        constraints: dict,
        scan_region: ScanRegion,
        on_decode: DecodeCallback,
        on_decode_error: DecodeErrorCallback,
    ) -> None:
        """Acquire the device and begin delivering decoded payloads.

        Decode callbacks must be delivered one at a time.

        Raises:
            CameraStartError: If the device cannot be acquired.
        """
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Release the device. A no-op when not running."""
        ...

    @abstractmethod
    def pause(self, keep_last_frame: bool = True) -> None: ...

    @abstractmethod
    def resume(self) -> None: ...

    @abstractmethod
    def get_capabilities(self) -> DeviceCapabilities: ...

    @abstractmethod
    async def apply_constraint(self, constraint: dict) -> None:
        """Apply a live constraint such as ``{"torch": True}``."""
        ...

    @abstractmethod
    async def decode_still_image(self, image: StillImage) -> str:
        """Decode a QR code from a still image file path or encoded bytes.

        Raises:
            CodeNotFoundError: If no code could be decoded.
        """
        ...


def create_device(config: SnapStockConfig) -> CameraDevice:
    """Create a camera device based on configuration."""
    backend_name = config.camera.backend

    match backend_name:
        case "opencv":
            from .opencv import OpenCVCameraDevice

            return OpenCVCameraDevice(camera_index=config.camera.index)
        case _:
            raise ValueError(
                f"Unknown camera backend: {backend_name!r} (choose: opencv)"
            )
