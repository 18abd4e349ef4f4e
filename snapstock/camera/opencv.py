"""USB/built-in camera QR scanning using OpenCV."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from ..exceptions import (
    CameraError,
    CameraStartError,
    CodeNotFoundError,
    TorchUnsupportedError,
)
from . import (
    CameraDevice,
    DecodeCallback,
    DecodeErrorCallback,
    DeviceCapabilities,
    ScanRegion,
    StillImage,
)

logger = logging.getLogger(__name__)


def _import_cv2():
    try:
        import cv2
    except ImportError:
        raise ImportError(
            "opencv-python is required: pip install opencv-python"
        ) from None
    return cv2


class OpenCVCameraDevice(CameraDevice):
    """Read frames from a local camera and decode QR codes in a centred region.

    OpenCV exposes no portable flashlight control, so torch is reported as
    unsupported.
    """

    def __init__(self, camera_index: int = 0) -> None:
        self._camera_index = camera_index
        self._cap = None
        self._detector = None
        self._task: asyncio.Task | None = None
        self._running = False
        self._paused = False

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(
        self,
        constraints: dict,
        scan_region: ScanRegion,
        on_decode: DecodeCallback,
        on_decode_error: DecodeErrorCallback,
    ) -> None:
        if self._running:
            raise CameraStartError("Camera is already running")

        cv2 = _import_cv2()
        index = constraints.get("index", self._camera_index)

        cap = await asyncio.to_thread(cv2.VideoCapture, index)
        if not cap.isOpened():
            cap.release()
            raise CameraStartError(
                f"Could not open camera {index}. "
                f"Check that it is connected and not in use."
            )

        self._cap = cap
        self._detector = cv2.QRCodeDetector()
        self._running = True
        self._paused = False
        self._task = asyncio.create_task(
            self._decode_loop(scan_region, on_decode, on_decode_error)
        )
        logger.info("Camera %d opened", index)

    async def stop(self) -> None:
        if not self._running and self._cap is None:
            return
        self._running = False
        task, self._task = self._task, None
        cap, self._cap = self._cap, None
        self._detector = None
        try:
            if task is not None:
                # The loop checks _running once per frame
                await task
        except Exception:
            logger.exception("Decode loop ended with an error")
        finally:
            if cap is not None:
                await asyncio.to_thread(cap.release)
            logger.info("Camera released")

    def pause(self, keep_last_frame: bool = True) -> None:
        if self._running:
            self._paused = True

    def resume(self) -> None:
        if self._running:
            self._paused = False

    def get_capabilities(self) -> DeviceCapabilities:
        return DeviceCapabilities(torch=False)

    async def apply_constraint(self, constraint: dict) -> None:
        if "torch" in constraint:
            raise TorchUnsupportedError("OpenCV cameras have no torch control")
        raise CameraError(f"Unsupported constraint: {constraint!r}")

    async def decode_still_image(self, image: StillImage) -> str:
        cv2 = _import_cv2()

        if isinstance(image, bytes):
            try:
                import numpy as np
            except ImportError:
                raise ImportError("numpy is required: pip install numpy") from None
            buf = np.frombuffer(image, dtype=np.uint8)
            frame = await asyncio.to_thread(cv2.imdecode, buf, cv2.IMREAD_COLOR)
        else:
            frame = await asyncio.to_thread(cv2.imread, str(Path(image)))

        if frame is None:
            raise CodeNotFoundError("Image could not be read")

        detector = cv2.QRCodeDetector()
        text, _points, _ = await asyncio.to_thread(detector.detectAndDecode, frame)
        if not text:
            raise CodeNotFoundError("No QR code found in image")
        return text

    async def _decode_loop(
        self,
        region: ScanRegion,
        on_decode: DecodeCallback,
        on_decode_error: DecodeErrorCallback,
    ) -> None:
        interval = 1.0 / max(region.fps, 1)
        while self._running:
            try:
                ok, frame = await asyncio.to_thread(self._cap.read)
            except Exception as e:
                ok, frame = False, None
                logger.warning("Frame read failed: %s", e)
            if not self._running:
                break
            if not ok or frame is None:
                on_decode_error(CameraError("Could not read a frame"))
            elif not self._paused:
                try:
                    text, _points, _ = self._detector.detectAndDecode(
                        _crop_center(frame, region)
                    )
                except Exception as e:
                    on_decode_error(e)
                else:
                    if text:
                        try:
                            on_decode(text)
                        except Exception as e:
                            logger.exception("Decode callback failed for %r", text)
                            on_decode_error(e)
            await asyncio.sleep(interval)


def _crop_center(frame, region: ScanRegion):
    """Return the centred ``region`` of ``frame`` (clamped to the frame)."""
    height, width = frame.shape[:2]
    w = min(region.width, width)
    h = min(region.height, height)
    x = (width - w) // 2
    y = (height - h) // 2
    return frame[y : y + h, x : x + w]
