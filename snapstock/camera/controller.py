"""Camera lifecycle state machine."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncIterator, Callable

from ..config import CameraConfig
from ..events import CameraState, EventListener, NoticeLevel
from ..exceptions import CameraStartError, CodeNotFoundError, TorchUnsupportedError
from . import CameraDevice, ScanRegion, StillImage

logger = logging.getLogger(__name__)


class CameraController:
    """Owns a :class:`CameraDevice` and exposes its lifecycle as states.

    ``idle → loading → scanning → {paused, error}``; ``scanning``/``paused``
    return to ``idle`` on :meth:`stop`. Every successful :meth:`start` must be
    matched by a :meth:`stop`; :meth:`running` guarantees that.
    """

    def __init__(
        self,
        device: CameraDevice,
        on_decoded: Callable[[str], object],
        *,
        config: CameraConfig | None = None,
        listener: EventListener | None = None,
    ) -> None:
        self._device = device
        self._on_decoded = on_decoded
        self._config = config or CameraConfig()
        self._listener = listener or EventListener()
        self._state = CameraState.IDLE
        self._torch_supported = False
        self._torch_on = False
        self._stop_requested = False

    @property
    def device(self) -> CameraDevice:
        return self._device

    @property
    def state(self) -> CameraState:
        return self._state

    @property
    def torch_supported(self) -> bool:
        return self._torch_supported

    @property
    def torch_on(self) -> bool:
        return self._torch_on

    def _set_state(self, state: CameraState) -> None:
        if state is self._state:
            return
        logger.debug("Camera state %s -> %s", self._state.value, state.value)
        self._state = state
        self._listener.on_camera_state_changed(state)

    async def start(self) -> None:
        """Acquire the device and begin scanning.

        Valid from ``idle``, and from ``error`` as an explicit retry; ignored
        in any other state.

        Raises:
            CameraStartError: If the device could not be acquired. The
                controller is left in ``error``.
        """
        if self._state not in (CameraState.IDLE, CameraState.ERROR):
            logger.debug("start() ignored in state %s", self._state.value)
            return

        self._stop_requested = False
        self._set_state(CameraState.LOADING)
        constraints = {
            "facingMode": self._config.facing_mode,
            "index": self._config.index,
        }
        region = ScanRegion(
            width=self._config.scan_region,
            height=self._config.scan_region,
            fps=self._config.fps,
        )
        try:
            await self._device.start(
                constraints, region, self._handle_decode, self._handle_decode_error
            )
        except Exception as e:
            logger.exception("Camera start failed")
            self._set_state(CameraState.ERROR)
            if isinstance(e, CameraStartError):
                raise
            raise CameraStartError(str(e) or type(e).__name__) from e

        if self._stop_requested:
            # stop() arrived while the device was still negotiating
            await self._device.stop()
            self._set_state(CameraState.IDLE)
            logger.info("Camera released after cancelled start")
            return

        self._torch_supported = bool(self._device.get_capabilities().torch)
        self._torch_on = False
        self._set_state(CameraState.SCANNING)
        logger.info("Camera scanning (torch supported: %s)", self._torch_supported)

    async def stop(self) -> None:
        """Release the device. Safe to call in any state."""
        match self._state:
            case CameraState.IDLE:
                return
            case CameraState.LOADING:
                self._stop_requested = True
                return
            case CameraState.ERROR:
                self._set_state(CameraState.IDLE)
                return

        try:
            await self._device.stop()
        finally:
            self._torch_supported = False
            self._torch_on = False
            self._set_state(CameraState.IDLE)
            logger.info("Camera stopped")

    def pause(self) -> None:
        if self._state is CameraState.SCANNING:
            self._device.pause(keep_last_frame=True)
            self._set_state(CameraState.PAUSED)

    def resume(self) -> None:
        if self._state is CameraState.PAUSED:
            self._device.resume()
            self._set_state(CameraState.SCANNING)

    async def toggle_torch(self) -> bool:
        """Flip the flashlight. Returns the resulting torch state.

        Raises:
            TorchUnsupportedError: If the device is not live or has no torch.
        """
        if not self._torch_supported or self._state not in (
            CameraState.SCANNING,
            CameraState.PAUSED,
        ):
            raise TorchUnsupportedError("Torch is not available")

        wanted = not self._torch_on
        try:
            await self._device.apply_constraint({"torch": wanted})
        except Exception:
            logger.warning("Torch constraint rejected", exc_info=True)
            self._listener.on_notice(NoticeLevel.ERROR, "Could not control torch.")
            return self._torch_on
        self._torch_on = wanted
        return self._torch_on

    async def decode_still_image(self, image: StillImage) -> str | None:
        """One-shot decode of a still image, independent of the live state."""
        self._listener.on_notice(NoticeLevel.INFO, "Processing image...")
        try:
            return await self._device.decode_still_image(image)
        except CodeNotFoundError:
            logger.warning("No QR code found in still image")
            self._listener.on_notice(NoticeLevel.ERROR, "QR code not found in image.")
            return None

    @contextlib.asynccontextmanager
    async def running(self) -> AsyncIterator[CameraController]:
        """Start the camera and guarantee it is stopped on exit."""
        try:
            await self.start()
            yield self
        finally:
            await self.stop()

    def _handle_decode(self, text: str) -> None:
        if self._state is CameraState.SCANNING:
            self._on_decoded(text)

    def _handle_decode_error(self, error: Exception) -> None:
        # Frames without a code are routine; only log at debug level
        logger.debug("Decode error: %s", error)
