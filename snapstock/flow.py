"""One scanning round: count items, scan batteries, commit or cancel."""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

from .camera import CameraDevice, StillImage
from .camera.controller import CameraController
from .events import CameraState, NoticeLevel, ScanOutcome
from .exceptions import (
    CameraStartError,
    IncompleteCountsError,
    NoActiveStationError,
    ValidationError,
)
from .models import ScanSession
from .session import ScanSessionManager

if TYPE_CHECKING:
    from .app import AppState

logger = logging.getLogger(__name__)


class FlowStage(str, enum.Enum):
    ITEMS = "items"
    SCANNING = "scanning"
    CLOSED = "closed"


class ScanningFlow:
    """Drives a :class:`ScanSessionManager` and a :class:`CameraController`.

    Use as ``async with app.new_flow() as flow:``; the camera is stopped
    exactly once on every exit path (completion, cancel, or an exception).
    """

    def __init__(self, app: AppState, device: CameraDevice) -> None:
        self._app = app
        self.session = ScanSessionManager(app.config.session, listener=app.listener)
        self.camera = CameraController(
            device,
            self.handle_decoded,
            config=app.config.camera,
            listener=app.listener,
        )
        self.session.on_ready = self.camera.resume
        self._stage = FlowStage.ITEMS
        self._camera_released = False

    @property
    def stage(self) -> FlowStage:
        return self._stage

    async def __aenter__(self) -> ScanningFlow:
        return self

    async def __aexit__(self, *exc) -> None:
        if self._stage is not FlowStage.CLOSED:
            await self.cancel()

    def start_scanning(self) -> None:
        """Leave the item-count stage.

        Raises:
            NoActiveStationError: If no station profile is set.
            IncompleteCountsError: If an item has no count yet.
        """
        if not self._app.profile.is_active:
            self._app.listener.on_notice(
                NoticeLevel.ERROR, "Please set a station profile first."
            )
            raise NoActiveStationError("No station profile set")
        if not self.session.can_start_scanning():
            raise IncompleteCountsError("Every item needs a count before scanning")
        self._stage = FlowStage.SCANNING

    async def open_camera(self) -> bool:
        """Start the camera. Returns False if it failed (offer a retry)."""
        if self._stage is not FlowStage.SCANNING:
            raise ValidationError(f"Camera cannot be opened in stage {self._stage.value}")
        try:
            await self.camera.start()
        except CameraStartError:
            return False
        return self.camera.state is CameraState.SCANNING

    def handle_decoded(self, text: str) -> ScanOutcome:
        # Hold the camera while the decision is outstanding
        self.camera.pause()
        return self.session.on_scan_decoded(text)

    def continue_scanning(self) -> None:
        self.session.acknowledge_and_resume()

    def clear_entries(self, *, confirmed: bool) -> bool:
        return self.session.clear_entries(confirmed=confirmed)

    async def scan_image(self, image: StillImage) -> ScanOutcome | None:
        """Decode a still image and treat the payload like a live scan."""
        text = await self.camera.decode_still_image(image)
        if text is None:
            return None
        return self.handle_decoded(text)

    async def complete_and_save(self) -> ScanSession | None:
        """Stop the camera and commit the session.

        Returns the committed session, or None if there was nothing to save.

        Raises:
            NoActiveStationError: If the profile was cleared meanwhile; the
                session is kept so the caller can recover it.
        """
        await self._release_camera()
        session = self.session.finalize()
        if session is None:
            self._app.listener.on_notice(
                NoticeLevel.INFO, "Session cancelled, no entries saved."
            )
            self._close()
            return None

        try:
            self._app.history.commit(self._app.profile.station_id, session)
        except NoActiveStationError:
            self._app.listener.on_notice(
                NoticeLevel.ERROR, "Cannot save, profile not set."
            )
            raise
        self._close()
        return session

    async def cancel(self) -> None:
        """Abandon the session without saving anything."""
        await self._release_camera()
        self._close()
        logger.info("Scanning flow cancelled")

    async def _release_camera(self) -> None:
        if self._camera_released:
            return
        self._camera_released = True
        await self.camera.stop()

    def _close(self) -> None:
        self.session.discard()
        self._stage = FlowStage.CLOSED
