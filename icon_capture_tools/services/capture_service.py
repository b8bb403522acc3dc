"""Service for acquiring capture surfaces for icon jobs.

This service provides:
- The live frame capture protocol as explicit step functions
  (begin_capture -> resume -> finish_reset)
- The two capture strategies sharing one interface:
  LiveCaptureStrategy (render, capture, center crop) and
  PreviewRecolorStrategy (preview thumbnail, color key substitution)
"""

from typing import List, Optional, Tuple

from icon_capture_tools.batch.config import (
    CapturePhase,
    ClearMode,
    PendingCapture,
    RenderTargetState,
)
from icon_capture_tools.batch.exceptions import FrameSequenceError, MissingPreviewError
from icon_capture_tools.batch.models import (
    BackgroundMode,
    CaptureSurface,
    IconJob,
    IconSpec,
)
from icon_capture_tools.common_functions import TRANSPARENT
from icon_capture_tools.image_processing_tools import center_crop, replace_color_key
from icon_capture_tools.services.base_service import BaseService
from icon_capture_tools.services.render_host import PreviewProvider, RenderHost


def initial_render_target_state(spec: IconSpec) -> RenderTargetState:
    """Render target state for the first job of a live capture batch.

    Solid backgrounds clear the full color buffer to the background color
    every frame. Transparent backgrounds clear depth only, on top of a
    color buffer that is reset to fully transparent between jobs.
    """
    if spec.background_mode is BackgroundMode.TRANSPARENT:
        return RenderTargetState(ClearMode.DEPTH_ONLY, TRANSPARENT)
    return RenderTargetState(ClearMode.COLOR, spec.background_color)


class FrameCaptureProtocol(BaseService):
    """Step functions that capture one object per frame without contamination.

    A capture is driven by an external loop that presents frames between
    the steps::

        pending = protocol.begin_capture(job, state, position, rotation)
        surface = protocol.resume(pending, host.await_frame_end())
        state = protocol.finish_reset(pending, host.await_frame_end())

    ``resume`` reads the frame only after the frame that composited the
    object has been presented, then removes the object and switches to a
    full color clear. ``finish_reset`` requires one more presented frame so
    that clear has taken effect, then switches to depth-only clearing for
    the next job.
    """

    def __init__(self, host: RenderHost, supersample: int = 1):
        super().__init__()
        self._validate_not_none(host, "host")
        self.host = host
        self.supersample = supersample
        self.last_frame: Optional[int] = None

    def begin_capture(
        self,
        job: IconJob,
        state: RenderTargetState,
        position: Tuple[float, float, float],
        rotation: float = 0.0,
    ) -> PendingCapture:
        """Apply the render target state and spawn the job's object.

        Args:
            job: Job to capture
            state: Render target state to composite the object with
            position: Spawn position
            rotation: Spawn rotation in degrees

        Returns:
            PendingCapture waiting for the next presented frame
        """
        self.host.set_clear_color(state.clear_color)
        self.host.set_clear_mode(state.clear_mode)
        handle = self.host.spawn(job.object_ref, position, rotation)

        requested_frame = self.last_frame if self.last_frame is not None else -1
        self.logger.debug(
            f"[{job.job_id}] Spawned '{job.name}' at {position}, "
            f"clear mode {state.clear_mode.value}"
        )
        return PendingCapture(
            job=job,
            handle=handle,
            state=state,
            requested_frame=requested_frame,
        )

    def resume(self, pending: PendingCapture, rendered_frame: int) -> CaptureSurface:
        """Acquire the composited frame and start the render target reset.

        Args:
            pending: Capture returned by ``begin_capture``
            rendered_frame: Number of the frame presented after the spawn

        Raises:
            FrameSequenceError: If the capture is not awaiting a frame, or
                ``rendered_frame`` was not presented after the spawn

        Returns:
            CaptureSurface at render target resolution x supersample
        """
        if pending.phase is not CapturePhase.OBJECT_SPAWNED:
            raise FrameSequenceError(
                f"[{pending.job.job_id}] Cannot resume a capture in phase "
                f"'{pending.phase.value}'"
            )
        self._check_frame_order(pending, rendered_frame, "capture")

        surface = self.host.capture_frame(self.supersample)

        # Full color clear so the next job does not see this object's pixels
        self.host.destroy(pending.handle)
        self.host.set_clear_mode(ClearMode.COLOR)

        pending.handle = None
        pending.requested_frame = rendered_frame
        pending.phase = CapturePhase.AWAITING_RESET
        self.last_frame = rendered_frame

        self.logger.debug(
            f"[{pending.job.job_id}] Captured frame {rendered_frame} "
            f"({surface.width}x{surface.height})"
        )
        return surface

    def finish_reset(self, pending: PendingCapture, rendered_frame: int) -> RenderTargetState:
        """Complete the render target reset after the clear frame.

        Args:
            pending: Capture previously passed to ``resume``
            rendered_frame: Number of the frame presented after ``resume``

        Raises:
            FrameSequenceError: If the capture has not been resumed, or no
                frame was presented since

        Returns:
            RenderTargetState for the next job (depth-only clearing)
        """
        if pending.phase is not CapturePhase.AWAITING_RESET:
            raise FrameSequenceError(
                f"[{pending.job.job_id}] Cannot finish reset of a capture in "
                f"phase '{pending.phase.value}'"
            )
        self._check_frame_order(pending, rendered_frame, "reset")

        self.host.set_clear_mode(ClearMode.DEPTH_ONLY)
        pending.phase = CapturePhase.DONE
        self.last_frame = rendered_frame

        return pending.state.with_clear_mode(ClearMode.DEPTH_ONLY)

    def _check_frame_order(self, pending: PendingCapture, rendered_frame: int, step: str) -> None:
        if rendered_frame is None or rendered_frame <= pending.requested_frame:
            raise FrameSequenceError(
                f"[{pending.job.job_id}] {step} needs a frame presented after "
                f"frame {pending.requested_frame}, got {rendered_frame}"
            )


class CaptureStrategy(BaseService):
    """Common interface of the two capture pipelines.

    Subclasses implement ``acquire`` (job -> source surface) and
    ``transform`` (source surface -> icon surface). ``transform_stage``
    names the transform for error reporting.
    """

    name = "capture"
    transform_stage = "transform"

    def __init__(self, spec: IconSpec):
        super().__init__()
        self.spec = spec

    def validate(self) -> List[str]:
        """Strategy-specific validation errors (empty if valid)."""
        return []

    def prepare(self) -> None:
        """Called once before the first job of a batch."""
        pass

    def acquire(self, job: IconJob) -> CaptureSurface:
        raise NotImplementedError

    def transform(self, surface: CaptureSurface) -> CaptureSurface:
        raise NotImplementedError


class LiveCaptureStrategy(CaptureStrategy):
    """Render each object live, capture the frame and center crop it.

    Parameters
    ----------
    spec : IconSpec
        Icon settings (size, background, supersample)
    host : RenderHost
        Scene and render target primitives
    anchor_position : tuple, default=(0.0, 0.0, 10.0)
        Spawn anchor. Each job's ``spawn_offset`` is added to its depth.
    anchor_rotation : float, default=0.0
        Spawn rotation in degrees applied to every object
    """

    name = "live"
    transform_stage = "crop"

    def __init__(
        self,
        spec: IconSpec,
        host: RenderHost,
        anchor_position: Tuple[float, float, float] = (0.0, 0.0, 10.0),
        anchor_rotation: float = 0.0,
    ):
        super().__init__(spec)
        self.host = host
        self.anchor_position = tuple(anchor_position)
        self.anchor_rotation = anchor_rotation
        self.protocol = FrameCaptureProtocol(host, supersample=spec.supersample)
        self.state = initial_render_target_state(spec)

    def validate(self) -> List[str]:
        """Check the icon size against the host's capture resolution.

        Hosts that do not expose ``width``/``height`` are checked per job
        by the crop instead.
        """
        errors = []
        host_width = getattr(self.host, "width", None)
        host_height = getattr(self.host, "height", None)
        sizes = (host_width, host_height, self.spec.width, self.spec.height, self.spec.supersample)
        if all(isinstance(v, int) for v in sizes):
            capture_width = host_width * self.spec.supersample
            capture_height = host_height * self.spec.supersample
            if self.spec.width > capture_width or self.spec.height > capture_height:
                errors.append(
                    f"Icon size {self.spec.width}x{self.spec.height} exceeds "
                    f"capture resolution {capture_width}x{capture_height}"
                )
        return errors

    def prepare(self) -> None:
        self.state = initial_render_target_state(self.spec)
        self.logger.info(
            f"Live capture: background {self.spec.background_mode.value}, "
            f"clear mode {self.state.clear_mode.value}, "
            f"supersample x{self.spec.supersample}"
        )

    def spawn_position(self, job: IconJob) -> Tuple[float, float, float]:
        x, y, z = self.anchor_position
        return x, y, z + job.spawn_offset

    def acquire(self, job: IconJob) -> CaptureSurface:
        """Drive the capture protocol for one job, presenting two frames."""
        pending = self.protocol.begin_capture(
            job, self.state, self.spawn_position(job), self.anchor_rotation
        )
        try:
            surface = self.protocol.resume(pending, self.host.await_frame_end())
        except Exception:
            if pending.handle is not None:
                self.host.destroy(pending.handle)
            raise
        self.state = self.protocol.finish_reset(pending, self.host.await_frame_end())
        return surface

    def transform(self, surface: CaptureSurface) -> CaptureSurface:
        return center_crop(surface, self.spec.size)


class PreviewRecolorStrategy(CaptureStrategy):
    """Copy each object's preview thumbnail and substitute its background.

    Parameters
    ----------
    spec : IconSpec
        Icon settings; ``key_color`` is replaced by ``background_color``
    provider : PreviewProvider
        Source of preview thumbnails
    """

    name = "preview"
    transform_stage = "recolor"

    def __init__(self, spec: IconSpec, provider: PreviewProvider):
        super().__init__(spec)
        self.provider = provider

    def prepare(self) -> None:
        self.logger.info(
            f"Preview recolor: key {self.spec.key_color} -> "
            f"{self.spec.background_color}"
        )

    def acquire(self, job: IconJob) -> CaptureSurface:
        bitmap = self.provider.get_preview_bitmap(job.object_ref)
        if bitmap is None:
            raise MissingPreviewError(
                f"Preview bitmap unavailable for '{job.name}' ({job.object_ref})"
            )
        # The provider may cache its bitmaps, so work on a copy
        return bitmap.copy()

    def transform(self, surface: CaptureSurface) -> CaptureSurface:
        return replace_color_key(surface, self.spec.key_color, self.spec.background_color)
