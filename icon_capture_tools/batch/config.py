"""Dataclasses for icon capture state and results.

These dataclasses provide type-safe structures for the render target
state threaded through the capture protocol, for encoded output, and for
per-job and per-batch results.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Tuple

from icon_capture_tools.batch.models import IconJob, ImageFormat
from icon_capture_tools.common_functions import TRANSPARENT


class ClearMode(Enum):
    """How the render target is cleared at the start of each frame."""

    COLOR = "color"
    DEPTH_ONLY = "depth_only"


@dataclass(frozen=True)
class RenderTargetState:
    """Render target configuration shared by consecutive captures.

    Passed into each capture and returned, updated, after cleanup so that
    the sequencing dependency between jobs is explicit.

    Attributes:
        clear_mode: Clear mode in force while compositing the next job
        clear_color: RGBA color used by a full color clear
    """
    clear_mode: ClearMode = ClearMode.DEPTH_ONLY
    clear_color: Tuple[int, int, int, int] = TRANSPARENT

    def with_clear_mode(self, clear_mode: ClearMode) -> "RenderTargetState":
        return replace(self, clear_mode=clear_mode)


class CapturePhase(Enum):
    """Phases of one live capture."""

    OBJECT_SPAWNED = "object_spawned"
    AWAITING_RESET = "awaiting_reset"
    DONE = "done"


@dataclass
class PendingCapture:
    """A capture that is waiting for the host to present a frame.

    Attributes:
        job: Job being captured
        handle: Host handle of the spawned object (None once destroyed)
        state: Render target state the object was composited with
        requested_frame: Last frame number the host reported before the
            request; the frame consumed next must be strictly later
        phase: Current protocol phase
    """
    job: IconJob
    handle: Any
    state: RenderTargetState
    requested_frame: int
    phase: CapturePhase = CapturePhase.OBJECT_SPAWNED


@dataclass
class EncodedIcon:
    """Encoded icon bytes and their destination.

    Attributes:
        data: Encoded byte sequence
        path: Destination file path
        image_format: Format the bytes are encoded in
    """
    data: bytes
    path: Path
    image_format: ImageFormat

    def __len__(self) -> int:
        return len(self.data)


@dataclass
class IconResult:
    """Result of processing a single job.

    Attributes:
        job_id: Job identifier
        name: Job name used in the filename
        success: Whether an icon was written
        output_path: Path of the written icon ("" if none)
        error_kind: Exception class name if the job failed
        error_message: Error message if the job failed
        error_stage: Stage where the error occurred
            ("acquire", "crop", "recolor", "encode", "write")
        source_size: (width, height) of the acquired surface
        processing_time_seconds: Time spent on this job
    """
    job_id: str
    name: str
    success: bool
    output_path: str = ""
    error_kind: Optional[str] = None
    error_message: Optional[str] = None
    error_stage: Optional[str] = None
    source_size: Tuple[int, int] = (0, 0)
    processing_time_seconds: float = 0.0

    def __str__(self) -> str:
        """Human-readable summary of the result."""
        if not self.success:
            return f"FAILED: {self.error_stage} - {self.error_kind}: {self.error_message}"
        return f"SUCCESS: {self.output_path} ({self.processing_time_seconds:.2f}s)"


@dataclass
class BatchResult:
    """Results from processing a batch of icon jobs.

    Attributes:
        total_jobs: Total number of jobs in the batch
        successful: Number of icons written
        failed: Number of jobs that failed
        skipped: Number of jobs never started because the batch stopped
        aborted: True if the batch stopped before reaching every job
        job_results: IconResult for each job that was started
        output_directory: Directory the icons were written to
        summary_csv_path: Path of the summary CSV ("" if not written)
        processing_time_seconds: Total batch processing time
    """
    total_jobs: int
    successful: int = 0
    failed: int = 0
    skipped: int = 0
    aborted: bool = False
    job_results: List[IconResult] = field(default_factory=list)
    output_directory: str = ""
    summary_csv_path: str = ""
    processing_time_seconds: float = 0.0

    def __str__(self) -> str:
        """Human-readable summary of batch results."""
        success_rate = (self.successful / self.total_jobs * 100) if self.total_jobs > 0 else 0
        text = (
            f"Batch: {self.successful}/{self.total_jobs} icons written "
            f"({success_rate:.1f}%) in {self.processing_time_seconds:.1f}s"
        )
        if self.aborted:
            text += f", aborted with {self.skipped} job(s) not started"
        return text

    def get_successful_results(self) -> List[IconResult]:
        """Get list of successful job results."""
        return [r for r in self.job_results if r.success]

    def get_failed_results(self) -> List[IconResult]:
        """Get list of failed job results."""
        return [r for r in self.job_results if not r.success]

    def get_output_paths(self) -> List[str]:
        """Paths of every icon written by the batch, in job order."""
        return [r.output_path for r in self.job_results if r.success]
