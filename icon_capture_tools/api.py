"""Python API for Icon Capture Tools batch icon generation.

This module provides a high-level Python API for generating icons for a
list of objects using either of the two capture pipelines:

1. Live capture: render each object, capture the frame, center crop it
2. Preview recolor: take each object's preview thumbnail and replace its
   background color

Example usage:

    # Live capture from sprites listed in a CSV
    from icon_capture_tools.api import generate_live_icons

    result = generate_live_icons(
        jobs="objects.csv",
        frame_size=(512, 512),
        icon_size=(256, 256),
        image_format="png",
        background_mode="transparent",
        project_root="MyGame/Assets",
    )

    print(f"Written: {result.successful}/{result.total_jobs}")

    # Recolor pre-rendered thumbnails
    from icon_capture_tools.api import generate_preview_icons

    result = generate_preview_icons(
        jobs=["Sword", "Shield"],
        thumbnail_dir="thumbnails/",
        background_color=(0, 0, 0, 0),
    )
"""

from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

from icon_capture_tools.batch.config import BatchResult
from icon_capture_tools.batch.models import BatchConfig, IconJob, IconSpec
from icon_capture_tools.batch.orchestrator import IconBatchOrchestrator
from icon_capture_tools.common_functions import DEFAULT_PREVIEW_BACKGROUND
from icon_capture_tools.services.capture_service import (
    LiveCaptureStrategy,
    PreviewRecolorStrategy,
)
from icon_capture_tools.services.job_csv_parser import JobCSVParser
from icon_capture_tools.services.render_host import (
    PreviewProvider,
    RenderHost,
    ThumbnailDirectoryPreviewProvider,
)
from icon_capture_tools.services.software_renderer import SoftwareRenderHost

JobsInput = Union[str, Path, Sequence[Union[IconJob, str]]]


def load_jobs(csv_path: Union[str, Path]) -> List[IconJob]:
    """Load icon jobs from a CSV file.

    Args:
        csv_path: Path to a CSV with an ``object_ref`` column and optional
            ``name`` and ``spawn_offset`` columns

    Returns:
        List of IconJob, one per row

    Raises:
        InvalidJobCSVError: If the CSV is malformed

    Example:
        >>> jobs = load_jobs("objects.csv")
        >>> print([job.name for job in jobs])
    """
    return JobCSVParser().parse_csv(str(csv_path))


def make_jobs(object_refs: Sequence[Union[IconJob, str]]) -> List[IconJob]:
    """Build jobs from object references, passing IconJob items through."""
    jobs = []
    for idx, ref in enumerate(object_refs, 1):
        if isinstance(ref, IconJob):
            jobs.append(ref)
        else:
            jobs.append(IconJob(job_id=f"job_{idx:03d}", object_ref=ref))
    return jobs


def _resolve_jobs(jobs: JobsInput) -> List[IconJob]:
    if isinstance(jobs, (str, Path)):
        return load_jobs(jobs)
    return make_jobs(jobs)


def generate_live_icons(
    jobs: JobsInput,
    host: Optional[RenderHost] = None,
    frame_size: Tuple[int, int] = (512, 512),
    icon_size: Tuple[int, int] = (256, 256),
    image_format: str = "png",
    background_mode: str = "solid",
    background_color=(0, 0, 0, 255),
    supersample: int = 1,
    jpeg_quality: int = 75,
    output_folder_name: str = "Generated Icons",
    base_file_name: str = "Live Icon",
    project_root: str = ".",
    anchor_position: Tuple[float, float, float] = (0.0, 0.0, 10.0),
    anchor_rotation: float = 0.0,
    stop_on_first_failure: bool = False,
    summary_csv_path: Optional[str] = None,
    log_path: Optional[str] = None,
    progress_callback: Optional[Callable[[int, str], None]] = None,
    show_progress: bool = False,
) -> BatchResult:
    """Generate icons by rendering each object live and cropping the frame.

    Args:
        jobs: CSV path, list of IconJob, or list of object references
        host: Render host (a SoftwareRenderHost of ``frame_size`` if None)
        frame_size: (width, height) of the default software render target
        icon_size: (width, height) of the icons
        image_format: "jpeg"/"jpg", "png" or "tga"
        background_mode: "solid" or "transparent"
        background_color: Solid background color
        supersample: Capture resolution multiplier
        jpeg_quality: JPEG quality (1-95)
        output_folder_name: Output folder, relative to the parent of project_root
        base_file_name: Prefix of every output file
        project_root: Project root directory
        anchor_position: Spawn position; each job's spawn_offset adds depth
        anchor_rotation: Spawn rotation in degrees
        stop_on_first_failure: Stop the batch at the first failed job
        summary_csv_path: Optional per-job summary CSV path
        log_path: Optional batch log file path
        progress_callback: Optional callback(percent, message)
        show_progress: Display a tqdm progress bar

    Returns:
        BatchResult

    Raises:
        ConfigurationError: If the configuration is invalid, e.g. a
            transparent background with JPEG. No file is written.
    """
    spec = IconSpec(
        width=icon_size[0],
        height=icon_size[1],
        image_format=image_format,
        background_mode=background_mode,
        background_color=background_color,
        supersample=supersample,
        jpeg_quality=jpeg_quality,
    )
    if host is None:
        host = SoftwareRenderHost(
            width=frame_size[0], height=frame_size[1], reference_depth=anchor_position[2]
        )

    strategy = LiveCaptureStrategy(
        spec, host, anchor_position=anchor_position, anchor_rotation=anchor_rotation
    )
    config = BatchConfig(
        output_folder_name=output_folder_name,
        base_file_name=base_file_name,
        project_root=project_root,
        stop_on_first_failure=stop_on_first_failure,
        summary_csv_path=summary_csv_path,
        log_path=log_path,
    )

    orchestrator = IconBatchOrchestrator(strategy, config)
    # Validate before loading any job so configuration errors come first
    orchestrator.validate_or_raise()
    return orchestrator.run(
        _resolve_jobs(jobs),
        progress_callback=progress_callback,
        show_progress=show_progress,
    )


def generate_preview_icons(
    jobs: JobsInput,
    provider: Optional[PreviewProvider] = None,
    thumbnail_dir: Optional[str] = None,
    image_format: str = "png",
    key_color=DEFAULT_PREVIEW_BACKGROUND,
    background_color=(0, 0, 0, 255),
    jpeg_quality: int = 75,
    output_folder_name: str = "Generated Icons",
    base_file_name: str = "Preview Icon",
    project_root: str = ".",
    stop_on_first_failure: bool = False,
    summary_csv_path: Optional[str] = None,
    log_path: Optional[str] = None,
    progress_callback: Optional[Callable[[int, str], None]] = None,
    show_progress: bool = False,
) -> BatchResult:
    """Generate icons from preview thumbnails with a substituted background.

    Args:
        jobs: CSV path, list of IconJob, or list of object references
        provider: Preview provider (thumbnail files in ``thumbnail_dir``
            if None)
        thumbnail_dir: Directory searched by the default provider
        image_format: "jpeg"/"jpg", "png" or "tga"
        key_color: Preview background color to replace
        background_color: Replacement color
        jpeg_quality: JPEG quality (1-95)
        output_folder_name: Output folder, relative to the parent of project_root
        base_file_name: Prefix of every output file
        project_root: Project root directory
        stop_on_first_failure: Stop the batch at the first failed job
        summary_csv_path: Optional per-job summary CSV path
        log_path: Optional batch log file path
        progress_callback: Optional callback(percent, message)
        show_progress: Display a tqdm progress bar

    Returns:
        BatchResult

    Raises:
        ConfigurationError: If the configuration is invalid, e.g. a
            transparent replacement color with JPEG
    """
    spec = IconSpec(
        image_format=image_format,
        background_color=background_color,
        key_color=key_color,
        jpeg_quality=jpeg_quality,
    )
    if provider is None:
        provider = ThumbnailDirectoryPreviewProvider(thumbnail_dir)

    strategy = PreviewRecolorStrategy(spec, provider)
    config = BatchConfig(
        output_folder_name=output_folder_name,
        base_file_name=base_file_name,
        project_root=project_root,
        stop_on_first_failure=stop_on_first_failure,
        summary_csv_path=summary_csv_path,
        log_path=log_path,
    )

    orchestrator = IconBatchOrchestrator(strategy, config)
    orchestrator.validate_or_raise()
    return orchestrator.run(
        _resolve_jobs(jobs),
        progress_callback=progress_callback,
        show_progress=show_progress,
    )
