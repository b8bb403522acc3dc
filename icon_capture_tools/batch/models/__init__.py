"""Icon batch processing models.

This module provides data models for icon batch processing operations.
All models are host-agnostic with no renderer dependencies.
"""

from icon_capture_tools.batch.models.capture_surface import CaptureSurface
from icon_capture_tools.batch.models.icon_job import IconJob, JobStatus
from icon_capture_tools.batch.models.icon_spec import (
    IconSpec,
    ImageFormat,
    BackgroundMode,
)
from icon_capture_tools.batch.models.batch_config import BatchConfig

__all__ = [
    "CaptureSurface",
    "IconJob",
    "JobStatus",
    "IconSpec",
    "ImageFormat",
    "BackgroundMode",
    "BatchConfig",
]
