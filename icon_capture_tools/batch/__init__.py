"""Batch processing module for Icon Capture Tools.

This module provides functionality to turn a list of objects into icon
image files in one run, either by capturing live rendered frames or by
recoloring pre-rendered preview thumbnails.

Key Components
--------------
- Models: IconJob, IconSpec, BatchConfig, CaptureSurface, JobStatus
- Exceptions: IconProcessingError and subclasses
- Orchestration: IconBatchOrchestrator in icon_capture_tools.batch.orchestrator

Examples
--------
>>> from icon_capture_tools.batch.models import IconSpec
>>> spec = IconSpec(width=128, height=128, image_format="jpeg",
...                 background_mode="transparent")
>>> errors = spec.validate()
>>> if errors:
...     print("Transparent JPEG icons are rejected")
Transparent JPEG icons are rejected
"""

from icon_capture_tools.batch.models import (
    CaptureSurface,
    IconJob,
    JobStatus,
    IconSpec,
    ImageFormat,
    BackgroundMode,
    BatchConfig,
)
from icon_capture_tools.batch.exceptions import (
    IconProcessingError,
    ConfigurationError,
    MissingPreviewError,
    EncodeUnsupportedError,
    CropBoundsError,
    FrameSequenceError,
    InvalidJobCSVError,
)

__all__ = [
    # Models
    "CaptureSurface",
    "IconJob",
    "JobStatus",
    "IconSpec",
    "ImageFormat",
    "BackgroundMode",
    "BatchConfig",
    # Exceptions
    "IconProcessingError",
    "ConfigurationError",
    "MissingPreviewError",
    "EncodeUnsupportedError",
    "CropBoundsError",
    "FrameSequenceError",
    "InvalidJobCSVError",
]
