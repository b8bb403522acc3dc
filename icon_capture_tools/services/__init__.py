"""Service classes for icon pipeline logic."""

from .base_service import BaseService
from .render_host import RenderHost, PreviewProvider, ThumbnailDirectoryPreviewProvider
from .software_renderer import SoftwareRenderHost, SoftwarePreviewRenderer
from .capture_service import (
    FrameCaptureProtocol,
    CaptureStrategy,
    LiveCaptureStrategy,
    PreviewRecolorStrategy,
)
from .encoder_service import EncoderService
from .job_csv_parser import JobCSVParser

__all__ = [
    "BaseService",
    "RenderHost",
    "PreviewProvider",
    "ThumbnailDirectoryPreviewProvider",
    "SoftwareRenderHost",
    "SoftwarePreviewRenderer",
    "FrameCaptureProtocol",
    "CaptureStrategy",
    "LiveCaptureStrategy",
    "PreviewRecolorStrategy",
    "EncoderService",
    "JobCSVParser",
]
