"""Interfaces to the rendering host and preview providers.

The icon pipeline never talks to a renderer directly. Live capture goes
through a ``RenderHost`` and preview recolor through a ``PreviewProvider``.
An engine bridge implements these; ``SoftwareRenderHost`` in
``icon_capture_tools.services.software_renderer`` is the bundled
implementation.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple, Union

from icon_capture_tools.batch.config import ClearMode
from icon_capture_tools.batch.models import CaptureSurface
from icon_capture_tools.image_processing_tools import image_file_to_surface


class RenderHost:
    """Scene and render target primitives consumed by live capture.

    Frame numbers returned by ``await_frame_end`` must strictly increase.
    """

    def spawn(
        self,
        object_ref: Any,
        position: Tuple[float, float, float],
        rotation: float,
    ) -> Any:
        """Place an object in the scene and return a handle to it."""
        raise NotImplementedError

    def destroy(self, handle: Any) -> None:
        """Remove a previously spawned object from the scene."""
        raise NotImplementedError

    def set_clear_mode(self, clear_mode: ClearMode) -> None:
        raise NotImplementedError

    def set_clear_color(self, rgba: Tuple[int, int, int, int]) -> None:
        raise NotImplementedError

    def await_frame_end(self) -> int:
        """Block until the next frame has finished compositing.

        Returns:
            The number of the frame that was presented
        """
        raise NotImplementedError

    def capture_frame(self, supersample_factor: int = 1) -> CaptureSurface:
        """Read back the last presented frame.

        Args:
            supersample_factor: Multiplies the capture resolution

        Returns:
            CaptureSurface at render target resolution x supersample_factor
        """
        raise NotImplementedError


class PreviewProvider:
    """Source of pre-rendered preview thumbnails."""

    def get_preview_bitmap(self, object_ref: Any) -> Optional[CaptureSurface]:
        """Return the preview thumbnail for an object, or None if unavailable."""
        raise NotImplementedError


class ThumbnailDirectoryPreviewProvider(PreviewProvider):
    """Preview provider backed by thumbnail image files on disk.

    An object reference resolves to a thumbnail when it is the path of an
    existing image file, or when ``directory`` contains
    ``<object_ref><extension>`` for one of ``extensions``.
    """

    DEFAULT_EXTENSIONS = (".png", ".tga", ".jpg", ".jpeg", ".bmp")

    def __init__(
        self,
        directory: Union[str, Path, None] = None,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    ):
        self.directory = Path(directory) if directory is not None else None
        self.extensions = tuple(extensions)
        self.logger = logging.getLogger(self.__class__.__name__)

    def resolve_thumbnail_path(self, object_ref: Any) -> Optional[Path]:
        """Find the thumbnail file for an object reference."""
        if object_ref is None:
            return None

        candidate = Path(str(object_ref))
        if self.directory is not None and not candidate.is_absolute():
            direct = self.directory / candidate
            if direct.is_file():
                return direct
        if candidate.is_file():
            return candidate

        if self.directory is not None:
            for ext in self.extensions:
                path = self.directory / f"{object_ref}{ext}"
                if path.is_file():
                    return path

        return None

    def get_preview_bitmap(self, object_ref: Any) -> Optional[CaptureSurface]:
        path = self.resolve_thumbnail_path(object_ref)
        if path is None:
            self.logger.warning(f"No preview thumbnail found for {object_ref!r}")
            return None

        try:
            return image_file_to_surface(path)
        except ValueError as e:
            self.logger.warning(f"Unreadable preview thumbnail {path}: {e}")
            return None
