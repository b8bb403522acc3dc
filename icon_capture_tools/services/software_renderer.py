"""Software render host used for headless icon generation and testing.

Objects are RGBA sprites composited onto a persistent color buffer. Like a
GPU render target, the color buffer is only overwritten by a full color
clear: with the depth-only clear mode the previous frame's pixels stay in
place, which is why the capture protocol performs a two-stage reset.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import cv2
import numpy as np

from icon_capture_tools.batch.config import ClearMode
from icon_capture_tools.batch.models import CaptureSurface
from icon_capture_tools.common_functions import (
    DEFAULT_PREVIEW_BACKGROUND,
    TRANSPARENT,
    parse_rgba_color,
)
from icon_capture_tools.image_processing_tools import (
    alpha_composite_into,
    image_file_to_surface,
    upscale_surface,
)
from icon_capture_tools.services.render_host import PreviewProvider, RenderHost


def load_sprite(object_ref: Any) -> np.ndarray:
    """Return the RGBA pixels of an object reference.

    Args:
        object_ref: a CaptureSurface, an (H, W, 4) uint8 array or the path
            of an image file

    Raises:
        ValueError: if the reference is None or cannot be loaded
    """
    if object_ref is None:
        raise ValueError("object_ref cannot be None")
    if isinstance(object_ref, CaptureSurface):
        return object_ref.pixels
    if isinstance(object_ref, np.ndarray):
        return CaptureSurface(object_ref).pixels
    if isinstance(object_ref, (str, Path)):
        return image_file_to_surface(object_ref).pixels
    raise ValueError(f"Unsupported object reference: {object_ref!r}")


def transform_sprite(sprite: np.ndarray, scale: float, rotation: float) -> np.ndarray:
    """Scale and rotate (degrees, counter-clockwise) an RGBA sprite.

    The identity transform returns the sprite untouched.
    """
    if scale <= 0:
        raise ValueError(f"Sprite scale must be positive, got {scale}")

    out = sprite
    if scale != 1.0:
        new_w = max(1, int(round(sprite.shape[1] * scale)))
        new_h = max(1, int(round(sprite.shape[0] * scale)))
        interpolation = cv2.INTER_AREA if scale < 1.0 else cv2.INTER_LINEAR
        out = cv2.resize(out, (new_w, new_h), interpolation=interpolation)

    if rotation % 360 != 0:
        h, w = out.shape[:2]
        matrix = cv2.getRotationMatrix2D((w / 2.0, h / 2.0), rotation, 1.0)
        cos, sin = abs(matrix[0, 0]), abs(matrix[0, 1])
        # Rounded so quarter turns do not gain a pixel from float error
        bound_w = int(np.ceil(round(h * sin + w * cos, 6)))
        bound_h = int(np.ceil(round(h * cos + w * sin, 6)))
        matrix[0, 2] += bound_w / 2.0 - w / 2.0
        matrix[1, 2] += bound_h / 2.0 - h / 2.0
        out = cv2.warpAffine(
            out,
            matrix,
            (bound_w, bound_h),
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=(0, 0, 0, 0),
        )

    return out


@dataclass
class _SceneObject:
    sprite: np.ndarray
    position: Tuple[float, float, float]
    rotation: float


class SoftwareRenderHost(RenderHost):
    """A CPU render target implementing the RenderHost primitives.

    Parameters
    ----------
    width : int, default=512
        Render target width in pixels
    height : int, default=512
        Render target height in pixels
    reference_depth : float, default=10.0
        Depth at which a sprite is drawn at its native size. An object at
        depth ``z`` is scaled by ``reference_depth / z``.

    Notes
    -----
    Positions are (x, y, z) with x to the right and y up, in pixels from
    the center of the render target, and z the distance from the camera.
    """

    def __init__(self, width: int = 512, height: int = 512, reference_depth: float = 10.0):
        if width <= 0 or height <= 0:
            raise ValueError(f"Render target size must be positive, got {width}x{height}")
        if reference_depth <= 0:
            raise ValueError(f"reference_depth must be positive, got {reference_depth}")

        self.width = width
        self.height = height
        self.reference_depth = reference_depth
        self.color_buffer = np.zeros((height, width, 4), dtype=np.uint8)
        self.clear_mode = ClearMode.COLOR
        self.clear_color = TRANSPARENT
        self.frame_number = 0

        self._objects: Dict[int, _SceneObject] = {}
        self._next_handle = 1
        self._sprite_cache: Dict[str, np.ndarray] = {}
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def object_count(self) -> int:
        """Number of objects currently in the scene."""
        return len(self._objects)

    def spawn(self, object_ref, position=(0.0, 0.0, None), rotation=0.0) -> int:
        x, y, z = position
        if z is None:
            z = self.reference_depth
        if z <= 0:
            raise ValueError(f"Object depth must be in front of the camera, got z={z}")

        if isinstance(object_ref, (str, Path)):
            key = str(object_ref)
            if key not in self._sprite_cache:
                self._sprite_cache[key] = load_sprite(object_ref)
            sprite = self._sprite_cache[key]
        else:
            sprite = load_sprite(object_ref)

        handle = self._next_handle
        self._next_handle += 1
        self._objects[handle] = _SceneObject(sprite, (float(x), float(y), float(z)), float(rotation))
        self.logger.debug(f"Spawned object {handle} at {(x, y, z)}")
        return handle

    def destroy(self, handle) -> None:
        if handle not in self._objects:
            raise ValueError(f"Unknown object handle: {handle!r}")
        del self._objects[handle]
        self.logger.debug(f"Destroyed object {handle}")

    def set_clear_mode(self, clear_mode: ClearMode) -> None:
        self.clear_mode = ClearMode(clear_mode)

    def set_clear_color(self, rgba) -> None:
        self.clear_color = parse_rgba_color(rgba)

    def await_frame_end(self) -> int:
        """Render one frame and return its frame number."""
        if self.clear_mode is ClearMode.COLOR:
            self.color_buffer[:, :] = np.asarray(self.clear_color, dtype=np.uint8)

        # Farthest objects first
        for obj in sorted(self._objects.values(), key=lambda o: -o.position[2]):
            x, y, z = obj.position
            sprite = transform_sprite(obj.sprite, self.reference_depth / z, obj.rotation)
            sprite_h, sprite_w = sprite.shape[:2]
            center_x = self.width // 2 + int(round(x))
            center_y = self.height // 2 - int(round(y))
            top_left = (center_x - sprite_w // 2, center_y - sprite_h // 2)
            alpha_composite_into(self.color_buffer, sprite, top_left)

        self.frame_number += 1
        return self.frame_number

    def capture_frame(self, supersample_factor: int = 1) -> CaptureSurface:
        """Read back the color buffer, enlarged by ``supersample_factor``."""
        return upscale_surface(CaptureSurface(self.color_buffer.copy()), supersample_factor)


class SoftwarePreviewRenderer(PreviewProvider):
    """Renders preview thumbnails the way an editor asset preview does.

    The object sprite is fitted inside a square preview and composited over
    the default preview background color RGBA(82, 82, 82, 255).
    """

    def __init__(
        self,
        preview_size: int = 128,
        background_color=DEFAULT_PREVIEW_BACKGROUND,
    ):
        if preview_size <= 0:
            raise ValueError(f"preview_size must be positive, got {preview_size}")
        self.preview_size = preview_size
        self.background_color = parse_rgba_color(background_color)
        self.logger = logging.getLogger(self.__class__.__name__)

    def get_preview_bitmap(self, object_ref) -> Optional[CaptureSurface]:
        try:
            sprite = load_sprite(object_ref)
        except ValueError as e:
            self.logger.warning(f"Preview unavailable for {object_ref!r}: {e}")
            return None

        scale = min(
            self.preview_size / sprite.shape[1], self.preview_size / sprite.shape[0]
        )
        fitted = transform_sprite(sprite, scale, 0.0)

        preview = CaptureSurface.filled(
            self.preview_size, self.preview_size, self.background_color
        )
        top_left = (
            (self.preview_size - fitted.shape[1]) // 2,
            (self.preview_size - fitted.shape[0]) // 2,
        )
        alpha_composite_into(preview.pixels, fitted, top_left)
        return preview
