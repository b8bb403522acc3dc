"""Icon Capture Tools module containing functions used for image processing"""

import logging
from typing import Tuple

import numpy as np
from PIL import Image

from icon_capture_tools.batch.exceptions import CropBoundsError
from icon_capture_tools.batch.models import CaptureSurface


def center_crop_origin(
    source_size: Tuple[int, int], target_size: Tuple[int, int]
) -> Tuple[int, int]:
    """Return the top-left corner of a centered crop.

    Args:
        source_size (tuple): source (width, height)
        target_size (tuple): crop (width, height)

    Raises:
        CropBoundsError: if the crop does not fit inside the source

    Returns:
        tuple: (x, y) origin, computed as (w // 2 - tw // 2, h // 2 - th // 2)
    """
    width, height = source_size
    target_width, target_height = target_size

    if target_width <= 0 or target_height <= 0:
        raise CropBoundsError(
            f"Crop size must be positive, got {target_width}x{target_height}"
        )

    if target_width > width or target_height > height:
        raise CropBoundsError(
            f"Crop size {target_width}x{target_height} exceeds source "
            f"surface {width}x{height}"
        )

    return width // 2 - target_width // 2, height // 2 - target_height // 2


def center_crop(surface: CaptureSurface, target_size: Tuple[int, int]) -> CaptureSurface:
    """Extract a fixed-size block from the center of a surface.

    The result never shares memory with ``surface``.

    Args:
        surface (CaptureSurface): the source surface
        target_size (tuple): crop (width, height)

    Raises:
        CropBoundsError: if the crop is larger than the surface

    Returns:
        CaptureSurface: a new surface of exactly target_size
    """
    x, y = center_crop_origin(surface.size, target_size)
    target_width, target_height = target_size
    block = surface.pixels[y:y + target_height, x:x + target_width]
    return CaptureSurface(np.array(block, dtype=np.uint8, copy=True))


def replace_color_key(
    surface: CaptureSurface,
    key_color: Tuple[int, int, int, int],
    replacement_color: Tuple[int, int, int, int],
) -> CaptureSurface:
    """Replace every pixel exactly equal to key_color with replacement_color.

    Equality is bit-exact on all four channels. Antialiased edge pixels
    blended between foreground and key color are not matches and keep
    their visible fringe.

    Args:
        surface (CaptureSurface): the source surface (left untouched)
        key_color (tuple): RGBA color to replace
        replacement_color (tuple): RGBA color written in its place

    Returns:
        CaptureSurface: the recolored copy
    """
    pixels = surface.pixels.copy()
    key = np.asarray(key_color, dtype=np.uint8)
    mask = np.all(pixels == key, axis=-1)
    pixels[mask] = np.asarray(replacement_color, dtype=np.uint8)

    logging.debug(
        f"Color key {tuple(key_color)} matched {int(mask.sum())} of "
        f"{mask.size} pixels"
    )
    return CaptureSurface(pixels)


def upscale_surface(surface: CaptureSurface, factor: int) -> CaptureSurface:
    """Return a copy of the surface enlarged by an integer factor.

    Each pixel is repeated factor x factor times.
    """
    if factor < 1:
        raise ValueError(f"Upscale factor must be >= 1, got {factor}")
    if factor == 1:
        return surface.copy()
    pixels = np.repeat(np.repeat(surface.pixels, factor, axis=0), factor, axis=1)
    return CaptureSurface(pixels)


def alpha_composite_into(
    destination: np.ndarray, sprite: np.ndarray, top_left: Tuple[int, int]
) -> None:
    """Composite an RGBA sprite over an RGBA buffer in place ("over" operator).

    Parts of the sprite that fall outside the destination are clipped.

    Args:
        destination (np.ndarray): (H, W, 4) uint8 buffer, modified in place
        sprite (np.ndarray): (h, w, 4) uint8 sprite
        top_left (tuple): (x, y) position of the sprite's top-left corner
    """
    dest_h, dest_w = destination.shape[:2]
    sprite_h, sprite_w = sprite.shape[:2]
    x, y = top_left

    x0, y0 = max(x, 0), max(y, 0)
    x1, y1 = min(x + sprite_w, dest_w), min(y + sprite_h, dest_h)
    if x0 >= x1 or y0 >= y1:
        return

    src = sprite[y0 - y:y1 - y, x0 - x:x1 - x].astype(np.float32) / 255.0
    dst = destination[y0:y1, x0:x1].astype(np.float32) / 255.0

    src_a = src[..., 3:4]
    dst_a = dst[..., 3:4]
    out_a = src_a + dst_a * (1.0 - src_a)
    out_rgb = np.where(
        out_a > 0,
        (src[..., :3] * src_a + dst[..., :3] * dst_a * (1.0 - src_a))
        / np.maximum(out_a, 1e-8),
        0.0,
    )

    out = np.concatenate([out_rgb, out_a], axis=-1)
    destination[y0:y1, x0:x1] = np.clip(np.rint(out * 255.0), 0, 255).astype(np.uint8)


def pillow_image_to_surface(image: Image.Image) -> CaptureSurface:
    """Convert a Pillow image of any mode to an RGBA CaptureSurface."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return CaptureSurface(np.array(image, dtype=np.uint8))


def surface_to_pillow_image(surface: CaptureSurface) -> Image.Image:
    """Convert a CaptureSurface to an RGBA Pillow image (copying the pixels)."""
    # (H, W, 4) uint8 arrays map to RGBA
    return Image.fromarray(surface.pixels.copy())


def image_file_to_surface(in_file) -> CaptureSurface:
    """Return image file contents as a CaptureSurface."""
    try:
        with Image.open(in_file) as image:
            return pillow_image_to_surface(image)
    except (OSError, ValueError) as e:
        raise ValueError(f"Could not read image from file: {in_file}") from e
