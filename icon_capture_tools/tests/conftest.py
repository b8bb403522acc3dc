"""Shared pytest fixtures for Icon Capture Tools tests."""

import numpy as np
import pytest
from PIL import Image

from icon_capture_tools.batch.models import CaptureSurface
from icon_capture_tools.common_functions import DEFAULT_PREVIEW_BACKGROUND

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)


def write_sprite(path, width, height, color):
    """Write a solid RGBA sprite image and return its path."""
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :] = color
    Image.fromarray(pixels).save(path)
    return path


@pytest.fixture
def temp_output_dir(tmp_path):
    """Create a temporary directory for test outputs.

    Args:
        tmp_path: pytest's tmp_path fixture

    Returns:
        Path to temporary output directory
    """
    output_dir = tmp_path / "output"
    output_dir.mkdir()
    return output_dir


@pytest.fixture
def project_root(tmp_path):
    """Project root directory; icons are written next to it."""
    root = tmp_path / "project" / "Assets"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def make_sprite():
    """Factory fixture: make_sprite(path, width, height, color) -> path."""
    return write_sprite


@pytest.fixture
def red_surface():
    """A 512x512 fully red, fully opaque surface."""
    return CaptureSurface.filled(512, 512, RED)


@pytest.fixture
def sprite_dir(tmp_path):
    """Directory holding three solid 64x64 sprites: Sword, Shield, Potion."""
    directory = tmp_path / "sprites"
    directory.mkdir()
    write_sprite(directory / "Sword.png", 64, 64, RED)
    write_sprite(directory / "Shield.png", 64, 64, GREEN)
    write_sprite(directory / "Potion.png", 64, 64, BLUE)
    return directory


@pytest.fixture
def thumbnail_dir(tmp_path):
    """Directory of 32x32 preview thumbnails on the default preview background.

    Each thumbnail has a 16x16 colored square in the middle.
    """
    directory = tmp_path / "thumbnails"
    directory.mkdir()
    for name, color in (("Sword", RED), ("Shield", GREEN), ("Potion", BLUE)):
        pixels = np.empty((32, 32, 4), dtype=np.uint8)
        pixels[:, :] = DEFAULT_PREVIEW_BACKGROUND
        pixels[8:24, 8:24] = color
        Image.fromarray(pixels).save(directory / f"{name}.png")
    return directory
