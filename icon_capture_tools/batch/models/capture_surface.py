"""CaptureSurface model representing an in-memory RGBA pixel grid."""

from dataclasses import dataclass
from typing import Tuple

import numpy as np


RGBA = Tuple[int, int, int, int]


@dataclass(eq=False)
class CaptureSurface:
    """A 2D grid of RGBA pixel values.

    Produced by frame acquisition or preview acquisition and owned by the
    pipeline step that produced it until handed to the next step.

    Parameters
    ----------
    pixels : np.ndarray
        Array of shape (height, width, 4) with dtype uint8. Row 0 is the
        top row of the image.

    Notes
    -----
    Surfaces are discarded after encoding and must not be reused.
    Operations that derive a new surface (``copy``, cropping, color keying)
    never share backing storage with their source.
    """

    pixels: np.ndarray

    def __post_init__(self):
        """Validate the pixel array layout."""
        if not isinstance(self.pixels, np.ndarray):
            raise ValueError("pixels must be a numpy array")

        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError(
                f"pixels must have shape (height, width, 4), got {self.pixels.shape}"
            )

        if self.pixels.dtype != np.uint8:
            raise ValueError(f"pixels must be uint8, got {self.pixels.dtype}")

    @classmethod
    def filled(cls, width: int, height: int, color: RGBA) -> "CaptureSurface":
        """Create a surface of the given size with every pixel set to ``color``."""
        if width <= 0 or height <= 0:
            raise ValueError(
                f"Surface size must be positive, got {width}x{height}"
            )
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :] = np.asarray(color, dtype=np.uint8)
        return cls(pixels)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        """Surface size as (width, height)."""
        return self.width, self.height

    def pixel(self, x: int, y: int) -> RGBA:
        """Return the RGBA value at column ``x``, row ``y``."""
        return tuple(int(c) for c in self.pixels[y, x])

    def copy(self) -> "CaptureSurface":
        """Return an independent copy of this surface."""
        return CaptureSurface(self.pixels.copy())

    def tobytes(self) -> bytes:
        """Raw RGBA bytes in row-major order."""
        return self.pixels.tobytes()

    def __eq__(self, other) -> bool:
        if not isinstance(other, CaptureSurface):
            return NotImplemented
        return (
            self.pixels.shape == other.pixels.shape
            and np.array_equal(self.pixels, other.pixels)
        )

    def __repr__(self) -> str:
        return f"CaptureSurface({self.width}x{self.height})"
