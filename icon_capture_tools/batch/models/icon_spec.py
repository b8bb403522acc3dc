"""IconSpec model describing the icons produced by a batch run."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Union

from icon_capture_tools.batch.exceptions import ConfigurationError
from icon_capture_tools.common_functions import (
    DEFAULT_PREVIEW_BACKGROUND,
    parse_rgba_color,
    rgba_to_hex,
)


class ImageFormat(Enum):
    """Enumeration of supported output formats."""

    JPEG = "jpeg"
    PNG = "png"
    TGA = "tga"

    @classmethod
    def from_string(cls, value: Union[str, "ImageFormat"]) -> "ImageFormat":
        """Parse a format name. ``jpg`` is accepted as an alias of ``jpeg``."""
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower().lstrip(".")
        if name == "jpg":
            name = "jpeg"
        try:
            return cls(name)
        except ValueError:
            valid = ", ".join(f.value for f in cls)
            raise ValueError(
                f"Unsupported image format '{value}'. Expected one of: {valid}"
            )

    @property
    def extension(self) -> str:
        """File extension without the leading dot."""
        return {"jpeg": "jpg", "png": "png", "tga": "tga"}[self.value]

    @property
    def pillow_format(self) -> str:
        return {"jpeg": "JPEG", "png": "PNG", "tga": "TGA"}[self.value]

    @property
    def supports_alpha(self) -> bool:
        return self is not ImageFormat.JPEG


class BackgroundMode(Enum):
    """Background handling for live capture."""

    SOLID = "solid"
    TRANSPARENT = "transparent"

    @classmethod
    def from_string(cls, value: Union[str, "BackgroundMode"]) -> "BackgroundMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unsupported background mode '{value}'. "
                f"Expected 'solid' or 'transparent'"
            )


@dataclass
class IconSpec:
    """Icon settings shared by every job of a batch run.

    Parameters
    ----------
    width : int, default=256
        Icon width in pixels
    height : int, default=256
        Icon height in pixels
    image_format : ImageFormat or str, default="png"
        Output format: "jpeg" (or "jpg"), "png" or "tga"
    background_mode : BackgroundMode or str, default="solid"
        Live capture background: "solid" clears to ``background_color``,
        "transparent" keeps the alpha channel of the cleared target
    background_color : RGBA or str, default=(0, 0, 0, 255)
        Clear color for solid live capture, and replacement color for the
        preview recolor pipeline
    key_color : RGBA or str, default=(82, 82, 82, 255)
        Preview background color replaced by the recolor pipeline
    supersample : int, default=1
        Multiplies the capture resolution before cropping
    jpeg_quality : int, default=75
        Quality used for JPEG encoding (1-95)

    Notes
    -----
    JPEG cannot carry an alpha channel. A transparent background (either
    ``background_mode="transparent"`` or a ``background_color`` whose alpha
    is below 255) combined with JPEG is reported by ``validate`` and must
    be rejected before any capture work begins.
    """

    width: int = 256
    height: int = 256
    image_format: ImageFormat = ImageFormat.PNG
    background_mode: BackgroundMode = BackgroundMode.SOLID
    background_color: Tuple[int, int, int, int] = (0, 0, 0, 255)
    key_color: Tuple[int, int, int, int] = DEFAULT_PREVIEW_BACKGROUND
    supersample: int = 1
    jpeg_quality: int = 75

    def __post_init__(self):
        """Coerce enum and color fields from their string forms."""
        self.image_format = ImageFormat.from_string(self.image_format)
        self.background_mode = BackgroundMode.from_string(self.background_mode)
        self.background_color = parse_rgba_color(self.background_color)
        self.key_color = parse_rgba_color(self.key_color)

    @property
    def size(self) -> Tuple[int, int]:
        """Icon size as (width, height)."""
        return self.width, self.height

    @property
    def is_transparent(self) -> bool:
        """True when the produced icons need an alpha channel."""
        return (
            self.background_mode is BackgroundMode.TRANSPARENT
            or self.background_color[3] < 255
        )

    def validate(self) -> List[str]:
        """Validate icon settings.

        Returns
        -------
        list of str
            List of validation error messages
            Empty list if all validations pass
        """
        errors = []

        if not isinstance(self.width, int) or not isinstance(self.height, int):
            errors.append(
                f"Icon size must be integers, got {self.width!r}x{self.height!r}"
            )
        elif self.width <= 0 or self.height <= 0:
            errors.append(
                f"Icon size must be positive, got {self.width}x{self.height}"
            )

        if not isinstance(self.supersample, int) or self.supersample < 1:
            errors.append(
                f"Supersample factor must be an integer >= 1, got {self.supersample!r}"
            )

        if not 1 <= self.jpeg_quality <= 95:
            errors.append(
                f"JPEG quality must be between 1 and 95, got {self.jpeg_quality}"
            )

        if self.image_format is ImageFormat.JPEG and self.is_transparent:
            errors.append(
                "Transparent JPG is not possible: the JPEG format cannot "
                "carry an alpha channel. Use png or tga, or an opaque "
                "solid background."
            )

        return errors

    def raise_if_invalid(self) -> None:
        """Raise ConfigurationError if ``validate`` reports any problem."""
        errors = self.validate()
        if errors:
            raise ConfigurationError(
                "Icon settings are invalid:\n" + "\n".join(errors)
            )

    def __repr__(self) -> str:
        return (
            f"IconSpec({self.width}x{self.height}, "
            f"format={self.image_format.value}, "
            f"background={self.background_mode.value} "
            f"{rgba_to_hex(self.background_color)}, "
            f"supersample={self.supersample})"
        )
