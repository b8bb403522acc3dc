"""Icon Capture Tools module containing common helper functions"""

from typing import Tuple, Union, Sequence

RGBA = Tuple[int, int, int, int]

# AssetPreview-style editor thumbnails are rendered on this background
DEFAULT_PREVIEW_BACKGROUND = (82, 82, 82, 255)
TRANSPARENT = (0, 0, 0, 0)


def parse_rgba_color(value: Union[str, Sequence[int]]) -> RGBA:
    """Parse a color into an RGBA tuple of 0-255 integers.

    Accepted forms are ``"#RRGGBB"``, ``"#RRGGBBAA"``, ``"r,g,b"``,
    ``"r,g,b,a"`` and 3 or 4 element sequences. A missing alpha channel
    means fully opaque.

    Args:
        value: the color to parse

    Raises:
        ValueError: if the color cannot be parsed or a channel is out of range

    Returns:
        tuple: (r, g, b, a)
    """
    if isinstance(value, str):
        text = value.strip()
        if text.startswith("#"):
            hex_digits = text[1:]
            if len(hex_digits) not in (6, 8):
                raise ValueError(f"Invalid hex color: {value}")
            try:
                channels = [
                    int(hex_digits[i:i + 2], 16)
                    for i in range(0, len(hex_digits), 2)
                ]
            except ValueError as e:
                raise ValueError(f"Invalid hex color: {value}") from e
        else:
            try:
                channels = [int(part.strip()) for part in text.split(",")]
            except ValueError as e:
                raise ValueError(f"Invalid color string: {value}") from e
    else:
        try:
            channels = [int(c) for c in value]
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid color: {value!r}") from e

    if len(channels) == 3:
        channels.append(255)

    if len(channels) != 4:
        raise ValueError(
            f"Color must have 3 or 4 channels, got {len(channels)}: {value!r}"
        )

    for channel in channels:
        if not 0 <= channel <= 255:
            raise ValueError(f"Color channel out of range 0-255: {value!r}")

    return tuple(channels)


def rgba_to_hex(color: RGBA) -> str:
    """Format an RGBA tuple as ``#RRGGBBAA``."""
    return "#" + "".join(f"{int(c):02X}" for c in color)


def parse_size(value: Union[str, Sequence[int]]) -> Tuple[int, int]:
    """Parse a size given as ``"WxH"``, ``"N"`` (square) or a (w, h) pair.

    Args:
        value: the size to parse

    Raises:
        ValueError: if the size cannot be parsed

    Returns:
        tuple: (width, height)
    """
    if isinstance(value, str):
        parts = value.lower().replace(" ", "").split("x")
        try:
            numbers = [int(p) for p in parts]
        except ValueError as e:
            raise ValueError(f"Invalid size: {value}") from e
    else:
        numbers = [int(v) for v in value]

    if len(numbers) == 1:
        numbers = numbers * 2

    if len(numbers) != 2:
        raise ValueError(f"Invalid size: {value!r}")

    return numbers[0], numbers[1]
