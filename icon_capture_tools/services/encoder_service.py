"""Service for encoding capture surfaces into icon files.

This service provides:
- Format dispatch for JPEG, PNG and TGA encoding (Pillow)
- Decoding of encoded icons back into surfaces for verification
- Atomic writing of encoded icons
"""

import io
from pathlib import Path
from typing import Union

from PIL import Image

from icon_capture_tools.batch.config import EncodedIcon
from icon_capture_tools.batch.exceptions import EncodeUnsupportedError
from icon_capture_tools.batch.models import CaptureSurface, ImageFormat
from icon_capture_tools.image_processing_tools import (
    pillow_image_to_surface,
    surface_to_pillow_image,
)
from icon_capture_tools.services.base_service import BaseService
from icon_capture_tools.utils.filesystem import write_file_atomic


class EncoderService(BaseService):
    """Service for icon encoding and writing."""

    def __init__(self, jpeg_quality: int = 75):
        super().__init__()
        self.jpeg_quality = jpeg_quality

    def encode(
        self,
        surface: CaptureSurface,
        image_format: Union[ImageFormat, str],
    ) -> bytes:
        """
        Serialize a surface into the bytes of an image file.

        Args:
            surface: Surface to encode
            image_format: Target format. JPEG drops the alpha channel;
                PNG and TGA keep it.

        Returns:
            Encoded byte sequence

        Raises:
            EncodeUnsupportedError: If no byte sequence could be produced
        """
        image_format = ImageFormat.from_string(image_format)
        image = surface_to_pillow_image(surface)

        save_kwargs = {}
        if image_format is ImageFormat.JPEG:
            image = image.convert("RGB")
            save_kwargs["quality"] = self.jpeg_quality
        elif image_format is ImageFormat.TGA:
            save_kwargs["compression"] = None

        buffer = io.BytesIO()
        try:
            image.save(buffer, format=image_format.pillow_format, **save_kwargs)
        except (OSError, ValueError, KeyError) as e:
            raise EncodeUnsupportedError(
                f"Could not encode {surface.width}x{surface.height} surface "
                f"as {image_format.value}: {e}"
            ) from e

        data = buffer.getvalue()
        if not data:
            raise EncodeUnsupportedError(
                f"Encoder produced no bytes for format {image_format.value}"
            )

        self.logger.debug(
            f"Encoded {surface.width}x{surface.height} surface as "
            f"{image_format.value} ({len(data)} bytes)"
        )
        return data

    def encode_icon(
        self,
        surface: CaptureSurface,
        image_format: Union[ImageFormat, str],
        path: Union[str, Path],
    ) -> EncodedIcon:
        """Encode a surface and bind it to its destination path."""
        image_format = ImageFormat.from_string(image_format)
        return EncodedIcon(
            data=self.encode(surface, image_format),
            path=Path(path),
            image_format=image_format,
        )

    def write_icon(self, icon: EncodedIcon) -> Path:
        """
        Write an encoded icon to disk as a single atomic operation.

        Args:
            icon: Encoded icon

        Returns:
            Absolute path of the written file
        """
        path = write_file_atomic(icon.path, icon.data)
        self.logger.debug(f"Wrote {len(icon.data)} bytes to {path}")
        return path

    def decode(self, data: bytes) -> CaptureSurface:
        """
        Decode image file bytes into an RGBA surface.

        Images without an alpha channel decode as fully opaque.

        Args:
            data: Encoded image bytes

        Returns:
            Decoded CaptureSurface

        Raises:
            ValueError: If the bytes are not a readable image
        """
        try:
            with Image.open(io.BytesIO(data)) as image:
                return pillow_image_to_surface(image)
        except OSError as e:
            raise ValueError(f"Could not decode image bytes: {e}") from e
