"""Utility modules for Icon Capture Tools."""

from icon_capture_tools.utils.filesystem import (
    sanitize_filename_component,
    ensure_directory,
    write_file_atomic,
)

__all__ = [
    "sanitize_filename_component",
    "ensure_directory",
    "write_file_atomic",
]
