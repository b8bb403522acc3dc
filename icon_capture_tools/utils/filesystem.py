"""Cross-platform filesystem utilities.

This module provides the filesystem collaborators used by the icon
pipeline: directory creation, atomic file writes and filename cleanup
that works consistently across Windows, Linux, and macOS.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Union


# Windows: / \ : * ? " < > |
# Linux/macOS: / (and null byte)
DISALLOWED_FILENAME_CHARS = r'[/\\:*?"<>|\x00-\x1F\x7F]'

WINDOWS_RESERVED_NAMES = {
    "CON", "PRN", "AUX", "NUL",
    "COM1", "COM2", "COM3", "COM4", "COM5", "COM6", "COM7", "COM8", "COM9",
    "LPT1", "LPT2", "LPT3", "LPT4", "LPT5", "LPT6", "LPT7", "LPT8", "LPT9"
}


def sanitize_filename_component(
    input_string: str,
    replacement: str = "_",
    max_length: int = 200
) -> str:
    """Make a string safe for use inside a filename on any platform.

    Unlike a full filename sanitizer, spaces are preserved because icon
    filenames are built as ``"{base name} {job name}.{ext}"``.

    Parameters
    ----------
    input_string : str
        The input string to sanitize
    replacement : str, default="_"
        Character to use as replacement for invalid characters
    max_length : int, default=200
        Maximum length of the returned component

    Returns
    -------
    str
        Sanitized string safe to embed in a filename

    Example
    -------
    >>> sanitize_filename_component("Sword: Level 2/3")
    'Sword_ Level 2_3'

    >>> sanitize_filename_component("  .hidden  ")
    'hidden'

    Notes
    -----
    - Removes leading/trailing dots and spaces
    - Empty results are replaced with "unnamed"
    - Reserved Windows names (CON, PRN, AUX, etc.) are prefixed with underscore
    """
    if not input_string:
        return "unnamed"

    safe_string = re.sub(DISALLOWED_FILENAME_CHARS, replacement, str(input_string))
    safe_string = safe_string.strip(". ")

    if len(safe_string) > max_length:
        safe_string = safe_string[:max_length].rstrip(". ")

    if safe_string.upper() in WINDOWS_RESERVED_NAMES:
        safe_string = "_" + safe_string

    if not safe_string:
        return "unnamed"

    return safe_string


def ensure_directory(path: Union[str, Path], mode: int = 0o755) -> Path:
    """Create directory if it doesn't exist, with proper permissions.

    This function creates a directory and all necessary parent directories,
    similar to `mkdir -p` in Unix systems.

    Parameters
    ----------
    path : str or Path
        Path to directory to create
    mode : int, default=0o755
        Permission mode for created directories (Unix only)
        On Windows, this parameter is ignored

    Returns
    -------
    Path
        Absolute path to the created/existing directory

    Raises
    ------
    OSError
        If directory cannot be created due to permissions or other errors
    """
    path_obj = Path(path).resolve()
    path_obj.mkdir(parents=True, exist_ok=True, mode=mode)
    return path_obj


def write_file_atomic(path: Union[str, Path], data: bytes) -> Path:
    """Write a complete byte sequence to ``path`` atomically.

    The bytes are written to a temporary file in the destination directory
    and then moved over the destination with ``os.replace``. A reader (or a
    process killed mid-write) never observes a partially written file.

    Parameters
    ----------
    path : str or Path
        Destination file path. The parent directory must exist.
    data : bytes
        Complete file contents

    Returns
    -------
    Path
        Absolute path of the written file

    Raises
    ------
    ValueError
        If ``data`` is empty
    OSError
        If the file cannot be written
    """
    if not data:
        raise ValueError(f"Refusing to write empty file: {path}")

    path_obj = Path(path).resolve()
    fd, temp_path = tempfile.mkstemp(
        prefix=".tmp_", suffix=path_obj.suffix, dir=str(path_obj.parent)
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path_obj)
    except BaseException:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise

    return path_obj
