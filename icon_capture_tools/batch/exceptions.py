"""Custom exceptions for icon batch processing operations."""


class IconProcessingError(Exception):
    """Base exception for all icon processing errors.

    This is the parent exception class for all icon-related errors.
    Catching this exception will catch all icon processing errors.
    """

    pass


class ConfigurationError(IconProcessingError):
    """Raised when the batch configuration is invalid.

    This is detected before any capture work begins, aborts the entire
    run, and guarantees that no files are written.

    Examples
    --------
    - Transparent background requested with the JPEG format
    - Icon size is zero or negative
    - Supersample factor below 1
    """

    pass


class MissingPreviewError(IconProcessingError):
    """Raised when a preview bitmap is unavailable for an object.

    The current job produces no output file.
    """

    pass


class EncodeUnsupportedError(IconProcessingError):
    """Raised when the requested format could not produce a byte sequence.

    Encoding failures short-circuit before the write step, so no partial
    file is ever written.
    """

    pass


class CropBoundsError(IconProcessingError, ValueError):
    """Raised when a crop target exceeds the bounds of its source surface.

    Crops are never clamped or wrapped.
    """

    pass


class FrameSequenceError(IconProcessingError):
    """Raised when the frame capture protocol is driven out of order.

    Examples
    --------
    - Acquiring pixels before a frame was presented after the spawn
    - Finishing the render target reset without an intervening frame
    - Resuming a capture that has already been resumed
    """

    pass


class InvalidJobCSVError(IconProcessingError):
    """Raised when a jobs CSV file is malformed or contains invalid data.

    Examples
    --------
    - CSV file doesn't exist
    - Required columns missing
    - Invalid data types or values
    """

    pass
