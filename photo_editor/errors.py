"""
Exception hierarchy for the editing engine.
Everything raised on purpose derives from EditorError so the HTTP and CLI
boundaries can catch the whole family in one place.
"""


class EditorError(Exception):
    """Base class for every error raised by the editing engine."""


class InvalidDimensionError(EditorError, ValueError):
    """Width or height below 1, or a pixel array of the wrong shape."""


class OutOfBoundsError(EditorError, IndexError):
    """A (row, col) coordinate outside [0, height) x [0, width)."""


class InvalidKernelError(EditorError, ValueError):
    """Convolution matrix is empty or not rectangular."""


class DecodeError(EditorError):
    """Encoded image bytes could not be turned into a PixelBuffer."""


class UnsupportedFormatError(DecodeError):
    """The bytes are not in any image format we can read."""


class EncodeError(EditorError):
    """A PixelBuffer could not be written in the requested format."""


class UnknownOperationError(EditorError, ValueError):
    """Name does not match any colour transform or kernel preset."""


class NoImageError(EditorError):
    """Session has no current image to operate on."""
