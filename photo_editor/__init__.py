"""
In-memory raster editing engine: pixel buffers, colour filters,
wrap-around convolution, flood fill, brush strokes and undo/redo history.
"""
from .errors import (
    EditorError,
    InvalidDimensionError,
    OutOfBoundsError,
    InvalidKernelError,
    DecodeError,
    UnsupportedFormatError,
    EncodeError,
    UnknownOperationError,
    NoImageError,
)
from .models.pixel_buffer import PixelBuffer
from .models.color_transform import ColorTransform
from .models.kernel import ConvolutionKernel
from .models.edit_history import EditHistory
from .pipeline.editing_session import EditingSession

__version__ = "1.0.0"

__all__ = [
    "EditorError",
    "InvalidDimensionError",
    "OutOfBoundsError",
    "InvalidKernelError",
    "DecodeError",
    "UnsupportedFormatError",
    "EncodeError",
    "UnknownOperationError",
    "NoImageError",
    "PixelBuffer",
    "ColorTransform",
    "ConvolutionKernel",
    "EditHistory",
    "EditingSession",
]
