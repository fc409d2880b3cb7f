from __future__ import annotations
from dataclasses import dataclass, field
from typing import List

from .pixel_buffer import PixelBuffer


@dataclass
class EditHistory:
    """
    Data object for the linear undo/redo model.
    The top of `undo` is the state currently being edited.
    """
    undo: List[PixelBuffer] = field(default_factory=list)
    redo: List[PixelBuffer] = field(default_factory=list)
    max_depth: int = 0  # 0 -> unbounded
