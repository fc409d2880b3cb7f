"""
Editing session
One document: the live PixelBuffer plus its undo/redo history.
Every edit is "compute or mutate, then record" under a single lock, so a
failed operation never reaches the history and callers never see a
half-applied result.
"""
from __future__ import annotations

import logging
import threading
import uuid
from typing import Iterable, Optional, Sequence, Union

from ..errors import NoImageError
from ..models.color_transform import ColorTransform
from ..models.kernel import ConvolutionKernel
from ..models.pixel_buffer import PixelBuffer, Color
from ..services.drawing_service import DrawingService
from ..services.filter_service import FilterService
from ..services.history_service import HistoryService
from ..services.pixel_buffer_service import PixelBufferService
from ..services.region_fill_service import RegionFillService

logger = logging.getLogger(__name__)


class EditingSession:
    """Owns the current buffer exclusively; everything else borrows it read-only."""

    def __init__(
        self,
        session_id: str | None = None,
        *,
        buffer_service: PixelBufferService | None = None,
        filter_service: FilterService | None = None,
        fill_service: RegionFillService | None = None,
        drawing_service: DrawingService | None = None,
        history_service: HistoryService | None = None,
    ):
        self.session_id = session_id or str(uuid.uuid4())
        self.buffer_service = buffer_service or PixelBufferService()
        self.filter_service = filter_service or FilterService()
        self.fill_service = fill_service or RegionFillService()
        self.drawing_service = drawing_service or DrawingService()
        self.history_service = history_service or HistoryService()

        self.history = self.history_service.create_history()
        self._current: Optional[PixelBuffer] = None
        self._stroke_pending = False  # live buffer holds draw_segment paint not yet recorded
        self._lock = threading.RLock()

    # ─── State ────────────────────────────────────────────────────────
    @property
    def current(self) -> Optional[PixelBuffer]:
        return self._current

    @property
    def has_image(self) -> bool:
        return self._current is not None

    def can_undo(self) -> bool:
        return self._stroke_pending or self.history_service.can_undo(self.history)

    def can_redo(self) -> bool:
        return self.history_service.can_redo(self.history)

    def _require_image(self) -> PixelBuffer:
        if self._current is None:
            raise NoImageError("No image is open in this session")
        return self._current

    def _replace_document(self, buffer: PixelBuffer) -> PixelBuffer:
        self.history_service.reset(self.history)
        self._current = buffer
        self._stroke_pending = False
        self.history_service.record(self.history, buffer)
        return buffer

    def _commit(self, buffer: PixelBuffer) -> PixelBuffer:
        self._current = buffer
        self._stroke_pending = False
        self.history_service.record(self.history, buffer)
        return buffer

    # ─── Document lifecycle ───────────────────────────────────────────
    def new_image(self, width: int | None = None, height: int | None = None,
                  fill: Color | None = None) -> PixelBuffer:
        with self._lock:
            if width is None and height is None:
                buffer = self.buffer_service.create_default(fill)
            else:
                buffer = self.buffer_service.create(
                    width if width is not None else self.buffer_service.DEFAULT_WIDTH,
                    height if height is not None else self.buffer_service.DEFAULT_HEIGHT,
                    fill,
                )
            logger.info(f"[{self.session_id}] New {buffer.width}x{buffer.height} image")
            return self._replace_document(buffer)

    def open_bytes(self, data: bytes) -> PixelBuffer:
        with self._lock:
            buffer = self.buffer_service.decode(data)
            logger.info(f"[{self.session_id}] Opened {buffer.width}x{buffer.height} image")
            return self._replace_document(buffer)

    def save_bytes(self, fmt: str | None = None) -> bytes:
        with self._lock:
            return self.buffer_service.encode(self._require_image(), fmt)

    # ─── Edits ────────────────────────────────────────────────────────
    def apply_color_transform(self, transform: Union[str, ColorTransform]) -> PixelBuffer:
        with self._lock:
            result = self.filter_service.apply_color_transform(self._require_image(), transform)
            return self._commit(result)

    def apply_convolution(self, kernel: Union[str, ConvolutionKernel]) -> PixelBuffer:
        with self._lock:
            result = self.filter_service.apply_convolution(self._require_image(), kernel)
            return self._commit(result)

    def fill_region(self, row: int, col: int, color: Color) -> PixelBuffer:
        with self._lock:
            result = self.fill_service.fill_region(self._require_image(), row, col, color)
            return self._commit(result)

    def draw_segment(self, start: Sequence, end: Sequence, diameter: int | None = None,
                     color: Color = (0, 0, 0)) -> PixelBuffer:
        """Paint into the live buffer without recording; call checkpoint() when the stroke ends."""
        with self._lock:
            buffer = self.drawing_service.draw_segment(self._require_image(), start, end, diameter, color)
            self._stroke_pending = True
            return buffer

    def draw_stroke(self, points: Iterable[Sequence], diameter: int | None = None,
                    color: Color = (0, 0, 0)) -> PixelBuffer:
        with self._lock:
            buffer = self.drawing_service.draw_stroke(self._require_image(), points, diameter, color)
            return self._commit(buffer)

    def checkpoint(self) -> PixelBuffer:
        """Record the live buffer as it is now (end of an incremental stroke)."""
        with self._lock:
            return self._commit(self._require_image())

    # ─── History ──────────────────────────────────────────────────────
    def _discard_pending_stroke(self) -> Optional[PixelBuffer]:
        """Roll the live buffer back to the last recorded state."""
        self._stroke_pending = False
        self._current = self.history_service.current(self.history)
        return self._current

    def undo(self) -> Optional[PixelBuffer]:
        """An unfinished stroke is undone on its own; recorded history is left alone."""
        with self._lock:
            if self._stroke_pending:
                logger.info(f"[{self.session_id}] Undo of unrecorded stroke")
                return self._discard_pending_stroke()
            restored = self.history_service.undo(self.history)
            if restored is not None:
                self._current = restored
                logger.info(f"[{self.session_id}] Undo")
            return restored

    def redo(self) -> Optional[PixelBuffer]:
        with self._lock:
            if self._stroke_pending:
                self._discard_pending_stroke()
            restored = self.history_service.redo(self.history)
            if restored is not None:
                self._current = restored
                logger.info(f"[{self.session_id}] Redo")
            return restored

    def close(self) -> None:
        with self._lock:
            self.history_service.reset(self.history)
            self._current = None
            self._stroke_pending = False

    def summary(self) -> dict:
        with self._lock:
            undo_depth, redo_depth = self.history_service.depths(self.history)
            return {
                "session_id": self.session_id,
                "has_image": self.has_image,
                "width": self._current.width if self._current is not None else None,
                "height": self._current.height if self._current is not None else None,
                "can_undo": self.can_undo(),
                "can_redo": self.can_redo(),
                "undo_depth": undo_depth,
                "redo_depth": redo_depth,
            }
