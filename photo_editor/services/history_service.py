import os
import logging
from typing import Optional
from dotenv import load_dotenv

from ..models.edit_history import EditHistory
from ..models.pixel_buffer import PixelBuffer
from ..repositories.edit_history_repository import EditHistoryRepository

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class HistoryService:
    """
    Business rules for undo/redo on top of EditHistoryRepository.

    * The bottom entry of `undo` is the floor and is never undone.
    * Recording a new state discards the redo branch.
    * `undo` is trimmed to the newest `max_depth` entries (0 = unbounded).
    """

    def __init__(self, max_depth: Optional[int] = None):
        if max_depth is None:
            max_depth = int(os.getenv("HISTORY_MAX_DEPTH", "50"))
        if max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")
        self.max_depth = max_depth
        self.repository = EditHistoryRepository()

    def create_history(self) -> EditHistory:
        return self.repository.create_history(self.max_depth)

    # ─── Transitions ──────────────────────────────────────────────────
    def record(self, history: EditHistory, buffer: PixelBuffer) -> None:
        """Checkpoint a snapshot of `buffer` as the new current state."""
        self.repository.push_undo(history, buffer)
        self.repository.clear_redo(history)
        if history.max_depth:
            dropped = self.repository.drop_oldest(history, history.max_depth)
            if dropped:
                logger.info(f"History depth limit {history.max_depth} reached, dropped {dropped} oldest state(s)")
        logger.debug(f"Recorded state; undo depth {self.repository.undo_depth(history)}")

    def undo(self, history: EditHistory) -> Optional[PixelBuffer]:
        """
        Step back one state.

        Returns:
            PixelBuffer: copy of the new current state, or None when only the
            floor is left (no-op).
        """
        if self.repository.undo_depth(history) <= 1:
            logger.debug("Nothing to undo")
            return None
        undone = self.repository.pop_undo(history)
        self.repository.push_redo(history, undone)
        return self.repository.peek_undo(history)

    def redo(self, history: EditHistory) -> Optional[PixelBuffer]:
        """
        Re-apply the most recently undone state.

        Returns:
            PixelBuffer: copy of the restored state, or None if there is nothing to redo.
        """
        if self.repository.redo_depth(history) == 0:
            logger.debug("Nothing to redo")
            return None
        redone = self.repository.pop_redo(history)
        self.repository.push_undo(history, redone)
        return self.repository.peek_undo(history)

    def reset(self, history: EditHistory) -> None:
        self.repository.clear(history)

    # ─── Queries ──────────────────────────────────────────────────────
    def current(self, history: EditHistory) -> Optional[PixelBuffer]:
        return self.repository.peek_undo(history)

    def can_undo(self, history: EditHistory) -> bool:
        return self.repository.undo_depth(history) > 1

    def can_redo(self, history: EditHistory) -> bool:
        return self.repository.redo_depth(history) > 0

    def state(self, history: EditHistory) -> str:
        return "active" if self.repository.undo_depth(history) else "empty"

    def depths(self, history: EditHistory):
        """(undo depth, redo depth)"""
        return self.repository.undo_depth(history), self.repository.redo_depth(history)
