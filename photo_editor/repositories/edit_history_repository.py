from typing import Optional

from ..models.edit_history import EditHistory
from ..models.pixel_buffer import PixelBuffer


def _snapshot(buffer: PixelBuffer) -> PixelBuffer:
    return PixelBuffer(buffer.pixels.copy())


class EditHistoryRepository:
    """
    Raw stack operations on EditHistory.
    Every buffer crossing this boundary is deep-copied in both directions,
    so live buffers never alias stored snapshots.
    """

    @staticmethod
    def create_history(max_depth: int = 0) -> EditHistory:
        return EditHistory(max_depth=max_depth)

    @staticmethod
    def push_undo(history: EditHistory, buffer: PixelBuffer) -> None:
        history.undo.append(_snapshot(buffer))

    @staticmethod
    def push_redo(history: EditHistory, buffer: PixelBuffer) -> None:
        history.redo.append(_snapshot(buffer))

    @staticmethod
    def pop_undo(history: EditHistory) -> PixelBuffer:
        return history.undo.pop()

    @staticmethod
    def pop_redo(history: EditHistory) -> PixelBuffer:
        return history.redo.pop()

    @staticmethod
    def peek_undo(history: EditHistory) -> Optional[PixelBuffer]:
        if not history.undo:
            return None
        return _snapshot(history.undo[-1])

    @staticmethod
    def clear_redo(history: EditHistory) -> None:
        history.redo.clear()

    @staticmethod
    def clear(history: EditHistory) -> None:
        history.undo.clear()
        history.redo.clear()

    @staticmethod
    def drop_oldest(history: EditHistory, keep: int) -> int:
        """Trim `undo` to its newest `keep` entries; returns how many were dropped."""
        excess = len(history.undo) - keep
        if excess <= 0:
            return 0
        del history.undo[:excess]
        return excess

    @staticmethod
    def undo_depth(history: EditHistory) -> int:
        return len(history.undo)

    @staticmethod
    def redo_depth(history: EditHistory) -> int:
        return len(history.redo)
