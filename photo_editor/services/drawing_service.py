import os
import logging
from typing import Iterable, Optional, Sequence, Tuple

import cv2
from dotenv import load_dotenv

from ..models.pixel_buffer import PixelBuffer, Color, to_color

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

Point = Tuple[int, int]  # (x, y) == (col, row) in buffer space


class DrawingService:
    """
    Brush strokes drawn straight into a buffer.
    The only in-place mutation in the engine; callers checkpoint afterwards.
    """

    def __init__(self):
        self.default_diameter = int(os.getenv("DEFAULT_BRUSH_DIAMETER", "5"))

    @staticmethod
    def _to_point(point: Sequence) -> Point:
        x, y = point
        return int(round(float(x))), int(round(float(y)))

    def draw_segment(
        self,
        buffer: PixelBuffer,
        start: Sequence,
        end: Sequence,
        diameter: Optional[int] = None,
        color: Color = (0, 0, 0),
    ) -> PixelBuffer:
        """
        Paint a round-capped line from `start` to `end` (a dot when they are equal).
        Off-buffer parts are clipped.  Mutates and returns `buffer`.
        """
        diameter = self.default_diameter if diameter is None else int(diameter)
        if diameter < 1:
            raise ValueError(f"Brush diameter must be at least 1, got {diameter}")

        rgb = tuple(int(c) for c in to_color(color))
        p0, p1 = self._to_point(start), self._to_point(end)
        # end discs are 2*radius+1 wide: the largest odd width not exceeding the brush
        radius = (diameter - 1) // 2
        canvas = buffer.pixels  # uint8, C-contiguous, drawn into directly

        if radius == 0:
            # 1-2px brush: single-pixel dot, or a line as thick as the brush
            if p1 != p0:
                cv2.line(canvas, p0, p1, rgb, thickness=diameter, lineType=cv2.LINE_8)
            elif 0 <= p0[0] < buffer.width and 0 <= p0[1] < buffer.height:
                canvas[p0[1], p0[0]] = rgb
            logger.debug(f"Drew segment {p0}->{p1} d={diameter} colour={rgb}")
            return buffer

        # caps: filled discs at both ends; body: thick line between them
        cv2.circle(canvas, p0, radius, rgb, thickness=-1, lineType=cv2.LINE_8)
        if p1 != p0:
            cv2.circle(canvas, p1, radius, rgb, thickness=-1, lineType=cv2.LINE_8)
            cv2.line(canvas, p0, p1, rgb, thickness=diameter, lineType=cv2.LINE_8)

        logger.debug(f"Drew segment {p0}->{p1} d={diameter} colour={rgb}")
        return buffer

    def draw_stroke(
        self,
        buffer: PixelBuffer,
        points: Iterable[Sequence],
        diameter: Optional[int] = None,
        color: Color = (0, 0, 0),
    ) -> PixelBuffer:
        """
        Paint a polyline through `points`; consecutive segments share
        their end discs, which gives round joins.
        """
        pts = [self._to_point(p) for p in points]
        if not pts:
            return buffer
        if len(pts) == 1:
            return self.draw_segment(buffer, pts[0], pts[0], diameter, color)
        for p0, p1 in zip(pts, pts[1:]):
            self.draw_segment(buffer, p0, p1, diameter, color)
        logger.info(f"Drew stroke of {len(pts)} points on {buffer.width}x{buffer.height} buffer")
        return buffer
