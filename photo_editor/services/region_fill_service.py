import logging

from ..models.pixel_buffer import PixelBuffer, Color, to_color
from ..repositories.pixel_buffer_repository import PixelBufferRepository

logger = logging.getLogger(__name__)


class RegionFillService:
    """
    Paint-bucket tool: 4-connected flood fill on a copy of the buffer.
    """

    def __init__(self):
        self.repository = PixelBufferRepository()

    def fill_region(self, buffer: PixelBuffer, start_row: int, start_col: int, fill_color: Color) -> PixelBuffer:
        """
        Replace the 4-connected region of the start pixel's colour with
        `fill_color` and return the result as a new buffer.

        Uses an explicit work stack, so region size never affects call depth.

        Args:
            buffer: Source buffer (never modified)
            start_row, start_col: Seed coordinate
            fill_color: (R, G, B)

        Returns:
            PixelBuffer: Filled copy

        Raises:
            OutOfBoundsError: seed outside the buffer
        """
        self.repository.check_bounds(buffer, start_row, start_col)
        fill = to_color(fill_color)
        result = self.repository.clone(buffer)
        pixels = result.pixels
        height, width = result.shape

        target = tuple(int(c) for c in pixels[start_row, start_col])
        if target == fill:
            logger.debug(f"Fill at ({start_row}, {start_col}) is a no-op: region already {fill}")
            return result

        def matches(r: int, c: int) -> bool:
            p = pixels[r, c]
            return int(p[0]) == target[0] and int(p[1]) == target[1] and int(p[2]) == target[2]

        stack = [(start_row, start_col)]
        painted = 0
        while stack:
            r, c = stack.pop()
            pixels[r, c] = fill
            painted += 1
            if c > 0 and matches(r, c - 1):
                stack.append((r, c - 1))
            if c < width - 1 and matches(r, c + 1):
                stack.append((r, c + 1))
            if r > 0 and matches(r - 1, c):
                stack.append((r - 1, c))
            if r < height - 1 and matches(r + 1, c):
                stack.append((r + 1, c))

        logger.info(f"Filled region from ({start_row}, {start_col}) with {fill}: {painted} pixel writes")
        return result
