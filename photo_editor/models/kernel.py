from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Sequence
import numpy as np

from ..errors import InvalidKernelError, UnknownOperationError


@dataclass(frozen=True, eq=False)
class ConvolutionKernel:
    """
    Value-object: rectangular weight matrix plus a scalar multiplier that
    is folded into every weight at read time.
    Odd sizes give a centre tap; even sizes are centred by floor division.
    """
    matrix: np.ndarray
    multiplier: float = 1.0
    name: str = field(default="custom", compare=False)

    def __post_init__(self):
        matrix = _validated_matrix(self.matrix)
        matrix.setflags(write=False)
        object.__setattr__(self, "matrix", matrix)
        object.__setattr__(self, "multiplier", float(self.multiplier))

    @property
    def height(self) -> int:
        return int(self.matrix.shape[0])

    @property
    def width(self) -> int:
        return int(self.matrix.shape[1])

    def weight(self, i: int, j: int) -> float:
        """Effective tap weight: matrix[i][j] * multiplier."""
        return float(self.matrix[i, j]) * self.multiplier

    def weights(self) -> np.ndarray:
        """All effective weights as a (kh, kw) float64 array."""
        return self.matrix * self.multiplier

    @classmethod
    def preset(cls, name: str) -> "ConvolutionKernel":
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return PRESETS[key]
        except KeyError:
            raise UnknownOperationError(f"Unknown kernel preset: {name!r}") from None

    def __repr__(self) -> str:
        return f"ConvolutionKernel(name={self.name!r}, {self.height}x{self.width}, multiplier={self.multiplier:g})"


def _validated_matrix(matrix) -> np.ndarray:
    if isinstance(matrix, np.ndarray):
        if matrix.ndim != 2 or matrix.size == 0:
            raise InvalidKernelError(f"Kernel matrix must be a non-empty 2-D array, got shape {matrix.shape}")
        return np.array(matrix, dtype=np.float64)

    rows = list(matrix)
    if not rows:
        raise InvalidKernelError("Kernel matrix cannot be empty.")
    row_length = len(rows[0])
    if row_length == 0:
        raise InvalidKernelError("Kernel matrix cannot have empty rows.")
    for row in rows:
        if len(row) != row_length:
            raise InvalidKernelError("Kernel matrix cannot have rows of different lengths.")
    return np.array(rows, dtype=np.float64)


def _kernel(name: str, rows: Sequence[Sequence[float]], multiplier: float = 1.0) -> ConvolutionKernel:
    return ConvolutionKernel(np.array(rows, dtype=np.float64), multiplier, name=name)


# ── Presets ──────────────────────────────────────────────────────────
BLUR = _kernel("blur", [[1] * 5] * 5, 1.0 / 25.0)

# weights kept exactly as shipped in the first release (note the two 26s)
GAUSSIAN_BLUR = _kernel("gaussian_blur", [
    [1,  4,  6,  4, 1],
    [4, 16, 24, 26, 4],
    [6, 24, 36, 24, 6],
    [4, 16, 24, 26, 4],
    [1,  4,  6,  4, 1],
], 1.0 / 256.0)

SHARPEN = _kernel("sharpen", [
    [0, -1, 0],
    [-1, 5, -1],
    [0, -1, 0],
])

LAPLACIAN = _kernel("laplacian", [
    [-1, -1, -1],
    [-1,  8, -1],
    [-1, -1, -1],
])

PRESETS: Dict[str, ConvolutionKernel] = {
    k.name: k for k in (BLUR, GAUSSIAN_BLUR, SHARPEN, LAPLACIAN)
}
