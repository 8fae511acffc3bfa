from __future__ import annotations

import numpy as np

MAX_STAND = 35


class Field:
    """A gridded field of stand counts in [0, MAX_STAND].

    Stand count is interpreted as thousands of plants per acre; one cell is one acre.
    """

    def __init__(self, stand_counts: np.ndarray, max_stand: float = MAX_STAND):
        """Create a field from a 2D stand-count grid (values are clipped and rounded)."""
        stand_counts = np.asarray(stand_counts, dtype=float)
        if stand_counts.ndim != 2:
            raise ValueError("stand_counts must be a 2D array")

        self.max_stand = max_stand
        self.stand_counts = np.floor(np.clip(stand_counts, 0.0, float(max_stand)) + 0.5).astype(np.int64)
        self.n_acres = int(self.stand_counts.size)

    @property
    def shape(self) -> tuple[int, int]:
        """Grid shape as (n_rows, n_cols)."""
        return self.stand_counts.shape

    def __getitem__(self, position: tuple[int, int]) -> int:
        row, col = position
        return int(self.stand_counts[row, col])

    def set_stand_count(self, row: int, col: int, value: float) -> None:
        """Overwrite one cell in place, keeping it within bounds."""
        self.stand_counts[row, col] = int(np.floor(np.clip(value, 0.0, float(self.max_stand)) + 0.5))

    def count_below(self, threshold: float) -> int:
        """Number of cells whose stand count is strictly below threshold."""
        return int((self.stand_counts < threshold).sum())

    def copy(self) -> Field:
        return Field(self.stand_counts.copy(), max_stand=self.max_stand)
