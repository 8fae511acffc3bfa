from __future__ import annotations

from typing import Optional

import numpy as np

from .field import Field


class ObservationTracker:
    """Track which cells of a field have been scouted.

    Cells only ever move from closed to open; replanting a cell does not close it again.
    """

    def __init__(self, rows: int, cols: int):
        if rows <= 0 or cols <= 0:
            raise ValueError("rows and cols must be positive")
        self.opened = np.zeros((int(rows), int(cols)), dtype=bool)

    @classmethod
    def for_field(cls, field: Field) -> ObservationTracker:
        """Create a tracker matching the dimensions of field."""
        rows, cols = field.shape
        return cls(rows, cols)

    @property
    def shape(self) -> tuple[int, int]:
        return self.opened.shape

    @property
    def opened_count(self) -> int:
        return int(self.opened.sum())

    def open_cell(self, row: int, col: int) -> bool:
        """Open a cell; returns False if it was already open."""
        nrows, ncols = self.opened.shape
        if not (0 <= row < nrows and 0 <= col < ncols):
            raise IndexError(f"cell ({row}, {col}) is outside a {nrows}x{ncols} field")
        if self.opened[row, col]:
            return False
        self.opened[row, col] = True
        return True

    def open_all(self) -> int:
        """Open every remaining cell and return how many were newly opened."""
        newly_opened = int((~self.opened).sum())
        self.opened[:, :] = True
        return newly_opened

    def is_opened(self, row: int, col: int) -> bool:
        return bool(self.opened[row, col])

    def is_fully_opened(self) -> bool:
        return bool(self.opened.all())

    def average_of_opened(self, field: Field) -> Optional[float]:
        """Mean stand count over opened cells, or None when nothing has been scouted yet."""
        if field.shape != self.opened.shape:
            raise ValueError("field and observation grid must share dimensions")
        if not self.opened.any():
            return None
        return float(field.stand_counts[self.opened].mean())

    def reset(self) -> None:
        self.opened[:, :] = False
