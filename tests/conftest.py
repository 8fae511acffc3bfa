import numpy as np
import pytest

from scouting import Field


@pytest.fixture
def rng():
    return np.random.default_rng(20240917)


@pytest.fixture
def make_field():
    def _make(rows, cols, fill, overrides=None):
        stand_counts = np.full((rows, cols), fill, dtype=float)
        for (row, col), value in (overrides or {}).items():
            stand_counts[row, col] = value
        return Field(stand_counts)

    return _make
