from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy.ndimage import correlate

from .field import MAX_STAND, Field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldParams:
    """Parameters controlling synthetic stand-count generation.

    The base normal sample is biased by a second perturbation, smoothed for spatial
    correlation, then degraded by isolated anomalies and low-yield patches.
    """
    mean: float = 31.0
    std_dev: float = 5.0
    max_stand: float = MAX_STAND
    noise_mean: float = -2.0
    noise_std_dev: float = 2.0
    smoothing_sigma: float = 0.5
    anomaly_probability: float = 0.02
    anomaly_max: int = 10
    patch_count: int = 2
    patch_size: int = 2
    patch_factor: float = 0.9


def gaussian_kernel(size: int = 3, sigma: float = 0.5) -> np.ndarray:
    """Return a normalized size x size Gaussian kernel."""
    center = size // 2
    offsets = np.arange(size, dtype=float) - center
    x, y = np.meshgrid(offsets, offsets, indexing="ij")
    kernel = np.exp(-(x ** 2 + y ** 2) / (2.0 * sigma ** 2))
    return kernel / kernel.sum()


def smooth(grid: np.ndarray, sigma: float = 0.5, size: int = 3) -> np.ndarray:
    """Gaussian-smooth a 2D grid, renormalizing by the kernel weight present at each cell.

    Edge and corner cells only see part of the kernel; dividing by that partial weight
    keeps boundaries from being pulled towards zero.
    """
    grid = np.asarray(grid, dtype=float)
    kernel = gaussian_kernel(size, sigma)
    weighted_sum = correlate(grid, kernel, mode="constant", cval=0.0)
    weight_total = correlate(np.ones_like(grid), kernel, mode="constant", cval=0.0)
    return weighted_sum / weight_total


class FieldGenerator:
    """Generate spatially-correlated stand-count fields.

    High-level flow for a full field:
    - sample a base normal grid and add a low-biased perturbation
    - clip, then smooth with a 3x3 Gaussian kernel
    - inject isolated emergence failures and low-yield patches
    - round to whole stand counts
    """

    def __init__(self, params: Optional[FieldParams] = None, rng: Optional[np.random.Generator] = None):
        """Create a generator.

        If rng is not provided, a new NumPy default RNG is created.
        """
        self.params = params if params is not None else FieldParams()
        self.random_generator = rng if rng is not None else np.random.default_rng()

    def generate_field(self, rows: int, cols: int) -> Field:
        """Generate a rows x cols field of stand counts."""
        if rows <= 0 or cols <= 0:
            raise ValueError("rows and cols must be positive")

        params = self.params
        rng = self.random_generator
        shape = (int(rows), int(cols))

        stand_counts = rng.normal(params.mean, params.std_dev, size=shape)
        stand_counts += rng.normal(params.noise_mean, params.noise_std_dev, size=shape)
        stand_counts = np.clip(stand_counts, 0.0, float(params.max_stand))
        stand_counts = smooth(stand_counts, params.smoothing_sigma)

        stand_counts = self._inject_anomalies(stand_counts)
        stand_counts = self._inject_patches(stand_counts)

        field = Field(np.floor(stand_counts + 0.5), max_stand=params.max_stand)
        logger.debug("Generated %dx%d field, mean stand count %.2f", rows, cols, float(field.stand_counts.mean()))
        return field

    def generate_single_value(self) -> int:
        """Draw one replacement stand count (no smoothing, anomalies or patches)."""
        params = self.params
        value = float(np.clip(self.random_generator.normal(params.mean, params.std_dev), 0.0, float(params.max_stand)))
        return int(np.floor(value + 0.5))

    def _inject_anomalies(self, stand_counts: np.ndarray) -> np.ndarray:
        """Overwrite random cells with low whole values (isolated emergence failures)."""
        rng = self.random_generator
        anomaly_mask = rng.random(stand_counts.shape) < self.params.anomaly_probability
        anomaly_values = rng.integers(0, self.params.anomaly_max, size=stand_counts.shape)
        return np.where(anomaly_mask, anomaly_values.astype(float), stand_counts)

    def _inject_patches(self, stand_counts: np.ndarray) -> np.ndarray:
        """Scale a few square blocks down to simulate low-yield patches."""
        size = self.params.patch_size
        nrows, ncols = stand_counts.shape
        if nrows < size or ncols < size:
            return stand_counts

        rng = self.random_generator
        patched = stand_counts.copy()
        for _ in range(self.params.patch_count):
            start_row = int(rng.integers(0, nrows - size + 1))
            start_col = int(rng.integers(0, ncols - size + 1))
            patched[start_row:start_row + size, start_col:start_col + size] *= self.params.patch_factor
        return patched
