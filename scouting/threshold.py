from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .field import Field
from .yield_model import DEFAULT_PRICE_PER_BUSHEL, economic_benefit, replant_cost

logger = logging.getLogger(__name__)

MIN_REPLANT_ACRES = 10


@dataclass(frozen=True)
class EconomicParams:
    """Market and policy parameters for the replant decision.

    target_stand_count is the stand the optimizer assumes a replanted acre reaches;
    fallback_threshold is offered when no threshold is profitable.
    """
    price_per_bushel: float = DEFAULT_PRICE_PER_BUSHEL
    target_stand_count: float = 28.5
    min_replant_acres: int = MIN_REPLANT_ACRES
    fallback_threshold: int = 25
    starting_bank: float = 100000.0
    drone_cost: float = 160.0


@dataclass(frozen=True)
class ThresholdRecommendation:
    """Threshold offered to the player and whether the optimizer actually found it."""
    threshold: int
    found: bool
    net_benefit: float = 0.0


def calculate_smart_threshold(
    field: Field,
    target_stand_count_after_replant: float,
    price_per_bushel: float,
    min_replant_acres: int = MIN_REPLANT_ACRES,
) -> Optional[int]:
    """Return the most profitable replant threshold, or None if none is profitable.

    Every cell value is tried as a threshold in ascending order (duplicates included);
    cells strictly below it would be replanted. Candidates replanting fewer than
    min_replant_acres are skipped. The first candidate with the strictly largest
    positive net benefit wins.
    """
    best = _search(field, target_stand_count_after_replant, price_per_bushel, min_replant_acres)
    return None if best is None else best[0]


def _search(
    field: Field,
    target_stand_count: float,
    price_per_bushel: float,
    min_replant_acres: int,
) -> Optional[tuple[int, float]]:
    candidates = np.sort(field.stand_counts.ravel())
    prefix_sums = np.concatenate(([0.0], np.cumsum(candidates, dtype=float)))
    cost_per_acre = replant_cost(1)

    best_threshold: Optional[int] = None
    max_benefit = 0.0
    for threshold in candidates:
        # candidates is sorted, so its left insertion point counts the cells below threshold
        acres_below = int(np.searchsorted(candidates, threshold, side="left"))
        if acres_below < min_replant_acres:
            continue

        cost = acres_below * cost_per_acre
        average_before = float(prefix_sums[acres_below]) / acres_below if acres_below else 0.0
        benefit = economic_benefit(acres_below, average_before, target_stand_count, price_per_bushel) - cost
        if benefit > 0 and benefit > max_benefit:
            best_threshold = int(threshold)
            max_benefit = benefit

    if best_threshold is None:
        logger.debug("No profitable replant threshold")
        return None
    logger.debug("Best replant threshold %d with net benefit %.2f", best_threshold, max_benefit)
    return best_threshold, max_benefit


class ThresholdOptimizer:
    """Recommend a smart-replant threshold, falling back to a fixed one when none pays off."""

    def __init__(self, params: Optional[EconomicParams] = None):
        self.params = params if params is not None else EconomicParams()

    def recommend(self, field: Field) -> ThresholdRecommendation:
        params = self.params
        best = _search(field, params.target_stand_count, params.price_per_bushel, params.min_replant_acres)
        if best is None:
            return ThresholdRecommendation(threshold=params.fallback_threshold, found=False)
        threshold, net_benefit = best
        return ThresholdRecommendation(threshold=threshold, found=True, net_benefit=net_benefit)
