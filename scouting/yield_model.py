"""Conversions from stand count to yield and money.

Yield is linear in stand count around a reference point: a stand of 31k plants per
acre yields 175 bushels per acre.
"""
from __future__ import annotations

import numpy as np

from .field import Field

REFERENCE_STAND_COUNT = 31.0
REFERENCE_YIELD = 175.0
COST_PER_ACRE = 125
DEFAULT_PRICE_PER_BUSHEL = 4.0


def yield_from_stand_count(stand_count: float) -> float:
    """Bushels per acre for a given stand count (thousands of plants per acre)."""
    return REFERENCE_YIELD * (stand_count / REFERENCE_STAND_COUNT)


def economic_benefit(
    acres: float,
    stand_count_before: float,
    stand_count_after: float,
    price_per_bushel: float = DEFAULT_PRICE_PER_BUSHEL,
) -> float:
    """Dollar value of the yield change from stand_count_before to stand_count_after."""
    yield_increase = yield_from_stand_count(stand_count_after) - yield_from_stand_count(stand_count_before)
    return yield_increase * price_per_bushel * acres


def replant_cost(acres: float) -> float:
    return acres * COST_PER_ACRE


def average_stand_count(field: Field) -> float:
    """Mean stand count over the whole field."""
    return float(np.mean(field.stand_counts))
