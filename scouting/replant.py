from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np

from .field import Field
from .field_generator import FieldGenerator, FieldParams
from .observation import ObservationTracker
from .yield_model import replant_cost

logger = logging.getLogger(__name__)


class InvalidStateError(RuntimeError):
    """Raised when an operation is not allowed in the current game state."""


@dataclass(frozen=True)
class DoNotReplant:
    pass


@dataclass(frozen=True)
class FullReplant:
    pass


@dataclass(frozen=True)
class ThresholdReplant:
    """Replant only the cells whose stand count is strictly below threshold."""
    threshold: float


Decision = Union[DoNotReplant, FullReplant, ThresholdReplant]


@dataclass(frozen=True)
class CellChange:
    """One regenerated cell, for the presentation layer to animate."""
    row: int
    col: int
    before: int
    after: int


@dataclass(frozen=True)
class ReplantOutcome:
    field: Field
    acres_affected: int
    cost: float
    changes: Tuple[CellChange, ...] = ()


class ReplantEngine:
    """Apply a replant decision to a field in one synchronous step.

    Replanted cells are redrawn with FieldGenerator.generate_single_value, which does not
    smooth or add anomalies; regenerated cells are statistically unlike the original field.
    """

    def __init__(self, generator: FieldGenerator):
        self.generator = generator

    def apply_decision(self, field: Field, observation: ObservationTracker, decision: Decision) -> ReplantOutcome:
        """Apply decision to field in place and report acres replanted and cost."""
        if field.shape != observation.shape:
            raise ValueError("field and observation grid must share dimensions")

        if isinstance(decision, DoNotReplant):
            return ReplantOutcome(field=field, acres_affected=0, cost=0)
        if isinstance(decision, FullReplant):
            mask = np.ones(field.shape, dtype=bool)
        elif isinstance(decision, ThresholdReplant):
            if not observation.is_fully_opened():
                raise InvalidStateError("threshold replant requires a fully scouted field")
            # Evaluated once, before any cell is overwritten
            mask = field.stand_counts < decision.threshold
        else:
            raise TypeError(f"unknown replant decision: {decision!r}")

        changes = []
        for row, col in zip(*np.nonzero(mask)):
            row, col = int(row), int(col)
            before = field[row, col]
            field.set_stand_count(row, col, self.generator.generate_single_value())
            changes.append(CellChange(row=row, col=col, before=before, after=field[row, col]))

        acres_affected = len(changes)
        cost = replant_cost(acres_affected)
        logger.debug("%s replanted %d acres for $%.0f", type(decision).__name__, acres_affected, cost)
        return ReplantOutcome(field=field, acres_affected=acres_affected, cost=cost, changes=tuple(changes))


def apply_decision(
    field: Field,
    observation: ObservationTracker,
    decision: Decision,
    rng: np.random.Generator,
    params: Optional[FieldParams] = None,
) -> ReplantOutcome:
    """Apply decision using a generator drawing from rng."""
    return ReplantEngine(FieldGenerator(params, rng)).apply_decision(field, observation, decision)
