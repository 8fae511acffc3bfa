"""
Scouting session: one round of the replant-decision game.

The session owns the stand-count field and its observation grid, and is the only
place the two are mutated together. Presentation code reveals cells, asks for the
recommended smart-replant threshold, submits one decision and reads back the
economic result and score. It never touches the arrays directly.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .field import Field
from .field_generator import FieldGenerator, FieldParams
from .observation import ObservationTracker
from .replant import (
    CellChange,
    Decision,
    DoNotReplant,
    FullReplant,
    InvalidStateError,
    ReplantEngine,
    ThresholdReplant,
)
from .threshold import EconomicParams, ThresholdOptimizer, ThresholdRecommendation
from .yield_model import REFERENCE_YIELD, average_stand_count, economic_benefit, yield_from_stand_count

logger = logging.getLogger(__name__)

DEFAULT_ROWS = 7
DEFAULT_COLS = 10


@dataclass(frozen=True)
class EconomicResult:
    """Economic summary of an applied replant decision."""
    acres_affected: int
    cost: float
    yield_before: float
    yield_after: float
    net_benefit: float


def _round_half_up(value: float) -> int:
    return int(np.floor(value + 0.5))


class ScoutingSession:
    """A single game session over a freshly generated field.

    If rng is not provided, a new NumPy default RNG is created. The same rng feeds
    field generation and replanting, so a seeded session is fully reproducible.
    """

    def __init__(
        self,
        rows: int = DEFAULT_ROWS,
        cols: int = DEFAULT_COLS,
        rng: Optional[np.random.Generator] = None,
        field_params: Optional[FieldParams] = None,
        economics: Optional[EconomicParams] = None,
    ):
        if rows <= 0 or cols <= 0:
            raise ValueError("rows and cols must be positive")

        self.rows = int(rows)
        self.cols = int(cols)
        self.economics = economics if economics is not None else EconomicParams()
        self.generator = FieldGenerator(field_params, rng)
        self.engine = ReplantEngine(self.generator)
        self.optimizer = ThresholdOptimizer(self.economics)
        self.best_score: Optional[int] = None
        self._start()

    def _start(self) -> None:
        self.field: Field = self.generator.generate_field(self.rows, self.cols)
        self.observation = ObservationTracker.for_field(self.field)
        self.money_in_bank = float(self.economics.starting_bank)
        self.estimated_yield = REFERENCE_YIELD
        self.result: Optional[EconomicResult] = None
        self.changes: Tuple[CellChange, ...] = ()
        logger.info("New %dx%d field, average stand count %.1f", self.rows, self.cols, average_stand_count(self.field))

    def restart(self) -> None:
        """Start over on a new field; the best score is kept."""
        self._start()

    @property
    def decision_made(self) -> bool:
        return self.result is not None

    def reveal(self, row: int, col: int) -> int:
        """Scout a cell and refresh the yield estimate from everything scouted so far."""
        if self.observation.open_cell(row, col):
            average = self.observation.average_of_opened(self.field)
            if average is not None:
                self.estimated_yield = yield_from_stand_count(average)
        return self.field[row, col]

    def drone_scout(self) -> int:
        """Pay for a drone flight that scouts every cell; returns how many cells it revealed."""
        cost = self.economics.drone_cost
        if self.money_in_bank < cost:
            raise InvalidStateError(f"a drone flight costs ${cost:g}, only ${self.money_in_bank:.0f} in the bank")

        self.money_in_bank -= cost
        revealed = self.observation.open_all()
        self.estimated_yield = yield_from_stand_count(average_stand_count(self.field))
        logger.info("Drone flight revealed %d cells for $%.0f", revealed, cost)
        return revealed

    def average_of_opened(self) -> Optional[float]:
        return self.observation.average_of_opened(self.field)

    def recommended_threshold(self) -> ThresholdRecommendation:
        """Smart-replant threshold computed over the whole field, as a final check would see it."""
        return self.optimizer.recommend(self.field)

    def available_decisions(self) -> List[Decision]:
        decisions: List[Decision] = [DoNotReplant(), FullReplant()]
        if self.observation.is_fully_opened():
            decisions.append(ThresholdReplant(self.recommended_threshold().threshold))
        return decisions

    def choose_decision(self, decision: Decision) -> EconomicResult:
        """Apply the player's replant decision and charge its cost.

        The rest of the field is revealed first. A threshold replant is only accepted
        once the player has scouted every cell themselves.
        """
        if not isinstance(decision, (DoNotReplant, FullReplant, ThresholdReplant)):
            raise TypeError(f"unknown replant decision: {decision!r}")
        if self.decision_made:
            raise InvalidStateError("a replant decision was already made this session")
        if isinstance(decision, ThresholdReplant) and not self.observation.is_fully_opened():
            raise InvalidStateError("threshold replant requires a fully scouted field")

        price = self.economics.price_per_bushel
        average_before = average_stand_count(self.field)
        self.observation.open_all()

        outcome = self.engine.apply_decision(self.field, self.observation, decision)
        average_after = average_stand_count(self.field)

        self.money_in_bank -= outcome.cost
        self.changes = outcome.changes
        self.result = EconomicResult(
            acres_affected=outcome.acres_affected,
            cost=outcome.cost,
            yield_before=yield_from_stand_count(average_before),
            yield_after=yield_from_stand_count(average_after),
            net_benefit=economic_benefit(self.field.n_acres, average_before, average_after, price) - outcome.cost,
        )
        logger.info(
            "%s: %d acres replanted for $%.0f, net benefit $%.0f",
            type(decision).__name__,
            outcome.acres_affected,
            outcome.cost,
            self.result.net_benefit,
        )
        return self.result

    def final_score(self) -> int:
        """Money left in the bank plus the harvest sold at the current price."""
        average = _round_half_up(average_stand_count(self.field))
        average_yield = _round_half_up(yield_from_stand_count(average))
        total_sell_price = average_yield * self.field.n_acres * self.economics.price_per_bushel
        score = int(round(self.money_in_bank + total_sell_price))
        if self.best_score is None or score > self.best_score:
            self.best_score = score
        logger.info("Final score %d (best %d)", score, self.best_score)
        return score

    def replant_message(self, result: Optional[EconomicResult] = None) -> str:
        """Human-readable summary of a replant decision."""
        result = result if result is not None else self.result
        if result is None:
            raise InvalidStateError("no replant decision has been made yet")
        return format_replant_message(result, self.economics.price_per_bushel)


def format_replant_message(result: EconomicResult, price_per_bushel: float) -> str:
    lines = [f"The replant cost you ${result.cost:.0f}."]

    yield_difference = result.yield_after - result.yield_before
    if yield_difference > 0:
        lines.append(
            f"It increased your average yield from {result.yield_before:.0f} bushels/acre "
            f"to {result.yield_after:.0f} bushels/acre."
        )
    elif yield_difference < 0:
        lines.append(
            f"However, it decreased your average yield from {result.yield_before:.0f} bushels/acre "
            f"to {result.yield_after:.0f} bushels/acre."
        )
    else:
        lines.append(f"Your yield remained unchanged at {result.yield_before:.0f} bushels/acre.")

    if result.net_benefit > 0:
        lines.append(
            f"With the current price of ${price_per_bushel:g} per bushel, "
            f"you potentially gained ${result.net_benefit:.0f} from this decision."
        )
    elif result.net_benefit < 0:
        lines.append(
            f"Based on the current price of ${price_per_bushel:g} per bushel, "
            f"you potentially lost ${abs(result.net_benefit):.0f} from this decision."
        )
    else:
        lines.append(
            f"With the current price of ${price_per_bushel:g} per bushel, "
            "you probably broke even on this decision."
        )
    return "\n\n".join(lines)
