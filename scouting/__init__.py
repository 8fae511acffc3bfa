from .field import MAX_STAND, Field
from .field_generator import FieldGenerator, FieldParams, gaussian_kernel, smooth
from .observation import ObservationTracker
from .replant import (
    CellChange,
    Decision,
    DoNotReplant,
    FullReplant,
    InvalidStateError,
    ReplantEngine,
    ReplantOutcome,
    ThresholdReplant,
    apply_decision,
)
from .session import EconomicResult, ScoutingSession, format_replant_message
from .threshold import EconomicParams, ThresholdOptimizer, ThresholdRecommendation, calculate_smart_threshold
from .yield_model import average_stand_count, economic_benefit, replant_cost, yield_from_stand_count

__all__ = [
    "CellChange",
    "Decision",
    "DoNotReplant",
    "EconomicParams",
    "EconomicResult",
    "Field",
    "FieldGenerator",
    "FieldParams",
    "FullReplant",
    "InvalidStateError",
    "MAX_STAND",
    "ObservationTracker",
    "ReplantEngine",
    "ReplantOutcome",
    "ScoutingSession",
    "ThresholdOptimizer",
    "ThresholdRecommendation",
    "ThresholdReplant",
    "apply_decision",
    "average_stand_count",
    "calculate_smart_threshold",
    "economic_benefit",
    "format_replant_message",
    "gaussian_kernel",
    "replant_cost",
    "smooth",
    "yield_from_stand_count",
]
