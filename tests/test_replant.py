import numpy as np
import pytest

from scouting import (
    MAX_STAND,
    CellChange,
    DoNotReplant,
    FieldGenerator,
    FullReplant,
    InvalidStateError,
    ObservationTracker,
    ReplantEngine,
    ThresholdReplant,
    apply_decision,
)


@pytest.fixture
def engine(rng):
    return ReplantEngine(FieldGenerator(rng=rng))


def _opened(field):
    observation = ObservationTracker.for_field(field)
    observation.open_all()
    return observation


def test_do_not_replant_leaves_field(engine, make_field):
    field = make_field(7, 10, 30, {(0, 0): 5})
    before = field.stand_counts.copy()
    outcome = engine.apply_decision(field, _opened(field), DoNotReplant())
    assert outcome.acres_affected == 0
    assert outcome.cost == 0
    assert outcome.changes == ()
    np.testing.assert_array_equal(field.stand_counts, before)


def test_full_replant_redraws_every_cell(rng):
    field = FieldGenerator(rng=rng).generate_field(7, 10)
    observation = _opened(field)
    outcome = ReplantEngine(FieldGenerator(rng=rng)).apply_decision(field, observation, FullReplant())

    assert outcome.acres_affected == 70
    assert outcome.cost == 8750
    assert outcome.field is field
    assert {(change.row, change.col) for change in outcome.changes} == {(r, c) for r in range(7) for c in range(10)}
    for change in outcome.changes:
        assert field[change.row, change.col] == change.after
    assert field.stand_counts.min() >= 0
    assert field.stand_counts.max() <= MAX_STAND
    assert observation.is_fully_opened()


def test_full_replant_does_not_need_scouting(engine, make_field):
    field = make_field(2, 3, 10)
    observation = ObservationTracker.for_field(field)
    outcome = engine.apply_decision(field, observation, FullReplant())
    assert outcome.acres_affected == 6
    assert observation.opened_count == 0


def test_threshold_replant_only_touches_low_cells(engine, make_field):
    low_cells = {(row, col): 20 for row in range(2) for col in range(6)}
    field = make_field(7, 10, 30, low_cells)
    field.set_stand_count(3, 3, 28)
    before = field.stand_counts.copy()

    outcome = engine.apply_decision(field, _opened(field), ThresholdReplant(28))

    assert outcome.acres_affected == 12
    assert outcome.cost == 1500
    replanted = {(change.row, change.col) for change in outcome.changes}
    assert replanted == {(row, col) for row in range(2) for col in range(6)}
    untouched = before >= 28
    np.testing.assert_array_equal(field.stand_counts[untouched], before[untouched])


def test_threshold_replant_requires_full_scouting(engine, make_field):
    field = make_field(3, 3, 30, {(0, 0): 5})
    observation = ObservationTracker.for_field(field)
    observation.open_cell(0, 0)
    before = field.stand_counts.copy()
    with pytest.raises(InvalidStateError):
        engine.apply_decision(field, observation, ThresholdReplant(28))
    np.testing.assert_array_equal(field.stand_counts, before)


def test_rejects_mismatched_observation(engine, make_field):
    with pytest.raises(ValueError):
        engine.apply_decision(make_field(3, 3, 30), ObservationTracker(2, 2), FullReplant())


def test_rejects_unknown_decision(engine, make_field):
    field = make_field(2, 2, 30)
    with pytest.raises(TypeError):
        engine.apply_decision(field, _opened(field), "replant everything")


def test_seeded_replant_is_reproducible(make_field):
    results = []
    for _ in range(2):
        field = make_field(4, 4, 30)
        apply_decision(field, _opened(field), FullReplant(), np.random.default_rng(99))
        results.append(field.stand_counts)
    np.testing.assert_array_equal(results[0], results[1])


class ReplantDraws:
    """Replays fixed standard-normal draws for single-value regeneration."""

    def __init__(self, draws):
        self.draws = list(draws)

    def normal(self, loc=0.0, scale=1.0, size=None):
        return loc + scale * self.draws.pop(0)


def test_full_replant_matches_golden_outcome(make_field):
    field = make_field(2, 2, 30, {(1, 1): 12})
    outcome = ReplantEngine(FieldGenerator(rng=ReplantDraws([-0.1, 1.0, -1.0, 2.0]))).apply_decision(
        field, _opened(field), FullReplant()
    )

    assert outcome.acres_affected == 4
    assert outcome.cost == 500
    assert outcome.changes == (
        CellChange(row=0, col=0, before=30, after=31),
        CellChange(row=0, col=1, before=30, after=35),
        CellChange(row=1, col=0, before=30, after=26),
        CellChange(row=1, col=1, before=12, after=35),
    )
    np.testing.assert_array_equal(field.stand_counts, [[31, 35], [26, 35]])
