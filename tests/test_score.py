import random

from match3.components.score import Score
from match3.engine import new_game
from match3.outcome import StepKind

from helpers import CORNER_SETUP, has_run, make_engine


def test_score_component_adds_and_totals():
    score = Score(points_per_cell=10)
    assert score.add(3) == 30
    assert score.add(0) == 0
    assert score.add(-2) == 0
    assert score.total() == 30


def test_cross_match_counts_shared_cell_once():
    engine = make_engine(CORNER_SETUP, points_per_cell=7)
    groups = []
    engine.event_bus.subscribe('match_found', lambda s, **k: groups.append(k['groups']))
    outcome = engine.request_swap(2, 2, 3, 2)

    first = outcome.steps[0]
    assert first.kind is StepKind.REMOVE
    assert set(first.positions) == {(0, 2), (1, 2), (2, 2), (2, 0), (2, 1)}
    assert first.score == 5 * 7
    assert len(groups[0]) == 1


def test_each_removal_step_scores_exactly():
    engine = make_engine(CORNER_SETUP, points_per_cell=10)
    outcome = engine.request_swap(2, 2, 3, 2)
    previous = 0
    for step in outcome.steps:
        if step.kind is StepKind.REMOVE:
            assert step.score - previous == len(step.positions) * 10
        else:
            assert step.score == previous
        previous = step.score
    assert outcome.score == previous == engine.current_score()


def test_score_is_monotonic_and_board_stays_settled():
    engine = new_game(7, 7, 4, 10, random_seed=2024)
    rng = random.Random(99)
    last_score = engine.current_score()
    accepted = 0
    for _ in range(300):
        x = rng.randrange(7)
        y = rng.randrange(7)
        dx, dy = rng.choice([(1, 0), (-1, 0), (0, 1), (0, -1), (2, 0), (1, 1)])
        before = engine.current_grid()
        outcome = engine.request_swap(x, y, x + dx, y + dy)
        assert engine.current_score() >= last_score
        assert outcome.score == engine.current_score()
        if outcome.accepted:
            accepted += 1
            assert outcome.score_delta == outcome.removed_count * 10
        else:
            assert outcome.grid == before
            assert engine.current_score() == last_score
        assert not has_run(engine.current_grid())
        assert not engine.current_grid().has_empty()
        last_score = engine.current_score()
    assert accepted > 0
