import pytest

from match3.components.cascade_state import CascadePhase
from match3.errors import UnstableCascade
from match3.events.bus import (EVENT_MATCH_FOUND, EVENT_CASCADE_STEP, EVENT_CASCADE_COMPLETE,
                               EVENT_SCORE_CHANGED, EVENT_TILE_SWAP_REVERTED, EVENT_TILE_SWAP_INVALID)
from match3.events.trace import EventTrace
from match3.outcome import RejectReason, StepKind
from match3.systems.cascade_state_utils import get_or_create_cascade_state

from helpers import BOTTOM_ROW_SETUP, ScriptedRandom, has_run, make_engine

AFTER_GRAVITY = [
    (None, None, None, 4, 5),
    (1, 2, 3, 1, 2),
    (3, 4, 5, 3, 4),
    (5, 1, 2, 5, 1),
    (2, 3, 5, 2, 3),
]


def test_single_step_resolution():
    engine = make_engine(BOTTOM_ROW_SETUP, refills=[3, 4, 1])
    outcome = engine.request_swap(2, 3, 2, 4)

    assert outcome.accepted and outcome.reason is None
    assert outcome.depth == 1
    assert [step.kind for step in outcome.steps] == [StepKind.REMOVE, StepKind.GRAVITY, StepKind.REFILL]

    remove, gravity, refill = outcome.steps
    assert remove.positions == ((0, 4), (1, 4), (2, 4))
    assert remove.grid.rows()[4] == (None, None, None, 2, 3)
    assert gravity.grid.rows() == AFTER_GRAVITY
    assert refill.positions == ((0, 0), (1, 0), (2, 0))
    assert refill.grid.rows()[0] == (3, 4, 1, 4, 5)

    assert outcome.grid == refill.grid
    assert outcome.grid.is_settled()
    assert outcome.score == 30 and outcome.score_delta == 30
    assert engine.current_score() == 30
    assert engine.current_grid() == outcome.grid


def test_two_step_cascade():
    # Refill 2 4 4 lines up with the 4 already in row 0, then 1 2 3 settles it.
    engine = make_engine(BOTTOM_ROW_SETUP, refills=[2, 4, 4, 1, 2, 3])
    depths = []
    complete = {}
    engine.event_bus.subscribe(EVENT_CASCADE_STEP, lambda s, **k: depths.append(k.get('depth')))
    engine.event_bus.subscribe(EVENT_CASCADE_COMPLETE, lambda s, **k: complete.update(k))

    outcome = engine.request_swap(2, 3, 2, 4)

    assert depths == [1, 2]
    assert complete.get('depth') == 2
    assert outcome.depth == 2
    assert len(outcome.steps) == 6
    second_remove = outcome.steps[3]
    assert second_remove.kind is StepKind.REMOVE and second_remove.depth == 2
    assert second_remove.positions == ((1, 0), (2, 0), (3, 0))
    # Cleared cells were already on top, so nothing falls in round two.
    assert outcome.steps[4].positions == ()
    assert outcome.grid.rows()[0] == (2, 1, 2, 3, 5)
    assert outcome.removed_count == 6
    assert outcome.score == 60
    assert not has_run(outcome.grid) and not outcome.grid.has_empty()


def test_event_sequence_for_one_round():
    engine = make_engine(BOTTOM_ROW_SETUP, refills=[3, 4, 1])
    trace = EventTrace(engine.event_bus)
    engine.request_swap(2, 3, 2, 4)
    names = [name for name in trace.names() if name != EVENT_SCORE_CHANGED]
    assert names == [
        'tile_swap_do',
        'cascade_step',
        'match_found',
        'match_cleared',
        'gravity_applied',
        'refill_completed',
        'cascade_complete',
    ]
    assert trace.payloads(EVENT_SCORE_CHANGED) == [{'total': 30, 'delta': 30, 'removed': 3}]
    found = trace.payloads(EVENT_MATCH_FOUND)[0]
    assert found['size'] == 3 and found['depth'] == 1


def test_rejected_swap_emits_revert_and_invalid():
    engine = make_engine(BOTTOM_ROW_SETUP)
    trace = EventTrace(engine.event_bus)
    outcome = engine.request_swap(0, 0, 1, 0)
    assert outcome.reason is RejectReason.NO_MATCH
    assert trace.names() == ['tile_swap_do', 'tile_swap_reverted', 'tile_swap_invalid']
    assert trace.payloads(EVENT_TILE_SWAP_INVALID)[0]['reason'] is RejectReason.NO_MATCH
    assert trace.payloads(EVENT_TILE_SWAP_REVERTED)[0] == {'src': (0, 0), 'dst': (1, 0)}


def test_engine_returns_to_idle():
    engine = make_engine(BOTTOM_ROW_SETUP, refills=[3, 4, 1])
    engine.request_swap(2, 3, 2, 4)
    state = get_or_create_cascade_state(engine.world)
    assert state.phase is CascadePhase.IDLE
    assert not engine.busy


def test_swap_requested_mid_cascade_is_busy():
    engine = make_engine(BOTTOM_ROW_SETUP, refills=[3, 4, 1])
    nested = []

    def on_cleared(sender, **kwargs):
        nested.append(engine.request_swap(0, 0, 1, 0))

    engine.event_bus.subscribe('match_cleared', on_cleared)
    outcome = engine.request_swap(2, 3, 2, 4)

    assert outcome.accepted
    assert len(nested) == 1
    assert nested[0].reason is RejectReason.ENGINE_BUSY
    assert not nested[0].accepted
    # The nested request did not disturb the cascade.
    assert outcome.grid.rows()[0] == (3, 4, 1, 4, 5)


def test_unstable_cascade_is_raised_and_engine_idles():
    # One tile kind: every refill recreates the runs it just removed.
    engine = make_engine(
        [[1, 1, 1], [1, 1, 1], [1, 1, 1]],
        tile_type_count=3,
        max_cascade_steps=4,
    )
    setattr(engine.world, "random", ScriptedRandom(default=1))
    rounds = []
    engine.event_bus.subscribe(EVENT_CASCADE_STEP, lambda s, **k: rounds.append(k['depth']))
    with pytest.raises(UnstableCascade) as excinfo:
        engine.request_swap(0, 0, 1, 0)
    assert excinfo.value.rounds == 4
    assert rounds == [1, 2, 3, 4]
    assert not engine.busy


def test_session_refuses_swaps_after_unstable_cascade():
    engine = make_engine(
        [[1, 1, 1], [1, 1, 1], [1, 1, 1]],
        tile_type_count=3,
        max_cascade_steps=4,
    )
    setattr(engine.world, "random", ScriptedRandom(default=1))
    with pytest.raises(UnstableCascade):
        engine.request_swap(0, 0, 1, 0)
    stuck = engine.current_grid()
    rounds = []
    engine.event_bus.subscribe(EVENT_CASCADE_STEP, lambda s, **k: rounds.append(k['depth']))

    with pytest.raises(UnstableCascade):
        engine.request_swap(0, 0, 1, 0)
    assert rounds == []
    assert engine.current_grid() == stuck

    selected = []
    engine.event_bus.subscribe('tile_selected', lambda s, **k: selected.append((k['x'], k['y'])))
    engine.event_bus.emit('tile_click', x=0, y=0)
    assert selected == []


def test_new_game_clears_failed_session():
    engine = make_engine(
        [[1, 1, 1], [1, 1, 1], [1, 1, 1]],
        tile_type_count=3,
        max_cascade_steps=4,
    )
    setattr(engine.world, "random", ScriptedRandom(default=1))
    with pytest.raises(UnstableCascade):
        engine.request_swap(0, 0, 1, 0)
    engine.new_game(5, 5, 5, 10, random_seed=4)
    assert not get_or_create_cascade_state(engine.world).failed
    outcome = engine.request_swap(0, 0, 3, 0)
    assert outcome.reason is RejectReason.INVALID_SWAP
