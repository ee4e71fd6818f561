import sys, os
ROOT = os.path.dirname(__file__)
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)
from match3.engine import new_game
from match3.events.trace import EventTrace
from match3.systems import board_ops

# Swapping (2,3) with (2,4) completes a run on the bottom row.
ROWS = [
    [1, 2, 3, 4, 5],
    [3, 4, 5, 1, 2],
    [5, 1, 2, 3, 4],
    [2, 3, 1, 5, 1],
    [1, 1, 5, 2, 3],
]

seed = int(sys.argv[1]) if len(sys.argv) > 1 else 0
engine = new_game(5, 5, 5, 10, random_seed=seed)
board_ops.load_rows(engine.world, ROWS)
trace = EventTrace(engine.event_bus)

print('before\n' + engine.current_grid().pretty())
outcome = engine.request_swap(2, 3, 2, 4)
for step in outcome.steps:
    print(f'\n{step.kind.value} (depth {step.depth}, score {step.score})')
    print(step.grid.pretty(marked=step.positions if step.kind.value == 'remove' else None))
print('\nevents', trace.names())
print('accepted', outcome.accepted, 'score', outcome.score, 'depth', outcome.depth)
