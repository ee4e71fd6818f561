GRID_WIDTH = 8
GRID_HEIGHT = 8
TILE_TYPE_COUNT = 5
POINTS_PER_CELL = 10

# A run needs this many equal tiles in a row or column to be matched.
MIN_RUN_LENGTH = 3

# Cascade rounds allowed per swap before the resolver gives up.
# A correct gravity/refill never gets close to this.
MAX_CASCADE_STEPS = 1000
# Whole-board re-rolls allowed when building a settled layout.
MAX_FILL_ATTEMPTS = 200

# Presentation pacing (seconds). The engine itself never waits.
REMOVE_STEP_DURATION = 0.3
GRAVITY_STEP_DURATION = 0.25
REFILL_STEP_DURATION = 0.25
RESHUFFLE_STEP_DURATION = 0.25
