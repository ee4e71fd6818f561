from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems alive even when nobody holds the system.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# INPUT & SELECTION
# ============================================================================
EVENT_TILE_CLICK = "tile_click"                    # payload: x, y
EVENT_TILE_SELECTED = "tile_selected"              # payload: x, y
EVENT_TILE_DESELECTED = "tile_deselected"          # payload: x, y, reason=str


# ============================================================================
# SWAP
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(x,y), dst=(x,y)
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src, dst, reason=RejectReason
EVENT_TILE_SWAP_DO = "tile_swap_do"                # payload: src, dst
EVENT_TILE_SWAP_REVERTED = "tile_swap_reverted"    # payload: src, dst
EVENT_SWAP_RESOLVED = "swap_resolved"              # payload: outcome=SwapOutcome


# ============================================================================
# MATCH & CASCADE
# ============================================================================
EVENT_MATCH_FOUND = "match_found"                  # payload: positions=[(x,y),...], groups=[[(x,y),...]], size=int, depth=int
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(x,y),...], types=[(x,y,type_id),...], depth=int
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=[GravityMove], columns=int, depth=int
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(x,y),...], depth=int
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=[(x,y),...]
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int
EVENT_BOARD_RESHUFFLED = "board_reshuffled"        # payload: reason=str
EVENT_BOARD_RESET = "board_reset"                  # payload: width=int, height=int


# ============================================================================
# SCORE
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: total=int, delta=int, removed=int


# ============================================================================
# ANIMATION
# ============================================================================
EVENT_ANIMATION_START = "animation_start"          # payload: kind=str, step=CascadeStep
EVENT_ANIMATION_COMPLETE = "animation_complete"    # payload: kind=str, step=CascadeStep
EVENT_PLAYBACK_COMPLETE = "playback_complete"      # payload: outcome=SwapOutcome
