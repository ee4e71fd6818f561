from dataclasses import dataclass
from enum import Enum, auto


class CascadePhase(Enum):
    """States of the swap resolution machine."""
    IDLE = auto()
    TRIAL_SWAP = auto()
    REVERT = auto()
    REMOVE = auto()
    GRAVITY = auto()
    REFILL = auto()
    REMATCH = auto()


@dataclass(slots=True)
class CascadeState:
    """Tracks the resolver's progress; input is accepted only while idle."""

    phase: CascadePhase = CascadePhase.IDLE
    depth: int = 0
    # Set once a cascade exceeded its ceiling; the board is unsettled for the rest of the session.
    failed: bool = False

    @property
    def busy(self) -> bool:
        return self.phase is not CascadePhase.IDLE
