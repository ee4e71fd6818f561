from dataclasses import dataclass

@dataclass(slots=True)
class TileType:
    """Per-tile type assignment.

    ``type_id`` is an opaque kind in ``[1, K]``; only equality matters.
    Empty cells keep their last id but are switched off via ActiveSwitch.
    """
    type_id: int
