"""Exceptions raised by the board resolution engine."""
from __future__ import annotations

from typing import Tuple


class EngineError(Exception):
    """Base class for every error raised by the engine."""


class OutOfBounds(EngineError, IndexError):
    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"({x}, {y}) is outside the {width}x{height} board")
        self.x = x
        self.y = y
        self.width = width
        self.height = height


class InvalidSwap(EngineError, ValueError):
    def __init__(self, src: Tuple[int, int], dst: Tuple[int, int]):
        super().__init__(f"{src} and {dst} are not orthogonally adjacent")
        self.src = src
        self.dst = dst


class EngineBusy(EngineError, RuntimeError):
    """A swap was requested while a cascade is still resolving."""


class UnstableCascade(EngineError, RuntimeError):
    """The cascade did not settle within the configured number of rounds.

    This signals a defect in gravity or refill; it is never raised for a
    correct board and must not be swallowed.
    """

    def __init__(self, rounds: int):
        super().__init__(f"cascade did not settle after {rounds} rounds")
        self.rounds = rounds


class BoardGenerationError(EngineError, RuntimeError):
    """No settled layout could be produced for the configured board."""
