"""
Thirty Game Engine.

Pure Python game logic with zero UI/database dependencies.
Handles dice rolling, holds, option bookkeeping and scoring.
"""

from src.engine.base import (
    Combination,
    DiceSet,
    Die,
    GameState,
    RoundState,
    ScoringOption,
    ScoringResult,
)
from src.engine.errors import (
    IllegalTransitionError,
    InvalidInputError,
    Precondition,
    ThirtyError,
)
from src.engine.events import EventPayload, GameEvent
from src.engine.scoring import ScoringEngine
from src.engine.session import ThirtyGame
from src.engine.snapshot import GameSnapshot, from_snapshot, to_snapshot
from src.engine.thirty import ThirtyEngine

__all__ = [
    # Data Classes
    "Combination",
    "DiceSet",
    "Die",
    "GameState",
    "RoundState",
    "ScoringResult",
    "EventPayload",
    # Enums
    "ScoringOption",
    "GameEvent",
    "Precondition",
    # Errors
    "ThirtyError",
    "InvalidInputError",
    "IllegalTransitionError",
    # Engines
    "ScoringEngine",
    "ThirtyEngine",
    "ThirtyGame",
    # Snapshots
    "GameSnapshot",
    "to_snapshot",
    "from_snapshot",
]
