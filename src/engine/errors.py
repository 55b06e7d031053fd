"""
Thirty - Engine Errors

Every rejected action raises one of these before any state changes.
"""

from enum import Enum


class Precondition(Enum):
    """Preconditions a transition can violate."""
    GAME_OVER = "game is over"
    NO_ROLLS_LEFT = "no rolls left this round"
    NOT_ROLLED_YET = "dice have not been rolled this round"
    ROLLS_REMAINING = "rolls remain this round"
    NO_OPTION_SELECTED = "no scoring option selected"
    OPTION_ALREADY_USED = "scoring option already used"
    DIE_INDEX_OUT_OF_RANGE = "die index out of range"
    ROUND_IN_PROGRESS = "round already in progress"


class ThirtyError(Exception):
    """Base class for game engine errors."""


class InvalidInputError(ThirtyError, ValueError):
    """Malformed dice values or an unknown scoring option label."""


class IllegalTransitionError(ThirtyError):
    """An action was attempted outside the state where it is allowed."""

    def __init__(self, action: str, precondition: Precondition, detail: str | None = None) -> None:
        self.action = action
        self.precondition = precondition
        message = f"Cannot {action}: {precondition.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
