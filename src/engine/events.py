"""
Thirty - Game Event Definitions

Event types and payloads published to the UI layer after each state change.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from src.engine.base import GameState


class GameEvent(Enum):
    """Events that can occur during a game."""

    GAME_STARTED = auto()
    ROUND_STARTED = auto()
    DICE_ROLLED = auto()
    DICE_HELD = auto()
    OPTION_SELECTED = auto()
    MENU_TOGGLED = auto()
    ROUND_SCORED = auto()
    GAME_FINISHED = auto()
    STATE_RESTORED = auto()
    STATE_UPDATED = auto()


@dataclass
class EventPayload:
    """Wrapper for a published state change."""

    event: GameEvent
    state: GameState
    data: dict[str, Any] = field(default_factory=dict)


def classify_state_change(previous: GameState, current: GameState) -> GameEvent | None:
    """Determine the game event from a before/after pair of states."""
    if current == previous:
        return None

    if current.round_count > previous.round_count:
        return GameEvent.GAME_FINISHED if current.is_over else GameEvent.ROUND_SCORED
    if current.round_count < previous.round_count or current.total_score < previous.total_score:
        return GameEvent.GAME_STARTED

    before = previous.current_round
    after = current.current_round
    if after.rolls_left < before.rolls_left:
        return GameEvent.DICE_ROLLED
    if after.rolls_left > before.rolls_left:
        return GameEvent.ROUND_STARTED
    if after.dice.held != before.dice.held:
        return GameEvent.DICE_HELD
    if after.selected_option != before.selected_option:
        return GameEvent.OPTION_SELECTED
    if after.scoring_menu_open != before.scoring_menu_open:
        return GameEvent.MENU_TOGGLED

    return GameEvent.STATE_UPDATED
