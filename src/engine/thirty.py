"""
Thirty - Round and Game State Machine

Game Rules:
- Ten rounds, six dice, up to three rolls per round
- After the first roll any die may be held to keep it out of later rolls
- Each round ends by committing to one unused scoring option
- Every option can be used once per game; the game ends after round ten

Each round moves through Idle -> Rolling (3, 2, 1, 0 rolls left) ->
AwaitingScore -> Committed, after which the next round starts on its own.

All methods are stateless class methods. State is passed in and a new
state is returned; a rejected action raises before anything is built.
"""

import logging
import random
from dataclasses import replace

from src.engine.base import (
    DIE_FACES,
    NUM_DICE,
    GameState,
    RoundState,
    ScoringOption,
    ScoringResult,
)
from src.engine.errors import IllegalTransitionError, Precondition
from src.engine.scoring import ScoringEngine
from src.engine.validators import is_valid_die_index, validate_scoring_option

logger = logging.getLogger(__name__)


class ThirtyEngine:
    """Stateless engine for Thirty round and game progression."""

    @classmethod
    def new_game(cls) -> GameState:
        """Create the state of a game that has not been played yet."""
        return GameState()

    @classmethod
    def restart(cls) -> GameState:
        """Throw away the current game and start over. Always allowed."""
        logger.debug("Game restarted")
        return cls.new_game()

    @classmethod
    def start_round(cls, state: GameState) -> GameState:
        """
        Reset dice, holds and selection for a new round.

        Raises:
            IllegalTransitionError: Game is over, or the current round has
                already been rolled or scored against
        """
        cls._require_not_over(state, "start round")
        if not state.current_round.is_untouched:
            raise IllegalTransitionError("start round", Precondition.ROUND_IN_PROGRESS)
        return replace(state, current_round=RoundState())

    @classmethod
    def roll(cls, state: GameState, rng: random.Random | None = None) -> GameState:
        """
        Re-roll every unheld die and use up one roll.

        Args:
            state: Current game state
            rng: Random source (defaults to the module-level generator)

        Returns:
            New state with fresh values for unheld dice

        Raises:
            IllegalTransitionError: Game is over or no rolls are left
        """
        cls._require_not_over(state, "roll")
        current = state.current_round
        if current.rolls_left <= 0:
            raise IllegalTransitionError("roll", Precondition.NO_ROLLS_LEFT)

        randint = rng.randint if rng is not None else random.randint
        values = tuple(
            value if held else randint(1, DIE_FACES)
            for value, held in zip(current.dice.values, current.dice.held)
        )
        rolled = replace(
            current,
            dice=current.dice.with_values(values),
            rolls_left=current.rolls_left - 1,
        )
        logger.debug("Rolled %s, %d rolls left", values, rolled.rolls_left)
        return replace(state, current_round=rolled)

    @classmethod
    def toggle_hold(cls, state: GameState, index: int) -> GameState:
        """
        Flip the hold flag of one die.

        Raises:
            IllegalTransitionError: Game is over, nothing rolled yet, or
                index is not 0-5
        """
        cls._require_not_over(state, "toggle hold")
        current = state.current_round
        if not current.has_rolled:
            raise IllegalTransitionError("toggle hold", Precondition.NOT_ROLLED_YET)
        if not is_valid_die_index(index):
            raise IllegalTransitionError(
                "toggle hold",
                Precondition.DIE_INDEX_OUT_OF_RANGE,
                f"got {index!r}, expected 0-{NUM_DICE - 1}",
            )
        toggled = replace(current, dice=current.dice.with_hold_toggled(index))
        return replace(state, current_round=toggled)

    @classmethod
    def select_option(cls, state: GameState, option: ScoringOption | str) -> GameState:
        """
        Record the option the round will be scored against.

        Selecting again before committing replaces the pending option.
        Closes the scoring menu.

        Raises:
            InvalidInputError: Unknown option label
            IllegalTransitionError: Game is over or the option is used up
        """
        option = validate_scoring_option(option)
        cls._require_not_over(state, "select option")
        if option in state.used_options:
            raise IllegalTransitionError(
                "select option", Precondition.OPTION_ALREADY_USED, str(option)
            )
        selected = replace(
            state.current_round, selected_option=option, scoring_menu_open=False
        )
        return replace(state, current_round=selected)

    @classmethod
    def set_scoring_menu_open(cls, state: GameState, is_open: bool) -> GameState:
        """Record whether the UI is showing the option menu."""
        return replace(
            state, current_round=replace(state.current_round, scoring_menu_open=is_open)
        )

    @classmethod
    def commit_round(
        cls,
        state: GameState,
        *,
        legacy_deep_match: bool = False,
    ) -> tuple[GameState, ScoringResult]:
        """
        Score the round against the selected option and move on.

        Args:
            state: Current game state
            legacy_deep_match: Score with the old 5/6-die lookup

        Returns:
            Tuple of (new_state, scoring_result). The new state is already
            in the next round, or past round ten if the game ended.

        Raises:
            IllegalTransitionError: Game is over, rolls remain, no option is
                selected, or the selected option was used already
        """
        cls._require_not_over(state, "commit round")
        current = state.current_round
        if current.rolls_left > 0:
            raise IllegalTransitionError(
                "commit round",
                Precondition.ROLLS_REMAINING,
                f"{current.rolls_left} left",
            )
        option = current.selected_option
        if option is None:
            raise IllegalTransitionError("commit round", Precondition.NO_OPTION_SELECTED)
        if option in state.used_options:
            raise IllegalTransitionError(
                "commit round", Precondition.OPTION_ALREADY_USED, str(option)
            )

        result = ScoringEngine.calculate_score(
            option, current.dice.values, legacy_deep_match=legacy_deep_match
        )
        used = state.used_options | {option}
        scores = state.scores_by_option
        scores[option] = result.points

        committed = GameState(
            current_round=RoundState(),
            round_count=state.round_count + 1,
            total_score=state.total_score + result.points,
            round_scores=tuple((o, scores[o]) for o in ScoringOption if o in scores),
            used_options=frozenset(used),
        )
        logger.debug(
            "Round %d scored %d on %s (total %d)",
            state.round_count, result.points, option, committed.total_score,
        )
        if committed.is_over:
            logger.info("Game finished with %d points", committed.total_score)
        return committed, result

    @classmethod
    def can_roll(cls, state: GameState) -> bool:
        return not state.is_over and state.rolls_left > 0

    @classmethod
    def can_commit(cls, state: GameState) -> bool:
        option = state.selected_option
        return (
            not state.is_over
            and state.rolls_left == 0
            and option is not None
            and option not in state.used_options
        )

    @classmethod
    def _require_not_over(cls, state: GameState, action: str) -> None:
        if state.is_over:
            raise IllegalTransitionError(action, Precondition.GAME_OVER)

