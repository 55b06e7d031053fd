"""
Thirty - Round and Game State Machine Tests
"""

import random
from unittest.mock import patch

import pytest

from src.engine.base import DiceSet, GameState, RoundState, ScoringOption
from src.engine.errors import IllegalTransitionError, InvalidInputError, Precondition
from src.engine.thirty import ThirtyEngine


def _play_round(state: GameState, option: ScoringOption, rng: random.Random) -> GameState:
    for _ in range(3):
        state = ThirtyEngine.roll(state, rng)
    state = ThirtyEngine.select_option(state, option)
    state, _ = ThirtyEngine.commit_round(state)
    return state


class TestRoll:
    """Tests for ThirtyEngine.roll()."""

    def test_decrements_rolls_left(self, fresh_state, rng):
        state = ThirtyEngine.roll(fresh_state, rng)
        assert state.rolls_left == 2
        assert fresh_state.rolls_left == 3

    def test_values_in_range(self, fresh_state):
        for _ in range(200):
            state = ThirtyEngine.roll(fresh_state)
            assert all(1 <= v <= 6 for v in state.dice.values)

    def test_randomness(self, fresh_state):
        seen = {ThirtyEngine.roll(fresh_state).dice.values for _ in range(50)}
        assert len(seen) > 1

    def test_all_held_leaves_values(self, rolled_state, rng):
        state = rolled_state
        for i in range(6):
            state = ThirtyEngine.toggle_hold(state, i)
        rolled = ThirtyEngine.roll(state, rng)
        assert rolled.dice.values == state.dice.values
        assert rolled.rolls_left == state.rolls_left - 1

    def test_held_dice_untouched(self, rolled_state):
        state = ThirtyEngine.toggle_hold(rolled_state, 0)
        with patch("src.engine.thirty.random.randint", return_value=1) as randint:
            rolled = ThirtyEngine.roll(state)
        assert rolled.dice.values == (6, 1, 1, 1, 1, 1)
        assert randint.call_count == 5

    def test_uses_given_rng(self, fresh_state):
        a = ThirtyEngine.roll(fresh_state, random.Random(7))
        b = ThirtyEngine.roll(fresh_state, random.Random(7))
        assert a == b

    def test_no_rolls_left(self, fresh_state, rng):
        state = fresh_state
        for _ in range(3):
            state = ThirtyEngine.roll(state, rng)
        with pytest.raises(IllegalTransitionError) as excinfo:
            ThirtyEngine.roll(state, rng)
        assert excinfo.value.precondition is Precondition.NO_ROLLS_LEFT

    def test_rejected_when_game_over(self, rng):
        with pytest.raises(IllegalTransitionError) as excinfo:
            ThirtyEngine.roll(GameState(round_count=11), rng)
        assert excinfo.value.precondition is Precondition.GAME_OVER

    def test_can_roll(self, fresh_state, ready_to_score_state):
        assert ThirtyEngine.can_roll(fresh_state)
        assert not ThirtyEngine.can_roll(ready_to_score_state)
        assert not ThirtyEngine.can_roll(GameState(round_count=11))


class TestToggleHold:
    """Tests for ThirtyEngine.toggle_hold()."""

    def test_rejected_before_first_roll(self, fresh_state):
        with pytest.raises(IllegalTransitionError) as excinfo:
            ThirtyEngine.toggle_hold(fresh_state, 0)
        assert excinfo.value.precondition is Precondition.NOT_ROLLED_YET
        assert fresh_state.dice.held_indices == frozenset()

    def test_toggles_flag(self, rolled_state):
        state = ThirtyEngine.toggle_hold(rolled_state, 3)
        assert state.dice.held_indices == frozenset({3})
        state = ThirtyEngine.toggle_hold(state, 3)
        assert state.dice.held_indices == frozenset()

    def test_allowed_with_no_rolls_left(self, ready_to_score_state):
        state = ThirtyEngine.toggle_hold(ready_to_score_state, 0)
        assert not state.dice.held[0]

    @pytest.mark.parametrize("index", [-1, 6, 10, "0", None])
    def test_index_out_of_range(self, rolled_state, index):
        with pytest.raises(IllegalTransitionError) as excinfo:
            ThirtyEngine.toggle_hold(rolled_state, index)
        assert excinfo.value.precondition is Precondition.DIE_INDEX_OUT_OF_RANGE


class TestSelectOption:
    """Tests for ThirtyEngine.select_option()."""

    def test_records_selection(self, fresh_state):
        state = ThirtyEngine.select_option(fresh_state, "9")
        assert state.selected_option is ScoringOption.NINE
        assert state.used_options == frozenset()

    def test_reselect_replaces(self, fresh_state):
        state = ThirtyEngine.select_option(fresh_state, ScoringOption.NINE)
        state = ThirtyEngine.select_option(state, ScoringOption.LOW)
        assert state.selected_option is ScoringOption.LOW

    def test_closes_menu(self, fresh_state):
        state = ThirtyEngine.set_scoring_menu_open(fresh_state, True)
        assert state.current_round.scoring_menu_open
        state = ThirtyEngine.select_option(state, "Low")
        assert not state.current_round.scoring_menu_open

    def test_used_option_rejected(self, ready_to_score_state):
        with pytest.raises(IllegalTransitionError) as excinfo:
            ThirtyEngine.select_option(ready_to_score_state, ScoringOption.LOW)
        assert excinfo.value.precondition is Precondition.OPTION_ALREADY_USED

    def test_unknown_option(self, fresh_state):
        with pytest.raises(InvalidInputError):
            ThirtyEngine.select_option(fresh_state, "Yahtzee")


class TestCommitRound:
    """Tests for ThirtyEngine.commit_round()."""

    def test_scores_and_advances(self, ready_to_score_state):
        state, result = ThirtyEngine.commit_round(ready_to_score_state)
        assert result.option is ScoringOption.SEVEN
        assert result.points == 21
        assert state.total_score == 36
        assert state.round_count == 4
        assert state.scores_by_option[ScoringOption.SEVEN] == 21
        assert ScoringOption.SEVEN in state.used_options

    def test_next_round_is_fresh(self, ready_to_score_state):
        state, _ = ThirtyEngine.commit_round(ready_to_score_state)
        assert state.current_round == RoundState()

    def test_round_scores_in_menu_order(self, ready_to_score_state):
        state, _ = ThirtyEngine.commit_round(ready_to_score_state)
        assert [o for o, _ in state.round_scores] == [
            ScoringOption.LOW, ScoringOption.SEVEN, ScoringOption.NINE,
        ]

    def test_rejected_with_rolls_remaining(self, rolled_state):
        state = ThirtyEngine.select_option(rolled_state, "Low")
        with pytest.raises(IllegalTransitionError) as excinfo:
            ThirtyEngine.commit_round(state)
        assert excinfo.value.precondition is Precondition.ROLLS_REMAINING
        assert state.total_score == 0
        assert state.used_options == frozenset()

    def test_rejected_without_selection(self):
        state = GameState(current_round=RoundState(rolls_left=0))
        with pytest.raises(IllegalTransitionError) as excinfo:
            ThirtyEngine.commit_round(state)
        assert excinfo.value.precondition is Precondition.NO_OPTION_SELECTED

    def test_rejected_for_used_selection(self):
        state = GameState(
            current_round=RoundState(rolls_left=0, selected_option=ScoringOption.LOW),
            used_options=frozenset({ScoringOption.LOW}),
        )
        with pytest.raises(IllegalTransitionError) as excinfo:
            ThirtyEngine.commit_round(state)
        assert excinfo.value.precondition is Precondition.OPTION_ALREADY_USED

    def test_legacy_flag_passed_through(self):
        state = GameState(
            current_round=RoundState(
                dice=DiceSet(values=(1, 2, 2, 1, 2, 2)),
                rolls_left=0,
                selected_option=ScoringOption.NINE,
            ),
        )
        _, fixed = ThirtyEngine.commit_round(state)
        _, legacy = ThirtyEngine.commit_round(state, legacy_deep_match=True)
        assert fixed.points == 9
        assert legacy.points == 0

    def test_can_commit(self, ready_to_score_state, rolled_state):
        assert ThirtyEngine.can_commit(ready_to_score_state)
        assert not ThirtyEngine.can_commit(rolled_state)


class TestStartRound:
    def test_resets_untouched_round(self):
        state = GameState(current_round=RoundState(scoring_menu_open=True))
        assert ThirtyEngine.start_round(state).current_round == RoundState()

    def test_rejected_mid_round(self, rolled_state):
        with pytest.raises(IllegalTransitionError) as excinfo:
            ThirtyEngine.start_round(rolled_state)
        assert excinfo.value.precondition is Precondition.ROUND_IN_PROGRESS


class TestFullGame:
    """Ten rounds from start to finish."""

    def test_ten_rounds_end_game(self, rng):
        state = ThirtyEngine.new_game()
        for option in ScoringOption:
            assert not state.is_over
            state = _play_round(state, option, rng)
            assert len(state.used_options) <= 10

        assert state.round_count == 11
        assert state.is_over
        assert state.used_options == frozenset(ScoringOption)
        assert state.total_score == sum(points for _, points in state.round_scores)
        assert state.remaining_options == ()

    def test_everything_rejected_after_game_end(self, rng):
        state = ThirtyEngine.new_game()
        for option in ScoringOption:
            state = _play_round(state, option, rng)

        actions = [
            lambda s: ThirtyEngine.roll(s, rng),
            lambda s: ThirtyEngine.toggle_hold(s, 0),
            lambda s: ThirtyEngine.select_option(s, ScoringOption.LOW),
            lambda s: ThirtyEngine.commit_round(s),
            lambda s: ThirtyEngine.start_round(s),
        ]
        for action in actions:
            with pytest.raises(IllegalTransitionError):
                action(state)

        assert ThirtyEngine.restart() == GameState()

    def test_options_never_reused(self, rng):
        state = ThirtyEngine.new_game()
        state = _play_round(state, ScoringOption.EIGHT, rng)
        for _ in range(3):
            state = ThirtyEngine.roll(state, rng)
        with pytest.raises(IllegalTransitionError):
            ThirtyEngine.select_option(state, ScoringOption.EIGHT)
