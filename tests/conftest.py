"""
Thirty - Test Configuration and Fixtures

Common fixtures and test data for all test modules.
"""

import random

import pytest

from src.engine.base import DiceSet, GameState, RoundState, ScoringOption


# =============================================================================
# SCORING TEST DATA
# =============================================================================

@pytest.fixture
def scoring_rolls() -> dict[str, tuple[str, tuple[int, ...], int]]:
    """
    Roll patterns with expected scores from the fixed engine.

    Returns:
        Dict mapping name to (option_label, dice_values, expected_points)
    """
    return {
        # Low
        "low_straight": ("Low", (1, 2, 3, 4, 5, 6), 6),
        "low_all_ones": ("Low", (1, 1, 1, 1, 1, 1), 6),
        "low_all_threes": ("Low", (3, 3, 3, 3, 3, 3), 18),
        "low_nothing": ("Low", (4, 5, 6, 4, 5, 6), 0),

        # Single die hits the target
        "four_from_singles": ("4", (4, 4, 1, 3, 6, 5), 12),
        "six_from_singles": ("6", (6, 6, 6, 6, 6, 6), 36),

        # Pairs and larger groups
        "twelve_from_sixes": ("12", (6, 6, 6, 6, 6, 6), 36),
        "seven_three_pairs": ("7", (6, 1, 5, 2, 4, 3), 21),
        "ten_two_groups": ("10", (5, 5, 4, 3, 2, 1), 20),
        "eight_nothing": ("8", (1, 1, 1, 1, 1, 1), 0),
        "nine_five_dice": ("9", (1, 2, 2, 1, 2, 2), 9),
        "six_all_ones": ("6", (1, 1, 1, 1, 1, 1), 6),
        "twelve_all_twos": ("12", (2, 2, 2, 2, 2, 2), 12),
    }


# =============================================================================
# GAME STATE FIXTURES
# =============================================================================

@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible rolls."""
    return random.Random(30)


@pytest.fixture
def fresh_state() -> GameState:
    """State at the start of a game."""
    return GameState()


@pytest.fixture
def rolled_state() -> GameState:
    """Round 1 after one roll, nothing held."""
    return GameState(
        current_round=RoundState(
            dice=DiceSet(values=(6, 5, 4, 3, 2, 1)),
            rolls_left=2,
        ),
    )


@pytest.fixture
def ready_to_score_state() -> GameState:
    """Round 3 with all rolls used and option 7 selected."""
    return GameState(
        current_round=RoundState(
            dice=DiceSet(values=(6, 1, 5, 2, 4, 3), held=(True, False, True, False, False, False)),
            rolls_left=0,
            selected_option=ScoringOption.SEVEN,
        ),
        round_count=3,
        total_score=15,
        round_scores=((ScoringOption.LOW, 6), (ScoringOption.NINE, 9)),
        used_options=frozenset({ScoringOption.LOW, ScoringOption.NINE}),
    )
