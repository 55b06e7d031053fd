"""
Thirty - Game Engine Base Classes

This module defines the foundational data structures and enums used throughout
the game engine. All classes are immutable (frozen dataclasses) so a state can
be handed to the UI or the persistence layer without copying.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator

from src.engine.errors import InvalidInputError

NUM_DICE = 6
DIE_FACES = 6
ROLLS_PER_ROUND = 3
NUM_ROUNDS = 10
DEFAULT_DICE_VALUES: tuple[int, ...] = (1, 2, 3, 4, 5, 6)


class ScoringOption(Enum):
    """The ten scoring options, in menu order."""
    LOW = "Low"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    ELEVEN = "11"
    TWELVE = "12"

    @property
    def label(self) -> str:
        return self.value

    @property
    def target(self) -> int | None:
        """Sum a combination must reach, or None for Low."""
        if self is ScoringOption.LOW:
            return None
        return int(self.value)

    @classmethod
    def catalog(cls) -> tuple["ScoringOption", ...]:
        """All options in menu order."""
        return tuple(cls)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Die:
    """A single die face and its hold flag."""
    value: int
    held: bool = False


@dataclass(frozen=True)
class DiceSet:
    """
    The six dice of a round, addressable by index 0-5.

    Attributes:
        values: Face values in table order
        held: Hold flag per die, same order as values
    """
    values: tuple[int, ...] = DEFAULT_DICE_VALUES
    held: tuple[bool, ...] = (False,) * NUM_DICE

    def __post_init__(self) -> None:
        """Validate dice count and face values."""
        if len(self.values) != NUM_DICE or len(self.held) != NUM_DICE:
            raise InvalidInputError(
                f"Invalid dice input: a dice set must contain exactly {NUM_DICE} dice."
            )
        for value in self.values:
            if isinstance(value, bool) or not isinstance(value, int) or not (
                1 <= value <= DIE_FACES
            ):
                raise InvalidInputError(
                    f"Invalid dice input: die value {value!r} must be between 1 and {DIE_FACES}."
                )

    def __len__(self) -> int:
        return NUM_DICE

    def __getitem__(self, index: int) -> Die:
        return Die(value=self.values[index], held=self.held[index])

    def __iter__(self) -> Iterator[Die]:
        for value, held in zip(self.values, self.held):
            yield Die(value=value, held=held)

    @property
    def held_indices(self) -> frozenset[int]:
        return frozenset(i for i, held in enumerate(self.held) if held)

    @property
    def all_held(self) -> bool:
        return all(self.held)

    def with_hold_toggled(self, index: int) -> "DiceSet":
        """Return a copy with the hold flag at index flipped."""
        held = list(self.held)
        held[index] = not held[index]
        return replace(self, held=tuple(held))

    def with_values(self, values: tuple[int, ...]) -> "DiceSet":
        return replace(self, values=tuple(values))


@dataclass(frozen=True)
class Combination:
    """
    A group of dice that together reached a scoring target.

    Attributes:
        indices: Positions in the descending-sorted dice order
        values: Face values counted towards the sum
    """
    indices: tuple[int, ...]
    values: tuple[int, ...]

    @property
    def total(self) -> int:
        return sum(self.values)


@dataclass(frozen=True)
class ScoringResult:
    """
    Complete scoring result for one option applied to six dice.

    Attributes:
        option: The scoring option that was applied
        points: Total points scored
        combinations: Matched combinations (Low yields one group of all dice <= 3)
    """
    option: ScoringOption
    points: int
    combinations: tuple[Combination, ...] = ()

    def __str__(self) -> str:
        lines = [f"{self.option}: {self.points} points"]
        for combination in self.combinations:
            dice = " + ".join(str(v) for v in combination.values)
            lines.append(f"  - {dice} = {combination.total}")
        return "\n".join(lines)


@dataclass(frozen=True)
class RoundState:
    """
    State of the round currently being played.

    Attributes:
        dice: The six dice and their hold flags
        rolls_left: Roll attempts remaining (3 at round start)
        selected_option: Pending scoring option, not yet committed
        scoring_menu_open: Whether the UI shows the option menu (pass-through)
    """
    dice: DiceSet = field(default_factory=DiceSet)
    rolls_left: int = ROLLS_PER_ROUND
    selected_option: ScoringOption | None = None
    scoring_menu_open: bool = False

    @property
    def has_rolled(self) -> bool:
        """True once at least one roll has been made this round."""
        return self.rolls_left < ROLLS_PER_ROUND

    @property
    def is_untouched(self) -> bool:
        return not self.has_rolled and self.selected_option is None


@dataclass(frozen=True)
class GameState:
    """
    Complete state of a game of Thirty.

    Attributes:
        current_round: The round in progress
        round_count: Current round number (1-10), 11 once the game has ended
        total_score: Sum of all committed round scores
        round_scores: Score per committed option, in menu order
        used_options: Options already consumed this game
    """
    current_round: RoundState = field(default_factory=RoundState)
    round_count: int = 1
    total_score: int = 0
    round_scores: tuple[tuple[ScoringOption, int], ...] = ()
    used_options: frozenset[ScoringOption] = field(default_factory=frozenset)

    @property
    def is_over(self) -> bool:
        return self.round_count > NUM_ROUNDS

    @property
    def dice(self) -> DiceSet:
        return self.current_round.dice

    @property
    def rolls_left(self) -> int:
        return self.current_round.rolls_left

    @property
    def selected_option(self) -> ScoringOption | None:
        return self.current_round.selected_option

    @property
    def scores_by_option(self) -> dict[ScoringOption, int]:
        return dict(self.round_scores)

    @property
    def remaining_options(self) -> tuple[ScoringOption, ...]:
        """Options still offered in the scoring menu, in menu order."""
        return tuple(o for o in ScoringOption if o not in self.used_options)

    @property
    def final_results(self) -> tuple[tuple[ScoringOption, int], ...]:
        """Committed round scores in menu order, for the results screen."""
        return self.round_scores
