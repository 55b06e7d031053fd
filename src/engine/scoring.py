"""
Thirty - Scoring Engine

Scores six dice against one of the ten scoring options.

Scoring Rules:
    - Low: sum of every die showing 3 or less
    - 4 to 12: dice are grouped into disjoint combinations that each sum
      exactly to the target; the score is the sum of all matched groups

Combination search:
    The dice are sorted in descending order. Each unconsumed die in turn
    starts a depth-first search over combinations in which it is the lowest
    index, extending only with higher unconsumed indices in ascending order.
    The partial sum is tested before the search goes deeper, and the first
    match found is consumed for good. A matched group is never broken up
    later to make room for a better grouping.

All methods are stateless class methods operating on immutable inputs.
"""

from typing import ClassVar, Sequence

from src.engine.base import Combination, NUM_DICE, ScoringOption, ScoringResult
from src.engine.validators import validate_dice_values, validate_scoring_option


class ScoringEngine:
    """
    Stateless scoring engine for Thirty.

    When ``legacy_deep_match`` is set, the 5th and 6th positions of a
    combination read the die bound at the 4th position instead of their own,
    matching the behaviour of older releases of the game.
    """

    LOW_MAX_FACE: ClassVar[int] = 3
    MAX_COMBINATION_SIZE: ClassVar[int] = NUM_DICE
    LEGACY_ALIASED_POSITION: ClassVar[int] = 4

    @classmethod
    def score(
        cls,
        option: ScoringOption | str,
        dice: Sequence[int],
        *,
        legacy_deep_match: bool = False,
    ) -> int:
        """
        Calculate the points for an option.

        Args:
            option: ScoringOption or its label
            dice: The six current dice values

        Returns:
            Points scored (never negative)

        Raises:
            InvalidInputError: Unknown option or malformed dice
        """
        return cls.calculate_score(option, dice, legacy_deep_match=legacy_deep_match).points

    @classmethod
    def calculate_score(
        cls,
        option: ScoringOption | str,
        dice: Sequence[int],
        *,
        legacy_deep_match: bool = False,
    ) -> ScoringResult:
        """
        Calculate the points for an option along with the matched dice.

        Args:
            option: ScoringOption or its label
            dice: The six current dice values
            legacy_deep_match: Reproduce the old 5/6-die lookup

        Returns:
            ScoringResult with points and combinations

        Raises:
            InvalidInputError: Unknown option or malformed dice
        """
        option = validate_scoring_option(option)
        values = validate_dice_values(dice)

        if option is ScoringOption.LOW:
            return cls._score_low(values)

        ordered = tuple(sorted(values, reverse=True))
        combinations = cls.find_combinations(
            option.target, ordered, legacy_deep_match=legacy_deep_match
        )
        return ScoringResult(
            option=option,
            points=sum(c.total for c in combinations),
            combinations=combinations,
        )

    @classmethod
    def _score_low(cls, values: tuple[int, ...]) -> ScoringResult:
        ordered = tuple(sorted(values, reverse=True))
        indices = tuple(i for i, v in enumerate(ordered) if v <= cls.LOW_MAX_FACE)
        combinations: tuple[Combination, ...] = ()
        if indices:
            combinations = (
                Combination(indices=indices, values=tuple(ordered[i] for i in indices)),
            )
        return ScoringResult(
            option=ScoringOption.LOW,
            points=sum(c.total for c in combinations),
            combinations=combinations,
        )

    @classmethod
    def find_combinations(
        cls,
        target: int,
        ordered: Sequence[int],
        *,
        legacy_deep_match: bool = False,
    ) -> tuple[Combination, ...]:
        """
        Group descending-sorted dice into disjoint combinations summing to target.

        Args:
            target: Sum each combination must reach
            ordered: Dice values sorted in descending order
            legacy_deep_match: Reproduce the old 5/6-die lookup

        Returns:
            Matched combinations in the order they were found
        """
        consumed: set[int] = set()
        found: list[Combination] = []

        for start in range(len(ordered)):
            if start in consumed:
                continue

            if ordered[start] == target:
                consumed.add(start)
                found.append(Combination(indices=(start,), values=(ordered[start],)))
                continue

            match = cls._extend(
                target, ordered, consumed, (start,), (start,), legacy_deep_match
            )
            if match is not None:
                consumed.update(match.indices)
                found.append(match)

        return tuple(found)

    @classmethod
    def _extend(
        cls,
        target: int,
        ordered: Sequence[int],
        consumed: set[int],
        bound: tuple[int, ...],
        read: tuple[int, ...],
        legacy_deep_match: bool,
    ) -> Combination | None:
        """
        Depth-first extension of an open combination.

        ``bound`` holds the loop index chosen at each position, ``read`` the
        index whose die is actually counted there. They differ only at the
        aliased positions in legacy mode.
        """
        if len(bound) >= cls.MAX_COMBINATION_SIZE:
            return None

        subtotal = sum(ordered[i] for i in read)
        aliased = legacy_deep_match and len(bound) >= cls.LEGACY_ALIASED_POSITION

        for candidate in range(bound[-1] + 1, len(ordered)):
            probe = bound[cls.LEGACY_ALIASED_POSITION - 1] if aliased else candidate
            if probe in consumed:
                continue

            total = subtotal + ordered[probe]
            if total > target:
                # dice are positive, deeper extensions only grow the sum
                continue

            next_bound = bound + (candidate,)
            next_read = read + (probe,)
            if total == target:
                return Combination(
                    indices=tuple(sorted(set(next_read))),
                    values=tuple(ordered[i] for i in next_read),
                )

            match = cls._extend(
                target, ordered, consumed, next_bound, next_read, legacy_deep_match
            )
            if match is not None:
                return match

        return None
