"""
Thirty - Input Validation Utilities

Provides validation functions for game engine inputs. All validators
either return validated data or raise descriptive InvalidInputError exceptions.
"""

from typing import Sequence

from src.engine.base import DIE_FACES, NUM_DICE, ScoringOption
from src.engine.errors import InvalidInputError


def validate_dice_values(values: Sequence[int], count: int = NUM_DICE) -> tuple[int, ...]:
    """
    Validate and normalize dice values.

    Args:
        values: Sequence of dice values to validate
        count: Exact number of dice required

    Returns:
        Validated values as a tuple

    Raises:
        InvalidInputError: If the count or any value is wrong
    """
    try:
        values_tuple = tuple(values)
    except TypeError:
        raise InvalidInputError(
            f"Invalid dice input: expected a sequence, got {type(values).__name__}."
        ) from None

    if len(values_tuple) != count:
        raise InvalidInputError(
            f"Invalid dice input: exactly {count} dice required, got {len(values_tuple)}."
        )

    for i, value in enumerate(values_tuple):
        # bool is an int subclass but never a die face
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidInputError(
                f"Invalid dice input: die at index {i} must be an integer, "
                f"got {type(value).__name__}."
            )
        if not (1 <= value <= DIE_FACES):
            raise InvalidInputError(
                f"Invalid dice input: die at index {i} is {value}, "
                f"must be between 1 and {DIE_FACES}."
            )

    return values_tuple


def validate_scoring_option(option: ScoringOption | str) -> ScoringOption:
    """
    Resolve a scoring option from an enum member or its label.

    Args:
        option: ScoringOption member or label such as "Low" or "7"

    Returns:
        The matching ScoringOption

    Raises:
        InvalidInputError: If the label is not in the catalog
    """
    if isinstance(option, ScoringOption):
        return option
    try:
        return ScoringOption(option)
    except ValueError:
        raise InvalidInputError(f"Unknown scoring option: {option!r}.") from None


def is_valid_die_index(index: object) -> bool:
    """True if index addresses one of the six dice."""
    return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < NUM_DICE
