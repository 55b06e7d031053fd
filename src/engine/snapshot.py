"""
Thirty - Snapshot Encoding

Converts a GameState to and from the flat key/value map the persistence
layer stores. Decoding never fails: a missing or malformed field falls back
to its fresh-game value, and counters that disagree with the used options
are rebuilt from them.
"""

import logging
from typing import Annotated, Any, Literal, Mapping

from pydantic import (
    BaseModel,
    Field,
    NonNegativeInt,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    WrapValidator,
    field_validator,
    model_validator,
)

from src.engine.base import (
    DIE_FACES,
    NUM_DICE,
    NUM_ROUNDS,
    ROLLS_PER_ROUND,
    DiceSet,
    GameState,
    RoundState,
    ScoringOption,
)

logger = logging.getLogger(__name__)

ROUND_SCORE_PREFIX = "roundScore_"
NO_OPTION_SELECTED = "Select scoring option"

_LABELS = frozenset(o.label for o in ScoringOption)


def _none_when_invalid(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    try:
        return handler(value)
    except ValidationError:
        logger.warning("Dropping malformed snapshot entry %r", value)
        return None


LenientOption = Annotated[ScoringOption | None, WrapValidator(_none_when_invalid)]
LenientScore = Annotated[NonNegativeInt | None, WrapValidator(_none_when_invalid)]
DieValue = Annotated[int, Field(ge=1, le=DIE_FACES)]


class GameSnapshot(BaseModel):
    """The persisted flat map, one field per key."""

    round_count: int = Field(1, ge=1, le=NUM_ROUNDS + 1, alias="roundCount")
    total_score: NonNegativeInt = Field(0, alias="totalScore")
    rolls_left: int = Field(ROLLS_PER_ROUND, ge=0, le=ROLLS_PER_ROUND, alias="rollsLeft")
    scoring_menu_open: bool = Field(False, alias="isScoringMenuOpen")
    selected_option: ScoringOption | Literal["Select scoring option"] = Field(
        NO_OPTION_SELECTED, alias="selectedScoringOption"
    )
    used_options: list[LenientOption] = Field(default_factory=list, alias="usedScoringOptions")
    round_scores: dict[ScoringOption, LenientScore] = Field(
        default_factory=dict, alias="roundScores"
    )

    dice1_value: DieValue = Field(1, alias="dice1Value")
    dice2_value: DieValue = Field(2, alias="dice2Value")
    dice3_value: DieValue = Field(3, alias="dice3Value")
    dice4_value: DieValue = Field(4, alias="dice4Value")
    dice5_value: DieValue = Field(5, alias="dice5Value")
    dice6_value: DieValue = Field(6, alias="dice6Value")
    dice1_held: bool = Field(False, alias="dice1Held")
    dice2_held: bool = Field(False, alias="dice2Held")
    dice3_held: bool = Field(False, alias="dice3Held")
    dice4_held: bool = Field(False, alias="dice4Held")
    dice5_held: bool = Field(False, alias="dice5Held")
    dice6_held: bool = Field(False, alias="dice6Held")

    model_config = {"populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def _collect_round_scores(cls, data: Any) -> Any:
        """Gather the roundScore_<label> keys into one mapping."""
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        scores = {}
        for key, value in data.items():
            if not isinstance(key, str) or not key.startswith(ROUND_SCORE_PREFIX):
                continue
            label = key[len(ROUND_SCORE_PREFIX):]
            if label in _LABELS:
                scores[label] = value
            else:
                logger.warning("Dropping snapshot field %s, unknown scoring option", key)
        data["roundScores"] = scores
        return data

    @field_validator("*", mode="wrap")
    @classmethod
    def _fall_back_to_default(
        cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> Any:
        field = cls.model_fields[info.field_name]
        try:
            # bool is an int subclass but never a counter or a face
            if field.annotation is int and isinstance(value, bool):
                raise ValueError("boolean given for an integer field")
            return handler(value)
        except (ValidationError, ValueError):
            default = field.get_default(call_default_factory=True)
            logger.warning(
                "Malformed snapshot field %s=%r, using %r", field.alias, value, default
            )
            return default

    @property
    def dice_values(self) -> tuple[int, ...]:
        return tuple(getattr(self, f"dice{n}_value") for n in range(1, NUM_DICE + 1))

    @property
    def dice_held(self) -> tuple[bool, ...]:
        return tuple(getattr(self, f"dice{n}_held") for n in range(1, NUM_DICE + 1))


def dice_value_key(position: int) -> str:
    """Key for the value of the die at 0-based position."""
    return f"dice{position + 1}Value"


def dice_held_key(position: int) -> str:
    """Key for the hold flag of the die at 0-based position."""
    return f"dice{position + 1}Held"


def to_snapshot(state: GameState) -> dict[str, Any]:
    """
    Encode a game state as a flat key/value map.

    Args:
        state: The state to encode

    Returns:
        Dict using the persisted key names; used options are written as a
        list in menu order so the map serializes to JSON as-is.
    """
    current = state.current_round
    dice: dict[str, Any] = {}
    for position in range(NUM_DICE):
        dice[dice_value_key(position)] = current.dice.values[position]
        dice[dice_held_key(position)] = current.dice.held[position]

    snapshot = GameSnapshot.model_validate({
        "roundCount": state.round_count,
        "totalScore": state.total_score,
        "rollsLeft": current.rolls_left,
        "isScoringMenuOpen": current.scoring_menu_open,
        "selectedScoringOption": current.selected_option or NO_OPTION_SELECTED,
        "usedScoringOptions": [o for o in ScoringOption if o in state.used_options],
        **dice,
    })
    data = snapshot.model_dump(mode="json", by_alias=True, exclude={"round_scores"})
    for option, points in state.round_scores:
        data[f"{ROUND_SCORE_PREFIX}{option.label}"] = points
    return data


def from_snapshot(data: Mapping[str, Any] | None) -> GameState:
    """
    Decode a flat key/value map into a game state, best effort.

    Args:
        data: Map produced by to_snapshot, possibly partial or corrupt

    Returns:
        The decoded GameState. Its round count, round scores and total
        always agree with its used options.
    """
    if not isinstance(data, Mapping):
        if data is not None:
            logger.warning("Ignoring snapshot of type %s", type(data).__name__)
        data = {}

    snapshot = GameSnapshot.model_validate(data)
    used = frozenset(o for o in snapshot.used_options if o is not None)

    scores: dict[ScoringOption, int] = {}
    for option, points in snapshot.round_scores.items():
        if option not in used:
            logger.warning("Dropping round score for unused option %s", option)
        elif points is not None:
            scores[option] = points
    for option in used - scores.keys():
        logger.warning("No round score for used option %s, recording 0", option)
        scores[option] = 0

    round_count = len(used) + 1
    if snapshot.round_count != round_count:
        logger.warning(
            "Snapshot round %d does not match %d used options, using round %d",
            snapshot.round_count, len(used), round_count,
        )
    total_score = sum(scores.values())
    if snapshot.total_score != total_score:
        logger.warning(
            "Snapshot total %d does not match round scores, using %d",
            snapshot.total_score, total_score,
        )

    selected = snapshot.selected_option
    if not isinstance(selected, ScoringOption):
        selected = None
    elif selected in used:
        logger.warning("Dropping selected option %s, already used", selected)
        selected = None

    held = snapshot.dice_held
    if snapshot.rolls_left == ROLLS_PER_ROUND and any(held):
        # dice cannot be held before the first roll of a round
        held = (False,) * NUM_DICE

    return GameState(
        current_round=RoundState(
            dice=DiceSet(values=snapshot.dice_values, held=held),
            rolls_left=snapshot.rolls_left,
            selected_option=selected,
            scoring_menu_open=snapshot.scoring_menu_open,
        ),
        round_count=round_count,
        total_score=total_score,
        round_scores=tuple((o, scores[o]) for o in ScoringOption if o in scores),
        used_options=used,
    )
