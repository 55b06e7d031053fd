"""
Thirty - Game Session

An explicitly owned game: holds the current immutable state, applies
ThirtyEngine transitions to it, and publishes each change to subscribers.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Any, Callable, Mapping

from src.engine.base import GameState, ScoringOption, ScoringResult
from src.engine.errors import ThirtyError
from src.engine.events import EventPayload, GameEvent, classify_state_change
from src.engine.snapshot import from_snapshot, to_snapshot
from src.engine.thirty import ThirtyEngine

if TYPE_CHECKING:
    from src.config.settings import Settings

logger = logging.getLogger(__name__)

Subscriber = Callable[[EventPayload], None]


class ThirtyGame:
    """One game of Thirty and its listeners.

    The session is the only writer of its state. Callers read ``state``,
    which is immutable, and learn about changes through ``subscribe``.
    """

    def __init__(
        self,
        state: GameState | None = None,
        *,
        rng: random.Random | None = None,
        legacy_deep_match: bool = False,
    ) -> None:
        self._state = state if state is not None else ThirtyEngine.new_game()
        self._rng = rng if rng is not None else random.Random()
        self.legacy_deep_match = legacy_deep_match
        self._subscribers: list[Subscriber] = []

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, state: GameState | None = None
    ) -> ThirtyGame:
        """Build a session configured from application settings."""
        if settings is None:
            from src.config.settings import get_settings

            settings = get_settings()
        return cls(
            state,
            rng=random.Random(settings.random_seed),
            legacy_deep_match=settings.legacy_deep_match,
        )

    @classmethod
    def from_snapshot(cls, data: Mapping[str, Any], **kwargs: Any) -> ThirtyGame:
        """Restore a session from a persisted flat snapshot."""
        return cls(from_snapshot(data), **kwargs)

    @property
    def state(self) -> GameState:
        return self._state

    # -- Subscribers -------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> None:
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    # -- Transitions -------------------------------------------------------

    def roll(self) -> GameState:
        return self._apply("roll", lambda s: ThirtyEngine.roll(s, self._rng))

    def toggle_hold(self, index: int) -> GameState:
        return self._apply(
            "toggle hold", lambda s: ThirtyEngine.toggle_hold(s, index), index=index
        )

    def select_option(self, option: ScoringOption | str) -> GameState:
        return self._apply(
            "select option", lambda s: ThirtyEngine.select_option(s, option)
        )

    def set_scoring_menu_open(self, is_open: bool) -> GameState:
        return self._apply(
            "toggle menu", lambda s: ThirtyEngine.set_scoring_menu_open(s, is_open)
        )

    def commit_round(self) -> ScoringResult:
        """Score the round and advance. Returns the scoring breakdown."""
        previous = self._state
        try:
            state, result = ThirtyEngine.commit_round(
                previous, legacy_deep_match=self.legacy_deep_match
            )
        except ThirtyError as exc:
            logger.info("Rejected commit round: %s", exc)
            raise

        self._state = state
        data = {
            "option": result.option.label,
            "points": result.points,
            "round": previous.round_count,
        }
        self._publish(GameEvent.ROUND_SCORED, data)
        if state.is_over:
            self._publish(GameEvent.GAME_FINISHED, {"total_score": state.total_score})
        else:
            self._publish(GameEvent.ROUND_STARTED, {"round": state.round_count})
        return result

    def restart(self) -> GameState:
        self._state = ThirtyEngine.restart()
        self._publish(GameEvent.GAME_STARTED)
        return self._state

    def restore(self, data: Mapping[str, Any]) -> GameState:
        """Replace the current state with one decoded from a snapshot."""
        self._state = from_snapshot(data)
        self._publish(GameEvent.STATE_RESTORED)
        return self._state

    def to_snapshot(self) -> dict[str, Any]:
        return to_snapshot(self._state)

    # -- Internals ---------------------------------------------------------

    def _apply(
        self,
        action: str,
        transition: Callable[[GameState], GameState],
        **data: Any,
    ) -> GameState:
        previous = self._state
        try:
            state = transition(previous)
        except ThirtyError as exc:
            logger.info("Rejected %s: %s", action, exc)
            raise

        self._state = state
        event = classify_state_change(previous, state)
        if event is not None:
            self._publish(event, data)
        return state

    def _publish(self, event: GameEvent, data: dict[str, Any] | None = None) -> None:
        payload = EventPayload(event=event, state=self._state, data=data or {})
        for callback in list(self._subscribers):
            try:
                callback(payload)
            except Exception:
                logger.exception("Subscriber failed handling %s", event.name)
