"""
Thirty - Saved Game Manager

CRUD operations for the `thirty_games` table. Each row holds the flat
snapshot of one game.
"""

import logging
from typing import Callable

from pydantic import ValidationError
from supabase import Client

from src.database.models import SavedGame
from src.engine.base import GameState
from src.engine.events import EventPayload
from src.engine.snapshot import from_snapshot, to_snapshot

logger = logging.getLogger(__name__)


class SavedGameManager:
    """Manages saved games in Supabase."""

    def __init__(self, client: Client) -> None:
        self.client = client
        self.table = client.table("thirty_games")

    def save(self, game_id: str, state: GameState) -> SavedGame:
        """Insert or replace the snapshot for a game."""
        data = (
            self.table
            .upsert({"game_id": game_id, "snapshot": to_snapshot(state)})
            .execute()
        )
        return SavedGame.model_validate(data.data[0])

    def get(self, game_id: str) -> SavedGame | None:
        """Get the stored row for a game."""
        data = (
            self.table
            .select("*")
            .eq("game_id", game_id)
            .execute()
        )
        if data.data:
            return SavedGame.model_validate(data.data[0])
        return None

    def load(self, game_id: str) -> GameState | None:
        """Load a game's state, or None if nothing was saved.

        A row whose snapshot cannot be read is treated as an empty snapshot,
        which decodes to a fresh game.
        """
        try:
            saved = self.get(game_id)
        except ValidationError:
            logger.warning("Unreadable saved game %s, starting fresh", game_id)
            return from_snapshot({})
        if saved is None:
            return None
        return from_snapshot(saved.snapshot)

    def delete(self, game_id: str) -> None:
        """Delete the saved state of a game."""
        self.table.delete().eq("game_id", game_id).execute()

    def autosaver(self, game_id: str) -> Callable[[EventPayload], None]:
        """
        Build a session subscriber that saves each new published state.

        A commit publishes the scored round and the next round (or game end)
        with the same state; that state is written once.
        """
        last_saved: GameState | None = None

        def _save(payload: EventPayload) -> None:
            nonlocal last_saved
            if payload.state == last_saved:
                logger.debug("Game %s unchanged after %s, not saving", game_id, payload.event.name)
                return
            self.save(game_id, payload.state)
            last_saved = payload.state
            logger.debug("Saved game %s after %s", game_id, payload.event.name)
        return _save
