"""
Thirty Database Layer.

Supabase integration for saving and restoring games.
"""

from src.database.client import get_supabase_client
from src.database.game_state import SavedGameManager
from src.database.models import SavedGame

__all__ = [
    "get_supabase_client",
    "SavedGame",
    "SavedGameManager",
]
