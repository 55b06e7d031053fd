"""
Thirty - Database Models

Pydantic models that mirror the Supabase table schemas.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class SavedGame(BaseModel):
    """Mirrors the `thirty_games` table."""

    game_id: str = Field(max_length=64)
    snapshot: dict[str, Any] = Field(default_factory=dict)
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
