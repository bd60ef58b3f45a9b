"""Draft pick models."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from .player import Position, normalize_position


class DraftPick(BaseModel):
    """A single selection as reported by the draft host."""

    player_id: str = Field(..., min_length=1)
    pick_no: int = Field(..., ge=1)
    draft_slot: int = Field(..., ge=1)
    round: Optional[int] = Field(default=None, ge=1)

    model_config = ConfigDict(frozen=True)


class DraftedPlayer(BaseModel):
    """A player already on a team's roster."""

    player_id: str = Field(..., min_length=1)
    name: str = ""
    position: Position
    pick_no: Optional[int] = None
    round: Optional[int] = None
    pick_in_round: Optional[int] = None
    draft_slot: Optional[int] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("position", mode="before")
    @classmethod
    def _normalize_position(cls, value: Any) -> str:
        return normalize_position(value)
