"""Player and draft models."""

from .draft import DraftPick, DraftedPlayer
from .player import (
    SCORING_VARIANTS,
    BorisChenRating,
    EnrichedPlayer,
    FantasyProsRating,
    PlayerRecord,
    Position,
    RankedPlayer,
    RankingSystem,
    RatingSource,
    RosterPlayer,
    ScoringVariant,
    SleeperRating,
    normalize_position,
    normalize_scoring,
    to_number,
)

__all__ = [
    "SCORING_VARIANTS",
    "BorisChenRating",
    "DraftPick",
    "DraftedPlayer",
    "EnrichedPlayer",
    "FantasyProsRating",
    "PlayerRecord",
    "Position",
    "RankedPlayer",
    "RankingSystem",
    "RatingSource",
    "RosterPlayer",
    "ScoringVariant",
    "SleeperRating",
    "normalize_position",
    "normalize_scoring",
    "to_number",
]
