"""Configuration helpers for league shapes and roster slots."""

from .league import (
    CORE_POSITIONS,
    DEFAULT_FLEX_POSITIONS,
    InvalidConfiguration,
    LeagueShape,
    get_league_shape,
    iter_league_shapes,
    normalize_slot,
)

__all__ = [
    "CORE_POSITIONS",
    "DEFAULT_FLEX_POSITIONS",
    "InvalidConfiguration",
    "LeagueShape",
    "get_league_shape",
    "iter_league_shapes",
    "normalize_slot",
]
