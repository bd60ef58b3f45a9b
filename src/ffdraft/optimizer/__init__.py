"""Lineup assignment for owned rosters."""

from .lineup import (
    RANKING_SYSTEMS,
    LineupAssignment,
    LineupComparison,
    bench_players,
    compare_lineups,
    optimize_lineup,
)

__all__ = [
    "RANKING_SYSTEMS",
    "LineupAssignment",
    "LineupComparison",
    "bench_players",
    "compare_lineups",
    "optimize_lineup",
]
