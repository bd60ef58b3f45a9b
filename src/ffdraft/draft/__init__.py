"""Live draft tracking: roster needs, recommendations and board state."""

from .needs import (
    KEY_POSITIONS,
    POSITION_LIMITS,
    RECOMMENDATION_LIMIT,
    DraftRecommendations,
    RosterNeeds,
    compute_roster_needs,
    recommend_for_roster,
    recommend_next_picks,
)
from .state import (
    DraftState,
    TeamRoster,
    build_draft_state,
    build_team_rosters,
    compute_round_pick,
    position_tier_counts,
    top_available_by_position,
    total_remaining_needs,
)

__all__ = [
    "KEY_POSITIONS",
    "POSITION_LIMITS",
    "RECOMMENDATION_LIMIT",
    "DraftRecommendations",
    "DraftState",
    "RosterNeeds",
    "TeamRoster",
    "build_draft_state",
    "build_team_rosters",
    "compute_roster_needs",
    "compute_round_pick",
    "position_tier_counts",
    "recommend_for_roster",
    "recommend_next_picks",
    "top_available_by_position",
    "total_remaining_needs",
]
