"""Roster needs tracking and next-pick recommendations."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ffdraft.config.league import (
    BENCH_SLOT,
    CORE_POSITIONS,
    DEFAULT_FLEX_POSITIONS,
    FLEX_SLOT,
    SLOT_ELIGIBILITY,
    SUPERFLEX_SLOT,
    InvalidConfiguration,
    normalize_slot,
    restricted_flex_order,
)
from ffdraft.models import RankedPlayer, normalize_position


logger = logging.getLogger(__name__)

KEY_POSITIONS: Tuple[str, ...] = ("RB", "WR", "TE", "QB")
POSITION_LIMITS: Mapping[str, float] = {
    "QB": 2,
    "RB": math.inf,
    "WR": math.inf,
    "TE": 2,
    "K": 1,
    "DEF": 1,
}
RECOMMENDATION_LIMIT = 5


@dataclass(frozen=True)
class RosterNeeds:
    """Remaining slot needs and holdings for one team."""

    needs: Mapping[str, int]
    position_counts: Mapping[str, int]
    slot_counts: Mapping[str, int]

    @property
    def drafted(self) -> int:
        return sum(self.position_counts.values())

    @property
    def open_starting_slots(self) -> int:
        return sum(count for slot, count in self.needs.items() if slot != BENCH_SLOT)


@dataclass(frozen=True)
class DraftRecommendations:
    key_positions: List[RankedPlayer]
    best_available: List[RankedPlayer]
    backups: List[RankedPlayer]
    non_key_positions: List[RankedPlayer]


def _position_of(player: Any) -> str:
    if isinstance(player, str):
        return normalize_position(player)
    if isinstance(player, Mapping):
        return normalize_position(player.get("position"))
    return normalize_position(getattr(player, "position", None))


def _validated_requirements(slot_requirements: Mapping[str, int]) -> Dict[str, int]:
    needs: Dict[str, int] = {}
    for raw_slot, count in slot_requirements.items():
        slot = normalize_slot(raw_slot)
        if count < 0:
            raise InvalidConfiguration(f"{slot} requirement must be >= 0, got {count}")
        needs[slot] = needs.get(slot, 0) + int(count)
    return needs


def compute_roster_needs(
    drafted_players: Iterable[Any],
    slot_requirements: Mapping[str, int],
    *,
    flex_positions: Sequence[str] = DEFAULT_FLEX_POSITIONS,
) -> RosterNeeds:
    """Walk a team's picks and attribute each one to exactly one open slot.

    A pick fills its dedicated slot when one is open, otherwise a restricted
    flex slot such as WR_FLEX (narrowest first), then FLEX (when eligible),
    then SUPERFLEX, then bench. ``drafted_players`` may hold
    position strings, mappings or objects with a ``position`` attribute.
    """

    needs = _validated_requirements(slot_requirements)
    position_counts: Dict[str, int] = {pos: 0 for pos in CORE_POSITIONS}
    slot_counts: Counter = Counter()
    superflex_positions = {"QB", *flex_positions}
    restricted = restricted_flex_order(needs)

    for player in drafted_players:
        position = _position_of(player)
        position_counts[position] += 1

        restricted_slot = next(
            (s for s in restricted if needs[s] > 0 and position in SLOT_ELIGIBILITY[s]), None
        )
        if needs.get(position, 0) > 0:
            slot = position
        elif restricted_slot is not None:
            slot = restricted_slot
        elif position in flex_positions and needs.get(FLEX_SLOT, 0) > 0:
            slot = FLEX_SLOT
        elif position in superflex_positions and needs.get(SUPERFLEX_SLOT, 0) > 0:
            slot = SUPERFLEX_SLOT
        elif needs.get(BENCH_SLOT, 0) > 0:
            slot = BENCH_SLOT
        else:
            logger.debug("No open slot for drafted %s", position)
            continue
        needs[slot] -= 1
        slot_counts[slot] += 1

    return RosterNeeds(
        needs=needs,
        position_counts=position_counts,
        slot_counts=dict(slot_counts),
    )


def _sorted_by_tier(players: Iterable[RankedPlayer]) -> List[RankedPlayer]:
    return sorted(players, key=lambda player: (player.tier, player.rank))


def _under_cap(player: RankedPlayer, position_counts: Mapping[str, int]) -> bool:
    return position_counts.get(player.position, 0) < POSITION_LIMITS[player.position]


def _limit(
    players: Sequence[RankedPlayer],
    limit: int,
    per_position_limit: Optional[int],
) -> List[RankedPlayer]:
    if per_position_limit is None:
        return list(players[: max(0, limit)])
    seen: Counter = Counter()
    out: List[RankedPlayer] = []
    for player in players:
        if len(out) >= limit:
            break
        if seen[player.position] >= per_position_limit:
            continue
        seen[player.position] += 1
        out.append(player)
    return out


def recommend_next_picks(
    available_players: Iterable[RankedPlayer],
    needs: Mapping[str, int],
    position_counts: Mapping[str, int],
    *,
    limit: int = RECOMMENDATION_LIMIT,
    per_position_limit: Optional[int] = None,
    flex_positions: Sequence[str] = DEFAULT_FLEX_POSITIONS,
) -> DraftRecommendations:
    """Build the four recommendation lists from one pool of undrafted players.

    Every list is ordered by (tier, rank) and truncated to ``limit``; the
    lists may overlap.
    """

    pool = _sorted_by_tier(available_players)

    targets = {pos for pos in KEY_POSITIONS if needs.get(pos, 0) > 0}
    if needs.get(FLEX_SLOT, 0) > 0:
        targets.update(flex_positions)
    for slot in restricted_flex_order(needs):
        if needs[slot] > 0:
            targets.update(SLOT_ELIGIBILITY[slot])
    if needs.get(SUPERFLEX_SLOT, 0) > 0:
        targets.update(("QB", *flex_positions))

    key_positions = [player for player in pool if player.position in targets]
    under_cap = [player for player in pool if _under_cap(player, position_counts)]
    non_key = [player for player in under_cap if player.position not in KEY_POSITIONS]

    return DraftRecommendations(
        key_positions=_limit(key_positions, limit, per_position_limit),
        best_available=_limit(under_cap, limit, per_position_limit),
        backups=_limit(under_cap, limit, per_position_limit),
        non_key_positions=_limit(non_key, limit, per_position_limit),
    )


def recommend_for_roster(
    available_players: Iterable[RankedPlayer],
    roster: RosterNeeds,
    **kwargs: Any,
) -> DraftRecommendations:
    return recommend_next_picks(available_players, roster.needs, roster.position_counts, **kwargs)
