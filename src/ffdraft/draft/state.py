"""Draft board bookkeeping: who is gone, who is left, what each team needs."""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass
import logging
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

from ffdraft.config.league import BENCH_SLOT, LeagueShape
from ffdraft.models import DraftedPlayer, DraftPick, EnrichedPlayer, RankedPlayer

from .needs import RosterNeeds, compute_roster_needs


logger = logging.getLogger(__name__)

BoardPlayer = Union[EnrichedPlayer, RankedPlayer]


@dataclass(frozen=True)
class DraftState:
    drafted: List[DraftedPlayer]
    available: List[RankedPlayer]
    drafted_ids: FrozenSet[str]
    teams: int


@dataclass(frozen=True)
class TeamRoster:
    draft_slot: int
    players: List[DraftedPlayer]
    needs: RosterNeeds


def compute_round_pick(pick_no: int, teams: int) -> Tuple[int, int]:
    """Return ``(round, pick_in_round)`` for an overall pick number."""

    if teams <= 0 or pick_no <= 0:
        return 0, 0
    round_no = (pick_no - 1) // teams + 1
    pick_in_round = (pick_no - 1) % teams + 1
    return round_no, pick_in_round


def _ranked_view(player: BoardPlayer) -> Optional[RankedPlayer]:
    if isinstance(player, RankedPlayer):
        return player
    return player.to_ranked_player()


def build_draft_state(
    players: Iterable[BoardPlayer],
    picks: Iterable[DraftPick],
    teams: int,
) -> DraftState:
    """Split the player pool into drafted and still-available players.

    Available players without a rank or tier are left off the board.
    """

    pick_by_id: Dict[str, DraftPick] = {}
    for pick in picks:
        pick_by_id[pick.player_id] = pick

    drafted: List[DraftedPlayer] = []
    available: List[RankedPlayer] = []
    for player in players:
        pick = pick_by_id.get(player.player_id)
        if pick is not None:
            round_no, pick_in_round = compute_round_pick(pick.pick_no, teams)
            drafted.append(
                DraftedPlayer(
                    player_id=player.player_id,
                    name=player.name,
                    position=player.position,
                    pick_no=pick.pick_no,
                    round=pick.round or round_no,
                    pick_in_round=pick_in_round,
                    draft_slot=pick.draft_slot,
                )
            )
            continue
        ranked = _ranked_view(player)
        if ranked is not None:
            available.append(ranked)

    unknown = set(pick_by_id) - {player.player_id for player in drafted}
    if unknown:
        logger.warning("Ignoring %d picks for players outside the pool", len(unknown))

    drafted.sort(key=lambda player: player.pick_no or 0)
    available.sort(key=lambda player: player.rank)
    return DraftState(
        drafted=drafted,
        available=available,
        drafted_ids=frozenset(player.player_id for player in drafted),
        teams=teams,
    )


def build_team_rosters(state: DraftState, league: LeagueShape) -> Dict[int, TeamRoster]:
    """Compute remaining needs for every draft slot in the league."""

    requirements = league.slot_requirements()
    by_slot: Dict[int, List[DraftedPlayer]] = defaultdict(list)
    for player in state.drafted:
        if player.draft_slot is not None:
            by_slot[player.draft_slot].append(player)

    rosters: Dict[int, TeamRoster] = {}
    for slot in range(1, league.teams + 1):
        players = by_slot.get(slot, [])
        rosters[slot] = TeamRoster(
            draft_slot=slot,
            players=players,
            needs=compute_roster_needs(players, requirements, flex_positions=league.flex_positions),
        )
    return rosters


def total_remaining_needs(rosters: Mapping[int, TeamRoster]) -> Dict[str, int]:
    """Sum starting-slot needs across the league."""

    totals: Counter = Counter()
    for roster in rosters.values():
        for slot, remaining in roster.needs.needs.items():
            if slot != BENCH_SLOT:
                totals[slot] += remaining
    return dict(totals)


def position_tier_counts(players: Iterable[RankedPlayer]) -> Dict[str, Dict[float, int]]:
    counts: Dict[str, Counter] = defaultdict(Counter)
    for player in players:
        counts[player.position][player.tier] += 1
    return {pos: dict(tiers) for pos, tiers in counts.items()}


def top_available_by_position(
    players: Iterable[RankedPlayer],
    limit: int = 3,
) -> Dict[str, List[RankedPlayer]]:
    grouped: Dict[str, List[RankedPlayer]] = defaultdict(list)
    for player in players:
        grouped[player.position].append(player)
    return {
        pos: sorted(group, key=lambda player: player.rank)[: max(0, limit)]
        for pos, group in grouped.items()
    }
