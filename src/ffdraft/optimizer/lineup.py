"""Starting lineup assignment for a single team's roster."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
import logging
import math
from typing import Any, Callable, Dict, Iterable, List, Mapping, Sequence, Tuple, Union

from ffdraft.config.league import (
    BENCH_SLOT,
    CORE_POSITIONS,
    DEFAULT_FLEX_POSITIONS,
    FLEX_SLOT,
    SLOT_ELIGIBILITY,
    SUPERFLEX_SLOT,
    InvalidConfiguration,
    is_flex_slot,
    normalize_slot,
)
from ffdraft.greedy import PositionArena
from ffdraft.models import EnrichedPlayer, RosterPlayer


logger = logging.getLogger(__name__)

RANKING_SYSTEMS: Tuple[str, ...] = ("fantasypros", "borischen")

LookupEntry = Union[RosterPlayer, EnrichedPlayer, Mapping[str, Any]]


@dataclass(frozen=True)
class LineupAssignment:
    """One filled starting slot."""

    slot: str
    slot_type: str
    player_id: str
    position: str


@dataclass(frozen=True)
class LineupComparison:
    fantasypros: List[LineupAssignment]
    borischen: List[LineupAssignment]


def _other_system(ranking: str) -> str:
    if ranking not in RANKING_SYSTEMS:
        raise InvalidConfiguration(f"Unknown ranking system {ranking!r}")
    return RANKING_SYSTEMS[1] if ranking == RANKING_SYSTEMS[0] else RANKING_SYSTEMS[0]


def _rank_key(ranking: str) -> Callable[[RosterPlayer], Tuple[float, float, str]]:
    secondary = _other_system(ranking)

    def key(player: RosterPlayer) -> Tuple[float, float, str]:
        primary_rank = player.rank(ranking)
        secondary_rank = player.rank(secondary)
        return (
            math.inf if primary_rank is None else primary_rank,
            math.inf if secondary_rank is None else secondary_rank,
            player.player_id,
        )

    return key


def _as_roster_player(player_id: str, entry: LookupEntry) -> RosterPlayer:
    if isinstance(entry, RosterPlayer):
        return entry
    if isinstance(entry, EnrichedPlayer):
        return entry.to_roster_player()
    return RosterPlayer.model_validate({"player_id": player_id, **entry})


def _labelled_slots(slot_template: Sequence[str]) -> List[Tuple[str, str]]:
    counters: Counter = Counter()
    labelled: List[Tuple[str, str]] = []
    for raw in slot_template:
        slot = normalize_slot(raw)
        if slot == BENCH_SLOT:
            continue
        counters[slot] += 1
        labelled.append((slot, f"{slot}{counters[slot]}"))
    return labelled


def optimize_lineup(
    owned_player_ids: Iterable[str],
    player_lookup: Mapping[str, LookupEntry],
    slot_template: Sequence[str],
    ranking: str = "fantasypros",
    *,
    flex_positions: Sequence[str] = DEFAULT_FLEX_POSITIONS,
) -> List[LineupAssignment]:
    """Fill starting slots with the best-ranked owned players.

    Dedicated slots are filled first, then FLEX-style slots, then SUPERFLEX,
    each pass in template order. Ties on ``ranking`` fall back to the other
    ranking system and then to player id. Slots with no eligible player left
    are omitted and anyone unassigned is on the bench. Lookup entries may be
    ``RosterPlayer``, ``EnrichedPlayer`` or plain mappings of their fields.
    """

    key = _rank_key(ranking)
    labelled = _labelled_slots(slot_template)

    pools: Dict[str, List[RosterPlayer]] = {pos: [] for pos in CORE_POSITIONS}
    seen = set()
    for player_id in owned_player_ids:
        if player_id in seen:
            continue
        seen.add(player_id)
        entry = player_lookup.get(player_id)
        if entry is None:
            logger.debug("Owned player %s missing from lookup", player_id)
            continue
        player = _as_roster_player(player_id, entry)
        pools[player.position].append(player)
    for group in pools.values():
        group.sort(key=key)

    eligibility: Dict[str, Tuple[str, ...]] = {}
    for slot, _ in labelled:
        if slot == FLEX_SLOT:
            allowed = set(flex_positions)
        elif slot == SUPERFLEX_SLOT:
            allowed = {"QB", *flex_positions}
        else:
            allowed = set(SLOT_ELIGIBILITY[slot])
        eligibility[slot] = tuple(pos for pos in CORE_POSITIONS if pos in allowed)

    passes = (
        [item for item in labelled if item[0] in CORE_POSITIONS],
        [item for item in labelled if is_flex_slot(item[0])],
        [item for item in labelled if item[0] == SUPERFLEX_SLOT],
    )

    arena: PositionArena[RosterPlayer] = PositionArena(pools)
    assignments: List[LineupAssignment] = []
    for slots in passes:
        for slot, label in slots:
            picked = arena.take_best(eligibility[slot], key)
            if picked is None:
                continue
            position, player = picked
            assignments.append(
                LineupAssignment(
                    slot=label,
                    slot_type=slot,
                    player_id=player.player_id,
                    position=position,
                )
            )
    return assignments


def compare_lineups(
    owned_player_ids: Iterable[str],
    player_lookup: Mapping[str, LookupEntry],
    slot_template: Sequence[str],
    *,
    flex_positions: Sequence[str] = DEFAULT_FLEX_POSITIONS,
) -> LineupComparison:
    """Run the optimizer under both ranking systems on the same roster."""

    owned = list(owned_player_ids)
    return LineupComparison(
        fantasypros=optimize_lineup(
            owned, player_lookup, slot_template, "fantasypros", flex_positions=flex_positions
        ),
        borischen=optimize_lineup(
            owned, player_lookup, slot_template, "borischen", flex_positions=flex_positions
        ),
    )


def bench_players(
    owned_player_ids: Iterable[str],
    assignments: Iterable[LineupAssignment],
) -> List[str]:
    """Owned ids not placed in any starting slot, in roster order."""

    started = {assignment.player_id for assignment in assignments}
    return [player_id for player_id in dict.fromkeys(owned_player_ids) if player_id not in started]
