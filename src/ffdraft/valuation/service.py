"""Replacement-level (VORP) valuation of a player pool."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections import Counter
from dataclasses import dataclass
import logging
import math
from typing import Dict, Iterable, List, Literal, Mapping, Optional, Sequence

from ffdraft.config.league import (
    ALLOCATION_PRIORITY,
    CORE_POSITIONS,
    InvalidConfiguration,
    LeagueShape,
    restricted_flex_order,
)
from ffdraft.greedy import PositionArena, allocate_slots
from ffdraft.models import EnrichedPlayer, PlayerRecord, normalize_scoring


logger = logging.getLogger(__name__)

ReplacementLevel = Literal["first_bench", "last_starter"]


@dataclass(frozen=True)
class PositionBaseline:
    """Starter allocation and replacement level for one position."""

    position: str
    dedicated_count: int
    flex_awarded: int
    superflex_awarded: int
    eligible_players: int
    baseline_index: Optional[int]
    baseline_points: float
    replacement_slope: float

    @property
    def starter_count(self) -> int:
        return self.dedicated_count + self.flex_awarded + self.superflex_awarded


@dataclass(frozen=True)
class _PoolEntry:
    order: int
    record: PlayerRecord
    points: float


def _whole(value: float) -> int:
    # Halves round up so -2.5 -> -2 and 2.5 -> 3.
    return int(math.floor(value + 0.5))


def _resolve_scoring(scoring: str) -> str:
    try:
        return normalize_scoring(scoring)
    except ValueError as exc:
        raise InvalidConfiguration(str(exc)) from None


def _group_by_position(
    players: Sequence[PlayerRecord],
    scoring: str,
    points_source: str,
) -> Dict[str, List[_PoolEntry]]:
    groups: Dict[str, List[_PoolEntry]] = {pos: [] for pos in CORE_POSITIONS}
    for order, record in enumerate(players):
        points = record.projected_points(scoring, points_source)
        if points is None:
            continue
        groups[record.position].append(_PoolEntry(order=order, record=record, points=points))
    for entries in groups.values():
        # list.sort is stable, so equal points keep input order.
        entries.sort(key=lambda entry: -entry.points)
    return groups


def _points_key(entry: _PoolEntry) -> float:
    return -entry.points


def _baseline_index(starters: int, available: int, replacement: str) -> Optional[int]:
    if available == 0 or starters <= 0:
        return None
    index = starters if replacement == "first_bench" else starters - 1
    return min(max(0, index), available - 1)


def _replacement_slope(points: Sequence[float], index: Optional[int]) -> float:
    if index is None:
        return 0.0
    if index + 1 < len(points):
        return points[index] - points[index + 1]
    if index - 1 >= 0:
        return points[index - 1] - points[index]
    return 0.0


def _baselines_from_groups(
    groups: Mapping[str, Sequence[_PoolEntry]],
    league: LeagueShape,
    replacement: str,
) -> Dict[str, PositionBaseline]:
    if replacement not in ("first_bench", "last_starter"):
        raise InvalidConfiguration(f"Unknown replacement level {replacement!r}")

    dedicated = {pos: league.teams * league.slots_for(pos) for pos in CORE_POSITIONS}
    arena: PositionArena[_PoolEntry] = PositionArena(groups, start=dedicated)
    flex_awarded: Counter = Counter()
    # Narrow slot types claim players before the generic FLEX pool.
    for slot in restricted_flex_order(league.flex_slots):
        order = [pos for pos in ALLOCATION_PRIORITY if pos in league.slot_eligibility(slot)]
        flex_awarded.update(
            allocate_slots(arena, league.teams * league.flex_slots[slot], order, _points_key)
        )
    flex_order = [pos for pos in ALLOCATION_PRIORITY if pos in league.flex_positions]
    superflex_order = [pos for pos in ALLOCATION_PRIORITY if pos in league.superflex_positions]
    flex_awarded.update(allocate_slots(arena, league.teams * league.flex, flex_order, _points_key))
    superflex_awarded = allocate_slots(
        arena, league.teams * league.superflex, superflex_order, _points_key
    )

    baselines: Dict[str, PositionBaseline] = {}
    for pos in CORE_POSITIONS:
        points = [entry.points for entry in groups[pos]]
        starters = dedicated[pos] + flex_awarded[pos] + superflex_awarded[pos]
        index = _baseline_index(starters, len(points), replacement)
        baselines[pos] = PositionBaseline(
            position=pos,
            dedicated_count=dedicated[pos],
            flex_awarded=flex_awarded[pos],
            superflex_awarded=superflex_awarded[pos],
            eligible_players=len(points),
            baseline_index=index,
            baseline_points=points[index] if index is not None else 0.0,
            replacement_slope=_replacement_slope(points, index),
        )
        logger.debug(
            "%s: starters=%d (flex=%d, superflex=%d) baseline=%.2f slope=%.2f",
            pos,
            starters,
            flex_awarded[pos],
            superflex_awarded[pos],
            baselines[pos].baseline_points,
            baselines[pos].replacement_slope,
        )
    return baselines


def compute_baselines(
    players: Iterable[PlayerRecord],
    league: LeagueShape,
    scoring: str = "std",
    *,
    points_source: str = "fantasypros",
    replacement: ReplacementLevel = "first_bench",
) -> Dict[str, PositionBaseline]:
    """Return per-position starter counts, baselines and replacement slopes."""

    scoring = _resolve_scoring(scoring)
    groups = _group_by_position(list(players), scoring, points_source)
    return _baselines_from_groups(groups, league, replacement)


def _local_scarcity(entries: Sequence[_PoolEntry]) -> Dict[int, float]:
    gaps: Dict[int, float] = {}
    for i, entry in enumerate(entries):
        if i + 1 < len(entries):
            gap = entry.points - entries[i + 1].points
        elif i > 0:
            gap = entries[i - 1].points - entry.points
        else:
            gap = 0.0
        gaps[entry.order] = max(0.0, gap)
    return gaps


def _remaining_value_percent(
    entries: Sequence[_PoolEntry],
    baseline: PositionBaseline,
) -> Dict[int, int]:
    """Share of the position's above-baseline value left after each pick."""

    window = min(baseline.starter_count, len(entries))
    values = [max(0.0, entry.points - baseline.baseline_points) for entry in entries[:window]]
    total = sum(values)
    if total <= 0 or not math.isfinite(total):
        return {entry.order: 0 for entry in entries}

    # suffix[i] == sum(values[i:])
    suffix = [0.0] * (window + 1)
    for i in range(window - 1, -1, -1):
        suffix[i] = suffix[i + 1] + values[i]

    out: Dict[int, int] = {}
    for i, entry in enumerate(entries):
        remaining = suffix[i + 1] if i + 1 <= window else 0.0
        out[entry.order] = _whole(remaining / total * 100)
    return out


def compute_valuations(
    players: Iterable[PlayerRecord],
    league: LeagueShape,
    scoring: str = "std",
    *,
    points_source: str = "fantasypros",
    replacement: ReplacementLevel = "first_bench",
) -> List[EnrichedPlayer]:
    """Enrich every player with baseline-relative value and market signals.

    Output preserves input order. Players lacking points for ``scoring`` are
    left out of the baseline pools and get null value fields; nothing here
    raises for missing data.
    """

    scoring = _resolve_scoring(scoring)
    roster = list(players)
    groups = _group_by_position(roster, scoring, points_source)
    baselines = _baselines_from_groups(groups, league, replacement)

    local_gaps: Dict[int, float] = {}
    remaining_pct: Dict[int, int] = {}
    for pos in CORE_POSITIONS:
        local_gaps.update(_local_scarcity(groups[pos]))
        remaining_pct.update(_remaining_value_percent(groups[pos], baselines[pos]))

    adps = sorted(adp for adp in (rec.adp(scoring) for rec in roster) if adp is not None)
    # ADP and its points fallback both come from Sleeper.
    sleeper_points = sorted(
        pts for pts in (rec.projected_points(scoring, "sleeper") for rec in roster) if pts is not None
    )

    def overall_rank(record: PlayerRecord) -> Optional[int]:
        adp = record.adp(scoring)
        if adp is not None:
            return bisect_right(adps, adp)
        points = record.projected_points(scoring, "sleeper")
        if points is not None:
            return len(sleeper_points) - bisect_left(sleeper_points, points)
        return None

    excluded = 0
    enriched: List[EnrichedPlayer] = []
    for order, record in enumerate(roster):
        baseline = baselines[record.position]
        points = record.projected_points(scoring, points_source)
        adp = record.adp(scoring)
        ecr = record.ecr(scoring)
        fp = record.fantasypros.get(scoring)

        if points is None:
            excluded += 1
            value = None
            gap = None
            index = None
        else:
            value = _whole(points - baseline.baseline_points)
            gap = local_gaps.get(order, 0.0)
            slope = baseline.replacement_slope
            index = gap / slope if slope > 0 else 0.0

        enriched.append(
            EnrichedPlayer(
                player=record,
                scoring=scoring,
                points=points,
                adp=adp,
                ecr=ecr,
                owned_pct=record.owned_pct,
                borischen_rank=record.borischen_rank(scoring),
                borischen_tier=record.borischen_tier(scoring),
                fantasypros_tier=fp.tier if fp is not None else None,
                position_rank=fp.position_rank if fp is not None else None,
                baseline_points=baseline.baseline_points,
                value_over_baseline=value,
                local_scarcity_gap=gap,
                replacement_slope=baseline.replacement_slope,
                scarcity_index=index,
                remaining_value_percent=remaining_pct.get(order) if points is not None else None,
                overall_rank=overall_rank(record),
                market_delta=_whole(adp - ecr) if adp is not None and ecr is not None else None,
            )
        )

    if excluded:
        logger.info("%d of %d players have no %s points for %s", excluded, len(roster), points_source, scoring)
    return enriched
