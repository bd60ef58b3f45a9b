"""Command-line interface for valuations and lineup comparisons."""

from __future__ import annotations

import argparse
import csv
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from ffdraft.config import LeagueShape, get_league_shape
from ffdraft.config_loader import LeagueProfile
from ffdraft.ingest import load_combined_aggregates
from ffdraft.optimizer import bench_players, compare_lineups
from ffdraft.valuation import compute_valuations


VALUATION_HEADER = [
    "player_id",
    "name",
    "position",
    "team",
    "points",
    "baseline_points",
    "value_over_baseline",
    "local_scarcity_gap",
    "replacement_slope",
    "remaining_value_percent",
    "overall_rank",
    "adp",
    "ecr",
    "market_delta",
    "borischen_rank",
    "borischen_tier",
]


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fantasy football draft valuation tools")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("aggregates", type=Path, help="Directory of *-combined-aggregate.json files")
        sub.add_argument("--league", default="standard", help="League preset name")
        sub.add_argument("--league-file", type=Path, default=None, help="League profile JSON")
        sub.add_argument("--teams", type=int, default=None, help="Override the preset team count")
        sub.add_argument("--scoring", default="ppr", help="Scoring variant (std, half, ppr)")

    values = subparsers.add_parser("values", help="Write per-player valuations to CSV")
    add_common(values)
    values.add_argument("--output", type=Path, default=Path("valuations.csv"), help="Output CSV path")
    values.add_argument(
        "--replacement",
        choices=("first_bench", "last_starter"),
        default="first_bench",
        help="Which player defines the positional baseline",
    )

    lineup = subparsers.add_parser("lineup", help="Compare optimal lineups for a roster")
    add_common(lineup)
    lineup.add_argument("--player-id", action="append", default=[], help="Owned player id (repeatable)")
    lineup.add_argument("--slots", nargs="*", default=None, help="Slot template (defaults to the league's)")
    return parser.parse_args(argv)


def _resolve_league(args: argparse.Namespace) -> LeagueShape:
    if args.league_file:
        league = LeagueProfile.load(args.league_file).to_shape()
    else:
        league = get_league_shape(args.league)
    if args.teams is not None:
        league = league.with_teams(args.teams)
    return league


def _fmt(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def _write_values(args: argparse.Namespace, league: LeagueShape) -> None:
    records = load_combined_aggregates(args.aggregates)
    enriched = compute_valuations(
        records.values(), league, args.scoring, replacement=args.replacement
    )
    with args.output.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(VALUATION_HEADER)
        for player in enriched:
            writer.writerow([
                player.player_id,
                player.name,
                player.position,
                player.player.team or "",
                _fmt(player.points),
                _fmt(player.baseline_points),
                _fmt(player.value_over_baseline),
                _fmt(player.local_scarcity_gap),
                _fmt(player.replacement_slope),
                _fmt(player.remaining_value_percent),
                _fmt(player.overall_rank),
                _fmt(player.adp),
                _fmt(player.ecr),
                _fmt(player.market_delta),
                _fmt(player.borischen_rank),
                _fmt(player.borischen_tier),
            ])
    print(f"Wrote {len(enriched)} players to {args.output}")


def _print_lineups(args: argparse.Namespace, league: LeagueShape) -> None:
    records = load_combined_aggregates(args.aggregates)
    enriched = compute_valuations(records.values(), league, args.scoring)
    lookup = {player.player_id: player for player in enriched}
    owned: List[str] = args.player_id

    missing = [player_id for player_id in owned if player_id not in lookup]
    if missing:
        print(f"Unknown player ids: {', '.join(missing)}")

    template = args.slots or list(league.slot_template())
    comparison = compare_lineups(owned, lookup, template, flex_positions=league.flex_positions)
    for label, assignments in (
        ("FantasyPros", comparison.fantasypros),
        ("Boris Chen", comparison.borischen),
    ):
        print(f"{label}:")
        for assignment in assignments:
            name = lookup[assignment.player_id].name
            print(f"  {assignment.slot:<12} {name} ({assignment.position})")
        bench = bench_players([pid for pid in owned if pid in lookup], assignments)
        if bench:
            print(f"  {'BN':<12} " + ", ".join(lookup[pid].name for pid in bench))


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    league = _resolve_league(args)

    if args.command == "values":
        _write_values(args, league)
    elif args.command == "lineup":
        _print_lineups(args, league)


if __name__ == "__main__":
    main()
