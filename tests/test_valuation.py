import pytest

from ffdraft.config import InvalidConfiguration, LeagueShape
from ffdraft.models import PlayerRecord
from ffdraft.valuation import compute_baselines, compute_valuations


def _player(player_id, position, points=None, *, adp=None, ecr=None, sleeper_points=None):
    fantasypros = {}
    if points is not None or ecr is not None:
        fantasypros["std"] = {"points": points, "ecr": ecr}
    sleeper = {}
    if adp is not None or sleeper_points is not None:
        sleeper["std"] = {"points": sleeper_points, "adp": adp}
    return PlayerRecord(
        player_id=player_id,
        name=player_id.upper(),
        position=position,
        fantasypros=fantasypros,
        sleeper=sleeper,
    )


def _flex_pool():
    return [
        _player("rb1", "RB", 240),
        _player("rb2", "RB", 230),
        _player("rb3", "RB", 220),
        _player("wr1", "WR", 300),
        _player("wr2", "WR", 180),
        _player("wr3", "WR", 170),
        _player("wr4", "WR", 160),
        _player("te1", "TE", 150),
        _player("te2", "TE", 140),
    ]


FLEX_LEAGUE = LeagueShape(teams=1, starters={"RB": 2, "WR": 3, "TE": 1}, flex=1)


def test_flex_goes_to_best_marginal_position():
    baselines = compute_baselines(_flex_pool(), FLEX_LEAGUE)

    assert baselines["RB"].flex_awarded == 1
    assert baselines["WR"].flex_awarded == 0
    assert baselines["TE"].flex_awarded == 0
    assert baselines["RB"].starter_count == 3
    assert baselines["RB"].baseline_points == 220
    assert baselines["WR"].baseline_points == 160
    assert baselines["TE"].baseline_points == 140


def test_value_over_baseline_matches_baselines():
    by_id = {p.player_id: p for p in compute_valuations(_flex_pool(), FLEX_LEAGUE)}

    assert by_id["rb1"].value_over_baseline == 20
    assert by_id["te2"].value_over_baseline == 0
    assert by_id["wr1"].value_over_baseline == 140
    assert by_id["rb1"].baseline_points == 220


def test_last_starter_replacement_level():
    baselines = compute_baselines(_flex_pool(), FLEX_LEAGUE, replacement="last_starter")

    assert baselines["RB"].baseline_points == 220
    assert baselines["WR"].baseline_points == 170
    assert baselines["TE"].baseline_points == 150


def test_positions_without_players_or_starters_have_zero_baseline():
    baselines = compute_baselines(_flex_pool(), FLEX_LEAGUE)

    assert baselines["QB"].baseline_index is None
    assert baselines["QB"].baseline_points == 0.0
    assert baselines["K"].replacement_slope == 0.0


def test_replacement_slope_falls_back_to_backward_gap():
    baselines = compute_baselines(_flex_pool(), FLEX_LEAGUE)

    # Every baseline above sits at the tail of its list.
    assert baselines["RB"].replacement_slope == pytest.approx(10)
    assert baselines["WR"].replacement_slope == pytest.approx(10)
    assert baselines["TE"].replacement_slope == pytest.approx(10)


def test_superflex_allocated_after_flex():
    players = _flex_pool() + [
        _player("qb1", "QB", 380),
        _player("qb2", "QB", 330),
        _player("qb3", "QB", 290),
    ]
    league = LeagueShape(teams=1, starters={"QB": 1, "RB": 2, "WR": 3, "TE": 1}, flex=1, superflex=1)
    baselines = compute_baselines(players, league)

    assert baselines["RB"].flex_awarded == 1
    assert baselines["QB"].superflex_awarded == 1
    assert baselines["QB"].starter_count == 2
    assert baselines["QB"].baseline_points == 290


def test_starter_count_never_decreases_with_more_teams():
    players = [_player(f"rb{i}", "RB", 300 - i) for i in range(40)]
    players += [_player(f"wr{i}", "WR", 290 - i) for i in range(40)]
    previous = None
    for teams in range(1, 13):
        league = LeagueShape(teams=teams, starters={"RB": 2, "WR": 2}, flex=1)
        counts = {pos: b.starter_count for pos, b in compute_baselines(players, league).items()}
        if previous is not None:
            assert all(counts[pos] >= previous[pos] for pos in counts)
        previous = counts


def test_market_delta_rounds_adp_minus_ecr():
    enriched = compute_valuations([_player("wr1", "WR", 200, adp=45.2, ecr=42)], FLEX_LEAGUE)

    assert enriched[0].market_delta == 3


def test_remaining_value_percent_is_non_increasing():
    players = [_player(f"rb{i}", "RB", pts) for i, pts in enumerate([300, 260, 250, 200, 190, 150])]
    league = LeagueShape(teams=2, starters={"RB": 2})
    enriched = compute_valuations(players, league)

    percents = [p.remaining_value_percent for p in enriched]
    assert percents == sorted(percents, reverse=True)
    assert percents[0] < 100
    assert percents[-1] == 0


def test_missing_points_yield_null_fields_but_stay_in_output():
    players = _flex_pool() + [_player("rb9", "RB", None, adp=5)]
    enriched = compute_valuations(players, FLEX_LEAGUE)

    assert [p.player_id for p in enriched] == [p.player_id for p in players]
    missing = enriched[-1]
    assert missing.points is None
    assert missing.value_over_baseline is None
    assert missing.local_scarcity_gap is None
    assert missing.remaining_value_percent is None
    assert missing.market_delta is None
    # Excluded from the pool, so RB baseline is unchanged.
    assert missing.baseline_points == 220


def test_local_scarcity_gap_is_non_negative():
    players = [_player("te1", "TE", 150), _player("te2", "TE", 150), _player("te3", "TE", 120)]
    by_id = {p.player_id: p for p in compute_valuations(players, FLEX_LEAGUE)}

    assert by_id["te1"].local_scarcity_gap == 0
    assert by_id["te2"].local_scarcity_gap == 30
    assert by_id["te3"].local_scarcity_gap == 30


def test_overall_rank_uses_adp_then_points():
    players = [
        _player("a", "RB", 200, adp=3.0, sleeper_points=200),
        _player("b", "WR", 250, adp=1.0, sleeper_points=250),
        _player("c", "WR", 230, adp=3.0, sleeper_points=230),
        _player("d", "TE", 240, sleeper_points=240),
        _player("e", "TE", 260),
    ]
    by_id = {p.player_id: p for p in compute_valuations(players, FLEX_LEAGUE)}

    assert by_id["b"].overall_rank == 1
    assert by_id["a"].overall_rank == 3
    assert by_id["c"].overall_rank == 3
    # No ADP: two players have Sleeper points >= 240.
    assert by_id["d"].overall_rank == 2
    # FantasyPros points alone do not rank a player.
    assert by_id["e"].overall_rank is None


def test_valuation_does_not_mutate_input_order():
    players = list(reversed(_flex_pool()))
    snapshot = list(players)
    compute_valuations(players, FLEX_LEAGUE)
    assert players == snapshot


def test_unknown_scoring_is_invalid_configuration():
    with pytest.raises(InvalidConfiguration):
        compute_valuations(_flex_pool(), FLEX_LEAGUE, scoring="dynasty")


def test_unknown_replacement_level_is_invalid_configuration():
    with pytest.raises(InvalidConfiguration):
        compute_baselines(_flex_pool(), FLEX_LEAGUE, replacement="median")  # type: ignore[arg-type]


def test_overall_rank_falls_back_to_sleeper_points():
    players = [
        _player("rb1", "RB", sleeper_points=250),
        _player("rb2", "RB", sleeper_points=300),
    ]
    by_id = {p.player_id: p for p in compute_valuations(players, FLEX_LEAGUE)}

    assert by_id["rb1"].overall_rank == 2
    assert by_id["rb2"].overall_rank == 1
    assert by_id["rb1"].points is None


def test_flex_tie_goes_to_priority_order_not_flex_position_order():
    players = [
        _player("rb1", "RB", 200),
        _player("rb2", "RB", 150),
        _player("wr1", "WR", 210),
        _player("wr2", "WR", 150),
        _player("te1", "TE", 100),
    ]
    league = LeagueShape(
        teams=1, starters={"RB": 1, "WR": 1}, flex=1, flex_positions=("TE", "WR", "RB")
    )
    baselines = compute_baselines(players, league)

    assert baselines["RB"].flex_awarded == 1
    assert baselines["WR"].flex_awarded == 0


def test_restricted_flex_is_never_awarded_to_ineligible_positions():
    players = [
        _player("wr1", "WR", 200),
        _player("wr2", "WR", 120),
        _player("te1", "TE", 180),
        _player("te2", "TE", 170),
    ]
    league = LeagueShape.from_roster_positions(1, ["WR", "WR_FLEX", "TE"])
    baselines = compute_baselines(players, league)

    assert baselines["WR"].flex_awarded == 1
    assert baselines["TE"].flex_awarded == 0
    assert baselines["WR"].baseline_points == 120
    assert baselines["TE"].baseline_points == 170


def test_restricted_flex_allocated_before_generic_flex():
    players = [
        _player("rb1", "RB", 200),
        _player("wr1", "WR", 190),
        _player("te1", "TE", 195),
    ]
    league = LeagueShape(teams=1, flex=1, flex_slots={"WR_FLEX": 1})
    baselines = compute_baselines(players, league)

    # WR_FLEX takes rb1; FLEX then prefers te1 over wr1.
    assert baselines["RB"].flex_awarded == 1
    assert baselines["TE"].flex_awarded == 1
    assert baselines["WR"].flex_awarded == 0
