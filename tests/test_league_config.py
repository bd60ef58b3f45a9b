import pytest

from ffdraft.config import InvalidConfiguration, LeagueShape, get_league_shape, iter_league_shapes
from ffdraft.config_loader import LeagueProfile


def test_get_league_shape_is_case_insensitive():
    league = get_league_shape("Standard")
    assert league.teams == 12
    assert league.slots_for("RB") == 2
    assert league.flex == 1


def test_get_league_shape_missing_raises():
    with pytest.raises(KeyError):
        get_league_shape("two_qb_dynasty")


def test_presets_are_valid_shapes():
    names = [name for name, _ in iter_league_shapes()]
    assert "superflex" in names
    superflex = get_league_shape("superflex")
    assert superflex.superflex_positions == ("QB", "RB", "WR", "TE")


def test_missing_positions_default_to_zero():
    league = LeagueShape(teams=10, starters={"QB": 1, "dst": 1})
    assert league.slots_for("DEF") == 1
    assert league.slots_for("K") == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"teams": -1},
        {"teams": 10, "starters": {"RB": -2}},
        {"teams": 10, "flex": -1},
        {"teams": 10, "superflex": -1},
        {"teams": 10, "starters": {"FLEX": 1}},
        {"teams": 10, "flex_positions": ("RB", "FLEX")},
    ],
)
def test_invalid_shapes_are_rejected(kwargs):
    with pytest.raises(InvalidConfiguration):
        LeagueShape(**kwargs)


def test_slot_requirements_and_template():
    league = LeagueShape(
        teams=12,
        starters={"QB": 1, "RB": 2, "WR": 2, "TE": 1, "K": 1, "DEF": 1},
        flex=1,
        superflex=1,
        bench=2,
    )
    assert league.slot_requirements() == {
        "QB": 1, "RB": 2, "WR": 2, "TE": 1, "K": 1, "DEF": 1, "FLEX": 1, "SUPERFLEX": 1,
    }
    assert league.slot_template() == (
        "QB", "RB", "RB", "WR", "WR", "TE", "FLEX", "SUPERFLEX", "K", "DEF", "BN", "BN",
    )
    assert "BN" not in league.slot_template(include_bench=False)


def test_from_roster_positions_counts_slots():
    league = LeagueShape.from_roster_positions(
        10, ["QB", "RB", "RB", "WR", "WR", "TE", "FLEX", "SUPER_FLEX", "K", "DEF", "BN", "BN", "BN"]
    )
    assert league.teams == 10
    assert league.slots_for("RB") == 2
    assert league.flex == 1
    assert league.superflex == 1
    assert league.bench == 3


def test_from_roster_positions_rejects_unknown_slot():
    with pytest.raises(InvalidConfiguration):
        LeagueShape.from_roster_positions(10, ["QB", "IDP_FLEX"])


def test_league_profile_round_trip(tmp_path):
    path = tmp_path / "league.json"
    LeagueProfile.from_shape(get_league_shape("superflex").with_teams(10)).save(path)

    league = LeagueProfile.load(path).to_shape()
    assert league.teams == 10
    assert league.superflex == 1
    assert league.slots_for("WR") == 2
    assert league.flex_positions == ("RB", "WR", "TE")


def test_restricted_flex_slots_keep_their_type():
    league = LeagueShape.from_roster_positions(1, ["WR", "WR_FLEX", "TE", "REC_FLEX"])

    assert league.flex == 0
    assert dict(league.flex_slots) == {"WR_FLEX": 2}
    assert league.slot_template() == ("WR", "TE", "WR_FLEX", "WR_FLEX")
    assert league.slot_requirements()["WR_FLEX"] == 2
    assert league.slot_eligibility("WR_FLEX") == frozenset({"WR", "RB"})


def test_slot_template_orders_restricted_flex_narrowest_first():
    league = LeagueShape(teams=1, starters={"QB": 1}, flex=1, flex_slots={"TE_FLEX": 1, "WR_FLEX": 1})
    assert league.slot_template() == ("QB", "FLEX", "WR_FLEX", "TE_FLEX")


@pytest.mark.parametrize("flex_slots", [{"FLEX": 1}, {"SUPERFLEX": 1}, {"WR": 1}, {"WR_FLEX": -1}])
def test_invalid_restricted_flex_slots(flex_slots):
    with pytest.raises(InvalidConfiguration):
        LeagueShape(teams=10, flex_slots=flex_slots)


def test_league_profile_keeps_restricted_flex(tmp_path):
    path = tmp_path / "league.json"
    LeagueProfile.from_shape(LeagueShape.from_roster_positions(8, ["WR", "WR_FLEX"])).save(path)

    league = LeagueProfile.load(path).to_shape()
    assert dict(league.flex_slots) == {"WR_FLEX": 1}
    assert league.slot_template() == ("WR", "WR_FLEX")
