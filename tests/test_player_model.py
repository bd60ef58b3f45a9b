import pytest
from pydantic import ValidationError

from ffdraft.models import PlayerRecord, RankedPlayer, RosterPlayer, to_number


def test_player_record_is_frozen():
    record = PlayerRecord(player_id="p1", name="Test Player", position="RB")

    assert record.player_id == "p1"
    assert record.position == "RB"

    with pytest.raises((TypeError, ValidationError)):
        record.player_id = "p2"  # type: ignore[misc]


@pytest.mark.parametrize("raw, expected", [("DST", "DEF"), ("d/st", "DEF"), ("wr", "WR"), ("PK", "K")])
def test_position_aliases_are_normalized(raw, expected):
    assert PlayerRecord(player_id="x", position=raw).position == expected


@pytest.mark.parametrize("raw", ["FLEX", "SUPERFLEX", "CB", ""])
def test_slot_labels_are_not_player_positions(raw):
    with pytest.raises(ValidationError):
        PlayerRecord(player_id="x", position=raw)


def test_scoring_keys_accept_source_aliases():
    record = PlayerRecord(
        player_id="x",
        position="WR",
        fantasypros={"standard": {"points": "210.5", "ecr": 40}, "half_ppr": {"points": 230}},
        sleeper={"ppr": {"points": 250, "adp": "31.2"}},
    )
    assert record.projected_points("std") == pytest.approx(210.5)
    assert record.projected_points("half") == pytest.approx(230)
    assert record.projected_points("ppr") is None
    assert record.projected_points("ppr", source="sleeper") == pytest.approx(250)
    assert record.adp("ppr") == pytest.approx(31.2)
    assert record.ecr("std") == pytest.approx(40)


def test_unusable_numbers_become_absent():
    record = PlayerRecord(
        player_id="x",
        position="QB",
        owned_pct="-5",
        sleeper={"std": {"points": "nan", "adp": -3}},
        fantasypros={"std": {"points": -2.5, "ecr": "inf", "position_rank": "QB7"}},
        borischen={"std": {"rank": "", "tier": 2}},
    )
    assert record.owned_pct is None
    assert record.sleeper["std"].points is None
    assert record.adp("std") is None
    # Negative projections are legal.
    assert record.projected_points("std") == pytest.approx(-2.5)
    assert record.ecr("std") is None
    assert record.fantasypros["std"].position_rank == 7
    assert record.borischen_rank("std") is None
    assert record.borischen_tier("std") == 2


def test_missing_sources_are_absent_not_zero():
    record = PlayerRecord(player_id="x", position="TE")
    assert record.projected_points("std") is None
    assert record.adp("std") is None
    assert record.ecr("std") is None
    assert record.borischen_rank("std") is None


def test_to_number_handles_formatted_strings():
    assert to_number("1,204.5") == pytest.approx(1204.5)
    assert to_number("12.5%") == pytest.approx(12.5)
    assert to_number(True) is None
    assert to_number("n/a") is None


def test_roster_player_rank_lookup():
    player = RosterPlayer(player_id="a", position="dst", fantasypros_ecr=3, borischen_rank=None)
    assert player.position == "DEF"
    assert player.rank("fantasypros") == 3
    assert player.rank("borischen") is None
    with pytest.raises(ValueError):
        player.rank("espn")


def test_ranked_player_requires_rank_and_tier():
    with pytest.raises(ValidationError):
        RankedPlayer(player_id="a", position="RB", rank=3)  # type: ignore[call-arg]
