"""League shape configuration and roster slot eligibility."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple


CORE_POSITIONS: Tuple[str, ...] = ("QB", "RB", "WR", "TE", "K", "DEF")
DEFAULT_FLEX_POSITIONS: Tuple[str, ...] = ("RB", "WR", "TE")

# Tie-break order for greedy FLEX/SUPERFLEX allocation.
ALLOCATION_PRIORITY: Tuple[str, ...] = ("RB", "WR", "TE", "QB", "K", "DEF")

FLEX_SLOT = "FLEX"
SUPERFLEX_SLOT = "SUPERFLEX"
BENCH_SLOT = "BN"

SLOT_ELIGIBILITY: Mapping[str, frozenset] = MappingProxyType({
    "QB": frozenset({"QB"}),
    "RB": frozenset({"RB"}),
    "WR": frozenset({"WR"}),
    "TE": frozenset({"TE"}),
    "K": frozenset({"K"}),
    "DEF": frozenset({"DEF"}),
    FLEX_SLOT: frozenset(DEFAULT_FLEX_POSITIONS),
    "WR_FLEX": frozenset({"WR", "RB"}),
    "TE_FLEX": frozenset({"TE", "WR", "RB"}),
    SUPERFLEX_SLOT: frozenset({"QB", *DEFAULT_FLEX_POSITIONS}),
})

_SLOT_ALIASES: Mapping[str, str] = {
    "DST": "DEF",
    "D/ST": "DEF",
    "D": "DEF",
    "SUPER_FLEX": SUPERFLEX_SLOT,
    "SFLEX": SUPERFLEX_SLOT,
    "OP": SUPERFLEX_SLOT,
    "REC_FLEX": "WR_FLEX",
    "BENCH": BENCH_SLOT,
    "BE": BENCH_SLOT,
    "IR": BENCH_SLOT,
    "TAXI": BENCH_SLOT,
}


class InvalidConfiguration(ValueError):
    """Raised when a league shape or slot template cannot be used."""


def normalize_slot(label: str) -> str:
    """Map a raw roster slot label onto its canonical name."""

    key = label.strip().upper()
    key = _SLOT_ALIASES.get(key, key)
    if key != BENCH_SLOT and key not in SLOT_ELIGIBILITY:
        raise InvalidConfiguration(f"Unknown roster slot {label!r}")
    return key


def is_flex_slot(slot: str) -> bool:
    return slot != SUPERFLEX_SLOT and len(SLOT_ELIGIBILITY.get(slot, ())) > 1


def restricted_flex_order(slots: Iterable[str]) -> List[str]:
    """Restricted flex slot types, narrowest eligibility first."""

    return sorted(
        (slot for slot in slots if slot != FLEX_SLOT and is_flex_slot(slot)),
        key=lambda slot: (len(SLOT_ELIGIBILITY[slot]), slot),
    )


@dataclass(frozen=True)
class LeagueShape:
    """Team count and per-team starter requirements for one league."""

    teams: int
    starters: Mapping[str, int] = field(default_factory=dict)
    flex: int = 0
    superflex: int = 0
    bench: int = 0
    flex_positions: Tuple[str, ...] = DEFAULT_FLEX_POSITIONS
    flex_slots: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.teams < 0:
            raise InvalidConfiguration(f"teams must be >= 0, got {self.teams}")
        for name in ("flex", "superflex", "bench"):
            value = getattr(self, name)
            if value < 0:
                raise InvalidConfiguration(f"{name} slot count must be >= 0, got {value}")

        counts: Dict[str, int] = {pos: 0 for pos in CORE_POSITIONS}
        for raw_pos, count in self.starters.items():
            pos = normalize_slot(raw_pos)
            if pos not in CORE_POSITIONS:
                raise InvalidConfiguration(f"{raw_pos!r} is not a dedicated position slot")
            if count < 0:
                raise InvalidConfiguration(f"{pos} slot count must be >= 0, got {count}")
            counts[pos] = int(count)
        object.__setattr__(self, "starters", MappingProxyType(counts))

        flex_positions = tuple(dict.fromkeys(normalize_slot(pos) for pos in self.flex_positions))
        for pos in flex_positions:
            if pos not in CORE_POSITIONS:
                raise InvalidConfiguration(f"{pos!r} cannot be FLEX-eligible")
        object.__setattr__(self, "flex_positions", flex_positions)

        # Restricted flex slots (WR_FLEX, TE_FLEX) keep their own eligibility.
        flex_slots: Dict[str, int] = {}
        for raw_slot, count in self.flex_slots.items():
            slot = normalize_slot(raw_slot)
            if slot in (FLEX_SLOT, SUPERFLEX_SLOT) or not is_flex_slot(slot):
                raise InvalidConfiguration(f"{raw_slot!r} is not a restricted flex slot")
            if count < 0:
                raise InvalidConfiguration(f"{slot} slot count must be >= 0, got {count}")
            if count:
                flex_slots[slot] = flex_slots.get(slot, 0) + int(count)
        object.__setattr__(self, "flex_slots", MappingProxyType(flex_slots))

    @property
    def superflex_positions(self) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(("QB", *self.flex_positions)))

    def slots_for(self, position: str) -> int:
        return self.starters.get(position, 0)

    def slot_eligibility(self, slot: str) -> frozenset:
        """Positions allowed in ``slot`` honouring this league's FLEX set."""

        if slot == FLEX_SLOT:
            return frozenset(self.flex_positions)
        if slot == SUPERFLEX_SLOT:
            return frozenset(self.superflex_positions)
        return SLOT_ELIGIBILITY[slot]

    def slot_requirements(self) -> Dict[str, int]:
        """Per-team slot requirements used as the starting roster needs."""

        requirements = dict(self.starters)
        if self.flex:
            requirements[FLEX_SLOT] = self.flex
        requirements.update(self.flex_slots)
        if self.superflex:
            requirements[SUPERFLEX_SLOT] = self.superflex
        return requirements

    def slot_template(self, *, include_bench: bool = True) -> Tuple[str, ...]:
        """Ordered starting slot template for one team."""

        slots: list[str] = []
        for pos in ("QB", "RB", "WR", "TE"):
            slots.extend([pos] * self.starters[pos])
        slots.extend([FLEX_SLOT] * self.flex)
        for slot in restricted_flex_order(self.flex_slots):
            slots.extend([slot] * self.flex_slots[slot])
        slots.extend([SUPERFLEX_SLOT] * self.superflex)
        for pos in ("K", "DEF"):
            slots.extend([pos] * self.starters[pos])
        if include_bench:
            slots.extend([BENCH_SLOT] * self.bench)
        return tuple(slots)

    def with_teams(self, teams: int) -> "LeagueShape":
        return replace(self, teams=teams)

    @classmethod
    def from_roster_positions(
        cls,
        teams: int,
        roster_positions: Sequence[str],
        *,
        flex_positions: Iterable[str] = DEFAULT_FLEX_POSITIONS,
    ) -> "LeagueShape":
        """Build a shape from a flat slot list such as ``["QB", "RB", "FLEX", "BN"]``."""

        starters: Dict[str, int] = {}
        flex_slots: Dict[str, int] = {}
        flex = superflex = bench = 0
        for label in roster_positions:
            slot = normalize_slot(label)
            if slot == BENCH_SLOT:
                bench += 1
            elif slot == SUPERFLEX_SLOT:
                superflex += 1
            elif slot == FLEX_SLOT:
                flex += 1
            elif is_flex_slot(slot):
                flex_slots[slot] = flex_slots.get(slot, 0) + 1
            else:
                starters[slot] = starters.get(slot, 0) + 1
        return cls(
            teams=teams,
            starters=starters,
            flex=flex,
            superflex=superflex,
            bench=bench,
            flex_positions=tuple(flex_positions),
            flex_slots=flex_slots,
        )


_LEAGUE_PRESETS: Dict[str, LeagueShape] = {
    "standard": LeagueShape(
        teams=12,
        starters={"QB": 1, "RB": 2, "WR": 2, "TE": 1, "K": 1, "DEF": 1},
        flex=1,
        bench=6,
    ),
    "half_ppr_3wr": LeagueShape(
        teams=12,
        starters={"QB": 1, "RB": 2, "WR": 3, "TE": 1, "K": 1, "DEF": 1},
        flex=1,
        bench=6,
    ),
    "superflex": LeagueShape(
        teams=12,
        starters={"QB": 1, "RB": 2, "WR": 2, "TE": 1, "K": 1, "DEF": 1},
        flex=1,
        superflex=1,
        bench=6,
    ),
}


def iter_league_shapes() -> Iterable[Tuple[str, LeagueShape]]:
    """Return an iterator of all preset (name, shape) pairs."""

    return _LEAGUE_PRESETS.items()


def get_league_shape(name: str) -> LeagueShape:
    """Fetch a preset league shape, raising KeyError if missing."""

    key = name.strip().lower()
    if key not in _LEAGUE_PRESETS:
        raise KeyError(f"No league preset named {name!r}")
    return _LEAGUE_PRESETS[key]
