"""Persist and load league profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from ffdraft.config import DEFAULT_FLEX_POSITIONS, LeagueShape


@dataclass
class LeagueProfile:
    teams: int
    starters: Dict[str, int]
    flex: int = 0
    superflex: int = 0
    bench: int = 0
    flex_positions: List[str] = field(default_factory=lambda: list(DEFAULT_FLEX_POSITIONS))
    flex_slots: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> "LeagueProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            teams=int(data.get("teams", 0)),
            starters={str(k): int(v) for k, v in data.get("starters", {}).items()},
            flex=int(data.get("flex", 0)),
            superflex=int(data.get("superflex", 0)),
            bench=int(data.get("bench", 0)),
            flex_positions=list(data.get("flex_positions", DEFAULT_FLEX_POSITIONS)),
            flex_slots={str(k): int(v) for k, v in data.get("flex_slots", {}).items()},
        )

    @classmethod
    def from_shape(cls, shape: LeagueShape) -> "LeagueProfile":
        return cls(
            teams=shape.teams,
            starters={pos: count for pos, count in shape.starters.items() if count},
            flex=shape.flex,
            superflex=shape.superflex,
            bench=shape.bench,
            flex_positions=list(shape.flex_positions),
            flex_slots=dict(shape.flex_slots),
        )

    def to_shape(self) -> LeagueShape:
        return LeagueShape(
            teams=self.teams,
            starters=dict(self.starters),
            flex=self.flex,
            superflex=self.superflex,
            bench=self.bench,
            flex_positions=tuple(self.flex_positions),
            flex_slots=dict(self.flex_slots),
        )

    def save(self, path: Path) -> None:
        payload = {
            "teams": self.teams,
            "starters": self.starters,
            "flex": self.flex,
            "superflex": self.superflex,
            "bench": self.bench,
            "flex_positions": self.flex_positions,
            "flex_slots": self.flex_slots,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
