"""Canonical player models shared across ingestion, valuation and draft layers."""

from __future__ import annotations

import math
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from ffdraft.config.league import CORE_POSITIONS


Position = Literal["QB", "RB", "WR", "TE", "K", "DEF"]
ScoringVariant = Literal["std", "half", "ppr"]
RatingSource = Literal["fantasypros", "sleeper"]
RankingSystem = Literal["fantasypros", "borischen"]

SCORING_VARIANTS: tuple[str, ...] = ("std", "half", "ppr")

_POSITION_ALIASES = {"DST": "DEF", "D/ST": "DEF", "D": "DEF", "PK": "K"}
_SCORING_ALIASES = {
    "standard": "std",
    "half_ppr": "half",
    "half-ppr": "half",
    "0.5ppr": "half",
    "full_ppr": "ppr",
}


def to_number(value: Any) -> Optional[float]:
    """Coerce a loosely-typed numeric field, returning None when unusable."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).replace(",", "").replace("%", "").strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def _non_negative(value: Any) -> Optional[float]:
    number = to_number(value)
    if number is None or number < 0:
        return None
    return number


def normalize_position(value: Any) -> str:
    """Return the core position for ``value`` or raise ValueError."""

    text = str(value or "").strip().upper()
    text = _POSITION_ALIASES.get(text, text)
    if text not in CORE_POSITIONS:
        raise ValueError(f"{value!r} is not a player position")
    return text


def normalize_scoring(value: Any) -> str:
    text = str(value or "").strip().lower()
    text = _SCORING_ALIASES.get(text, text)
    if text not in SCORING_VARIANTS:
        raise ValueError(f"{value!r} is not a scoring variant")
    return text


class _Rating(BaseModel):
    model_config = ConfigDict(frozen=True)


class BorisChenRating(_Rating):
    """Tiered rank published per scoring variant."""

    rank: Optional[float] = None
    tier: Optional[float] = None

    @field_validator("rank", "tier", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> Optional[float]:
        return _non_negative(value)


class SleeperRating(_Rating):
    """Season projection and market ADP."""

    points: Optional[float] = None
    adp: Optional[float] = None

    @field_validator("points", mode="before")
    @classmethod
    def _coerce_points(cls, value: Any) -> Optional[float]:
        return to_number(value)

    @field_validator("adp", mode="before")
    @classmethod
    def _coerce_adp(cls, value: Any) -> Optional[float]:
        return _non_negative(value)


class FantasyProsRating(_Rating):
    """Projection plus expert consensus rank."""

    points: Optional[float] = None
    ecr: Optional[float] = None
    tier: Optional[float] = None
    position_rank: Optional[int] = None

    @field_validator("points", mode="before")
    @classmethod
    def _coerce_points(cls, value: Any) -> Optional[float]:
        return to_number(value)

    @field_validator("ecr", "tier", mode="before")
    @classmethod
    def _coerce_rank(cls, value: Any) -> Optional[float]:
        return _non_negative(value)

    @field_validator("position_rank", mode="before")
    @classmethod
    def _coerce_position_rank(cls, value: Any) -> Optional[int]:
        # FantasyPros publishes these as "WR12".
        if isinstance(value, str):
            value = value.strip().lstrip("ABCDEFGHIJKLMNOPQRSTUVWXYZ/")
        number = _non_negative(value)
        return int(number) if number is not None else None


def _scoring_keys(value: Any) -> Any:
    if not isinstance(value, dict):
        return value
    out: Dict[str, Any] = {}
    for key, rating in value.items():
        if rating is None:
            continue
        out[normalize_scoring(key)] = rating
    return out


class PlayerRecord(BaseModel):
    """Merged per-player record across all rating sources."""

    player_id: str = Field(..., min_length=1)
    name: str = ""
    position: Position
    team: Optional[str] = None
    bye_week: Optional[int] = None
    owned_pct: Optional[float] = None
    borischen: Dict[ScoringVariant, BorisChenRating] = Field(default_factory=dict)
    sleeper: Dict[ScoringVariant, SleeperRating] = Field(default_factory=dict)
    fantasypros: Dict[ScoringVariant, FantasyProsRating] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("player_id", mode="before")
    @classmethod
    def _strip_id(cls, value: Any) -> Any:
        return str(value).strip() if value is not None else value

    @field_validator("position", mode="before")
    @classmethod
    def _normalize_position(cls, value: Any) -> str:
        return normalize_position(value)

    @field_validator("owned_pct", mode="before")
    @classmethod
    def _coerce_owned(cls, value: Any) -> Optional[float]:
        return _non_negative(value)

    @field_validator("borischen", "sleeper", "fantasypros", mode="before")
    @classmethod
    def _normalize_scoring_keys(cls, value: Any) -> Any:
        return _scoring_keys(value)

    def projected_points(self, scoring: str, source: str = "fantasypros") -> Optional[float]:
        if source == "fantasypros":
            fp = self.fantasypros.get(scoring)
            return fp.points if fp is not None else None
        if source == "sleeper":
            sl = self.sleeper.get(scoring)
            return sl.points if sl is not None else None
        raise ValueError(f"Unknown rating source {source!r}")

    def adp(self, scoring: str) -> Optional[float]:
        rating = self.sleeper.get(scoring)
        return rating.adp if rating is not None else None

    def ecr(self, scoring: str) -> Optional[float]:
        rating = self.fantasypros.get(scoring)
        return rating.ecr if rating is not None else None

    def borischen_rank(self, scoring: str) -> Optional[float]:
        rating = self.borischen.get(scoring)
        return rating.rank if rating is not None else None

    def borischen_tier(self, scoring: str) -> Optional[float]:
        rating = self.borischen.get(scoring)
        return rating.tier if rating is not None else None


class EnrichedPlayer(BaseModel):
    """A player record with valuation fields for one scoring variant."""

    player: PlayerRecord
    scoring: ScoringVariant
    points: Optional[float] = None
    adp: Optional[float] = None
    ecr: Optional[float] = None
    owned_pct: Optional[float] = None
    borischen_rank: Optional[float] = None
    borischen_tier: Optional[float] = None
    fantasypros_tier: Optional[float] = None
    position_rank: Optional[int] = None
    baseline_points: float = 0.0
    value_over_baseline: Optional[int] = None
    local_scarcity_gap: Optional[float] = None
    replacement_slope: float = 0.0
    scarcity_index: Optional[float] = None
    remaining_value_percent: Optional[int] = None
    overall_rank: Optional[int] = None
    market_delta: Optional[int] = None

    model_config = ConfigDict(frozen=True)

    @property
    def player_id(self) -> str:
        return self.player.player_id

    @property
    def position(self) -> str:
        return self.player.position

    @property
    def name(self) -> str:
        return self.player.name

    def to_ranked_player(self) -> Optional["RankedPlayer"]:
        """Return a draftable view ranked by Boris Chen, or None without rank/tier."""

        if self.borischen_rank is None or self.borischen_tier is None:
            return None
        return RankedPlayer(
            player_id=self.player_id,
            name=self.name,
            position=self.position,
            team=self.player.team,
            rank=self.borischen_rank,
            tier=self.borischen_tier,
        )

    def to_roster_player(self) -> "RosterPlayer":
        return RosterPlayer(
            player_id=self.player_id,
            position=self.position,
            fantasypros_ecr=self.ecr,
            borischen_rank=self.borischen_rank,
        )


class RankedPlayer(BaseModel):
    """Undrafted player carrying the rank and tier recommendations sort on."""

    player_id: str = Field(..., min_length=1)
    name: str = ""
    position: Position
    team: Optional[str] = None
    rank: float
    tier: float

    model_config = ConfigDict(frozen=True)

    @field_validator("position", mode="before")
    @classmethod
    def _normalize_position(cls, value: Any) -> str:
        return normalize_position(value)


class RosterPlayer(BaseModel):
    """Owned player as seen by the lineup optimizer."""

    player_id: str = Field(..., min_length=1)
    position: Position
    fantasypros_ecr: Optional[float] = None
    borischen_rank: Optional[float] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("position", mode="before")
    @classmethod
    def _normalize_position(cls, value: Any) -> str:
        return normalize_position(value)

    @field_validator("fantasypros_ecr", "borischen_rank", mode="before")
    @classmethod
    def _coerce_rank(cls, value: Any) -> Optional[float]:
        return _non_negative(value)

    def rank(self, system: str) -> Optional[float]:
        if system == "fantasypros":
            return self.fantasypros_ecr
        if system == "borischen":
            return self.borischen_rank
        raise ValueError(f"Unknown ranking system {system!r}")
