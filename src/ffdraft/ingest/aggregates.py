"""Load combined per-player aggregate shards into canonical records."""

from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from ffdraft.models import PlayerRecord, SCORING_VARIANTS


logger = logging.getLogger(__name__)

SHARD_POSITIONS = ("ALL", "QB", "RB", "WR", "TE", "K", "DEF", "FLEX")
SHARD_SUFFIX = "-combined-aggregate.json"

_CACHE_TTL_ENV = "FFDRAFT_AGGREGATES_CACHE_SECONDS"
_CACHE_TTL_DEFAULT = 600.0

# Each source keys its scoring variants differently.
_SLEEPER_SUFFIX = {"std": "std", "half": "half_ppr", "ppr": "ppr"}
_FANTASYPROS_KEY = {"std": "standard", "half": "half", "ppr": "ppr"}


def _env_float(name: str, default: float, *, clamp_min: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    return value


class SleeperSection(BaseModel):
    stats: Dict[str, Any] = Field(default_factory=dict)
    week: Optional[int] = None


class FantasyProsSection(BaseModel):
    player_id: Optional[str] = None
    player_owned_avg: Any = None
    pos_rank: Any = None
    stats: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    rankings: Dict[str, Any] = Field(default_factory=dict)


class CombinedEntry(BaseModel):
    """One player as written by the aggregation pipeline."""

    player_id: str = Field(..., min_length=1)
    name: str = ""
    position: str
    team: Optional[str] = None
    bye_week: Optional[int] = None
    borischen: Dict[str, Optional[Dict[str, Any]]] = Field(default_factory=dict)
    sleeper: Optional[SleeperSection] = None
    fantasypros: Optional[FantasyProsSection] = None

    def to_record(self) -> PlayerRecord:
        """Convert to a ``PlayerRecord``; raises ValidationError on a bad position."""

        borischen: Dict[str, Dict[str, Any]] = {}
        sleeper: Dict[str, Dict[str, Any]] = {}
        fantasypros: Dict[str, Dict[str, Any]] = {}

        for scoring in SCORING_VARIANTS:
            bc = self.borischen.get(scoring)
            if bc:
                borischen[scoring] = {"rank": bc.get("rank"), "tier": bc.get("tier")}

            if self.sleeper is not None:
                suffix = _SLEEPER_SUFFIX[scoring]
                points = self.sleeper.stats.get(f"pts_{suffix}")
                adp = self.sleeper.stats.get(f"adp_{suffix}")
                if points is not None or adp is not None:
                    sleeper[scoring] = {"points": points, "adp": adp}

            if self.fantasypros is not None:
                key = _FANTASYPROS_KEY[scoring]
                stats = self.fantasypros.stats.get(key) or {}
                ranking = self.fantasypros.rankings.get(key)
                ranking = ranking if isinstance(ranking, Mapping) else {}
                points = stats.get("FPTS_AVG", stats.get("FPTS"))
                if points is not None or ranking:
                    fantasypros[scoring] = {
                        "points": points,
                        "ecr": ranking.get("rank_ecr"),
                        "tier": ranking.get("tier"),
                        "position_rank": self.fantasypros.pos_rank,
                    }

        return PlayerRecord(
            player_id=self.player_id,
            name=self.name,
            position=self.position,
            team=self.team,
            bye_week=self.bye_week,
            owned_pct=self.fantasypros.player_owned_avg if self.fantasypros is not None else None,
            borischen=borischen,
            sleeper=sleeper,
            fantasypros=fantasypros,
        )


def _read_shard(path: Path) -> Dict[str, Dict[str, Any]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} is not a JSON object")
    for entry in data.values():
        CombinedEntry.model_validate(entry)
    return data


def records_from_entries(entries: Iterable[Mapping[str, Any]]) -> List[PlayerRecord]:
    """Validate raw entries, skipping (and logging) the ones that cannot be used."""

    records: List[PlayerRecord] = []
    for raw in entries:
        try:
            records.append(CombinedEntry.model_validate(raw).to_record())
        except ValidationError as exc:
            logger.warning(
                "Skipping player %s: %s",
                raw.get("name") or raw.get("player_id"),
                exc.errors()[0].get("msg", "invalid entry"),
            )
    return records


def load_combined_aggregates(directory: Path) -> Dict[str, PlayerRecord]:
    """Merge every positional shard in ``directory`` keyed by player id.

    Later shards win where entries overlap. Unreadable or malformed shards
    are skipped with a warning.
    """

    merged: Dict[str, Dict[str, Any]] = {}
    if not directory.is_dir():
        logger.warning("Aggregate directory %s does not exist", directory)
        return {}

    for pos in SHARD_POSITIONS:
        path = directory / f"{pos}{SHARD_SUFFIX}"
        if not path.exists():
            continue
        try:
            shard = _read_shard(path)
        except (OSError, ValueError, ValidationError) as exc:
            logger.warning("Skipping corrupted file %s: %s", path, exc)
            continue
        for player_id, entry in shard.items():
            merged[player_id] = {**merged.get(player_id, {}), **entry}

    records = records_from_entries(merged.values())
    logger.info("Loaded %d players from %s", len(records), directory)
    return {record.player_id: record for record in records}


class AggregateCache:
    """Caller-owned TTL cache around an aggregate loader.

    Nothing is cached at module level; create one per data directory and
    call :meth:`invalidate` when the underlying files change.
    """

    def __init__(
        self,
        loader: Callable[[], Dict[str, PlayerRecord]],
        *,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds is None:
            ttl_seconds = _env_float(_CACHE_TTL_ENV, _CACHE_TTL_DEFAULT, clamp_min=0.0)
        self.ttl_seconds = ttl_seconds
        self._loader = loader
        self._clock = clock
        self._data: Optional[Dict[str, PlayerRecord]] = None
        self._loaded_at: Optional[float] = None

    @classmethod
    def for_directory(cls, directory: Path, **kwargs: Any) -> "AggregateCache":
        return cls(lambda: load_combined_aggregates(directory), **kwargs)

    @property
    def last_loaded(self) -> Optional[float]:
        return self._loaded_at

    def get(self) -> Dict[str, PlayerRecord]:
        now = self._clock()
        if self._data is not None and self._loaded_at is not None:
            if now - self._loaded_at < self.ttl_seconds:
                return self._data
        self._data = self._loader()
        self._loaded_at = now
        return self._data

    def invalidate(self) -> None:
        self._data = None
        self._loaded_at = None
