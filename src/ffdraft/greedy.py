"""Constrained greedy assignment over per-position sorted pools.

Both the FLEX/SUPERFLEX baseline allocation and the lineup optimizer reduce
to the same loop: each position owns a list sorted best-first plus a cursor
marking how many entries have been consumed, and every resource (a flex slot,
a lineup slot) goes to the eligible position whose next entry scores best.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Callable, Dict, Generic, Iterable, Mapping, Optional, Sequence, Tuple, TypeVar


T = TypeVar("T")


class PositionArena(Generic[T]):
    """Sorted candidate pools indexed by position with a consume cursor each.

    Pools are never mutated; only the cursors advance.
    """

    def __init__(
        self,
        pools: Mapping[str, Sequence[T]],
        *,
        start: Optional[Mapping[str, int]] = None,
    ) -> None:
        self._pools: Dict[str, Sequence[T]] = dict(pools)
        self._cursor: Dict[str, int] = {pos: 0 for pos in self._pools}
        for pos, offset in (start or {}).items():
            if pos in self._cursor:
                self._cursor[pos] = max(0, offset)

    def cursor(self, position: str) -> int:
        return self._cursor.get(position, 0)

    def peek(self, position: str) -> Optional[T]:
        pool = self._pools.get(position, ())
        index = self._cursor.get(position, 0)
        return pool[index] if index < len(pool) else None

    def take(self, position: str) -> Optional[T]:
        item = self.peek(position)
        if item is not None:
            self._cursor[position] += 1
        return item

    def _best_entry(self, positions: Iterable[str], key: Callable[[T], Any]) -> Optional[Tuple[str, T]]:
        best: Optional[Tuple[str, T]] = None
        best_key: Any = None
        for pos in positions:
            item = self.peek(pos)
            if item is None:
                continue
            item_key = key(item)
            if best is None or item_key < best_key:
                best = (pos, item)
                best_key = item_key
        return best

    def best(self, positions: Iterable[str], key: Callable[[T], Any]) -> Optional[str]:
        """Position whose next entry has the smallest ``key``.

        Exhausted pools are skipped; ties go to the earliest position in
        ``positions``.
        """

        entry = self._best_entry(positions, key)
        return entry[0] if entry is not None else None

    def take_best(self, positions: Iterable[str], key: Callable[[T], Any]) -> Optional[Tuple[str, T]]:
        """Consume and return ``(position, item)`` for the best next entry."""

        entry = self._best_entry(positions, key)
        if entry is not None:
            self._cursor[entry[0]] += 1
        return entry


def allocate_slots(
    arena: PositionArena[T],
    slots: int,
    positions: Sequence[str],
    key: Callable[[T], Any],
) -> Counter:
    """Hand out ``slots`` units one at a time to the best next candidate.

    Returns how many units each position received. Stops early when every
    eligible pool is exhausted.
    """

    awarded: Counter = Counter()
    for _ in range(max(0, slots)):
        picked = arena.take_best(positions, key)
        if picked is None:
            break
        awarded[picked[0]] += 1
    return awarded
