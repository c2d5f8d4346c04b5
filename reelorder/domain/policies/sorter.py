# reelorder/domain/policies/sorter.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List

from reelorder.domain.entities.scored_entry import ScoredEntry
from reelorder.domain.enums.sort_strategy import SortStrategy


@dataclass(frozen=True)
class Ordering:
    key: Callable[[ScoredEntry], Any]
    descending: bool = False


# One ordering per strategy. Python's sort is stable (also with reverse=True),
# so entries with equal keys keep their input order.
ORDERINGS: Dict[SortStrategy, Ordering] = {
    SortStrategy.none: Ordering(key=lambda e: e.path),
    SortStrategy.quality: Ordering(key=lambda e: e.score, descending=True),
    SortStrategy.name: Ordering(key=lambda e: e.name),
    SortStrategy.duration: Ordering(key=lambda e: e.duration_ms, descending=True),
    SortStrategy.size: Ordering(key=lambda e: e.size_bytes, descending=True),
}


def sort_entries(
    entries: Iterable[ScoredEntry],
    strategy: SortStrategy | str | None = SortStrategy.none,
) -> List[ScoredEntry]:
    """Return a new list ordered by ``strategy``; the input is left untouched."""
    ordering = ORDERINGS[SortStrategy.parse(strategy)]
    return sorted(entries, key=ordering.key, reverse=ordering.descending)
