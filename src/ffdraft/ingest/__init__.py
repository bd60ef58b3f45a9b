"""Input adapters that normalize merged ranking data."""

from .aggregates import (
    AggregateCache,
    CombinedEntry,
    load_combined_aggregates,
    records_from_entries,
)

__all__ = [
    "AggregateCache",
    "CombinedEntry",
    "load_combined_aggregates",
    "records_from_entries",
]
