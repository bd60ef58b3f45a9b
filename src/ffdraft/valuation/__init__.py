"""Player valuation against positional replacement level."""

from .service import PositionBaseline, ReplacementLevel, compute_baselines, compute_valuations

__all__ = ["PositionBaseline", "ReplacementLevel", "compute_baselines", "compute_valuations"]
