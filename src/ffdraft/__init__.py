"""Fantasy football draft valuation and roster optimization."""

__version__ = "0.1.0"
