"""latticeview — interactive knowledge-graph view engine."""

__version__ = "0.3.0"
