"""graphlog — persistent directed-graph engine with constrained search."""

__version__ = "0.4.0"
