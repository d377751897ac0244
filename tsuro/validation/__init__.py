"""Consistency checks between the tile grid and the board graph."""

from .graph_checks import GraphConsistencyError, check_graph_consistency, expected_adjacency

__all__ = ["GraphConsistencyError", "check_graph_consistency", "expected_adjacency"]
