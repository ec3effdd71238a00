"""Analysis utilities for workflow graphs."""

from flowcanvas.analysis.graph_check import GraphReport, check_graph

__all__ = [
    "GraphReport",
    "check_graph",
]
