"""Graph utilities over the city adjacency built from carrier data.

This subpackage contains the breadth-first path-finding used for
composite planning and diagnostics.
"""

from .bfs import enumerate_shortest_paths, shortest_path, shortest_path_predecessors

__all__ = ["shortest_path", "shortest_path_predecessors", "enumerate_shortest_paths"]
