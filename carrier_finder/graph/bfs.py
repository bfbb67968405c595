"""Shortest hop-count paths over the unweighted city graph.

The graph is the symmetric adjacency mapping of ``Indices``. Neighbors
are sorted tuples and predecessor lists keep discovery order, so every
function here returns the same paths for the same indices.
"""

from collections import deque
from typing import Deque, Dict, List, Mapping, Optional, Sequence, Tuple

Adjacency = Mapping[str, Sequence[str]]

# Node -> predecessors at minimal distance, in discovery order
Predecessors = Dict[str, List[str]]


def shortest_path(adjacency: Adjacency, start: str, goal: str) -> Optional[List[str]]:
    """Return the first-discovered shortest path between two cities.

    Parameters
    ----------
    adjacency:
        City graph as produced by ``build_indices``.
    start:
        Departure city.
    goal:
        Destination city.

    Returns
    -------
    list[str] or None
        Cities from ``start`` to ``goal`` inclusive, ``[start]`` when
        both are the same city, ``None`` when ``goal`` is unreachable.
    """
    if start == goal:
        return [start]

    previous: Dict[str, str] = {}
    seen = {start}
    queue: Deque[str] = deque([start])
    while queue:
        u = queue.popleft()
        for v in adjacency.get(u, ()):
            if v in seen:
                continue
            seen.add(v)
            previous[v] = u
            if v == goal:
                path = [v]
                while path[-1] != start:
                    path.append(previous[path[-1]])
                path.reverse()
                return path
            queue.append(v)
    return None


def _is_skipped(u: str, v: str, skip_edge: Optional[Tuple[str, str]]) -> bool:
    if skip_edge is None:
        return False
    a, b = skip_edge
    return (u == a and v == b) or (u == b and v == a)


def shortest_path_predecessors(
    adjacency: Adjacency,
    start: str,
    goal: str,
    skip_edge: Optional[Tuple[str, str]] = None,
) -> Optional[Predecessors]:
    """Run BFS from ``start`` keeping every minimal-distance predecessor.

    ``skip_edge`` hides one undirected edge from the walk, which forces
    multi-hop alternatives when a direct edge should be avoided.

    Returns ``None`` when ``goal`` is unreachable.
    """
    distances: Dict[str, int] = {start: 0}
    predecessors: Predecessors = {}
    queue: Deque[str] = deque([start])
    while queue:
        u = queue.popleft()
        du = distances[u]
        for v in adjacency.get(u, ()):
            if _is_skipped(u, v, skip_edge):
                continue
            if v not in distances:
                distances[v] = du + 1
                predecessors[v] = [u]
                queue.append(v)
            elif distances[v] == du + 1:
                predecessors[v].append(u)

    if goal not in distances:
        return None
    return predecessors


def enumerate_shortest_paths(
    predecessors: Predecessors, start: str, goal: str, k: int
) -> List[List[str]]:
    """Rebuild up to ``k`` distinct shortest paths from predecessor lists.

    Walks backwards from ``goal`` depth-first and stops as soon as ``k``
    paths are collected.
    """
    paths: List[List[str]] = []
    if k <= 0:
        return paths
    current: List[str] = []

    def walk(node: str) -> None:
        current.append(node)
        if node == start:
            paths.append(current[::-1])
        else:
            for prev in predecessors.get(node, ()):
                walk(prev)
                if len(paths) >= k:
                    break
        current.pop()

    walk(goal)
    return paths
