"""Composite (multi-carrier) itinerary planning.

A shortest node path between two cities is partitioned into contiguous
legs, each covered end-to-end by one carrier. Partitions are compared
in strict priority order:

1. fewer legs,
2. shorter total covered length (hops),
3. higher score, where a leg from ``i`` to ``j`` scores
   ``5 * (j - i) + degree(path[j]) + strength``.

``strength`` is 0-2: how many of the two directions ``path[i] -> path[j]``
and ``path[j] -> path[i]`` appear in the chosen carrier's chains. The
degree term favours legs ending at well-connected transfer hubs.

A dynamic program over path positions, filled from the end, keeps the
best partition of every suffix. Cost is quadratic in path length per
candidate path; the number of candidate paths is capped by ``k_paths``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Collection, Dict, List, Optional, Sequence, Tuple

from .domain.models import CompositePlan, CompositeSegment, Indices
from .graph.bfs import enumerate_shortest_paths, shortest_path_predecessors
from .indexing import ordered_key, unordered_key

logger = logging.getLogger(__name__)

LENGTH_WEIGHT = 5
HUB_WEIGHT = 1
STRENGTH_WEIGHT = 1

DEFAULT_MAX_DRIVERS = 3
DEFAULT_K_PATHS = 5
DEFAULT_K_PATHS_MULTI = 8


@dataclass(frozen=True)
class _PlanState:
    count: int
    length: int
    score: int
    next_index: Optional[int] = None
    driver_id: Optional[int] = None

    def rank(self) -> Tuple[int, int, int]:
        return (self.count, self.length, -self.score)


def _cover_sets(
    indices: Indices, path: Sequence[str], exclude: Collection[int]
) -> Dict[Tuple[int, int], Tuple[int, ...]]:
    """Carriers able to cover ``path[i]..path[j]``, for every i < j.

    Coverage is the union of chain sub-sequences (either direction) and
    explicit history pairs, minus excluded ids.
    """
    cover: Dict[Tuple[int, int], Tuple[int, ...]] = {}
    for i in range(len(path)):
        for j in range(i + 1, len(path)):
            key = unordered_key(path[i], path[j])
            ids = indices.subpath_und.get(key, frozenset()) | indices.pair_exact.get(
                key, frozenset()
            )
            cover[(i, j)] = tuple(sorted(ids.difference(exclude)))
    return cover


def _strength(indices: Indices, a: str, b: str, driver_id: int) -> int:
    forward = driver_id in indices.subpath_dir.get(ordered_key(a, b), ())
    backward = driver_id in indices.subpath_dir.get(ordered_key(b, a), ())
    return int(forward) + int(backward)


def plan_composite_for_path(
    indices: Indices,
    path: Sequence[str],
    max_drivers: int = DEFAULT_MAX_DRIVERS,
    exclude: Collection[int] = (),
) -> CompositePlan:
    """Partition one node path into carrier-covered legs.

    Args:
        indices: Frozen indices of the current load.
        path: Node path, typically one of the shortest paths.
        max_drivers: Maximum number of legs.
        exclude: Carrier ids that must not be used.

    Returns:
        The best plan. When no partition within ``max_drivers`` exists,
        a single unattributed leg spanning the whole path, carrying every
        carrier that covers both endpoints (possibly none) and score 0.
    """
    path = tuple(path)
    if len(path) <= 1:
        return CompositePlan(path=path, segments=(), score=0)

    exclude = frozenset(exclude)
    cover = _cover_sets(indices, path, exclude)
    last = len(path) - 1

    dp: List[Optional[_PlanState]] = [None] * len(path)
    dp[last] = _PlanState(count=0, length=0, score=0)

    for i in range(last - 1, -1, -1):
        best: Optional[_PlanState] = None
        for j in range(i + 1, len(path)):
            candidates = cover[(i, j)]
            nxt = dp[j]
            if not candidates or nxt is None or nxt.count + 1 > max_drivers:
                continue

            pick, pick_strength = candidates[0], -1
            for driver_id in candidates:
                strength = _strength(indices, path[i], path[j], driver_id)
                if strength > pick_strength:
                    pick, pick_strength = driver_id, strength

            hops = j - i
            score = (
                LENGTH_WEIGHT * hops
                + HUB_WEIGHT * indices.degree(path[j])
                + STRENGTH_WEIGHT * pick_strength
            )
            candidate = _PlanState(
                count=nxt.count + 1,
                length=nxt.length + hops,
                score=nxt.score + score,
                next_index=j,
                driver_id=pick,
            )
            if best is None or candidate.rank() < best.rank():
                best = candidate
        dp[i] = best

    head = dp[0]
    if head is None:
        logger.debug(
            "No carrier partition within budget",
            extra={"path": list(path), "max_drivers": max_drivers},
        )
        fallback = CompositeSegment(
            from_city=path[0],
            to_city=path[last],
            path=path,
            driver_id=None,
            driver_ids=cover[(0, last)],
        )
        return CompositePlan(path=path, segments=(fallback,), score=0)

    segments: List[CompositeSegment] = []
    idx = 0
    while idx < last:
        state = dp[idx]
        if state is None or state.next_index is None:
            break
        j = state.next_index
        segments.append(
            CompositeSegment(
                from_city=path[idx],
                to_city=path[j],
                path=path[idx : j + 1],
                driver_id=state.driver_id,
                driver_ids=cover[(idx, j)],
            )
        )
        idx = j
    return CompositePlan(path=path, segments=tuple(segments), score=head.score)


def _rank_key(plan: CompositePlan) -> Tuple[bool, int, int]:
    # Unattributed fallback plans go after every complete plan
    return (not plan.is_complete, plan.segments_count, -plan.score)


def _candidate_plans(
    indices: Indices,
    from_city: str,
    to_city: str,
    max_drivers: int,
    k_paths: int,
    avoid_direct: bool,
    exclude: Collection[int],
) -> List[CompositePlan]:
    skip_edge = (from_city, to_city) if avoid_direct else None
    predecessors = shortest_path_predecessors(
        indices.adjacency, from_city, to_city, skip_edge=skip_edge
    )
    if predecessors is None:
        logger.debug(
            "No path between cities",
            extra={"from": from_city, "to": to_city, "avoid_direct": avoid_direct},
        )
        return []

    paths = enumerate_shortest_paths(predecessors, from_city, to_city, k_paths)
    plans = [plan_composite_for_path(indices, p, max_drivers, exclude) for p in paths]
    plans.sort(key=_rank_key)
    return plans


def search_composite(
    indices: Indices,
    from_city: str,
    to_city: str,
    max_drivers: int = DEFAULT_MAX_DRIVERS,
    k_paths: int = DEFAULT_K_PATHS,
    avoid_direct: bool = False,
    exclude: Collection[int] = (),
) -> Optional[CompositePlan]:
    """Return the best plan over up to ``k_paths`` shortest paths.

    Complete plans rank before unattributed fallbacks, then by leg count,
    then score (descending). ``None`` when the cities are not connected.
    """
    plans = _candidate_plans(
        indices, from_city, to_city, max_drivers, k_paths, avoid_direct, exclude
    )
    return plans[0] if plans else None


def search_composite_multi(
    indices: Indices,
    from_city: str,
    to_city: str,
    max_drivers: int = DEFAULT_MAX_DRIVERS,
    k_paths: int = DEFAULT_K_PATHS_MULTI,
    avoid_direct: bool = False,
    exclude: Collection[int] = (),
) -> List[CompositePlan]:
    """Return every candidate plan, ranked, one per distinct node path."""
    plans = _candidate_plans(
        indices, from_city, to_city, max_drivers, k_paths, avoid_direct, exclude
    )
    seen = set()
    unique: List[CompositePlan] = []
    for plan in plans:
        if plan.path in seen:
            continue
        seen.add(plan.path)
        unique.append(plan)
    return unique
