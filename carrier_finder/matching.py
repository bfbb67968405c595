"""Single-carrier matches: exact history pairs and route (geo) matches."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from .domain.models import Indices, RouteMatch
from .indexing import ordered_key, unordered_key

DriverChains = Mapping[int, Sequence[Sequence[str]]]


def shortest_fragment(
    chains: Iterable[Sequence[str]], a: str, b: str
) -> Optional[Tuple[str, ...]]:
    """Return the shortest stretch of any chain spanning ``a`` and ``b``.

    The stretch keeps the carrier's own travel order, so it reads
    ``b .. a`` when the chain visits ``b`` first. Every occurrence of
    each city is considered, so a looping chain yields its tightest
    stretch. Ties keep the first chain. Returns ``None`` when no chain
    contains both cities.
    """
    best: Optional[Tuple[str, ...]] = None
    for chain in chains:
        positions_a = [idx for idx, city in enumerate(chain) if city == a]
        positions_b = [idx for idx, city in enumerate(chain) if city == b]
        for i in positions_a:
            for j in positions_b:
                if i == j:
                    continue
                lo, hi = min(i, j), max(i, j)
                if best is None or hi - lo + 1 < len(best):
                    best = tuple(chain[lo : hi + 1])
    return best


def _matches(
    driver_ids: Iterable[int], a: str, b: str, driver_chains: Optional[DriverChains]
) -> List[RouteMatch]:
    chains = driver_chains or {}
    results = []
    for driver_id in sorted(driver_ids):
        fragment = shortest_fragment(chains.get(driver_id, ()), a, b)
        results.append(RouteMatch(driver_id=driver_id, chain=fragment or (a, b)))
    results.sort(key=lambda match: len(match.chain))
    return results


def search_exact(
    indices: Indices, a: str, b: str, driver_chains: Optional[DriverChains] = None
) -> List[RouteMatch]:
    """Carriers with the exact pair ``a``/``b`` in their trip history.

    Each match carries the carrier's shortest chain fragment spanning the
    pair, or the bare pair when its chains do not contain both cities.
    Results are ordered by fragment length, then carrier id.
    """
    ids = indices.pair_exact.get(unordered_key(a, b), frozenset())
    return _matches(ids, a, b, driver_chains)


def search_geo(
    indices: Indices, a: str, b: str, driver_chains: Optional[DriverChains] = None
) -> List[RouteMatch]:
    """Carriers whose chains pass through both cities, in either order."""
    ids = set(indices.subpath_dir.get(ordered_key(a, b), ()))
    ids.update(indices.subpath_dir.get(ordered_key(b, a), ()))
    ids.update(indices.subpath_und.get(unordered_key(a, b), ()))
    return _matches(ids, a, b, driver_chains)
