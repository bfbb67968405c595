"""Index construction over the canonical city key space.

Five structures are derived from the carrier set:

* exact-pair index: unordered history pair -> carrier ids
* directed sub-chain index: (A, B) with A before B in a chain -> ids
* undirected sub-chain index: same, order-agnostic
* edge index: unordered adjacent chain link -> ids
* adjacency graph: city -> neighbors, symmetric

Accumulation is pure set union, so the indices do not depend on the
order of carriers or chains in the input. Finished indices are frozen:
id sets become frozensets and neighbor sets become sorted tuples, which
keeps graph walks deterministic.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import DefaultDict, Dict, Hashable, Iterable, Optional, Sequence, Set

from .domain.models import Driver, Indices, OrderedKey, UnorderedKey
from .normalize import normalize_city

logger = logging.getLogger(__name__)


def unordered_key(a: str, b: str) -> UnorderedKey:
    """Key for an order-agnostic city pair (sorted 2-tuple)."""
    return (a, b) if a <= b else (b, a)


def ordered_key(a: str, b: str) -> OrderedKey:
    """Key for a city pair where ``a`` comes before ``b``."""
    return (a, b)


def _freeze(index: Dict[Hashable, Set[int]]) -> Dict[Hashable, frozenset]:
    return {key: frozenset(ids) for key, ids in sorted(index.items())}


def build_indices(
    drivers: Iterable[Driver],
    line_chains: Optional[Iterable[Sequence[str]]] = None,
) -> Indices:
    """Build every lookup structure from carriers and route chains.

    Args:
        drivers: Carriers with canonical pairs and chains.
        line_chains: Supplementary route chains without carrier
            attribution; they only add graph edges. Cities are
            normalized here, empty ones are skipped.

    Returns:
        Frozen Indices.
    """
    pair_exact: DefaultDict[UnorderedKey, Set[int]] = defaultdict(set)
    subpath_dir: DefaultDict[OrderedKey, Set[int]] = defaultdict(set)
    subpath_und: DefaultDict[UnorderedKey, Set[int]] = defaultdict(set)
    edge_drivers: DefaultDict[UnorderedKey, Set[int]] = defaultdict(set)
    adjacency: DefaultDict[str, Set[str]] = defaultdict(set)

    def add_edge(a: str, b: str) -> None:
        if not a or not b or a == b:
            return
        adjacency[a].add(b)
        adjacency[b].add(a)

    driver_count = 0
    for driver in drivers:
        driver_count += 1
        for a, b in driver.pairs:
            if not a or not b:
                continue
            pair_exact[unordered_key(a, b)].add(driver.id)
            add_edge(a, b)

        for chain in driver.chains:
            for i, a in enumerate(chain):
                for b in chain[i + 1 :]:
                    subpath_dir[ordered_key(a, b)].add(driver.id)
                    subpath_und[unordered_key(a, b)].add(driver.id)
            for a, b in zip(chain, chain[1:]):
                edge_drivers[unordered_key(a, b)].add(driver.id)
                add_edge(a, b)

    line_count = 0
    for chain in line_chains or ():
        line_count += 1
        cities = [normalize_city(city) for city in chain]
        for a, b in zip(cities, cities[1:]):
            add_edge(a, b)

    indices = Indices(
        pair_exact=_freeze(pair_exact),
        subpath_dir=_freeze(subpath_dir),
        subpath_und=_freeze(subpath_und),
        edge_drivers=_freeze(edge_drivers),
        adjacency={city: tuple(sorted(n)) for city, n in sorted(adjacency.items())},
    )
    logger.info(
        "Indices built",
        extra={
            "drivers": driver_count,
            "line_chains": line_count,
            "cities": len(indices.adjacency),
            "exact_pairs": len(indices.pair_exact),
            "edges": len(indices.edge_drivers),
        },
    )
    return indices
