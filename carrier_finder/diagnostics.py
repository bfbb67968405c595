"""Coverage diagnostics over every city pair of a dataset.

For each ordered pair of known cities present in the graph, records the
BFS path, exact and geo matches, the composite plan and which carriers
cover each edge of the BFS path. Useful to spot holes in carrier data.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Set, Tuple

from .domain.models import CompositePlan, RouteMatch
from .graph.bfs import shortest_path
from .indexing import unordered_key
from .normalize import normalize_city
from .services.carrier_search import CarrierSearchService

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 50


def match_to_dict(service: CarrierSearchService, match: RouteMatch) -> Dict[str, Any]:
    return {
        "id": match.driver_id,
        "name": service.driver_name(match.driver_id),
        "chain": list(match.chain),
    }


def plan_to_dict(plan: Optional[CompositePlan]) -> Optional[Dict[str, Any]]:
    if plan is None:
        return None
    data = asdict(plan)
    data["segments_count"] = plan.segments_count
    data["is_complete"] = plan.is_complete
    return data


def route_report(
    service: CarrierSearchService, from_city: str, to_city: str
) -> Optional[Dict[str, Any]]:
    """Diagnose one ordered pair; ``None`` when the pair is not connected."""
    indices = service.indices
    path = shortest_path(indices.adjacency, from_city, to_city)
    if path is None:
        return None

    edges = []
    for u, v in zip(path, path[1:]):
        ids = sorted(indices.subpath_und.get(unordered_key(u, v), ()))
        edges.append(
            {
                "from": u,
                "to": v,
                "drivers": [
                    {"id": driver_id, "name": service.driver_name(driver_id)}
                    for driver_id in ids
                ],
            }
        )

    exact = service.search_exact(from_city, to_city)
    geo = service.search_geo(from_city, to_city)
    return {
        "from": from_city,
        "to": to_city,
        "path": path,
        "exact": [match_to_dict(service, m) for m in exact],
        "geo": [match_to_dict(service, m) for m in geo],
        "composite": plan_to_dict(service.composite(from_city, to_city)),
        "edges": edges,
    }


def _pairs(
    cities: List[str],
    in_graph: Set[str],
    from_city: Optional[str],
    to_city: Optional[str],
) -> List[Tuple[str, str]]:
    if from_city and to_city:
        # An explicit pair bypasses the name filter
        a, b = normalize_city(from_city), normalize_city(to_city)
        if a in in_graph and b in in_graph and a != b:
            return [(a, b)]
        return []
    return [(a, b) for a in cities for b in cities if a != b]


def run_diagnostics(
    service: CarrierSearchService,
    max_pairs: Optional[int] = None,
    name_filter: Optional[str] = None,
    from_city: Optional[str] = None,
    to_city: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Diagnose city pairs of the dataset.

    Args:
        service: Loaded search service.
        max_pairs: Stop after this many pairs (connected or not).
        name_filter: Keep only cities containing this substring.
        from_city: With ``to_city``, diagnose this single pair only,
            whatever ``name_filter`` says.
        to_city: See ``from_city``.

    Returns:
        One report per connected pair.
    """
    in_graph = set(service.indices.adjacency)
    cities = [c for c in service.cities if c in in_graph]
    if name_filter:
        needle = name_filter.lower()
        cities = [c for c in cities if needle in c.lower()]

    pairs = _pairs(cities, in_graph, from_city, to_city)
    limit = max_pairs if max_pairs and max_pairs > 0 else len(pairs)

    reports = []
    for processed, (a, b) in enumerate(pairs[:limit], start=1):
        report = route_report(service, a, b)
        if report is not None:
            reports.append(report)
        if processed % PROGRESS_EVERY == 0:
            logger.info(
                "Diagnostics progress",
                extra={"processed": processed, "total": limit},
            )

    logger.info(
        "Diagnostics completed",
        extra={"pairs": len(reports), "cities": len(cities)},
    )
    return reports
