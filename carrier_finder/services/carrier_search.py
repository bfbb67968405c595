"""Carrier search service - the query facade.

Validates query endpoints against the known-city set, dispatches the
exact, geo and composite sub-queries, removes overlapping results and
applies the final ordering.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import (
    Collection,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
)

from ..config import AppConfig, SearchConfig, get_config
from ..domain.errors import CityNotFoundError, ConfigurationError
from ..domain.models import (
    CompositePlan,
    Driver,
    DriverRow,
    Indices,
    RouteMatch,
    SearchResults,
)
from ..drivers import process_drivers
from ..indexing import build_indices
from ..matching import search_exact, search_geo
from ..normalize import normalize_cities, normalize_city
from ..planner import search_composite, search_composite_multi
from ..ports.data import CarrierRepositoryPort
from ..suggestions import suggest_cities


@dataclass
class CarrierSearchService:
    """Point-to-point carrier search over one loaded dataset.

    The service is built once per load and holds only immutable data,
    so independent queries may run concurrently.

    Attributes:
        drivers: Carriers, ids equal to their position
        indices: Lookup structures derived from the carriers
        cities: Canonical known cities; when empty, every city present
            in the graph or in a carrier chain is considered known
        config: Search limits
    """

    drivers: Sequence[Driver]
    indices: Indices
    cities: Sequence[str] = ()
    config: SearchConfig = field(default_factory=lambda: get_config().search)

    _logger: logging.Logger = field(init=False, repr=False)
    _by_id: Dict[int, Driver] = field(init=False, repr=False)
    _chains: Dict[int, Tuple[Tuple[str, ...], ...]] = field(init=False, repr=False)
    _city_set: FrozenSet[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self.drivers = tuple(self.drivers)
        self._by_id = {driver.id: driver for driver in self.drivers}
        self._chains = {driver.id: driver.chains for driver in self.drivers}
        if self.cities:
            self.cities = tuple(self.cities)
        else:
            graph_cities = set(self.indices.adjacency)
            for driver in self.drivers:
                for chain in driver.chains:
                    graph_cities.update(chain)
            self.cities = tuple(sorted(graph_cities))
        self._city_set = frozenset(self.cities)

    @classmethod
    def from_records(
        cls,
        rows: Iterable[DriverRow],
        cities: Iterable[str] = (),
        line_chains: Iterable[Sequence[str]] = (),
        config: Optional[AppConfig] = None,
    ) -> CarrierSearchService:
        """Build carriers, indices and the known-city set from raw input.

        Args:
            rows: Carrier records.
            cities: Known city names, raw.
            line_chains: Route chains without carrier attribution.
            config: Optional configuration override.

        Returns:
            A ready-to-query service.
        """
        config = config or get_config()
        drivers = process_drivers(
            rows, config.columns, config.search.max_chain_expansions
        )
        indices = build_indices(drivers, line_chains)
        return cls(
            drivers=drivers,
            indices=indices,
            cities=normalize_cities(list(cities)),
            config=config.search,
        )

    @classmethod
    def from_repository(
        cls, repository: CarrierRepositoryPort, config: Optional[AppConfig] = None
    ) -> CarrierSearchService:
        """Load everything a repository provides and build the service."""
        return cls.from_records(
            repository.load_driver_rows(),
            repository.load_cities(),
            repository.load_line_chains(),
            config=config,
        )

    def driver(self, driver_id: int) -> Optional[Driver]:
        return self._by_id.get(driver_id)

    def driver_name(self, driver_id: int) -> str:
        driver = self._by_id.get(driver_id)
        return driver.name if driver else ""

    def is_known(self, city: str) -> bool:
        return bool(city) and city in self._city_set

    def _sorted(self, matches: Iterable[RouteMatch]) -> List[RouteMatch]:
        return sorted(
            matches,
            key=lambda m: (
                len(m.chain),
                self.driver_name(m.driver_id).casefold(),
                m.driver_id,
            ),
        )

    def search_exact(self, from_city: str, to_city: str) -> List[RouteMatch]:
        """Exact history matches, by fragment length then carrier name."""
        matches = search_exact(self.indices, from_city, to_city, self._chains)
        return self._sorted(matches)

    def search_geo(self, from_city: str, to_city: str) -> List[RouteMatch]:
        """Route matches, by fragment length then carrier name."""
        matches = search_geo(self.indices, from_city, to_city, self._chains)
        return self._sorted(matches)

    def search_same_city(self, city: str) -> List[RouteMatch]:
        """Carriers whose chains pass through ``city``, by name."""
        matches = [
            RouteMatch(driver_id=driver.id, chain=(city,))
            for driver in self.drivers
            if driver.serves(city)
        ]
        return self._sorted(matches)

    def _budget(self, max_drivers: Optional[int]) -> int:
        budget = self.config.max_drivers if max_drivers is None else max_drivers
        if budget < 1:
            raise ConfigurationError(
                f"Segment budget must be at least 1, got {budget}",
                setting_name="max_drivers",
                expected_type="int >= 1",
            )
        return budget

    def composite(
        self,
        from_city: str,
        to_city: str,
        max_drivers: Optional[int] = None,
        k_paths: Optional[int] = None,
        avoid_direct: bool = False,
        exclude: Collection[int] = (),
    ) -> Optional[CompositePlan]:
        """Best composite plan between two canonical cities."""
        return search_composite(
            self.indices,
            from_city,
            to_city,
            max_drivers=self._budget(max_drivers),
            k_paths=k_paths or self.config.k_paths,
            avoid_direct=avoid_direct,
            exclude=exclude,
        )

    def composite_alternatives(
        self,
        from_city: str,
        to_city: str,
        max_drivers: Optional[int] = None,
        k_paths: Optional[int] = None,
        avoid_direct: bool = False,
        exclude: Collection[int] = (),
    ) -> List[CompositePlan]:
        """Ranked composite plans over distinct shortest paths."""
        return search_composite_multi(
            self.indices,
            from_city,
            to_city,
            max_drivers=self._budget(max_drivers),
            k_paths=k_paths or self.config.k_paths_alternatives,
            avoid_direct=avoid_direct,
            exclude=exclude,
        )

    def _unknown_result(
        self, from_city: str, to_city: str, unknown: Tuple[str, ...]
    ) -> SearchResults:
        suggestions: List[str] = []
        for city in unknown:
            for suggestion in suggest_cities(
                city,
                self.cities,
                limit=self.config.suggestion_limit,
                score_cutoff=self.config.suggestion_score_cutoff,
            ):
                if suggestion not in suggestions:
                    suggestions.append(suggestion)

        self._logger.info(
            "City not found",
            extra={"cities": list(unknown), "suggestions": len(suggestions)},
        )
        return SearchResults(
            from_city=from_city,
            to_city=to_city,
            unknown_cities=unknown,
            suggestions=tuple(suggestions[: self.config.suggestion_limit]),
        )

    @staticmethod
    def _is_redundant(
        plan: CompositePlan, from_city: str, to_city: str, matches: Iterable[RouteMatch]
    ) -> bool:
        """A one-leg plan whose carrier is already listed for the same pair."""
        if plan.segments_count != 1:
            return False
        driver_id = plan.segments[0].driver_id
        if driver_id is None:
            return False
        endpoints = {from_city, to_city}
        return any(
            m.driver_id == driver_id and {m.chain[0], m.chain[-1]} == endpoints
            for m in matches
        )

    def search(self, from_raw: str, to_raw: str) -> SearchResults:
        """Run a full point-to-point query on raw city names.

        Unknown endpoints are reported through ``unknown_cities`` (with
        suggestions) and empty result collections, never raised.

        Args:
            from_raw: Departure city as typed.
            to_raw: Destination city as typed.

        Returns:
            SearchResults with exact, geo and composite results.
        """
        from_city = normalize_city(from_raw) or str(from_raw or "").strip()
        to_city = normalize_city(to_raw) or str(to_raw or "").strip()

        unknown = tuple(
            dict.fromkeys(c for c in (from_city, to_city) if not self.is_known(c))
        )
        if unknown:
            return self._unknown_result(from_city, to_city, unknown)

        if from_city == to_city:
            same = self.search_same_city(from_city)
            self._logger.info(
                "Same-city search", extra={"city": from_city, "drivers": len(same)}
            )
            return SearchResults(
                from_city=from_city, to_city=to_city, exact=tuple(same)
            )

        exact = self.search_exact(from_city, to_city)
        exact_ids = {m.driver_id for m in exact}
        geo = [
            m
            for m in self.search_geo(from_city, to_city)
            if m.driver_id not in exact_ids
        ]

        composite = self.composite(from_city, to_city)
        alternatives: List[CompositePlan] = []
        if not exact:
            alternatives = self.composite_alternatives(from_city, to_city)[
                : self.config.alternatives_limit
            ]

        if composite is not None and self._is_redundant(
            composite, from_city, to_city, [*exact, *geo]
        ):
            composite = None

        self._logger.info(
            "Search completed",
            extra={
                "from": from_city,
                "to": to_city,
                "exact": len(exact),
                "geo": len(geo),
                "composite_segments": composite.segments_count if composite else 0,
                "alternatives": len(alternatives),
            },
        )
        return SearchResults(
            from_city=from_city,
            to_city=to_city,
            exact=tuple(exact),
            geo=tuple(geo),
            composite=composite,
            composite_alternatives=tuple(alternatives),
        )

    def search_strict(self, from_raw: str, to_raw: str) -> SearchResults:
        """Like search(), but raise on unknown cities.

        Raises:
            CityNotFoundError: If an endpoint is not a known city.
        """
        results = self.search(from_raw, to_raw)
        if not results.is_valid:
            raise CityNotFoundError(
                f"City not found: {', '.join(results.unknown_cities)}",
                cities=results.unknown_cities,
                suggestions=results.suggestions,
            )
        return results
