"""Immutable domain models for the carrier finder.

All models are frozen dataclasses with slots. They are built once per
data load and never mutated afterwards; query results reference
carriers only by integer id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Mapping, Optional, Tuple

# Canonical city name, see normalize.normalize_city
CityName = str

# A raw carrier record: flat mapping of named textual fields
DriverRow = Mapping[str, Any]

UnorderedKey = Tuple[CityName, CityName]
OrderedKey = Tuple[CityName, CityName]


@dataclass(frozen=True, slots=True)
class Driver:
    """A carrier built from one input record.

    Attributes:
        id: Position of the source record in the input
        name: Display name (contact string without the phone)
        phone: Contact phone, empty when none was found
        raw_name: Contact string as found in the record
        pairs: Unordered city pairs from the trip history
        chains: Ordered city chains from the detailed route field
        branches: Free-form branch tags the carrier may serve
        corridors: Free-form corridor tags the carrier may serve
    """

    id: int
    name: str
    phone: str = ""
    raw_name: str = ""
    pairs: Tuple[Tuple[CityName, CityName], ...] = ()
    chains: Tuple[Tuple[CityName, ...], ...] = ()
    branches: Tuple[str, ...] = ()
    corridors: Tuple[str, ...] = ()

    def serves(self, city: CityName) -> bool:
        """Check whether any chain of this carrier passes through ``city``."""
        return any(city in chain for chain in self.chains)


@dataclass(frozen=True, slots=True)
class Indices:
    """Lookup structures derived from the carrier set.

    Attributes:
        pair_exact: Unordered history pair -> carrier ids
        subpath_dir: Ordered (A before B) chain sub-sequence -> carrier ids
        subpath_und: Unordered chain sub-sequence -> carrier ids
        edge_drivers: Unordered adjacent chain link -> carrier ids
        adjacency: City -> sorted neighbor cities (symmetric)
    """

    pair_exact: Mapping[UnorderedKey, FrozenSet[int]] = field(default_factory=dict)
    subpath_dir: Mapping[OrderedKey, FrozenSet[int]] = field(default_factory=dict)
    subpath_und: Mapping[UnorderedKey, FrozenSet[int]] = field(default_factory=dict)
    edge_drivers: Mapping[UnorderedKey, FrozenSet[int]] = field(default_factory=dict)
    adjacency: Mapping[CityName, Tuple[CityName, ...]] = field(default_factory=dict)

    def degree(self, city: CityName) -> int:
        """Return the number of neighbors of ``city`` in the graph."""
        return len(self.adjacency.get(city, ()))


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """A carrier serving a city pair, exact or geo.

    Attributes:
        driver_id: Carrier id
        chain: Shortest fragment of the carrier's chains spanning both
            queried cities, in the carrier's travel order (or the bare pair)
    """

    driver_id: int
    chain: Tuple[CityName, ...]


@dataclass(frozen=True, slots=True)
class CompositeSegment:
    """One contiguous leg of a composite plan.

    Attributes:
        from_city: First city of the leg
        to_city: Last city of the leg
        path: Cities of the leg, inclusive
        driver_id: Chosen carrier, None when no carrier covers the leg
        driver_ids: Every carrier able to cover the whole leg
    """

    from_city: CityName
    to_city: CityName
    path: Tuple[CityName, ...]
    driver_id: Optional[int] = None
    driver_ids: Tuple[int, ...] = ()


@dataclass(frozen=True, slots=True)
class CompositePlan:
    """A multi-carrier itinerary over one shortest node path."""

    path: Tuple[CityName, ...]
    segments: Tuple[CompositeSegment, ...] = ()
    score: int = 0

    @property
    def segments_count(self) -> int:
        return len(self.segments)

    @property
    def is_complete(self) -> bool:
        """Check if every leg has a chosen carrier.

        False for the unattributed fallback plan returned when no
        partition within the segment budget exists.
        """
        return all(segment.driver_id is not None for segment in self.segments)

    @property
    def signature(self) -> str:
        return " — ".join(self.path)


@dataclass(frozen=True, slots=True)
class SearchResults:
    """Outcome of a point-to-point query.

    Attributes:
        from_city: Canonical departure city
        to_city: Canonical destination city
        exact: Carriers with the pair in their trip history
        geo: Carriers whose chains pass through both cities (exact ids removed)
        composite: Best multi-carrier plan, if any
        composite_alternatives: Ranked alternative plans
        unknown_cities: Endpoints missing from the known-city set
        suggestions: Known cities resembling the unknown endpoints
    """

    from_city: CityName
    to_city: CityName
    exact: Tuple[RouteMatch, ...] = ()
    geo: Tuple[RouteMatch, ...] = ()
    composite: Optional[CompositePlan] = None
    composite_alternatives: Tuple[CompositePlan, ...] = ()
    unknown_cities: Tuple[CityName, ...] = ()
    suggestions: Tuple[CityName, ...] = ()

    @property
    def is_valid(self) -> bool:
        """Check if both endpoints were known cities."""
        return not self.unknown_cities

    @property
    def is_empty(self) -> bool:
        return not self.exact and not self.geo and self.composite is None

    @property
    def show_composite(self) -> bool:
        """Whether the composite plan adds anything over exact matches."""
        if self.composite is None:
            return False
        return not self.exact or self.composite.segments_count > 1
