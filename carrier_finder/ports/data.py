"""Data ports - Abstractions over where carrier data comes from.

The search core never parses files: a repository hands it already
tokenized carrier rows, the known-city list and supplementary route
chains, once per load.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Protocol, Sequence

if TYPE_CHECKING:
    from ..domain.models import DriverRow


class CarrierRepositoryPort(Protocol):
    """Port for loading carrier input data.

    Implementations:
    - adapters/data/csv_repository.py (CSVCarrierRepository)
    - adapters/data/memory_repository.py (InMemoryCarrierRepository)
    """

    def load_driver_rows(self) -> Sequence[DriverRow]:
        """Load carrier records.

        Returns:
            One flat field mapping per carrier, in input order.
        """
        ...

    def load_cities(self) -> List[str]:
        """Load the known-city list (raw names, deduplicated)."""
        ...

    def load_line_chains(self) -> List[List[str]]:
        """Load route chains that carry no carrier attribution.

        Returns:
            Ordered city lists, each with at least two cities.
        """
        ...
