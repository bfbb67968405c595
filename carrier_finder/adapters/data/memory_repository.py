"""In-memory carrier repository.

Serves rows that a host application already parsed (an upload widget,
a spreadsheet API) without touching the filesystem.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from ...domain.models import DriverRow


@dataclass
class InMemoryCarrierRepository:
    """Repository over already tokenized rows.

    Attributes:
        driver_rows: Carrier records in input order
        cities: Known city names
        line_chains: Route chains without carrier attribution
    """

    driver_rows: Sequence[DriverRow] = field(default_factory=list)
    cities: Sequence[str] = field(default_factory=list)
    line_chains: Sequence[Sequence[str]] = field(default_factory=list)

    def load_driver_rows(self) -> List[DriverRow]:
        return list(self.driver_rows)

    def load_cities(self) -> List[str]:
        return list(dict.fromkeys(c for c in self.cities if c))

    def load_line_chains(self) -> List[List[str]]:
        return [list(chain) for chain in self.line_chains if len(chain) >= 2]
