"""CSV carrier repository adapter.

Reads the three input tables:
- drivers.csv: one carrier per row (required)
- cities.csv: known-city list (optional)
- line_paths.csv: route chains without carrier attribution (optional),
  either grouped ``line_id, variant_id, seq, city_id`` rows or one
  dash-separated chain per row
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ...config import DataConfig, get_config
from ...domain.errors import DataLoadError
from ...domain.models import DriverRow
from ...normalize import SEPARATOR, normalize_dash_separators

CITY_COLUMNS = ("city", "City", "город", "Город", "label")
GROUPED_COLUMNS = ("line_id", "variant_id", "seq", "city_id")


def _read_rows(path: Path) -> List[Dict[str, str]]:
    """Read a CSV file into rows with trimmed headers and cells."""
    with path.open(encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        rows = []
        for row in reader:
            rows.append(
                {
                    str(key or "").strip(): str(value or "").strip()
                    for key, value in row.items()
                    if key is not None
                }
            )
        return rows


def _to_seq(value: str) -> float:
    try:
        return float(value or 0)
    except ValueError:
        return 0.0


@dataclass
class CSVCarrierRepository:
    """Carrier repository that loads from CSV files.

    Implements CarrierRepositoryPort. Each table is read once and cached
    until clear_cache() is called.

    Attributes:
        config: Data configuration (directory, file names)
    """

    config: DataConfig = field(default_factory=lambda: get_config().data)
    _logger: logging.Logger = field(init=False, repr=False)

    _rows: Optional[List[DriverRow]] = field(default=None, repr=False)
    _cities: Optional[List[str]] = field(default=None, repr=False)
    _line_chains: Optional[List[List[str]]] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def load_driver_rows(self) -> List[DriverRow]:
        """Load carrier records.

        Returns:
            Rows of drivers.csv with trimmed headers and values.

        Raises:
            DataLoadError: If the file cannot be read or parsed.
        """
        if self._rows is not None:
            return self._rows

        path = self.config.drivers_path
        self._logger.debug("Loading carriers", extra={"path": str(path)})
        try:
            rows = _read_rows(path)
        except (OSError, csv.Error, UnicodeDecodeError) as e:
            raise DataLoadError(
                f"Failed to load carriers from {path}",
                file_path=str(path),
                cause=e,
            )

        self._rows = list(rows)
        self._logger.info("Carriers loaded", extra={"rows": len(rows)})
        return self._rows

    def load_cities(self) -> List[str]:
        """Load known city names.

        The city column is the first of ``city``/``Город``/``label``
        present in the header, otherwise the first column. A missing
        file yields an empty list.
        """
        if self._cities is not None:
            return self._cities

        path = self.config.cities_path
        try:
            rows = _read_rows(path)
        except (OSError, csv.Error, UnicodeDecodeError) as e:
            self._logger.warning(
                "Failed to load known cities",
                extra={"path": str(path), "error": str(e)},
            )
            rows = []

        names: List[str] = []
        if rows:
            header = list(rows[0].keys())
            key = next((h for h in header if h in CITY_COLUMNS), header[0])
            names = [row.get(key, "") for row in rows]

        self._cities = list(dict.fromkeys(name for name in names if name))
        self._logger.info("Cities loaded", extra={"cities": len(self._cities)})
        return self._cities

    def load_line_chains(self) -> List[List[str]]:
        """Load supplementary route chains; a missing file yields none."""
        if self._line_chains is not None:
            return self._line_chains

        path = self.config.line_paths_path
        try:
            rows = _read_rows(path)
        except (OSError, csv.Error, UnicodeDecodeError) as e:
            self._logger.warning(
                "Failed to load route chains",
                extra={"path": str(path), "error": str(e)},
            )
            rows = []

        if rows and all(column in rows[0] for column in GROUPED_COLUMNS):
            chains = self._grouped_chains(rows)
        else:
            chains = self._inline_chains(rows)

        self._line_chains = chains
        self._logger.info("Route chains loaded", extra={"chains": len(chains)})
        return chains

    def _grouped_chains(self, rows: List[Dict[str, str]]) -> List[List[str]]:
        """Group ``line_id``/``variant_id`` rows and order them by ``seq``."""
        groups: Dict[Tuple[str, str], List[Tuple[float, str]]] = {}
        for row in rows:
            key = (row.get("line_id", ""), row.get("variant_id", ""))
            groups.setdefault(key, []).append(
                (_to_seq(row.get("seq", "")), row.get("city_id", ""))
            )

        chains = []
        for stops in groups.values():
            stops.sort(key=lambda stop: stop[0])
            chain = [city for _, city in stops if city]
            if len(chain) >= 2:
                chains.append(chain)
        return chains

    def _inline_chains(self, rows: List[Dict[str, str]]) -> List[List[str]]:
        """Read one dash-separated chain from the first column of each row."""
        if not rows:
            return []
        column = next(iter(rows[0]))
        chains = []
        for row in rows:
            text = normalize_dash_separators(row.get(column, ""))
            chain = [part.strip() for part in text.split(SEPARATOR) if part.strip()]
            if len(chain) >= 2:
                chains.append(chain)
        return chains

    def clear_cache(self) -> None:
        """Clear cached tables."""
        self._rows = None
        self._cities = None
        self._line_chains = None
        self._logger.debug("Carrier data cache cleared")
