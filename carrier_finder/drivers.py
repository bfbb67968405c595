"""Conversion of raw carrier records into Driver entities."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Tuple

from .config import ColumnsConfig
from .domain.models import Driver, DriverRow
from .normalize import (
    DEFAULT_MAX_EXPANSIONS,
    expand_alternatives,
    extract_phone_and_name,
    normalize_city,
    split_list,
    split_pairs_list,
    split_top_level,
)

logger = logging.getLogger(__name__)


def _field(row: DriverRow, key: str) -> Any:
    value = row.get(key)
    return "" if value is None else value


def _carrier_field(row: DriverRow, key: str) -> Any:
    if key in row and row[key] is not None:
        return row[key]
    # Headerless exports: the contact is the first column
    return next(iter(row.values()), "") or ""


def _chains(text: Any, max_expansions: int) -> Tuple[Tuple[str, ...], ...]:
    chains: List[Tuple[str, ...]] = []
    for variant in split_top_level(text, "|"):
        for expanded in expand_alternatives(variant, max_expansions):
            cleaned = tuple(city for city in map(normalize_city, expanded) if city)
            if cleaned:
                chains.append(cleaned)
    return tuple(chains)


def build_driver(
    driver_id: int,
    row: DriverRow,
    columns: Optional[ColumnsConfig] = None,
    max_expansions: int = DEFAULT_MAX_EXPANSIONS,
) -> Driver:
    """Build one Driver from a record.

    Missing fields yield empty pairs/chains/tags for that carrier
    instead of failing the whole load.

    Args:
        driver_id: Id to assign (position of the record in the input).
        row: Flat mapping of field name to cell text.
        columns: Field names to read, defaults to ColumnsConfig().
        max_expansions: Cap on chains produced by one chain variant.

    Returns:
        The immutable Driver.
    """
    columns = columns or ColumnsConfig()

    missing = [
        key
        for key in (columns.history, columns.chains)
        if not str(_field(row, key)).strip()
    ]
    if missing:
        logger.debug(
            "Carrier record has empty route fields",
            extra={"driver_id": driver_id, "fields": missing},
        )

    contact = extract_phone_and_name(_carrier_field(row, columns.carrier))
    return Driver(
        id=driver_id,
        name=contact.name,
        phone=contact.phone,
        raw_name=contact.raw_name,
        pairs=tuple(split_pairs_list(_field(row, columns.history))),
        chains=_chains(_field(row, columns.chains), max_expansions),
        branches=tuple(split_list(_field(row, columns.branches))),
        corridors=tuple(split_list(_field(row, columns.corridors))),
    )


def process_drivers(
    rows: Iterable[DriverRow],
    columns: Optional[ColumnsConfig] = None,
    max_expansions: int = DEFAULT_MAX_EXPANSIONS,
) -> List[Driver]:
    """Build carriers from records; ids follow record order."""
    columns = columns or ColumnsConfig()
    drivers = [
        build_driver(idx, row, columns, max_expansions) for idx, row in enumerate(rows)
    ]
    logger.info(
        "Carriers built",
        extra={
            "drivers": len(drivers),
            "with_chains": sum(1 for d in drivers if d.chains),
            "with_pairs": sum(1 for d in drivers if d.pairs),
        },
    )
    return drivers
