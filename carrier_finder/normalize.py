"""Canonicalization of free-text city and route strings.

Carrier records spell the same city and the same route in many ways:
different dash characters, colloquial names, stray placeholders left
by spreadsheet exports. Every index is keyed by the canonical form
produced here, so raw text never reaches a lookup structure.

Example
-------
    >>> split_chain("москва-Тверь –  питер")
    ['Москва', 'Тверь', 'Санкт-Петербург']
    >>> expand_alternatives("Москва — Тверь||Клин — Питер")
    [['Москва', 'Тверь', 'Санкт-Петербург'], ['Москва', 'Клин', 'Санкт-Петербург']]
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from itertools import islice, product
from typing import Any, List, Optional, Tuple

logger = logging.getLogger(__name__)

EM_DASH = "—"
# The only token separator left after dash unification
SEPARATOR = f" {EM_DASH} "

# Marks an either/or branch inside one chain token: "A — B1||B2 — C"
ALTERNATIVE_MARK = "||"

DEFAULT_MAX_EXPANSIONS = 64

_DASH_RE = re.compile(r"\s*[\-–—‑]\s*")
_SPACE_RE = re.compile(r"\s+")
_PHONE_RE = re.compile(r"\+7\d{10}")

# Values spreadsheet exports leave in empty cells
PLACEHOLDERS = frozenset({"nan", "none", "null"})

ELLIPSES = frozenset({"…", "..."})

# Colloquial names and administrative mergers -> canonical spelling.
# Keys are lowercase; compound names are written with plain hyphens.
ALIASES = {
    "спб": "Санкт-Петербург",
    "питер": "Санкт-Петербург",
    "санкт-петербург": "Санкт-Петербург",
    "мск": "Москва",
    "екб": "Екатеринбург",
    "нск": "Новосибирск",
    "когалым": "Сургут",
    "ачинск": "Красноярск",
    "самара": "Тольятти",
    "ставрополь": "Армавир",
    "ростов-на-дону": "Ростов-на-Дону",
    "комсомольск-на-амуре": "Комсомольск-на-Амуре",
    "петропавловск-камчатский": "Петропавловск-Камчатский",
    "улан-удэ": "Улан-Удэ",
}


@dataclass(frozen=True, slots=True)
class Contact:
    """Carrier contact split into display name and phone."""

    name: str
    phone: str
    raw_name: str


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def normalize_dash_separators(text: Any) -> str:
    """Unify every dash variant into the spaced em dash separator.

    Non-breaking spaces become plain spaces, any hyphen, en dash, em dash
    or non-breaking hyphen (with whatever spacing around it) becomes
    ``" — "`` and runs of whitespace collapse to one space.
    """
    t = _as_text(text)
    if not t:
        return ""
    t = t.replace("\u00a0", " ")
    t = _DASH_RE.sub(SEPARATOR, t)
    return _SPACE_RE.sub(" ", t).strip()


def _capitalize(text: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))


def normalize_city(raw: Any) -> str:
    """Return the canonical key for a raw city name.

    Parameters
    ----------
    raw:
        City name as typed in a record or a query. Non-string cells
        (``None``, float NaN from a spreadsheet) are accepted.

    Returns
    -------
    str
        The canonical name, or an empty string for placeholders and
        separator-only input.
    """
    t = normalize_dash_separators(raw)
    if not t or not t.replace(EM_DASH, "").strip():
        return ""
    lower = t.lower()
    if lower in PLACEHOLDERS:
        return ""
    alias = ALIASES.get(lower) or ALIASES.get(lower.replace(SEPARATOR, "-"))
    if alias:
        return alias
    return _capitalize(lower)


def split_chain(text: Any) -> List[str]:
    """Split ``"A — B — C"`` into canonical cities.

    Only the canonical separator splits; empty and ellipsis tokens are
    dropped.
    """
    cleaned = normalize_dash_separators(text)
    if not cleaned:
        return []
    cities = [normalize_city(part) for part in cleaned.split(SEPARATOR)]
    return [city for city in cities if city and city not in ELLIPSES]


def split_top_level(text: Any, delimiters: str = "|") -> List[str]:
    """Split on single delimiters, keeping doubled ones inside tokens.

    ``"A||B | C"`` yields ``["A||B", "C"]``: a doubled delimiter is an
    escaped literal and never ends a token.
    """
    s = _as_text(text)
    items: List[str] = []
    buf: List[str] = []

    def flush() -> None:
        token = "".join(buf).strip()
        if token:
            items.append(token)
        buf.clear()

    i = 0
    while i < len(s):
        ch = s[i]
        if ch in delimiters:
            if i + 1 < len(s) and s[i + 1] == ch:
                buf.append(ch * 2)
                i += 2
                continue
            flush()
        else:
            buf.append(ch)
        i += 1
    flush()
    return items


def expand_alternatives(
    text: Any, max_expansions: int = DEFAULT_MAX_EXPANSIONS
) -> List[List[str]]:
    """Expand either/or tokens of one chain into concrete chains.

    ``"А — B1 || B2 — C"`` becomes ``[[A, B1, C], [A, B2, C]]``. The
    Cartesian product is generated lazily and cut at ``max_expansions``
    chains. A token whose alternatives are all empty is skipped rather
    than wiping out the whole chain.
    """
    cleaned = normalize_dash_separators(text)
    if not cleaned:
        return []

    slots: List[List[str]] = []
    for token in cleaned.split(SEPARATOR):
        alternatives: List[str] = []
        for alt in token.split(ALTERNATIVE_MARK):
            city = normalize_city(alt)
            if city and city not in ELLIPSES and city not in alternatives:
                alternatives.append(city)
        if alternatives:
            slots.append(alternatives)

    if not slots:
        return []

    total = math.prod(len(alternatives) for alternatives in slots)
    if total > max_expansions:
        logger.warning(
            "Chain alternatives truncated",
            extra={"chain": cleaned, "combinations": total, "kept": max_expansions},
        )
    return [list(chain) for chain in islice(product(*slots), max_expansions)]


def extract_phone_and_name(raw: Any) -> Contact:
    """Split a combined contact string into name and phone.

    The phone is the first ``+7`` number with ten digits; the name is
    what remains. A missing phone yields an empty string.
    """
    text = _as_text(raw)
    match = _PHONE_RE.search(text)
    phone = match.group(0) if match else ""
    name = _SPACE_RE.sub(" ", _PHONE_RE.sub("", text, count=1)).strip()
    return Contact(name=name, phone=phone, raw_name=text)


def split_pairs_list(text: Any) -> List[Tuple[str, str]]:
    """Parse a trip history field like ``"Москва-Тверь; Тверь - Клин"``.

    Each item contributes its first two cities; items with fewer than
    two cities or with the same city twice are dropped.
    """
    pairs: List[Tuple[str, str]] = []
    for item in split_top_level(text, ";|"):
        cities = split_chain(item)
        if len(cities) >= 2 and cities[0] != cities[1]:
            pairs.append((cities[0], cities[1]))
    return pairs


def split_list(text: Any) -> List[str]:
    """Split a ``;``/``|`` delimited tag field (branches, corridors)."""
    return split_top_level(text, ";|")


def normalize_cities(names: Optional[List[Any]]) -> List[str]:
    """Canonicalize, deduplicate and sort a list of city names."""
    return sorted({city for city in map(normalize_city, names or ()) if city})
