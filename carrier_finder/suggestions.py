"""Suggestions of known cities for a mistyped or unknown city.

Two sources are merged: known cities sharing the first two letters of
the query, then fuzzy matches from rapidfuzz.

Example
-------
    >>> suggest_cities("Москав", ["Москва", "Тверь", "Мурманск"])
    ['Москва']
"""

from typing import Iterable, List

from rapidfuzz import fuzz, process

DEFAULT_LIMIT = 10

# Minimum similarity score (0-100) for a fuzzy suggestion
MIN_SIMILARITY_SCORE = 70

PREFIX_LENGTH = 2


def suggest_cities(
    query: str,
    cities: Iterable[str],
    limit: int = DEFAULT_LIMIT,
    score_cutoff: float = MIN_SIMILARITY_SCORE,
) -> List[str]:
    """Return up to ``limit`` known cities resembling ``query``.

    Parameters
    ----------
    query:
        Canonical (or raw) city name that was not found.
    cities:
        Known canonical city names.
    limit:
        Maximum number of suggestions.
    score_cutoff:
        Minimum rapidfuzz ratio for a fuzzy suggestion.

    Returns
    -------
    list[str]
        Prefix matches in the order of ``cities``, then fuzzy matches by
        decreasing similarity, without duplicates.
    """
    query_lower = (query or "").strip().lower()
    if not query_lower or limit <= 0:
        return []

    candidates = list(cities)
    prefix = query_lower[:PREFIX_LENGTH]
    suggestions = [c for c in candidates if c.lower().startswith(prefix)]

    fuzzy = process.extract(
        query_lower,
        [c.lower() for c in candidates],
        scorer=fuzz.ratio,
        score_cutoff=score_cutoff,
        limit=limit,
    )
    for _, _, index in fuzzy:
        city = candidates[index]
        if city not in suggestions:
            suggestions.append(city)

    return suggestions[:limit]
