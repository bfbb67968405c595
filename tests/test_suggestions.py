"""Tests for city suggestions with rapidfuzz."""

from carrier_finder.suggestions import suggest_cities

CITIES = ["Москва", "Тверь", "Мурманск", "Клин"]


def test_prefix_suggestion():
    """Test that a typo keeping the first letters is suggested."""
    assert suggest_cities("Москав", CITIES) == ["Москва"]


def test_fuzzy_suggestion_without_shared_prefix():
    """Test that a typo in the first letter is still found."""
    assert suggest_cities("Ьосква", CITIES) == ["Москва"]


def test_score_cutoff_filters_fuzzy_matches():
    assert suggest_cities("Ьосква", CITIES, score_cutoff=100) == []


def test_empty_query_or_limit():
    assert suggest_cities("", CITIES) == []
    assert suggest_cities("Москва", CITIES, limit=0) == []


def test_limit_applies_to_merged_suggestions():
    cities = ["Мга", "Мглин", "Мгачи"]
    assert suggest_cities("Мг", cities, limit=2) == ["Мга", "Мглин"]
