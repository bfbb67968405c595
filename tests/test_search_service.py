"""Tests for the carrier search service."""

import pytest

from carrier_finder.adapters.data import InMemoryCarrierRepository
from carrier_finder.domain.errors import CityNotFoundError, ConfigurationError
from carrier_finder.services import CarrierSearchService


def _names(service, matches):
    return [service.driver_name(m.driver_id) for m in matches]


def test_exact_and_geo_results(service):
    """Test a pair served directly, with aliases in the query."""
    results = service.search("мск", " тверь ")

    assert results.is_valid
    assert (results.from_city, results.to_city) == ("Москва", "Тверь")
    assert _names(service, results.exact) == ["Борис Смирнов", "Анна Ким"]
    assert [m.chain for m in results.exact] == [
        ("Москва", "Тверь"),
        ("Москва", "Клин", "Тверь"),
    ]
    assert _names(service, results.geo) == ["Вера"]


def test_geo_excludes_exact_carriers(service):
    results = service.search("Москва", "Тверь")

    exact_ids = {m.driver_id for m in results.exact}
    assert exact_ids.isdisjoint(m.driver_id for m in results.geo)


def test_redundant_composite_is_suppressed(service):
    """Test that a one-leg plan repeating an exact carrier is hidden."""
    results = service.search("Москва", "Тверь")

    assert results.composite is None
    assert not results.show_composite
    assert results.composite_alternatives == ()


def test_geo_match_in_reverse_direction(service):
    results = service.search("Новгород", "Москва")

    assert results.exact == ()
    assert _names(service, results.geo) == ["Вера"]
    assert results.geo[0].chain == ("Москва", "Тверь", "Новгород")
    assert results.composite is None


def test_composite_relay(service):
    """Test a two-carrier plan when nobody serves the pair directly."""
    results = service.search("Москва", "Псков")

    assert results.exact == () and results.geo == ()
    plan = results.composite
    assert plan.path == ("Москва", "Тверь", "Новгород", "Псков")
    assert [service.driver_name(s.driver_id) for s in plan.segments] == [
        "Вера",
        "Глеб",
    ]
    assert results.show_composite
    assert [p.path for p in results.composite_alternatives] == [plan.path]


def test_composite_budget_fallback(service):
    plan = service.composite("Москва", "Псков", max_drivers=1)

    assert plan.segments_count == 1
    assert not plan.is_complete


def test_invalid_budget_raises(service):
    with pytest.raises(ConfigurationError) as excinfo:
        service.composite("Москва", "Псков", max_drivers=0)
    assert excinfo.value.setting_name == "max_drivers"


def test_same_city_lists_carriers_by_name(service):
    """Test a query whose endpoints are the same city."""
    results = service.search("Москва", "москва")

    assert _names(service, results.exact) == [
        "Анна Ким",
        "Борис Смирнов",
        "Вера",
        "Дина",
    ]
    assert all(m.chain == ("Москва",) for m in results.exact)
    assert results.geo == ()
    assert results.composite is None


def test_unknown_city(service):
    """Test the unknown-city condition with empty collections."""
    results = service.search("Зеленоград", "Москва")

    assert not results.is_valid
    assert results.unknown_cities == ("Зеленоград",)
    assert results.is_empty
    assert results.composite_alternatives == ()


def test_unknown_city_suggestions(service):
    results = service.search("Москав", "Тверь")

    assert results.unknown_cities == ("Москав",)
    assert "Москва" in results.suggestions


def test_search_strict_raises(service):
    with pytest.raises(CityNotFoundError) as excinfo:
        service.search_strict("Зеленоград", "Москва")
    assert excinfo.value.cities == ("Зеленоград",)


def test_known_but_unconnected_city(service):
    results = service.search("Москва", "Владивосток")

    assert results.is_valid
    assert results.is_empty
    assert results.composite_alternatives == ()


def test_known_cities_default_to_graph(carrier_rows):
    """Test that without a city list every graph city is known."""
    service = CarrierSearchService.from_records(carrier_rows)

    assert service.is_known("Псков")
    assert not service.is_known("Владивосток")


def test_from_repository(carrier_rows, known_cities):
    repository = InMemoryCarrierRepository(
        driver_rows=carrier_rows,
        cities=known_cities,
        line_chains=[["Псков", "Рига"]],
    )

    service = CarrierSearchService.from_repository(repository)

    assert "Рига" in service.indices.adjacency["Псков"]
    assert service.search("Москва", "Тверь").exact
    assert not service.is_known("Рига")


def test_driver_lookup(service):
    assert service.driver(3).phone == "+79004440000"
    assert service.driver(99) is None
    assert service.driver_name(99) == ""


def test_composite_prefers_complete_relay(make_row):
    """Test a relay found on the second of two equally short paths."""
    service = CarrierSearchService.from_records(
        [
            make_row("Анна", chains="Москва — Клин"),
            make_row("Борис", chains="Клин — Тверь"),
        ],
        line_chains=[["Москва", "Дубна", "Тверь"]],
    )

    results = service.search("Москва", "Тверь")

    assert results.composite.is_complete
    assert results.composite.path == ("Москва", "Клин", "Тверь")
    assert [
        service.driver_name(s.driver_id) for s in results.composite.segments
    ] == ["Анна", "Борис"]
