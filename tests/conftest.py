"""Shared fixtures for carrier finder tests."""

import pytest

from carrier_finder.config import ColumnsConfig, reset_config
from carrier_finder.domain.models import Driver
from carrier_finder.indexing import build_indices
from carrier_finder.services import CarrierSearchService


@pytest.fixture(autouse=True)
def fresh_config():
    """Drop the cached configuration around every test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def make_row():
    """Factory for carrier records keyed by the default column names."""
    columns = ColumnsConfig()

    def _make(carrier, history="", chains="", branches="", corridors=""):
        return {
            columns.carrier: carrier,
            columns.history: history,
            columns.chains: chains,
            columns.branches: branches,
            columns.corridors: corridors,
        }

    return _make


@pytest.fixture
def relay_drivers():
    """Two carriers meeting at B: one runs A-B, the other B-C-D."""
    return [
        Driver(id=0, name="Альфа", chains=(("A", "B"),)),
        Driver(id=1, name="Бета", chains=(("B", "C", "D"),)),
    ]


@pytest.fixture
def relay_indices(relay_drivers):
    return build_indices(relay_drivers)


@pytest.fixture
def carrier_rows(make_row):
    """A small dataset around Moscow, Tver and Novgorod."""
    return [
        make_row("Борис Смирнов +79001110000", "Москва-Тверь", "Москва — Тверь"),
        make_row("Анна Ким +79002220000", "Москва - Тверь", "Москва — Клин — Тверь"),
        make_row("Вера +79003330000", "", "Москва — Тверь — Новгород"),
        make_row("Глеб +79004440000", "Новгород-Псков", "Новгород — Псков"),
        make_row("Дина +79005550000", "", "Клин — Москва"),
    ]


@pytest.fixture
def known_cities():
    return ["Москва", "Тверь", "Клин", "Новгород", "Псков", "Владивосток", "Мурманск"]


@pytest.fixture
def service(carrier_rows, known_cities):
    return CarrierSearchService.from_records(carrier_rows, cities=known_cities)
