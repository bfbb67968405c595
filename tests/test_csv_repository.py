"""Tests for the CSV carrier repository."""

import pytest

from carrier_finder.adapters.data import CSVCarrierRepository
from carrier_finder.config import DataConfig
from carrier_finder.domain.errors import DataLoadError
from carrier_finder.services import CarrierSearchService

DRIVERS_CSV = (
    "Перевозчик,Маршруты из истории,Города (детализация)\n"
    "Иванов +79001234567, Москва-Тверь ,Москва — Тверь — Питер\n"
    "Петров +79007654321,Тверь-Клин,\n"
)


@pytest.fixture
def data_dir(tmp_path):
    # BOM as written by spreadsheet exports
    (tmp_path / "drivers.csv").write_text(DRIVERS_CSV, encoding="utf-8-sig")
    (tmp_path / "cities.csv").write_text(
        "city\nМосква\nТверь\n\nМосква\nСПб\nКлин\n", encoding="utf-8"
    )
    return tmp_path


@pytest.fixture
def repository(data_dir):
    return CSVCarrierRepository(DataConfig(data_dir=data_dir))


def test_load_driver_rows_trims_header_and_cells(repository):
    rows = repository.load_driver_rows()

    assert len(rows) == 2
    assert rows[0]["Перевозчик"] == "Иванов +79001234567"
    assert rows[0]["Маршруты из истории"] == "Москва-Тверь"
    assert rows[1]["Города (детализация)"] == ""


def test_missing_drivers_file_raises(tmp_path):
    repository = CSVCarrierRepository(DataConfig(data_dir=tmp_path))

    with pytest.raises(DataLoadError) as excinfo:
        repository.load_driver_rows()
    assert excinfo.value.file_path.endswith("drivers.csv")


def test_load_cities_dedups(repository):
    assert repository.load_cities() == ["Москва", "Тверь", "СПб", "Клин"]


def test_load_cities_uses_first_column_without_known_header(data_dir):
    (data_dir / "cities.csv").write_text("name,region\nТверь,69\n", encoding="utf-8")
    repository = CSVCarrierRepository(DataConfig(data_dir=data_dir))

    assert repository.load_cities() == ["Тверь"]


def test_missing_optional_files(tmp_path):
    """Test that cities and route chains are optional."""
    repository = CSVCarrierRepository(DataConfig(data_dir=tmp_path))

    assert repository.load_cities() == []
    assert repository.load_line_chains() == []


def test_grouped_line_chains_sorted_by_seq(data_dir):
    (data_dir / "line_paths.csv").write_text(
        "line_id,variant_id,seq,city_id\n"
        "L1,1,10,Клин\n"
        "L1,1,2,Тверь\n"
        "L1,1,1,Москва\n"
        "L2,1,1,Псков\n",
        encoding="utf-8",
    )
    repository = CSVCarrierRepository(DataConfig(data_dir=data_dir))

    # L2 has a single stop and is dropped
    assert repository.load_line_chains() == [["Москва", "Тверь", "Клин"]]


def test_inline_line_chains(data_dir):
    (data_dir / "line_paths.csv").write_text(
        "path\nМосква - Клин – Тверь\nОдинокий\n", encoding="utf-8"
    )
    repository = CSVCarrierRepository(DataConfig(data_dir=data_dir))

    assert repository.load_line_chains() == [["Москва", "Клин", "Тверь"]]


def test_rows_are_cached_until_cleared(repository, data_dir):
    repository.load_driver_rows()
    (data_dir / "drivers.csv").unlink()

    assert len(repository.load_driver_rows()) == 2

    repository.clear_cache()
    with pytest.raises(DataLoadError):
        repository.load_driver_rows()


def test_service_from_csv(repository):
    """Test a full load from CSV files into a query-ready service."""
    service = CarrierSearchService.from_repository(repository)

    results = service.search("москва", "спб")

    assert results.is_valid
    assert results.to_city == "Санкт-Петербург"
    assert [service.driver_name(m.driver_id) for m in results.geo] == ["Иванов"]
