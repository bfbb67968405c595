"""Tests for city and route string canonicalization."""

import pytest

from carrier_finder.normalize import (
    expand_alternatives,
    extract_phone_and_name,
    normalize_cities,
    normalize_city,
    normalize_dash_separators,
    split_chain,
    split_list,
    split_pairs_list,
    split_top_level,
)


def test_normalize_city_capitalizes_and_trims():
    """Test that case and surrounding whitespace are canonicalized."""
    assert normalize_city("  москва ") == "Москва"
    assert normalize_city("нижний   новгород") == "Нижний Новгород"


@pytest.mark.parametrize(
    "raw", ["спб", "СПб", "Питер", "санкт-петербург", "Санкт - Петербург"]
)
def test_normalize_city_aliases_saint_petersburg(raw):
    """Test that colloquial spellings map to one canonical name."""
    assert normalize_city(raw) == "Санкт-Петербург"


def test_normalize_city_merged_cities():
    """Test administrative merger aliases."""
    assert normalize_city("Когалым") == "Сургут"
    assert normalize_city("самара") == "Тольятти"
    assert normalize_city("мск") == "Москва"


@pytest.mark.parametrize(
    "raw", [None, "", "   ", "nan", "NaN", "None", "null", "—", "-", float("nan")]
)
def test_normalize_city_placeholders_are_empty(raw):
    """Test that placeholders and separator-only input yield no city."""
    assert normalize_city(raw) == ""


def test_normalize_city_is_idempotent():
    """Test that normalizing a canonical name changes nothing."""
    for raw in ["москва", "спб", "ростов-на-дону", "нижний новгород", "екб"]:
        once = normalize_city(raw)
        assert normalize_city(once) == once


def test_normalize_dash_separators_unifies_variants():
    """Test hyphen, en dash, em dash and non-breaking space handling."""
    assert normalize_dash_separators("A-B–C —D") == "A — B — C — D"
    assert normalize_dash_separators("A\u00a0B") == "A B"
    assert normalize_dash_separators(None) == ""


def test_split_chain_drops_empty_and_ellipsis_tokens():
    """Test chain splitting with mixed separators and filler tokens."""
    assert split_chain("москва-Тверь –  питер") == [
        "Москва",
        "Тверь",
        "Санкт-Петербург",
    ]
    assert split_chain("Москва — … — nan — Клин") == ["Москва", "Клин"]
    assert split_chain("") == []


def test_split_top_level_keeps_doubled_delimiters():
    """Test that a doubled delimiter is an escaped literal."""
    assert split_top_level("A||B | C") == ["A||B", "C"]
    assert split_top_level("a;b|c", ";|") == ["a", "b", "c"]
    assert split_top_level("a;;b", ";|") == ["a;;b"]
    assert split_top_level(" | ") == []


def test_expand_alternatives_cartesian_product():
    """Test either/or tokens expanding into concrete chains."""
    chains = expand_alternatives("Москва — Тверь||Клин — Питер")
    assert chains == [
        ["Москва", "Тверь", "Санкт-Петербург"],
        ["Москва", "Клин", "Санкт-Петербург"],
    ]


def test_expand_alternatives_is_capped():
    """Test that the product is cut at max_expansions chains."""
    chains = expand_alternatives("A||B||C — D||E||F — G||H||I", max_expansions=5)
    assert len(chains) == 5
    assert chains[0] == ["A", "D", "G"]


def test_expand_alternatives_skips_empty_slot():
    """Test that a slot of placeholders does not wipe the chain."""
    assert expand_alternatives("Москва — nan||null — Тверь") == [["Москва", "Тверь"]]
    assert expand_alternatives("nan") == []


def test_extract_phone_and_name():
    """Test splitting a contact into name and phone."""
    contact = extract_phone_and_name("Иванов Иван +79001234567")
    assert contact.name == "Иванов Иван"
    assert contact.phone == "+79001234567"
    assert contact.raw_name == "Иванов Иван +79001234567"


def test_extract_phone_and_name_without_phone():
    """Test that a missing or malformed phone yields an empty string."""
    assert extract_phone_and_name("ООО Ромашка").phone == ""
    assert extract_phone_and_name("Петров +7900123").phone == ""
    assert extract_phone_and_name(None).name == ""


def test_extract_phone_in_the_middle():
    contact = extract_phone_and_name("Петров +79001234567 (ИП)")
    assert contact.name == "Петров (ИП)"
    assert contact.phone == "+79001234567"


def test_split_pairs_list():
    """Test history parsing drops singletons and self-pairs."""
    pairs = split_pairs_list("Москва-Тверь; Тверь - Клин | Клин-Клин | Одинокий")
    assert pairs == [("Москва", "Тверь"), ("Тверь", "Клин")]


def test_split_list():
    assert split_list("Север; Центр|Юг||Восток") == ["Север", "Центр", "Юг||Восток"]


def test_normalize_cities_dedups_and_sorts():
    names = ["тверь", "Москва", "мск", "nan", None]
    assert normalize_cities(names) == ["Москва", "Тверь"]
    assert normalize_cities(None) == []
