"""Unit tests for core/query.py -- filter precedence, substring matching, page windows.

Covers:
- blank/None filters are no-ops; case-insensitive substring containment
- filters AND together and commute
- 1-based page window; absent page or page_size returns everything
- pass-through arithmetic for page/page_size <= 0, and the clamp switch
- filtering always happens before pagination
"""

from dataclasses import dataclass

import pytest

from core.query import filter_records, paginate, query


@dataclass
class _Car:
    name: str
    brand: str


@pytest.fixture
def ten_cars() -> list[_Car]:
    return [_Car(name=f"Carro {i}", brand="Marca A" if i % 2 else "Marca B") for i in range(1, 11)]


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def test_filter_by_exact_name():
    cars = [_Car("Uno", "Fiat"), _Car("Palio", "Fiat")]
    result = filter_records(cars, name="Uno")
    assert [c.name for c in result] == ["Uno"]


def test_filter_is_case_insensitive_substring():
    cars = [_Car("Uno Mille", "Fiat"), _Car("Gol", "Volkswagen")]
    assert [c.name for c in filter_records(cars, name="MILL")] == ["Uno Mille"]
    assert [c.name for c in filter_records(cars, brand="wagen")] == ["Gol"]


@pytest.mark.parametrize("blank", [None, "", "   "])
def test_blank_filter_is_noop(ten_cars, blank):
    assert filter_records(ten_cars, name=blank, brand=blank) == ten_cars


def test_filters_combine_with_and():
    cars = [_Car("Uno", "Fiat"), _Car("Uno", "Outra"), _Car("Palio", "Fiat")]
    result = filter_records(cars, name="uno", brand="fiat")
    assert result == [_Car("Uno", "Fiat")]


def test_filters_commute(ten_cars):
    name_then_brand = filter_records(filter_records(ten_cars, name="1"), brand="marca a")
    brand_then_name = filter_records(filter_records(ten_cars, brand="marca a"), name="1")
    assert name_then_brand == brand_then_name
    assert [c.name for c in name_then_brand] == ["Carro 1"]


def test_unknown_filter_field_raises(ten_cars):
    with pytest.raises(AttributeError):
        filter_records(ten_cars, color="red")


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


def test_second_page_of_three_starts_at_fourth(ten_cars):
    result = paginate(ten_cars, page=2, page_size=3)
    assert [c.name for c in result] == ["Carro 4", "Carro 5", "Carro 6"]


def test_last_partial_page(ten_cars):
    assert [c.name for c in paginate(ten_cars, page=4, page_size=3)] == ["Carro 10"]


def test_page_past_end_is_empty(ten_cars):
    assert paginate(ten_cars, page=5, page_size=3) == []


@pytest.mark.parametrize(("page", "page_size"), [(None, 3), (2, None), (None, None)])
def test_missing_page_or_size_returns_everything(ten_cars, page, page_size):
    assert paginate(ten_cars, page=page, page_size=page_size) == ten_cars


def test_page_zero_passes_through_as_no_skip(ten_cars):
    """(0 - 1) * 3 = -3: a negative skip skips nothing."""
    assert [c.name for c in paginate(ten_cars, page=0, page_size=3)] == ["Carro 1", "Carro 2", "Carro 3"]


@pytest.mark.parametrize("page_size", [0, -2])
def test_non_positive_page_size_takes_nothing(ten_cars, page_size):
    assert paginate(ten_cars, page=1, page_size=page_size) == []


def test_clamp_raises_page_size_to_one(ten_cars):
    assert [c.name for c in paginate(ten_cars, page=2, page_size=0, clamp=True)] == ["Carro 2"]


def test_clamp_raises_page_to_one(ten_cars):
    assert paginate(ten_cars, page=-4, page_size=2, clamp=True) == ten_cars[:2]


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


def test_query_filters_before_paginating(ten_cars):
    """Page 2 of the Marca B cars, not the Marca B cars on page 2."""
    result = query(ten_cars, page=2, page_size=2, brand="marca b")
    assert [c.name for c in result] == ["Carro 6", "Carro 8"]


def test_query_unfiltered_matches_paginate(ten_cars):
    assert query(ten_cars, page=2, page_size=3, name=None, brand=None) == paginate(ten_cars, 2, 3)
