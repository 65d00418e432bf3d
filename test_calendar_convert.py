# test_calendar_convert.py
from datetime import date, datetime

import pytest

from calendar_convert import (
    SOLAR_TERMS,
    LunarDate,
    SolarDate,
    get_term,
    lunar2solar,
    normalize_lunar_date_str,
    normalize_solar_date_str,
    solar2lunar,
)

@pytest.mark.parametrize("value", [
    "2023-07-04", "2023-7-4", "2023/07/04", "2023.7.4", "2023-07-04 23:30:00", "2023年7月4日",
    date(2023, 7, 4), datetime(2023, 7, 4, 23, 30),
])
def test_normalize_solar_date_str(value):
    assert normalize_solar_date_str(value) == (2023, 7, 4)

@pytest.mark.parametrize("bad", ["", "2023-07", "2023-xx-04", "2023-02-29", "2023-04-31", None])
def test_normalize_solar_date_str_rejects(bad):
    with pytest.raises(ValueError):
        normalize_solar_date_str(bad)

def test_normalize_lunar_date_str_checks_shape_only():
    assert normalize_lunar_date_str("2023-2-30") == (2023, 2, 30)
    with pytest.raises(ValueError):
        normalize_lunar_date_str("2023-2")

@pytest.mark.parametrize("lunar,is_leap,expected", [
    ("2023-05-17", False, "2023-07-04"),
    ("2024-01-01", False, "2024-02-10"),
    ("2023-02-01", False, "2023-02-20"),
    ("2023-02-01", True, "2023-03-22"),
    # 2023 has no leap third month: flag ignored
    ("2023-03-01", True, "2023-04-20"),
    ("1949-08-10", False, "1949-10-01"),
])
def test_lunar2solar(lunar, is_leap, expected):
    solar = lunar2solar(lunar, is_leap)
    assert isinstance(solar, SolarDate)
    assert str(solar) == expected
    assert solar.to_date() == date.fromisoformat(expected)

@pytest.mark.parametrize("bad", ["1899-12-01", "2101-01-01", "2023-00-01", "2023-13-01", "2023-01-31", "2023-01-00"])
def test_lunar2solar_rejects(bad):
    with pytest.raises(ValueError):
        lunar2solar(bad)

def test_solar2lunar():
    assert solar2lunar("2023-07-04") == LunarDate(2023, 5, 17, False)
    assert solar2lunar("2024-02-09").lunar_year == 2023
    assert solar2lunar(date(2024, 2, 10)) == LunarDate(2024, 1, 1, False)

def test_solar2lunar_leap_month():
    lunar = solar2lunar("2023-03-22")
    assert lunar == LunarDate(2023, 2, 1, True)
    assert str(lunar) == "2023-闰02-01"

@pytest.mark.parametrize("bad", ["1899-06-01", "2101-06-01", "2023-02-30"])
def test_solar2lunar_rejects(bad):
    with pytest.raises(ValueError):
        solar2lunar(bad)

def test_solar_terms_table():
    assert len(SOLAR_TERMS) == 24
    assert SOLAR_TERMS[0] == "小寒"
    assert SOLAR_TERMS[2] == "立春"
    assert SOLAR_TERMS[23] == "冬至"

@pytest.mark.parametrize("year,term_index,expected", [
    (2023, 3, 4),    # 立春
    (2023, 13, 7),   # 小暑
    (2024, 3, 4),    # 立春
    (2023, 24, 22),  # 冬至
    (2024, 24, 21),  # 冬至
])
def test_get_term(year, term_index, expected):
    assert get_term(year, term_index) == expected

def test_get_term_falls_in_its_month():
    # odd terms are the 节 that open each Gregorian month
    for month in range(1, 13):
        day = get_term(2020, month * 2 - 1)
        assert 3 <= day <= 9

@pytest.mark.parametrize("term_index", [0, 25, -1])
def test_get_term_rejects_index(term_index):
    with pytest.raises(ValueError):
        get_term(2023, term_index)
