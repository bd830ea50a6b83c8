from datetime import date

import pytest

from banglaroll.utils.bengali import (
    parse_bengali_date,
    resolve_two_digit_year,
    to_latin_digits,
)


def test_bengali_latin_and_mixed_digits_agree():
    expected = date(1985, 10, 5)

    assert parse_bengali_date("০৫/১০/৮৫") == expected
    assert parse_bengali_date("05/10/85") == expected
    assert parse_bengali_date("০5/1০/৮5") == expected


def test_four_digit_year():
    assert parse_bengali_date("০৫/১০/১৯৮৫") == date(1985, 10, 5)
    assert parse_bengali_date("5/1/2001") == date(2001, 1, 5)


@pytest.mark.parametrize("value, year", [
    ("01/01/00", 2000),
    ("01/01/29", 2029),
    ("01/01/30", 1930),
    ("01/01/99", 1999),
])
def test_century_pivot(value, year):
    assert parse_bengali_date(value).year == year


def test_leap_day_two_digit_year():
    assert parse_bengali_date("29/02/00") == date(2000, 2, 29)


@pytest.mark.parametrize("value", ["", "31/02/1990", "13/13/13", "not a date", "05-10-1985"])
def test_unparseable_dates_are_none(value):
    assert parse_bengali_date(value) is None


def test_to_latin_digits():
    assert to_latin_digits("১২৩৪৫৬৭৮৯০") == "1234567890"
    assert to_latin_digits("ক১a2") == "ক1a2"
    assert to_latin_digits("") == ""


def test_resolve_two_digit_year():
    assert resolve_two_digit_year(0) == 2000
    assert resolve_two_digit_year(29) == 2029
    assert resolve_two_digit_year(30) == 1930


@pytest.mark.parametrize("value, expected", [
    ("01/01/0085", date(1985, 1, 1)),
    ("01/01/0029", date(2029, 1, 1)),
    ("29/02/0084", date(1984, 2, 29)),
])
def test_padded_two_digit_year(value, expected):
    assert parse_bengali_date(value) == expected
