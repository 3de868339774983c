from datetime import date, timezone

import pytest

from finstore.date_time_helper import (
    DateTimeConversionFailed,
    DateTimeParseFailed,
    StringParseError,
    date_from_str,
    date_time_from_str,
    date_time_from_str_american,
    date_time_from_str_standard,
    make_time,
    naive_date_to_date_time,
    to_time,
    unix_to_date_time,
)

FMT = "%Y-%m-%d %H:%M:%S"


def test_unix_to_date_time():
    d = unix_to_date_time(1587099600).astimezone(timezone.utc)
    assert d.strftime(FMT) == "2020-04-17 05:00:00"


def test_date_time_from_str_american():
    d = date_time_from_str_american("02-10-2020", 18, None)
    assert d.strftime(FMT) == "2020-02-10 18:00:00"


def test_date_date_time_from_str_standard():
    d = date_time_from_str_standard("2020-02-10", 18, None)
    assert d.strftime(FMT) == "2020-02-10 18:00:00"


def test_date_time_from_str():
    d = date_time_from_str("10-2020-02", "%d-%Y-%m", 18, None)
    assert d.strftime(FMT) == "2020-02-10 18:00:00"


def test_date_time_from_str_with_zone():
    d = date_time_from_str_standard("2020-02-10", 18, "UTC")
    assert d.astimezone(timezone.utc).strftime(FMT) == "2020-02-10 18:00:00"


def test_invalid_zone():
    with pytest.raises(StringParseError):
        date_time_from_str_standard("2020-02-10", 18, "Not/AZone")


def test_invalid_date_string():
    with pytest.raises(DateTimeParseFailed):
        date_time_from_str_standard("10.02.2020", 18, None)


def test_invalid_hour():
    with pytest.raises(DateTimeConversionFailed):
        naive_date_to_date_time(date(2020, 2, 10), 25, None)


def test_nonexistent_time_in_zone():
    with pytest.raises(DateTimeConversionFailed):
        naive_date_to_date_time(date(2021, 3, 28), 2, "Europe/Berlin")


def test_ambiguous_time_in_zone():
    with pytest.raises(DateTimeConversionFailed):
        naive_date_to_date_time(date(2021, 10, 31), 2, "Europe/Berlin")


def test_date_from_str():
    assert date_from_str("2020-12-02", "%Y-%m-%d") == date(2020, 12, 2)
    assert date_from_str("2020-12-02", "%F") == date(2020, 12, 2)
    with pytest.raises(DateTimeParseFailed):
        date_from_str("2020-13-02", "%F")


def test_to_time():
    d = to_time("2020-04-17 05:00:00.000", 0).astimezone(timezone.utc)
    assert d.strftime(FMT) == "2020-04-17 05:00:00"
    shifted = to_time("2020-04-17 05:00:00.000", 200).astimezone(timezone.utc)
    assert shifted.strftime(FMT) == "2020-04-17 03:00:00"
    assert d - shifted == d.replace(hour=7) - d.replace(hour=5)


def test_to_time_keeps_milliseconds():
    d = to_time("2020-04-17 05:00:00.250", 0)
    assert d.microsecond == 250000


def test_to_time_rejects_missing_fraction():
    with pytest.raises(DateTimeParseFailed):
        to_time("2020-04-17 05:00:00", 0)


def test_make_time():
    t = make_time(2021, 12, 6, 19, 0, 0)
    assert t.strftime(FMT) == "2021-12-06 19:00:00"
    assert t < make_time(2021, 12, 6, 19, 1, 0)