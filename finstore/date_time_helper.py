"""Helpers to build local, time zone aware date-times from dates and strings."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class DateTimeError(Exception):
    """Base class of date-time errors."""


class DateTimeParseFailed(DateTimeError):
    def __init__(self, message: str = "Failed to parse (date-)time") -> None:
        super().__init__(message)


class DateTimeConversionFailed(DateTimeError):
    def __init__(self, message: str = "Conversion of date-time failed") -> None:
        super().__init__(message)


class StringParseError(DateTimeError):
    def __init__(self, message: str = "Failed to parse (date-)time from string") -> None:
        super().__init__(message)


def _unique_local(naive: datetime) -> Optional[datetime]:
    """Interpret a naive time in the local zone, None if it is ambiguous or missing."""
    first = naive.replace(fold=0).astimezone()
    second = naive.replace(fold=1).astimezone()
    if first.utcoffset() != second.utcoffset():
        return None
    return first


def _unique_in_zone(naive: datetime, tz: ZoneInfo) -> Optional[datetime]:
    first = naive.replace(tzinfo=tz, fold=0)
    second = naive.replace(tzinfo=tz, fold=1)
    if first.utcoffset() != second.utcoffset():
        return None
    return first


def naive_date_to_date_time(date: date, hour: int, zone: Optional[str] = None) -> datetime:
    """Return the date at the given hour in the given zone (local if None), as local time."""
    try:
        naive = datetime(date.year, date.month, date.day, hour)
    except ValueError as exc:
        raise DateTimeConversionFailed() from exc
    if zone is None:
        result = _unique_local(naive)
    else:
        try:
            tz = ZoneInfo(zone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise StringParseError() from exc
        result = _unique_in_zone(naive, tz)
        if result is not None:
            result = result.astimezone()
    if result is None:
        raise DateTimeConversionFailed()
    return result


def unix_to_date_time(seconds: int) -> datetime:
    """Return local time for seconds since the UNIX epoch."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc).astimezone()


def date_time_from_str_american(
    date_str: str, hour: int, zone: Optional[str] = None
) -> datetime:
    """Parse a date in `%m-%d-%Y` format and set it to the given hour."""
    return date_time_from_str(date_str, "%m-%d-%Y", hour, zone)


def date_time_from_str_standard(
    date_str: str, hour: int, zone: Optional[str] = None
) -> datetime:
    """Parse a date in `%Y-%m-%d` format and set it to the given hour."""
    return date_time_from_str(date_str, "%F", hour, zone)


def date_time_from_str(
    date_str: str, fmt: str, hour: int, zone: Optional[str] = None
) -> datetime:
    """Parse a date in the given format and set it to the given hour."""
    return naive_date_to_date_time(date_from_str(date_str, fmt), hour, zone)


def date_from_str(date_str: str, fmt: str) -> date:
    """Parse a date in the given format."""
    try:
        return datetime.strptime(date_str, fmt.replace("%F", "%Y-%m-%d")).date()
    except ValueError as exc:
        raise DateTimeParseFailed() from exc


_TIME_PATTERN = re.compile(r"^(?P<head>.*)\.(?P<frac>\d{3})(?P<offset>[+-]\d{4})$", re.S)


def to_time(time: str, zone: int = 0) -> datetime:
    """Parse `%Y-%m-%d %H:%M:%S.fff` with an added offset (e.g. 100 for +01:00)."""
    text = f"{time}{zone:+05d}"
    match = _TIME_PATTERN.match(text)
    if match is None:
        raise DateTimeParseFailed()
    try:
        parsed = datetime.strptime(
            f"{match['head']}.{match['frac']}{match['offset']}",
            "%Y-%m-%d %H:%M:%S.%f%z",
        )
    except ValueError as exc:
        raise DateTimeParseFailed() from exc
    return parsed.astimezone()


def make_time(
    year: int, month: int, day: int, hour: int, minute: int, second: int
) -> Optional[datetime]:
    """Build a local time; None if the local time is ambiguous or does not exist."""
    return _unique_local(datetime(year, month, day, hour, minute, second))