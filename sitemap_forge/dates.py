"""
Date parsing and formatting for sitemap timestamps.

Parsing is delegated to pydantic's lax datetime validation, so RFC 3339 /
ISO 8601 strings, bare ``YYYY-MM-DD`` dates and unix timestamps are accepted.
Other strings such as ``January 15, 2025`` or ``01/15/2025`` fall back to
dateutil's general parser. Naive values are treated as UTC.
"""

from datetime import date, datetime, time, timezone
from typing import Union

from dateutil import parser as dateutil_parser
from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from .types import DateParseError, InvalidDateError


DateValue = Union[str, int, float, date, datetime]

_datetime_adapter = TypeAdapter(datetime)
_date_adapter = TypeAdapter(date)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_date(value: DateValue) -> datetime:
    """
    Parse ``value`` into a timezone-aware UTC datetime.

    Raises:
        DateParseError: if the value cannot be parsed
    """
    try:
        return _parse(value)
    except OverflowError as e:
        # Valid local time that falls outside the datetime range in UTC
        raise DateParseError(f"Unable to parse date: {value!r}") from e


def _parse(value: DateValue) -> datetime:
    if isinstance(value, datetime):
        return _as_utc(value)

    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)

    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise DateParseError(f"Unable to parse date: {value!r}")

    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise DateParseError("Unable to parse date: empty string")

    try:
        return _as_utc(_datetime_adapter.validate_python(value))
    except PydanticValidationError:
        pass

    if not isinstance(value, str):
        raise DateParseError(f"Unable to parse date: {value!r}")

    try:
        parsed = _date_adapter.validate_python(value)
        return datetime.combine(parsed, time.min, tzinfo=timezone.utc)
    except PydanticValidationError:
        pass

    try:
        return _as_utc(dateutil_parser.parse(value))
    except (ValueError, OverflowError) as e:
        raise DateParseError(f"Unable to parse date: {value!r}") from e


def _iso_utc(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_date(value: DateValue) -> str:
    """
    Format a date as a full-precision UTC timestamp (``2024-01-15T10:30:00.000Z``).

    Raises:
        InvalidDateError: if the value cannot be parsed
    """
    if not isinstance(value, (str, date)):
        raise InvalidDateError("Date must be a date/datetime object or ISO string")

    try:
        parsed = parse_date(value)
    except DateParseError as e:
        raise InvalidDateError(f"Invalid date: {value!r}") from e

    return _iso_utc(parsed)


def format_news_date(value: DateValue) -> str:
    """Format a publication date for Google News (RFC 3339)."""
    return format_date(value)


def format_w3c_date(value: DateValue, include_time: bool = True) -> str:
    """Format a date in W3C Datetime, either full timestamp or date only."""
    try:
        parsed = parse_date(value)
    except DateParseError as e:
        raise InvalidDateError("Invalid date provided") from e

    if include_time:
        return _iso_utc(parsed)
    return parsed.date().isoformat()


def is_valid_date(value: DateValue) -> bool:
    """
    Check that ``value`` parses as a date.

    This is as lenient as the underlying parser: partial forms such as a bare
    year-month-day or a unix timestamp are accepted.
    """
    try:
        parse_date(value)
    except DateParseError:
        return False
    return True


def is_valid_lastmod_date(value: DateValue) -> bool:
    """True when ``value`` parses and is not after the current instant."""
    try:
        parsed = parse_date(value)
    except DateParseError:
        return False
    return parsed <= _utcnow()


def get_current_date() -> str:
    return _iso_utc(_utcnow())


def is_same_day(first: DateValue, second: DateValue) -> bool:
    """Compare two dates by UTC calendar day. Unparseable input compares unequal."""
    try:
        return parse_date(first).date() == parse_date(second).date()
    except DateParseError:
        return False
