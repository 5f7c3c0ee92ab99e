"""Date helpers for trip ranges (ISO YYYY-MM-DD strings, local calendar dates)."""
from datetime import date, datetime
from typing import Union

from packy.utilities.constants import DATE_FORMAT

DateLike = Union[str, date]


def parse_date(value: DateLike) -> date:
    '''Parses a YYYY-MM-DD string (or passes a date through) without any timezone shift.'''
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value.strip(), DATE_FORMAT).date()


def to_date_string(value):
    '''Stores dates as YYYY-MM-DD strings; anything else is returned unchanged.'''
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    return value


def calculate_days(departure: DateLike, return_date: DateLike) -> int:
    """Number of trip days, counting both the departure and the return day."""
    start = parse_date(departure)
    end = parse_date(return_date)
    return abs((end - start).days) + 1


def is_valid_date_string(value) -> bool:
    if not isinstance(value, str):
        return False
    try:
        parse_date(value)
    except ValueError:
        return False
    return True


def is_valid_date_range(departure: DateLike, return_date: DateLike) -> bool:
    return parse_date(return_date) >= parse_date(departure)


def get_date_range_string(departure: DateLike, return_date: DateLike) -> str:
    """Display range like 'Dec 20 - 27' or 'Dec 30 - Jan 2'."""
    dep = parse_date(departure)
    ret = parse_date(return_date)
    dep_month = dep.strftime('%b')
    ret_month = ret.strftime('%b')
    if (dep.year, dep.month) == (ret.year, ret.month):
        return f"{dep_month} {dep.day} - {ret.day}"
    return f"{dep_month} {dep.day} - {ret_month} {ret.day}"


def get_duration_string(days: int) -> str:
    return '1 day' if days == 1 else f'{days} days'
