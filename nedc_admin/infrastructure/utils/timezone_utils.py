"""
Timezone helpers.
Dates from the backend are ISO strings in UTC, pages show them in Stockholm time.
"""
from datetime import date, datetime, timezone
from typing import Optional, Union

from .datetime_config import API_DATE_FORMAT, DEFAULT_TIMEZONE, get_datetime_format

LOCAL_TZ = DEFAULT_TIMEZONE


def parse_datetime(value: Optional[Union[datetime, date, str]]) -> Optional[datetime]:
    """
    Parses an ISO string (with or without 'Z') into an aware datetime.

    Args:
        value: datetime, date, ISO string or None

    Returns:
        Aware datetime (naive input is taken as UTC) or None when unparsable
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def to_local_time(value: Optional[Union[datetime, date, str]]) -> Optional[datetime]:
    """Converts to Stockholm time"""
    dt = parse_datetime(value)
    if dt is None:
        return None
    return dt.astimezone(LOCAL_TZ)


def to_local_date(value: Optional[Union[datetime, date, str]]) -> Optional[date]:
    """Calendar date in Stockholm time"""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    local = to_local_time(value)
    return local.date() if local else None


def format_local_datetime(value: Optional[Union[datetime, str]]) -> str:
    local = to_local_time(value)
    if local is None:
        return "—"
    return local.strftime(get_datetime_format("full_datetime"))


def format_local_date(value: Optional[Union[datetime, date, str]]) -> str:
    local = to_local_date(value)
    if local is None:
        return "—"
    return local.strftime(get_datetime_format("date_only"))


def format_api_date(value: date) -> str:
    """YYYY-MM-DD as the backend expects in fromdate/todate"""
    return value.strftime(API_DATE_FORMAT)
