"""Timezone handling service for the Habit Tracker.

This service provides centralized timezone conversion functions so that goal
days are bucketed consistently in each user's local calendar.
"""
from datetime import datetime, date, time, timedelta
from typing import Optional, Tuple
import pytz
from pytz import timezone as pytz_timezone


DEFAULT_TIMEZONE = 'UTC'


def get_timezone_object(timezone_str: str) -> pytz.BaseTzInfo:
    """Get timezone object from timezone string."""
    try:
        return pytz_timezone(timezone_str)
    except (pytz.exceptions.UnknownTimeZoneError, AttributeError):
        # Fallback to UTC if timezone is invalid
        return pytz.UTC


def is_valid_timezone(timezone_str: str) -> bool:
    """
    Validate if timezone string is a known IANA identifier.

    Args:
        timezone_str: Timezone string to validate

    Returns:
        True if valid, False otherwise
    """
    if not timezone_str or not isinstance(timezone_str, str):
        return False
    try:
        pytz_timezone(timezone_str)
        return True
    except pytz.exceptions.UnknownTimeZoneError:
        return False


def convert_utc_to_user_time(user_timezone: str, utc_datetime: datetime) -> Tuple[datetime, date, time]:
    """
    Convert UTC datetime to user's local time.

    Args:
        user_timezone: User's timezone string
        utc_datetime: UTC datetime

    Returns:
        Tuple of (local_datetime, local_date, local_time)
    """
    # Ensure UTC datetime is timezone-aware
    if utc_datetime.tzinfo is None:
        utc_datetime = pytz.UTC.localize(utc_datetime)
    elif utc_datetime.tzinfo != pytz.UTC:
        utc_datetime = utc_datetime.astimezone(pytz.UTC)

    # Convert to user's timezone
    user_tz = get_timezone_object(user_timezone)
    local_datetime = utc_datetime.astimezone(user_tz)

    return local_datetime, local_datetime.date(), local_datetime.time()


def get_current_user_time(user_timezone: str, now: Optional[datetime] = None) -> Tuple[datetime, date, time]:
    """
    Get current time in user's timezone.

    Args:
        user_timezone: User's timezone string
        now: Override for the current UTC instant

    Returns:
        Tuple of (local_datetime, local_date, local_time)
    """
    utc_now = now or datetime.now(pytz.UTC)
    return convert_utc_to_user_time(user_timezone, utc_now)


def get_user_local_date(user_timezone: str, now: Optional[datetime] = None) -> date:
    """Today's calendar date in the user's timezone (UTC for unknown zones)."""
    _, local_date, _ = get_current_user_time(user_timezone, now)
    return local_date


def format_local_time(user_timezone: str, now: Optional[datetime] = None) -> str:
    """Current local time for display, e.g. '2024-01-01 16:30:00 +04'."""
    local_datetime, _, _ = get_current_user_time(user_timezone, now)
    return local_datetime.strftime('%Y-%m-%d %H:%M:%S %Z')


def get_next_local_midnight(user_timezone: str, now: Optional[datetime] = None) -> datetime:
    """
    Get the next local midnight in the user's timezone.

    The result is timezone-aware and localized, so DST transitions between
    now and midnight are accounted for.
    """
    user_tz = get_timezone_object(user_timezone)
    local_date = get_user_local_date(user_timezone, now)
    next_midnight = datetime.combine(local_date + timedelta(days=1), time.min)
    return user_tz.localize(next_midnight)


def get_timezone_offset(user_timezone: str, now: Optional[datetime] = None) -> str:
    """
    Get timezone offset string for display (e.g., '-05:00', '+02:00').

    Args:
        user_timezone: User's timezone string
        now: Override for the current UTC instant

    Returns:
        Timezone offset string
    """
    local_datetime, _, _ = get_current_user_time(user_timezone, now)
    offset = local_datetime.strftime('%z')

    # Format as +/-HH:MM
    if len(offset) == 5:
        return f"{offset[:3]}:{offset[3:]}"
    return offset
