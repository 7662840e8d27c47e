"""Helper utilities for the What The Food admin board."""
from data.config import ADMIN_IDS, REFERENCE_TZ_OFFSET_HOURS
from datetime import datetime, timedelta, timezone

# Single reference zone for every date-granularity decision (filtering,
# filter options, display)
REFERENCE_TZ = timezone(timedelta(hours=REFERENCE_TZ_OFFSET_HOURS))

def to_reference_time(dt: datetime) -> datetime:
    """Convert an aware datetime to the reference time zone.

    Naive datetimes are treated as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(REFERENCE_TZ)

def truncate_date(dt: datetime) -> str:
    """Reduce a timestamp to its calendar date (YYYY-MM-DD) in the reference zone."""
    return to_reference_time(dt).strftime("%Y-%m-%d")

def is_calendar_date(value: str) -> bool:
    """Check that value is a YYYY-MM-DD date string."""
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except (TypeError, ValueError):
        return False
    return len(value) == 10

def format_reference_datetime(dt: datetime) -> str:
    """Format a timestamp as DD.MM.YYYY HH:MM in the reference zone."""
    if dt is None:
        return "—"
    return to_reference_time(dt).strftime('%d.%m.%Y %H:%M')

def format_amount(amount: float) -> str:
    """Format a rupee amount, dropping a zero fractional part."""
    if float(amount).is_integer():
        return f"₹{int(amount):,}"
    return f"₹{amount:,.2f}"

def is_admin(user_id):
    """Check if the user_id is in the admin list."""
    return user_id in ADMIN_IDS
