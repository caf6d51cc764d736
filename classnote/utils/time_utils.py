import math
import pytz
from datetime import datetime, date

SCHOOL_TIMEZONE = pytz.timezone("Asia/Seoul")

def get_seoul_time():
    """
    Returns the current time in Asia/Seoul (KST) as a naive datetime.
    """
    return datetime.now(SCHOOL_TIMEZONE).replace(tzinfo=None)

def current_week_number(semester_start: date, now: datetime = None) -> int:
    """
    Week number counted from the semester start: ceil(days elapsed / 7).
    """
    now = now or get_seoul_time()
    start = datetime.combine(semester_start, datetime.min.time())
    elapsed = (now - start).total_seconds()
    return math.ceil(elapsed / (7 * 24 * 60 * 60))

def to_school_time(value: datetime) -> datetime:
    """Aware datetimes are converted to school time; naive ones are kept as is."""
    if value.tzinfo is None:
        return value
    return value.astimezone(SCHOOL_TIMEZONE).replace(tzinfo=None)
