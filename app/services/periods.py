"""
Period filters for the repair table: this month, last month, this year.
"""

from datetime import datetime, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from app.core.config import settings

THIS_MONTH = "thisMonth"
LAST_MONTH = "lastMonth"
THIS_YEAR = "thisYear"

PERIODS = (THIS_MONTH, LAST_MONTH, THIS_YEAR)

Bounds = Tuple[Optional[datetime], Optional[datetime]]


def current_time() -> datetime:
    """Now, in the time zone periods are counted in"""
    return datetime.now(ZoneInfo(settings.TIMEZONE))


def period_bounds(period: str, now: datetime) -> Bounds:
    """
    Inclusive (start, end) bounds on date_sold for a period tag.

    - thisMonth: first of this month 00:00, open ended
    - lastMonth: first of last month 00:00 through the last day of last
      month 00:00 (a sale later that day falls outside)
    - thisYear: January 1 00:00, open ended
    - unknown tags: no bounds
    """
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    if period == THIS_MONTH:
        return month_start, None

    if period == LAST_MONTH:
        last_month_end = month_start - timedelta(days=1)
        return last_month_end.replace(day=1), last_month_end

    if period == THIS_YEAR:
        return month_start.replace(month=1), None

    return None, None
