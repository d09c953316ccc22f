"""Utility functions for the communication monitor."""
import logging
import math
from datetime import date, datetime, timedelta
from typing import Optional

import pandas as pd

from comm_monitor.utilities import config
from comm_monitor.utilities.models import PeriodWindow

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1)


def shift_months(day: date, months: int) -> date:
    """
    Step back a number of calendar months, keeping the day of month.

    Days that do not exist in the target month roll over into the next one,
    so 31 March minus one month is 3 March in a non-leap year.

    Args:
        day: Starting date
        months: Number of months to go back

    Returns:
        Shifted date
    """
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    return date(year, month + 1, 1) + timedelta(days=day.day - 1)


def create_period_window(period: str, now: Optional[datetime] = None) -> PeriodWindow:
    """
    Create the window a period statistic is scoped to.

    Args:
        period: One of config.PERIODS; unknown keys fall back to 'total'
        now: Reference time (defaults to the wall clock)

    Returns:
        PeriodWindow instance
    """
    now = now or datetime.now()

    if period not in config.PERIODS:
        logger.warning("Unknown period %r; using '%s'", period, config.PERIOD_TOTAL)
        period = config.PERIOD_TOTAL

    if period == config.PERIOD_TOTAL:
        return PeriodWindow(
            period=period,
            start=EPOCH,
            description=config.PERIOD_LABELS[period],
        )

    start_day = shift_months(now.date(), config.PERIOD_MONTHS[period])
    start = datetime.combine(start_day, datetime.min.time())
    description = f"{config.PERIOD_LABELS[period]} (since {start_day.isoformat()})"
    return PeriodWindow(period=period, start=start, description=description)


def days_since(last: datetime, now: datetime) -> int:
    """Whole days from last to now, rounded up."""
    delta = pd.Timestamp(now) - pd.Timestamp(last)
    return math.ceil(delta / pd.Timedelta(days=1))


def format_date(value: Optional[datetime], missing: str = config.MISSING_DATE_LABEL) -> str:
    """Format a date as YYYY-MM-DD, or the missing placeholder when there is none."""
    if value is None or pd.isna(value):
        return missing
    return value.strftime("%Y-%m-%d")
