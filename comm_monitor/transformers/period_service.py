"""Per-period communication statistics."""
import logging
from datetime import datetime
from typing import List, Optional

import pandas as pd

from comm_monitor.utilities import utils
from comm_monitor.utilities.models import PeriodStat, PeriodStats, PeriodWindow

logger = logging.getLogger(__name__)


def filter_window(communications: pd.DataFrame, window: PeriodWindow) -> pd.DataFrame:
    """Communications dated on or after the window start."""
    if communications.empty:
        return communications
    return communications[communications["date"] >= pd.Timestamp(window.start)]


def compute_period_stats(
    students: pd.DataFrame,
    communications: pd.DataFrame,
    period: str,
    now: Optional[datetime] = None,
) -> PeriodStats:
    """
    Count communications per student within a period window.

    Args:
        students: Prepared student table
        communications: Prepared communication table
        period: Period key (total, year, halfyear, month)
        now: Reference time (defaults to the wall clock)

    Returns:
        PeriodStats with one entry per student, highest count first; ties
        keep student order
    """
    window = utils.create_period_window(period, now)
    in_window = filter_window(communications, window)

    if in_window.empty:
        counts = pd.DataFrame(columns=["count", "last"])
    else:
        counts = in_window.groupby("name")["date"].agg(count="count", last="max")

    stats: List[PeriodStat] = []
    for student in students.to_dict("records"):
        name = student.get("name", "")
        stat = PeriodStat(name=name, type=student.get("type", ""))
        if name in counts.index:
            stat.count = int(counts.at[name, "count"])
            stat.last_comm = pd.Timestamp(counts.at[name, "last"]).to_pydatetime()
        stats.append(stat)

    logger.debug(
        "Period %s: %d communications in window across %d students",
        window.period,
        len(in_window),
        len(stats),
    )

    stats.sort(key=lambda stat: stat.count, reverse=True)
    return PeriodStats(window=window, stats=stats)
