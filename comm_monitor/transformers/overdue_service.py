"""Business logic for overdue communication checks."""
import logging
from datetime import datetime
from typing import List, Optional

import pandas as pd

from comm_monitor.utilities import config, utils
from comm_monitor.utilities.models import DashboardSummary, OverdueRecord

logger = logging.getLogger(__name__)


def threshold_for(student_type: str) -> int:
    """Days a student may go without communication before being overdue."""
    if student_type == config.GRADUATE_TYPE:
        return config.GRADUATE_THRESHOLD_DAYS
    return config.UNDERGRADUATE_THRESHOLD_DAYS


def classify_severity(student_type: str, total_days: int) -> str:
    """
    Classify elapsed days into a green/yellow/red severity band.

    Any type other than graduate uses the undergraduate bands.

    Args:
        student_type: Student type label
        total_days: Days since the latest communication

    Returns:
        Severity band name
    """
    bands = config.SEVERITY_BANDS.get(student_type, config.SEVERITY_BANDS[config.UNDERGRADUATE_TYPE])
    green_limit, yellow_limit = bands
    if total_days <= green_limit:
        return config.SEVERITY_GREEN
    if total_days <= yellow_limit:
        return config.SEVERITY_YELLOW
    return config.SEVERITY_RED


def find_latest_communications(communications: pd.DataFrame) -> pd.Series:
    """
    Find the latest communication date per student name.

    When several communications share the latest date the first one in
    newest-first order wins, which is the earliest in input order.

    Args:
        communications: Communications with a datetime date column

    Returns:
        Series of latest dates indexed by name
    """
    if communications.empty:
        return pd.Series(dtype="datetime64[ns]")

    ordered = communications.sort_values("date", ascending=False, kind="mergesort")
    latest = ordered.drop_duplicates(subset="name", keep="first")
    return latest.set_index("name")["date"]


def compute_overdue_records(
    students: pd.DataFrame,
    communications: pd.DataFrame,
    now: Optional[datetime] = None,
) -> List[OverdueRecord]:
    """
    Compute elapsed and overdue days for every student.

    All students are returned, not only overdue ones, so callers can show
    severity for each of them.

    Args:
        students: Prepared student table
        communications: Prepared communication table
        now: Reference time (defaults to the wall clock)

    Returns:
        One OverdueRecord per student, in student order
    """
    now = now or datetime.now()
    latest_dates = find_latest_communications(communications)
    records: List[OverdueRecord] = []

    for student in students.to_dict("records"):
        name = student.get("name", "")
        student_type = student.get("type", "")

        last_date = latest_dates.get(name)
        if last_date is None or pd.isna(last_date):
            last_comm_date = None
            total_days = config.NEVER_CONTACTED_DAYS
        else:
            last_comm_date = pd.Timestamp(last_date).to_pydatetime()
            total_days = utils.days_since(last_comm_date, now)

        records.append(
            OverdueRecord(
                name=name,
                type=student_type,
                last_comm_date=last_comm_date,
                total_days_since_last_comm=total_days,
                days_overdue=max(0, total_days - threshold_for(student_type)),
                severity=classify_severity(student_type, total_days),
                fields={key: str(value) for key, value in student.items()},
            )
        )

    logger.debug(
        "Computed overdue records for %d students (%d overdue)",
        len(records),
        sum(1 for record in records if record.days_overdue > 0),
    )
    return records


def filter_overdue(
    records: List[OverdueRecord],
    student_type: str,
    threshold: int,
) -> List[OverdueRecord]:
    """Records of one student type whose elapsed days exceed the threshold."""
    return [
        record
        for record in records
        if record.type == student_type and record.total_days_since_last_comm > threshold
    ]


def summarize(students: pd.DataFrame, records: List[OverdueRecord]) -> DashboardSummary:
    """
    Build the headline counters.

    Args:
        students: Prepared student table
        records: Overdue records for the same students

    Returns:
        DashboardSummary
    """
    types = students["type"] if "type" in students.columns else pd.Series(dtype="object")
    return DashboardSummary(
        total_students=len(students),
        graduates=int((types == config.GRADUATE_TYPE).sum()),
        undergraduates=int((types == config.UNDERGRADUATE_TYPE).sum()),
        overdue=sum(1 for record in records if record.days_overdue > 0),
    )
