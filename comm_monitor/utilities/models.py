"""Data models for the communication monitor."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

import pandas as pd


@dataclass
class PeriodWindow:
    """Represents the rolling window a period statistic is scoped to."""
    period: str
    start: datetime
    description: str


@dataclass
class DashboardData:
    """Container for loaded student and communication data."""
    students: pd.DataFrame = field(default_factory=pd.DataFrame)
    communications: pd.DataFrame = field(default_factory=pd.DataFrame)
    errors: List[str] = field(default_factory=list)
    files_loaded: int = 0
    load_error: Optional[str] = None


@dataclass
class OverdueRecord:
    """A student with the time elapsed since their latest communication."""
    name: str
    type: str
    last_comm_date: Optional[datetime]
    total_days_since_last_comm: int
    days_overdue: int
    severity: str
    fields: Dict[str, str] = field(default_factory=dict)


@dataclass
class PeriodStat:
    """Communication count for one student within a period window."""
    name: str
    type: str
    count: int = 0
    last_comm: Optional[datetime] = None


@dataclass
class PeriodStats:
    """Statistics for all students within one period window."""
    window: PeriodWindow
    stats: List[PeriodStat] = field(default_factory=list)


@dataclass
class DashboardSummary:
    """Headline counters for the dashboard."""
    total_students: int = 0
    graduates: int = 0
    undergraduates: int = 0
    overdue: int = 0


@dataclass
class Dashboard:
    """Everything needed to render one dashboard view."""
    summary: DashboardSummary
    generated_at: datetime
    records: List[OverdueRecord] = field(default_factory=list)
    graduate_overdue: List[OverdueRecord] = field(default_factory=list)
    undergraduate_overdue: List[OverdueRecord] = field(default_factory=list)
    periods: List[PeriodStats] = field(default_factory=list)


@dataclass
class PipelineResult:
    """Outcome of a dashboard pipeline run."""
    report: str
    errors: List[str] = field(default_factory=list)
    alert: Optional[str] = None
