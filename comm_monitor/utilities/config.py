"""Configuration constants and settings for the communication monitor."""
import os
from typing import Dict, Tuple

# ============================================================================
# DATA SOURCE CONFIGURATION
# ============================================================================

# Local directory or http(s) base URL holding the CSV files
DATA_SOURCE = os.getenv("COMM_MONITOR_DATA_SOURCE", "data")

STUDENTS_FILE = "students.csv"
COMMUNICATIONS_FILE = "communications.csv"

HTTP_TIMEOUT = float(os.getenv("COMM_MONITOR_HTTP_TIMEOUT", "30"))
HTTP_USER_AGENT = "CommMonitor/0.1.0"

FILE_ENCODING = "utf-8-sig"

# ============================================================================
# COLUMN DEFINITIONS
# ============================================================================

HEADER_MAP: Dict[str, str] = {
    "姓名": "name",
    "类型": "type",
    "日期": "date",
}

STUDENT_COLUMNS = ["name", "type"]
COMMUNICATION_COLUMNS = ["name", "type", "date"]

# ============================================================================
# BUSINESS RULES
# ============================================================================

GRADUATE_TYPE = "研究生"
UNDERGRADUATE_TYPE = "本科生"

GRADUATE_THRESHOLD_DAYS = 14
UNDERGRADUATE_THRESHOLD_DAYS = 30

# Reported for students without any communication on record
NEVER_CONTACTED_DAYS = 999

# Severity bands: (green upper bound, yellow upper bound) on total elapsed days
SEVERITY_BANDS: Dict[str, Tuple[int, int]] = {
    GRADUATE_TYPE: (GRADUATE_THRESHOLD_DAYS + 7, GRADUATE_THRESHOLD_DAYS + 14),
    UNDERGRADUATE_TYPE: (UNDERGRADUATE_THRESHOLD_DAYS + 15, UNDERGRADUATE_THRESHOLD_DAYS + 30),
}

SEVERITY_GREEN = "green"
SEVERITY_YELLOW = "yellow"
SEVERITY_RED = "red"

# ============================================================================
# PERIOD CONFIGURATION
# ============================================================================

PERIOD_TOTAL = "total"
PERIOD_YEAR = "year"
PERIOD_HALFYEAR = "halfyear"
PERIOD_MONTH = "month"

# Calendar months to step back from today for each rolling period
PERIOD_MONTHS: Dict[str, int] = {
    PERIOD_YEAR: 12,
    PERIOD_HALFYEAR: 6,
    PERIOD_MONTH: 1,
}

PERIODS = [PERIOD_TOTAL, PERIOD_YEAR, PERIOD_HALFYEAR, PERIOD_MONTH]

PERIOD_LABELS: Dict[str, str] = {
    PERIOD_TOTAL: "all time",
    PERIOD_YEAR: "last year",
    PERIOD_HALFYEAR: "last six months",
    PERIOD_MONTH: "last month",
}

# ============================================================================
# REPORT CONFIGURATION
# ============================================================================

NEVER_CONTACTED_LABEL = "Never contacted"
MISSING_DATE_LABEL = "-"
EMPTY_OVERDUE_LABEL = "No overdue students"
EMPTY_STATS_LABEL = "No data"

LOAD_ALERT_MESSAGE = (
    "Failed to load data. Check that the CSV files exist and are correctly formatted."
)

# Invalid date rows listed individually before collapsing into a count
MAX_REPORTED_INVALID_ROWS = 3
