"""Text rendering for the communication dashboard."""
from typing import List, Sequence

from comm_monitor.utilities import config, utils
from comm_monitor.utilities.models import Dashboard, OverdueRecord, PeriodStats


def _format_table(headers: Sequence[str], rows: List[Sequence[str]], empty_label: str) -> List[str]:
    """Lay out rows in left-aligned columns under a header line."""
    if not rows:
        return [f"  {empty_label}"]

    widths = [len(header) for header in headers]
    for row in rows:
        for index, cell in enumerate(row):
            widths[index] = max(widths[index], len(cell))

    def _line(cells: Sequence[str]) -> str:
        return "  " + " | ".join(cell.ljust(widths[i]) for i, cell in enumerate(cells)).rstrip()

    lines = [_line(headers), "  " + "-+-".join("-" * width for width in widths)]
    lines.extend(_line(row) for row in rows)
    return lines


def render_overdue_table(records: List[OverdueRecord]) -> List[str]:
    """Render overdue students: name, last communication, days overdue, severity."""
    rows = [
        [
            record.name,
            utils.format_date(record.last_comm_date, config.NEVER_CONTACTED_LABEL),
            f"{record.days_overdue} days",
            record.severity,
        ]
        for record in records
    ]
    return _format_table(
        ["Name", "Last communication", "Overdue", "Severity"],
        rows,
        config.EMPTY_OVERDUE_LABEL,
    )


def render_period_table(period_stats: PeriodStats) -> List[str]:
    """Render communication counts for one period."""
    rows = [
        [
            stat.name,
            stat.type,
            str(stat.count),
            utils.format_date(stat.last_comm, config.NEVER_CONTACTED_LABEL),
        ]
        for stat in period_stats.stats
    ]
    return _format_table(
        ["Name", "Type", "Communications", "Last communication"],
        rows,
        config.EMPTY_STATS_LABEL,
    )


def render_dashboard(dashboard: Dashboard) -> str:
    """
    Render the full dashboard as plain text.

    Args:
        dashboard: Computed dashboard

    Returns:
        Report text
    """
    summary = dashboard.summary
    body_lines = [
        "STUDENT COMMUNICATION DASHBOARD",
        "=" * 70,
        f"Total students: {summary.total_students}",
        f"Graduates: {summary.graduates}",
        f"Undergraduates: {summary.undergraduates}",
        f"Overdue students: {summary.overdue}",
        "",
        f"GRADUATES WITHOUT COMMUNICATION FOR OVER {config.GRADUATE_THRESHOLD_DAYS} DAYS",
    ]
    body_lines.extend(render_overdue_table(dashboard.graduate_overdue))
    body_lines.append("")
    body_lines.append(
        f"UNDERGRADUATES WITHOUT COMMUNICATION FOR OVER {config.UNDERGRADUATE_THRESHOLD_DAYS} DAYS"
    )
    body_lines.extend(render_overdue_table(dashboard.undergraduate_overdue))

    for period_stats in dashboard.periods:
        body_lines.append("")
        body_lines.append(f"COMMUNICATIONS - {period_stats.window.description.upper()}")
        body_lines.extend(render_period_table(period_stats))

    body_lines.append("")
    body_lines.append("=" * 70)
    body_lines.append(f"Last update: {dashboard.generated_at.strftime('%Y-%m-%d %H:%M:%S')}")

    return "\n".join(body_lines)


def format_load_alert(errors: Sequence[str]) -> str:
    """
    Build the user-facing alert shown when loading the data failed.

    Args:
        errors: Error messages collected while loading

    Returns:
        Alert text
    """
    lines = [config.LOAD_ALERT_MESSAGE]
    lines.extend(f"  - {error}" for error in errors if error)
    return "\n".join(lines)
