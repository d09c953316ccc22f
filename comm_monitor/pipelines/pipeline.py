"""Main orchestration pipeline for the communication dashboard."""
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

import httpx

from comm_monitor.utilities import config
from comm_monitor.utilities.models import Dashboard, DashboardData, PipelineResult
from comm_monitor.extractors import csv_reader
from comm_monitor.transformers import overdue_service, period_service, report_service

logger = logging.getLogger(__name__)


def build_dashboard(
    data: DashboardData,
    periods: Sequence[str] = (config.PERIOD_TOTAL,),
    now: Optional[datetime] = None,
) -> Dashboard:
    """
    Compute every dashboard figure from loaded data.

    Args:
        data: Loaded students and communications
        periods: Period keys to compute communication counts for
        now: Reference time shared by all computations (defaults to the wall clock)

    Returns:
        Dashboard ready for rendering
    """
    now = now or datetime.now()

    records = overdue_service.compute_overdue_records(data.students, data.communications, now)

    return Dashboard(
        summary=overdue_service.summarize(data.students, records),
        generated_at=now,
        records=records,
        graduate_overdue=overdue_service.filter_overdue(
            records, config.GRADUATE_TYPE, config.GRADUATE_THRESHOLD_DAYS
        ),
        undergraduate_overdue=overdue_service.filter_overdue(
            records, config.UNDERGRADUATE_TYPE, config.UNDERGRADUATE_THRESHOLD_DAYS
        ),
        periods=[
            period_service.compute_period_stats(data.students, data.communications, period, now)
            for period in periods
        ],
    )


def run_dashboard(
    source: Optional[str] = None,
    periods: Optional[Sequence[str]] = None,
    output_path: Optional[str | Path] = None,
    client: Optional[httpx.Client] = None,
    now: Optional[datetime] = None,
) -> PipelineResult:
    """
    Run the complete dashboard pipeline.

    Loading failures are logged together with the user alert; the dashboard
    is still computed from whatever data was loaded.

    Args:
        source: Local directory or http(s) base URL (uses config default if not provided)
        periods: Period keys to report (defaults to 'total')
        output_path: If given, the report is also written to this file
        client: HTTP client for remote sources
        now: Reference time (defaults to the wall clock)

    Returns:
        PipelineResult with the report, loading errors and the alert text
        when loading failed
    """
    source = source or config.DATA_SOURCE
    periods = list(periods) if periods else [config.PERIOD_TOTAL]

    logger.info("=" * 70)
    logger.info("STARTING DASHBOARD PIPELINE")
    logger.info("Data source: %s", source)
    logger.info("Periods: %s", ", ".join(periods))
    logger.info("=" * 70)

    start_time = time.time()

    data = csv_reader.load_dashboard_data(source, client)

    alert = None
    if data.load_error:
        alert = report_service.format_load_alert([data.load_error])
        logger.error("=" * 70)
        logger.error("✗ DATA LOADING FAILED")
        logger.error(alert)
        logger.error("=" * 70)

    if data.errors:
        logger.warning("⚠ LOADING COMPLETED WITH %d ERROR(S):", len(data.errors))
        for i, error in enumerate(data.errors[:10], 1):
            logger.warning("  %d. %s", i, error)
        if len(data.errors) > 10:
            logger.warning("  ... and %d more errors", len(data.errors) - 10)

    dashboard = build_dashboard(data, periods, now)
    report = report_service.render_dashboard(dashboard)

    logger.info(
        "Dashboard computed: %d students, %d overdue",
        dashboard.summary.total_students,
        dashboard.summary.overdue,
    )

    if output_path:
        path = Path(output_path)
        path.write_text(report + "\n", encoding="utf-8")
        logger.info("Report written to %s", path)

    elapsed_time = time.time() - start_time
    logger.info("=" * 70)
    logger.info("PIPELINE COMPLETE - Total time: %.2f seconds", elapsed_time)

    return PipelineResult(report=report, errors=list(data.errors), alert=alert)
