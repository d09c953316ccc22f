"""Main entry point for the student communication dashboard."""
import argparse
import logging
import sys
from datetime import date, datetime

from comm_monitor.utilities import config
from comm_monitor.pipelines import pipeline

logger = logging.getLogger(__name__)


def parse_date(date_str: str) -> date:
    """Parse date string in YYYY-MM-DD format."""
    try:
        return date.fromisoformat(date_str)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date format: {date_str}. Use YYYY-MM-DD")


def main(argv=None):
    """Main entry point with CLI argument parsing."""
    parser = argparse.ArgumentParser(
        description="Report students who are overdue for a communication",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Report from the default data folder, all-time counts (default)
  python main.py

  # Counts for the last month only
  python main.py --period month

  # Every period, data served over HTTP, report saved to a file
  python main.py --data-source https://example.org/data --all-periods --output report.txt
        """,
    )

    parser.add_argument(
        "--data-source",
        help=f"Folder or http(s) base URL holding {config.STUDENTS_FILE} and "
        f"{config.COMMUNICATIONS_FILE} (default: {config.DATA_SOURCE})",
    )

    parser.add_argument(
        "--period",
        choices=config.PERIODS,
        default=config.PERIOD_TOTAL,
        help="Window for communication counts (default: total)",
    )

    parser.add_argument(
        "--all-periods",
        action="store_true",
        help="Report communication counts for every period",
    )

    parser.add_argument(
        "--as-of",
        type=parse_date,
        help="Compute elapsed days as of midnight on this date (YYYY-MM-DD, default: now)",
    )

    parser.add_argument(
        "--output",
        help="Also write the report to this file",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set logging level (default: INFO)",
    )

    args = parser.parse_args(argv)

    log_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format=log_format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    periods = config.PERIODS if args.all_periods else [args.period]

    try:
        result = pipeline.run_dashboard(
            source=args.data_source,
            periods=periods,
            output_path=args.output,
            now=datetime.combine(args.as_of, datetime.min.time()) if args.as_of else None,
        )
    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user")
        return 130
    except Exception as exc:
        logger.error("=" * 70)
        logger.error("PIPELINE EXECUTION FAILED")
        logger.error("=" * 70)
        logger.exception("Fatal error: %s", exc)
        return 1

    print(result.report)

    if result.alert:
        print(result.alert, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
