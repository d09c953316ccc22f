"""Data cleaning and normalization for the communication monitor."""
import logging
from typing import List, Sequence, Tuple

import pandas as pd

from comm_monitor.utilities import config

logger = logging.getLogger(__name__)


def normalize_text_series(series: pd.Series) -> pd.Series:
    """
    Normalize a text series by stripping whitespace.

    Args:
        series: Input series

    Returns:
        Normalized series
    """
    return series.apply(lambda value: "" if pd.isna(value) else str(value).strip())


def parse_date_value(value) -> pd.Timestamp:
    """Parse one date; values with a UTC offset are converted to naive local time."""
    stamp = pd.to_datetime(value, errors="coerce")
    if pd.isna(stamp) or stamp.tzinfo is None:
        return stamp
    return pd.Timestamp(stamp.to_pydatetime().astimezone().replace(tzinfo=None))


def ensure_columns(df: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    """Return a copy of df with every column present, missing ones filled with ''."""
    frame = df.copy()
    for column in columns:
        if column not in frame.columns:
            frame[column] = ""
    return frame


def prepare_students(df: pd.DataFrame) -> pd.DataFrame:
    """
    Prepare the student table for joining.

    Args:
        df: Raw student records

    Returns:
        Frame with normalized name and type columns
    """
    frame = ensure_columns(df, config.STUDENT_COLUMNS)
    for column in config.STUDENT_COLUMNS:
        frame[column] = normalize_text_series(frame[column])
    return frame.reset_index(drop=True)


def coerce_communication_dates(df: pd.DataFrame) -> Tuple[pd.DataFrame, List[str]]:
    """
    Convert the date column of communication records to datetimes.

    Rows with dates that cannot be parsed are dropped and reported.

    Args:
        df: Raw communication records

    Returns:
        Tuple of (communications, errors)
    """
    errors: List[str] = []
    frame = ensure_columns(df, config.COMMUNICATION_COLUMNS)
    frame["name"] = normalize_text_series(frame["name"])
    frame["type"] = normalize_text_series(frame["type"])

    frame["date"] = pd.to_datetime(frame["date"].apply(parse_date_value))
    invalid_dates = frame["date"].isna()
    if invalid_dates.any():
        limit = config.MAX_REPORTED_INVALID_ROWS
        sample_indexes = invalid_dates[invalid_dates].index[:limit]
        for idx in sample_indexes:
            errors.append(
                f"File {config.COMMUNICATIONS_FILE} has invalid date in row {idx + 2}"
            )
        if invalid_dates.sum() > limit:
            errors.append(
                f"File {config.COMMUNICATIONS_FILE} has "
                f"{invalid_dates.sum() - limit} more rows with invalid dates"
            )
        logger.warning("Dropped %d communication(s) with invalid dates", int(invalid_dates.sum()))
        frame = frame[~invalid_dates]

    return frame.reset_index(drop=True), errors


def sort_communications(df: pd.DataFrame) -> pd.DataFrame:
    """
    Sort communications newest first.

    The sort is stable, so records sharing a date keep their input order.

    Args:
        df: Communications with a datetime date column

    Returns:
        Sorted dataframe
    """
    if df.empty:
        return df
    return df.sort_values("date", ascending=False, kind="mergesort").reset_index(drop=True)


def prepare_communications(df: pd.DataFrame) -> Tuple[pd.DataFrame, List[str]]:
    """
    Prepare the communication table: coerce dates, then sort newest first.

    Args:
        df: Raw communication records

    Returns:
        Tuple of (communications, errors)
    """
    frame, errors = coerce_communication_dates(df)
    return sort_communications(frame), errors
