"""CSV reading and loading for the communication monitor."""
import logging
from pathlib import Path
from typing import Dict, List, Optional

import httpx
import pandas as pd

from comm_monitor.utilities import config
from comm_monitor.utilities.models import DashboardData
from comm_monitor.transformers import data_processor

logger = logging.getLogger(__name__)


class DataLoadError(Exception):
    """Raised when a CSV resource exists but cannot be read."""

    pass


def parse_csv(text: str) -> List[Dict[str, str]]:
    """
    Parse comma-separated text into records keyed by column name.

    Known Chinese header labels are mapped to fixed field names, other headers
    are kept verbatim. Quoting and escaping are not supported.

    Args:
        text: Raw CSV text with a header line

    Returns:
        List of records, empty for empty input
    """
    lines = text.strip().split("\n")
    if not lines[0].strip():
        return []

    headers = [
        config.HEADER_MAP.get(header, header)
        for header in (label.strip() for label in lines[0].split(","))
    ]

    records: List[Dict[str, str]] = []
    for line in lines[1:]:
        if not line.strip():
            continue
        values = [value.strip() for value in line.split(",")]
        record: Dict[str, str] = {}
        for index, header in enumerate(headers):
            record[header] = values[index] if index < len(values) else ""
        records.append(record)

    return records


def is_remote_source(source: str) -> bool:
    """Return True when the data source is an http(s) base URL."""
    return source.lower().startswith(("http://", "https://"))


def create_http_client() -> httpx.Client:
    """Create the HTTP client used to fetch remote CSV files."""
    return httpx.Client(
        follow_redirects=True,
        timeout=config.HTTP_TIMEOUT,
        headers={
            "User-Agent": config.HTTP_USER_AGENT,
            "Accept": "text/csv, text/plain",
        },
    )


def _fetch_remote_text(url: str, client: httpx.Client) -> Optional[str]:
    """Fetch a remote CSV file; None when the server reports it missing."""
    try:
        response = client.get(url)
    except httpx.HTTPError as exc:
        raise DataLoadError(f"Request to {url} failed: {exc}") from exc

    if response.status_code == 404:
        logger.warning("CSV file %s not found; treating as empty", url)
        return None

    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DataLoadError(f"HTTP error! status: {response.status_code} ({url})") from exc

    return response.text


def _read_local_text(path: Path) -> Optional[str]:
    """Read a local CSV file; None when it does not exist."""
    if not path.exists():
        logger.warning("CSV file %s not found; treating as empty", path)
        return None

    try:
        return path.read_text(encoding=config.FILE_ENCODING)
    except (OSError, UnicodeDecodeError) as exc:
        raise DataLoadError(f"File {path} could not be read: {exc}") from exc


def fetch_csv_text(
    source: str,
    filename: str,
    client: Optional[httpx.Client] = None,
) -> Optional[str]:
    """
    Fetch the raw text of one CSV file from a directory or base URL.

    Args:
        source: Local directory or http(s) base URL
        filename: CSV file name within the source
        client: HTTP client for remote sources (created if not provided)

    Returns:
        File text, or None when the file is missing

    Raises:
        DataLoadError: If the file exists but cannot be fetched or read
    """
    if is_remote_source(source):
        url = f"{source.rstrip('/')}/{filename}"
        if client is None:
            with create_http_client() as owned_client:
                return _fetch_remote_text(url, owned_client)
        return _fetch_remote_text(url, client)
    return _read_local_text(Path(source) / filename)


def load_csv(
    source: str,
    filename: str,
    client: Optional[httpx.Client] = None,
) -> List[Dict[str, str]]:
    """
    Load and parse one CSV file; empty when the file is missing.

    Raises:
        DataLoadError: If the file exists but cannot be fetched or read
    """
    text = fetch_csv_text(source, filename, client)
    if text is None:
        return []

    records = parse_csv(text)
    logger.debug("Parsed %d records from %s", len(records), filename)
    return records


def load_dashboard_data(
    source: Optional[str] = None,
    client: Optional[httpx.Client] = None,
) -> DashboardData:
    """
    Load students and communications from the configured data source.

    Files are loaded one after the other. A failure aborts the remaining
    loads; whatever was loaded before it is kept and the failure is recorded
    in the returned errors.

    Args:
        source: Local directory or http(s) base URL (uses config default if not provided)
        client: HTTP client for remote sources

    Returns:
        DashboardData with loaded frames and errors
    """
    source = source or config.DATA_SOURCE
    data = DashboardData(
        students=data_processor.prepare_students(pd.DataFrame()),
        communications=data_processor.prepare_communications(pd.DataFrame())[0],
    )

    try:
        text = fetch_csv_text(source, config.STUDENTS_FILE, client)
        if text is not None:
            data.students = data_processor.prepare_students(pd.DataFrame(parse_csv(text)))
            data.files_loaded += 1

        text = fetch_csv_text(source, config.COMMUNICATIONS_FILE, client)
        if text is not None:
            data.communications, date_errors = data_processor.prepare_communications(
                pd.DataFrame(parse_csv(text))
            )
            data.errors.extend(date_errors)
            data.files_loaded += 1
    except DataLoadError as exc:
        logger.error("Failed to load data: %s", exc)
        data.load_error = str(exc)
        data.errors.append(str(exc))

    logger.info(
        "Loaded %d files from %s: %d students, %d communications",
        data.files_loaded,
        source,
        len(data.students),
        len(data.communications),
    )

    return data
