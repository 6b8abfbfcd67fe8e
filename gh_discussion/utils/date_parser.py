"""Date parsing and validation utilities for discussion search."""

from datetime import date, datetime

import typer


def parse_date_input(date_str: str) -> date:
    """Parse various date formats into a calendar date.

    Supports:
    - ISO dates: 2024-01-01, 2024-01-01T10:00:00Z
    - Common formats: January 1, 2024, Jan 1 2024

    Args:
        date_str: Date string to parse

    Returns:
        Parsed date; any time of day is dropped since search ranges are
        whole days

    Raises:
        ValueError: If date format is not recognized
    """
    formats = [
        "%Y-%m-%d",  # 2024-01-01
        "%Y-%m-%dT%H:%M:%SZ",  # 2024-01-01T10:00:00Z
        "%Y-%m-%dT%H:%M:%S",  # 2024-01-01T10:00:00
        "%B %d, %Y",  # January 1, 2024
        "%b %d, %Y",  # Jan 1, 2024
        "%B %d %Y",  # January 1 2024
        "%b %d %Y",  # Jan 1 2024
        "%Y/%m/%d",  # 2024/01/01
        "%m/%d/%Y",  # 01/01/2024
    ]

    value = date_str.strip()
    for fmt in formats:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue

    raise ValueError(
        f"Unable to parse date '{date_str}'. "
        f"Supported formats include: YYYY-MM-DD, YYYY-MM-DDTHH:MM:SSZ, "
        f"'January 1, 2024', 'Jan 1 2024', MM/DD/YYYY"
    )


def validate_date_range(start: date | None, end: date | None) -> None:
    """Validate date range logic.

    A range covering a single day (start == end) is valid.

    Args:
        start: Start date (optional)
        end: End date (optional)

    Raises:
        ValueError: If start falls after end
    """
    if start is None or end is None:
        _warn_if_future(start or end)
        return

    if start > end:
        raise ValueError(
            f"--from date ({format_datetime_for_github(start)}) must not be after "
            f"--to date ({format_datetime_for_github(end)})"
        )

    _warn_if_future(start)


def _warn_if_future(value: date | None) -> None:
    if value is not None and value > date.today():
        typer.echo(
            f"Warning: date {format_datetime_for_github(value)} is in the future",
            err=True,
        )


def parse_date_range(
    created_from: str | None, created_to: str | None
) -> tuple[date | None, date | None]:
    """Parse and validate the ``--from``/``--to`` pair of the search command.

    Raises:
        ValueError: If either date is malformed or the range is inverted
    """
    from_date = None
    to_date = None

    if created_from:
        try:
            from_date = parse_date_input(created_from)
        except ValueError as e:
            raise ValueError(f"Invalid --from date: {e}")

    if created_to:
        try:
            to_date = parse_date_input(created_to)
        except ValueError as e:
            raise ValueError(f"Invalid --to date: {e}")

    validate_date_range(from_date, to_date)
    return from_date, to_date


def format_datetime_for_github(dt: date) -> str:
    """Format a date for GitHub search qualifiers (``YYYY-MM-DD``)."""
    return dt.strftime("%Y-%m-%d")
