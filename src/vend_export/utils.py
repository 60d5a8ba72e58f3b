"""Shared utilities for the sales export.

This module provides the small parsing and formatting helpers used across
the package:

- Date parsing: validation of ``YYYY-MM-DD`` command-line dates
- Timestamp conversion: Vend sale timestamps to local date/time strings
- Number formatting: shortest round-trip decimal strings for report cells

Examples:
    >>> from vend_export.utils import format_amount, parse_date
    >>> parse_date("2018-03-01")
    datetime.date(2018, 3, 1)
    >>> format_amount(115.0)
    '115'

"""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import numpy as np
import pandas as pd

from vend_export.exceptions import ConfigError

DATE_LAYOUT = "%Y-%m-%d"


def parse_date(s: str) -> date:
    """Parse a date string in YYYY-MM-DD format.

    Args:
        s: Date string in ISO format (YYYY-MM-DD).

    Returns:
        Parsed date object.

    Raises:
        ValueError: If the date string is not in YYYY-MM-DD format. Months and
            days must be zero-padded: "2018-3-1" is rejected.

    Examples:
        >>> parse_date("2023-01-15")
        datetime.date(2023, 1, 15)

    """
    parsed = datetime.strptime(s, DATE_LAYOUT).date()
    if parsed.strftime(DATE_LAYOUT) != s:
        raise ValueError(f"date {s!r} does not match format YYYY-MM-DD")
    return parsed


def load_zone(name: str) -> ZoneInfo:
    """Resolve a zoneinfo identifier such as ``Pacific/Auckland``.

    Raises:
        ConfigError: If the name is not a known timezone.

    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"Unknown timezone {name!r}: {e}") from e


def parse_vend_datetime(value: str, timezone: str | None = None) -> datetime:
    """Convert a Vend sale timestamp into an aware datetime in ``timezone``.

    Vend returns RFC 3339 timestamps (``2018-03-01T02:04:05Z``, with an
    offset or fractional seconds) on API 2.0 and ``2018-03-01 02:04:05``
    on older endpoints. Values without an offset are UTC.

    Args:
        value: Timestamp string as returned by the API.
        timezone: Target zoneinfo identifier. None or empty converts to
            the local system timezone.

    Returns:
        Timezone-aware datetime in the target zone.

    Raises:
        ValueError: If the timestamp cannot be parsed.
        ConfigError: If the timezone name is unknown.

    """
    ts = pd.Timestamp(value.strip())
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    if timezone:
        return ts.tz_convert(load_zone(timezone)).to_pydatetime()
    return ts.to_pydatetime().astimezone()


def split_date_time(value: str | None, timezone: str | None = None) -> tuple[str, str]:
    """Return the local ``(YYYY-MM-DD, HH:MM:SS)`` pair for a sale timestamp.

    Sub-second precision is truncated. A missing timestamp gives two
    blank strings.
    """
    if not value:
        return "", ""
    local = parse_vend_datetime(value, timezone)
    return local.strftime(DATE_LAYOUT), local.strftime("%H:%M:%S")


def format_amount(value: float | None) -> str:
    """Format a number as its shortest round-trip decimal string.

    Never uses scientific notation, and drops a trailing ``.0``. None is
    treated as zero.

    Examples:
        >>> format_amount(22.0)
        '22'
        >>> format_amount(0.1 + 0.2)
        '0.30000000000000004'
        >>> format_amount(1e21)
        '1000000000000000000000'

    """
    return np.format_float_positional(float(value or 0.0), trim="-")
