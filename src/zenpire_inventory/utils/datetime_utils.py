"""Datetime utilities for timezone-aware UTC timestamps.

Usage:
    from zenpire_inventory.utils.datetime_utils import utc_now

    timestamp = utc_now()

    # For SQLAlchemy Column defaults
    created_at = Column(DateTime, default=utc_now)
"""

import re
from datetime import datetime, timezone
from typing import Optional

# Fractional seconds; Python 3.10 fromisoformat only takes 3 or 6 digits
_FRACTION_PATTERN = re.compile(r"\.(\d+)")


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def _pad_fraction(match: "re.Match[str]") -> str:
    digits = match.group(1)[:6]
    return "." + digits.ljust(6, "0")


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp as written by exports.

    Accepts the trailing "Z" form produced by other exporters and fractional
    seconds of any precision (truncated to microseconds).

    Args:
        value: ISO string or None

    Returns:
        datetime (timezone-aware if the string carried an offset) or None
    """
    if value is None:
        return None
    normalized = _FRACTION_PATTERN.sub(_pad_fraction, value.replace("Z", "+00:00"), count=1)
    return datetime.fromisoformat(normalized)
