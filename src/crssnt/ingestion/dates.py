"""Best-effort parsing of heterogeneous date strings."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

_FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def _as_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _looks_like_date(text: str) -> bool:
    """Gate for the permissive parser.

    Bare words ("May"), bare numbers ("42") and URLs can slip through
    dateutil but are never dates in a spreadsheet cell.
    """
    if "://" in text or text.isdigit():
        return False
    return any(c.isdigit() for c in text)


def parse_date(value: object) -> datetime | None:
    """Parse *value* into a timezone-aware UTC datetime, or return None.

    Tries, in order: ISO 8601, RFC 822 (``Wed, 02 Apr 2025 18:30:00 GMT``),
    then a permissive generic parse that handles locale strings such as
    ``04/01/2025`` (month first). Strings that leave any of year, month or
    day to be guessed (``4.99``, ``10:30``) return None. Never raises.
    """
    if isinstance(value, datetime):
        return _as_utc(value)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None

    try:
        return _as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass

    try:
        return _as_utc(parsedate_to_datetime(text))
    except (TypeError, ValueError, IndexError):
        pass

    if not _looks_like_date(text):
        return None
    try:
        first, second = (date_parser.parse(text, default=d) for d in _FILL_DEFAULTS)
    except (date_parser.ParserError, ValueError, OverflowError):
        logger.debug("Unparseable date string: %r", text)
        return None
    # dateutil fills missing fields from the default, so a partial date
    # ("4.99", "10:30") comes out differently for each one.
    if first != second:
        logger.debug("Incomplete date string: %r", text)
        return None
    return _as_utc(first)
