"""Chronological ordering of posts by their free-form date strings."""

import logging
import time
from datetime import date

from .models import Dated, Undated

logger = logging.getLogger(__name__)

# e.g. "Monday 01 January 2024"
DEFAULT_DATE_FORMATS = ("%A %d %B %Y",)

UNDATED_FIRST = "first"
UNDATED_LAST = "last"
UNDATED_POSITIONS = (UNDATED_FIRST, UNDATED_LAST)


def _parse_with_format(text, fmt):
    parsed = time.strptime(text, fmt)
    day = date(parsed.tm_year, parsed.tm_mon, parsed.tm_mday)
    # strptime keeps the weekday it read; it must agree with the calendar
    if ("%A" in fmt or "%a" in fmt) and parsed.tm_wday != day.weekday():
        raise ValueError(f"weekday does not match {day.isoformat()}")
    return day


def parse_post_date(text, formats=DEFAULT_DATE_FORMATS):
    """Parse a post date into ``Dated`` or ``Undated``.

    Each format is tried in order. Anything that matches none of them,
    including non-string values, is ``Undated``.
    """
    if not isinstance(text, str):
        return Undated(raw=str(text))
    cleaned = text.strip()
    for fmt in formats:
        try:
            return Dated(value=_parse_with_format(cleaned, fmt))
        except ValueError:
            continue
    return Undated(raw=text)


def date_sort_key(post_date, undated=UNDATED_FIRST):
    """Comparable key for a ``Dated``/``Undated`` value.

    Undated values share one rank, placed before or after every dated
    value depending on ``undated``; ``sorted`` keeps their input order.
    """
    if undated not in UNDATED_POSITIONS:
        raise ValueError(f"undated must be one of {UNDATED_POSITIONS}, got {undated!r}")
    if isinstance(post_date, Dated):
        return (1, post_date.value)
    rank = 0 if undated == UNDATED_FIRST else 2
    return (rank, date.min)


def sort_posts(posts, formats=DEFAULT_DATE_FORMATS, undated=UNDATED_FIRST):
    """Return a new list of posts ordered ascending by date."""
    keyed = []
    for post in posts:
        post_date = parse_post_date(post.date, formats)
        if isinstance(post_date, Undated):
            logger.warning("Could not parse date %r for post %r; treating it as undated",
                           post.date, post.title)
        keyed.append((date_sort_key(post_date, undated), post))
    keyed.sort(key=lambda pair: pair[0])
    return [post for _, post in keyed]
