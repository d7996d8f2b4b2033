# team_pulse/utils/week_utils.py
import math
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union


def compute_week_key(value: Optional[Union[date, datetime]] = None) -> str:
    """Maps a calendar date to its ISO-8601 week identifier, e.g. ``2026-W10``.

    Aware datetimes are converted to UTC first; naive datetimes and dates use
    their own calendar day. Defaults to today.

    The year component is the ISO week-year, which differs from the calendar
    year around January 1st (2018-12-31 is ``2019-W01``).
    """
    if value is None:
        value = date.today()
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        value = value.date()

    # Monday=1 .. Sunday=7, then move to the Thursday of the same week
    iso_day = value.isoweekday()
    thursday = value + timedelta(days=4 - iso_day)

    year_start = date(thursday.year, 1, 1)
    days_since_year_start = (thursday - year_start).days
    week_no = math.ceil((days_since_year_start + 1) / 7)
    return f"{thursday.year}-W{week_no:02d}"
