# backend/birdsurvey/services/mapping/datetimes.py
"""Date/time helpers for the survey wire format.

Clients send the survey date and the start/end times as separately edited
strings. Depending on the widget that produced them they arrive either as
en-US short forms (``5/1/2020``, ``2:30 PM``) or as ISO strings
(``2020-05-01T00:00:00``). ``parse_date_time`` takes the date portion from the
date string and the time portion from the time string and recombines them.

Outgoing values use the en-US short forms so the client can display them
as-is.
"""

from __future__ import annotations

import re
from datetime import datetime
from itertools import product
from typing import Optional

_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%Y/%m/%d")
_TIME_FORMATS_24H = ("%H:%M", "%H:%M:%S", "%H:%M:%S.%f")
_TIME_FORMATS_12H = ("%I:%M %p", "%I:%M:%S %p", "%I:%M%p", "%I:%M:%S%p")

# 12時間表記は空白区切り、24時間/ISO表記は T 区切りで結合される
_SPACE_FORMATS = tuple(f"{d} {t}" for d, t in product(_DATE_FORMATS, _TIME_FORMATS_12H))
_ISO_FORMATS = tuple(f"{d}T{t}" for d, t in product(_DATE_FORMATS, _TIME_FORMATS_24H))

_TZ_SUFFIX = re.compile(r"(?:Z|[+-]\d{2}:?\d{2})$", re.IGNORECASE)
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")


def _time_portion(time: str) -> str:
    time_only = time.split("T", 1)[1] if "T" in time else time
    # wall-clock time only; offsets are dropped
    time_only = _TZ_SUFFIX.sub("", time_only.strip())
    return _LONG_FRACTION.sub(r"\1", time_only)


def parse_date_time(date: Optional[str], time: Optional[str]) -> Optional[datetime]:
    """Combine a date string and a time string into one naive datetime.

    Returns ``None`` when the combination can't be parsed; never raises.
    """
    date = date or ""
    time = time or ""

    date_only = (date.split("T", 1)[0] if "T" in date else date).strip()
    time_only = _time_portion(time)

    if "M" in time_only.upper():
        combined, formats = f"{date_only} {time_only}", _SPACE_FORMATS
    else:
        combined, formats = f"{date_only}T{time_only}", _ISO_FORMATS

    for fmt in formats:
        try:
            return datetime.strptime(combined, fmt)
        except ValueError:
            continue
    return None


def format_short_date(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return f"{value.month}/{value.day}/{value.year}"


def format_short_time(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"
