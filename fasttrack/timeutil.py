# -*- coding: utf-8 -*-
"""Time helpers — epoch milliseconds <-> device-local dates and strings.

All conversions use the device's current local time zone; nothing here is
time-zone aware beyond that.
"""

from __future__ import annotations

import time
from datetime import date, datetime, timedelta
from typing import Optional

MS_PER_MINUTE = 60_000
MS_PER_HOUR = 3_600_000
MS_PER_DAY = 86_400_000

# The edit boundary speaks minute precision; seconds are tolerated on input.
EDIT_FORMAT = "%Y-%m-%dT%H:%M"
_EDIT_INPUT_FORMATS = (EDIT_FORMAT, "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%d %H:%M:%S")


def now_ms() -> int:
    return int(time.time() * 1000)


def to_datetime(ms: float) -> datetime:
    return datetime.fromtimestamp(ms / 1000)


def to_local_iso(ms: float) -> str:
    """Render an instant as the editable ``YYYY-MM-DDTHH:mm`` local string."""
    return to_datetime(ms).strftime(EDIT_FORMAT)


def from_local_iso(text: Optional[str]) -> Optional[int]:
    """Parse an editable local-time string back to epoch ms.

    Returns None for blank or unparseable input so callers can keep their
    commit action disabled instead of storing a bogus instant.
    """
    if not text:
        return None
    value = str(text).strip()
    for fmt in _EDIT_INPUT_FORMATS:
        try:
            dt = datetime.strptime(value, fmt)
        except ValueError:
            continue
        return int(round(dt.timestamp() * 1000))
    return None


def local_date(ms: float) -> date:
    return to_datetime(ms).date()


def same_local_day(ms: float, now: float) -> bool:
    return local_date(ms) == local_date(now)


def week_start(now: float) -> date:
    """Sunday on or before the local date of ``now``."""
    today = local_date(now)
    # date.weekday(): Monday=0 ... Sunday=6
    return today - timedelta(days=(today.weekday() + 1) % 7)


def day_index(ms: float, start: date) -> int:
    """Calendar days between ``start`` and the local date of ``ms``."""
    return (local_date(ms) - start).days


def today_index(now: float) -> int:
    return day_index(now, week_start(now))


# ---- display ----

def fmt_duration(ms: float) -> str:
    """HH:MM:SS with unbounded hours (a 30h fast renders as 30:00:00)."""
    ms = max(0, int(ms))
    hours = ms // MS_PER_HOUR
    minutes = (ms % MS_PER_HOUR) // MS_PER_MINUTE
    seconds = (ms % MS_PER_MINUTE) // 1000
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def fmt_date(ms: float) -> str:
    d = to_datetime(ms)
    return f"{d:%b} {d.day}, {d.year}"


def fmt_time(ms: float) -> str:
    return to_datetime(ms).strftime("%I:%M %p")


def fmt_weekday(ms: float) -> str:
    d = to_datetime(ms)
    return f"{d:%A}, {d:%b} {d.day}"
