import re
from datetime import datetime
from typing import Optional, Tuple

import pytz

DEADLINE_FORMATS = (
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
)

TIME_RE = re.compile(r"[0-9]{2}:[0-9]{2}(:[0-9]{2}(\.[0-9]{1,6})?)?", re.ASCII)


def now_local(tz=pytz.UTC) -> datetime:
    return datetime.now(tz)


def combine_date_time(date_str: str, time_str: str, tz=pytz.UTC) -> Optional[datetime]:
    """Parse "<date>T<time>" as a local instant; None if it is not a real date/time"""
    if not TIME_RE.fullmatch(time_str or ""):
        return None
    raw = f"{date_str}T{time_str}"
    for fmt in DEADLINE_FORMATS:
        try:
            naive = datetime.strptime(raw, fmt)
        except ValueError:
            continue
        return tz.localize(naive)
    return None


def split_deadline(deadline: datetime, tz=pytz.UTC) -> Tuple[str, str]:
    """Local calendar date (YYYY-MM-DD) and time of day (HH:MM) of a deadline"""
    if deadline.tzinfo is None:
        deadline = pytz.UTC.localize(deadline)
    local = deadline.astimezone(tz)
    return local.strftime("%Y-%m-%d"), local.strftime("%H:%M")


def format_deadline(deadline: datetime, tz=pytz.UTC, fmt: str = "%d.%m.%Y %H:%M") -> str:
    if deadline.tzinfo is None:
        deadline = pytz.UTC.localize(deadline)
    return deadline.astimezone(tz).strftime(fmt)
