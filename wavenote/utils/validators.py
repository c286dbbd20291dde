import re
from datetime import datetime
from typing import Optional

import pytz

from wavenote.utils.datetime_utils import combine_date_time, now_local

DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}", re.ASCII)
EMAIL_RE = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")

INVALID_DATE_MESSAGE = "Please enter a valid date."
INVALID_DATETIME_MESSAGE = "The date and time are not valid."
PAST_DATETIME_MESSAGE = "The date and time cannot be in the past."
MISSING_FIELDS_MESSAGE = "Please fill in the title and description."
MISSING_CREDENTIALS_MESSAGE = "Please fill in both fields"


def is_valid_date(date_str: str) -> bool:
    return bool(DATE_RE.fullmatch(date_str or ""))


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.fullmatch(email or ""))


def validate_deadline(date_str: str, time_str: str, now: Optional[datetime] = None, tz=pytz.UTC) -> str:
    """
    Check a deadline entered as separate date and time strings.

    Returns the error message of the first failing rule, or "" when the
    deadline is acceptable.
    """
    if not is_valid_date(date_str):
        return INVALID_DATE_MESSAGE

    deadline = combine_date_time(date_str, time_str, tz)
    if deadline is None:
        return INVALID_DATETIME_MESSAGE

    if now is None:
        now = now_local(tz)
    if deadline < now:
        return PAST_DATETIME_MESSAGE

    return ""


def validate_task_fields(title: str, description: str) -> str:
    if not title or not description:
        return MISSING_FIELDS_MESSAGE
    return ""
