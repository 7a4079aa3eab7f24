"""
Schedule parsing (schedule string -> MeetingInterval list).

Course records carry a compact, human-readable schedule such as:

    MWF 9:00-9:50 AM
    TTh 2:00-3:50 PM

Important rules (DO NOT CHANGE):
- The grammar is fixed and case-sensitive (see SCHEDULE_RE)
- R = Thursday, TTh = Tuesday + Thursday
- A single AM/PM marker applies to BOTH start and end
- Anything that does not match means "meets never": return [] and never raise
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List

from myregistrar.model import DAYS, MeetingInterval


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Grammar
# ---------------------------------------------------------------------------

SCHEDULE_RE = re.compile(r"^(TTh|[MTWRFSU]+) (\d{1,2}):(\d{2})-(\d{1,2}):(\d{2}) (AM|PM)$")

DAY_CODES = {
    "M": "Monday",
    "T": "Tuesday",
    "W": "Wednesday",
    "R": "Thursday",
    "F": "Friday",
    "S": "Saturday",
    "U": "Sunday",
}

CODE_ORDER = "MTWRFSU"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _resolve_days(token: str) -> List[str]:
    """
    Map a day token to weekday names, in order of first appearance.
    """
    if token == "TTh":
        return ["Tuesday", "Thursday"]

    days: List[str] = []
    for letter in token:
        day = DAY_CODES.get(letter)
        if day and day not in days:
            days.append(day)
    return days


def _valid_clock(hour: int, minute: int) -> bool:
    return 1 <= hour <= 12 and 0 <= minute <= 59


def to_minutes(hour: int, minute: int, period: str) -> int:
    """
    12-hour clock to minutes since midnight.

    12 AM -> 0, 12 PM -> 720, any other PM hour adds 12.
    """
    if period == "AM" and hour == 12:
        hour = 0
    elif period == "PM" and hour != 12:
        hour += 12
    return hour * 60 + minute


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_schedule(schedule: str) -> List[MeetingInterval]:
    """
    Parse one schedule string into one MeetingInterval per meeting day.

    Malformed or placeholder schedules ("TBD", "", lowercase days, extra
    whitespace) yield an empty list.
    """
    if not isinstance(schedule, str):
        return []

    match = SCHEDULE_RE.fullmatch(schedule)
    if not match:
        logger.debug("Unparseable schedule %r treated as no meetings", schedule)
        return []

    token, sh, sm, eh, em, period = match.groups()

    if not (_valid_clock(int(sh), int(sm)) and _valid_clock(int(eh), int(em))):
        logger.debug("Schedule %r has an invalid clock time", schedule)
        return []

    start = to_minutes(int(sh), int(sm), period)
    end = to_minutes(int(eh), int(em), period)

    intervals: List[MeetingInterval] = []
    for day in _resolve_days(token):
        try:
            intervals.append(MeetingInterval(day=day, start_minute=start, end_minute=end))
        except ValueError:
            # start not before end, e.g. "M 3:00-2:00 PM"
            logger.debug("Schedule %r has no valid time range", schedule)
            return []
    return intervals


def minutes_to_clock(minute: int) -> str:
    """
    Minutes since midnight -> display string like '9:00 AM' / '12:30 PM'.
    """
    hour, mins = divmod(minute, 60)
    period = "AM" if hour < 12 else "PM"
    display = hour % 12 or 12
    return f"{display}:{mins:02d} {period}"


def format_schedule(days: Iterable[str], start_minute: int, end_minute: int) -> str:
    """
    Build a canonical schedule string from day codes and 24h minutes.

    - days are single-letter codes (M T W R F S U) or weekday names
    - exactly {T, R} is written as 'TTh'
    - the period marker is taken from the END time; a range that crosses
      noon therefore cannot be written exactly (format limitation)

    Returns "" if no valid day is given or start >= end.
    """
    codes: set[str] = set()
    for d in days:
        d = str(d).strip()
        if d in DAY_CODES:
            codes.add(d)
        elif d in DAYS:
            codes.add(CODE_ORDER[DAYS.index(d)])

    if not codes or start_minute >= end_minute:
        return ""

    token = "TTh" if codes == {"T", "R"} else "".join(c for c in CODE_ORDER if c in codes)

    def hm(minute: int) -> str:
        hour, mins = divmod(minute, 60)
        return f"{hour % 12 or 12}:{mins:02d}"

    period = "AM" if end_minute // 60 < 12 else "PM"
    return f"{token} {hm(start_minute)}-{hm(end_minute)} {period}"
