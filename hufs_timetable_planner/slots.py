"""
Parse provider time descriptions ("월 1 2 화 3", "(Mon. 5 6) Wed. 5")
into day/period slots, and format slots back for display.
"""
from __future__ import annotations

import re
from typing import Dict, List, Tuple

from .models import Course, Day, TimeSlot, union_slots


# ──────────────────────────────────────────────────────────────────
#  Day tokens
# ──────────────────────────────────────────────────────────────────

_DAY_TOKENS: Dict[str, Day] = {
    "월": Day.MON,
    "화": Day.TUE,
    "수": Day.WED,
    "목": Day.THU,
    "금": Day.FRI,
    "Mon": Day.MON,
    "Mon.": Day.MON,
    "Tue": Day.TUE,
    "Tue.": Day.TUE,
    "Wed": Day.WED,
    "Wed.": Day.WED,
    "Thu": Day.THU,
    "Thu.": Day.THU,
    "Thur": Day.THU,
    "Thur.": Day.THU,
    "Fri": Day.FRI,
    "Fri.": Day.FRI,
}

_PERIOD_RE = re.compile(r"[0-9]+")


def _normalize_day(token: str) -> Day | None:
    return _DAY_TOKENS.get(token)


# ──────────────────────────────────────────────────────────────────
#  Parsing
# ──────────────────────────────────────────────────────────────────

def parse_slots(raw: str | None) -> Tuple[TimeSlot, ...]:
    """
    Turn a time description into slots, one per day, Mon..Fri.

    Day tokens move a cursor; integer tokens after a day are that day's
    periods. Everything else is noise. Never raises: text with no
    recognizable day/period pair gives an empty tuple.
    """
    if not raw:
        return ()
    tokens = re.sub(r"[()]", " ", raw).split()

    buckets: Dict[Day, List[int]] = {}
    current: Day | None = None
    for token in tokens:
        day = _normalize_day(token)
        if day is not None:
            current = day
            continue
        if current is not None and _PERIOD_RE.fullmatch(token):
            buckets.setdefault(current, []).append(int(token))

    return union_slots(TimeSlot(day, tuple(periods)) for day, periods in buckets.items())


def format_slots(course: Course) -> str:
    """'Mon 1·2, Tue 3' style summary; '-' for a course without slots."""
    if not course.slots:
        return "-"
    return ", ".join(
        f"{slot.day} {'·'.join(str(p) for p in slot.periods)}" for slot in course.slots
    )
