"""
Fixed settings shared by the planner modules.
"""
from __future__ import annotations

import os
from pathlib import Path

from .models import Day

# Weekdays shown on the grid, in display order
DAY_ORDER: tuple[Day, ...] = (Day.MON, Day.TUE, Day.WED, Day.THU, Day.FRI)

# Period number -> clock range
PERIODS: dict[int, str] = {
    1: "09:00~10:00",
    2: "10:00~11:00",
    3: "11:00~12:00",
    4: "12:00~13:00",
    5: "13:00~14:00",
    6: "14:00~15:00",
    7: "15:00~16:00",
    8: "16:00~17:00",
    9: "17:00~18:00",
    10: "18:00~19:00",
    11: "19:00~20:00",
    12: "20:00~21:00",
}
PERIOD_COUNT = len(PERIODS)

# Ids handed out to fetched courses start here (baseline ids stay below)
API_ID_SEED = 100000

# Section kind of a major-list query ("2"/"3" list liberal-arts and basic fields)
SECTION_MAJOR = "1"

# Major picked by default when a major list arrives
PREFERRED_MAJOR = "ATJA1"

STORAGE_KEY = "saved-timetables"
DEFAULT_PLAN_NAME = "Timetable {n}"

# Where JsonFileStore keeps its files when no directory is given
HOME_ENV = "HUFS_TIMETABLE_HOME"
DEFAULT_HOME = Path.home() / ".hufs_timetable"

# User-facing messages
MSG_NO_COURSES = "No courses found."
MSG_NO_MAJORS = "No majors or fields found."
MSG_FETCH_FAILED = "Could not load courses."


def store_dir() -> Path:
    """Directory for file-backed storage: $HUFS_TIMETABLE_HOME or ~/.hufs_timetable."""
    env = os.environ.get(HOME_ENV, "").strip()
    return Path(env).expanduser() if env else DEFAULT_HOME
