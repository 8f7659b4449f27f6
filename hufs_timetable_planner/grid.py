"""
Lay selected courses out on the weekday × period grid.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Set

from .config import DAY_ORDER, PERIOD_COUNT
from .conflicts import grid_conflicts
from .models import Course, Day

Grid = Dict[Day, Dict[int, List[Course]]]


def build_grid(
    selected: Iterable[Course],
    days: Sequence[Day] = DAY_ORDER,
    period_count: int = PERIOD_COUNT,
) -> Grid:
    """
    grid[day][period] -> courses meeting there, in selection order.

    Every day in `days` and every period 1..period_count has an entry
    (empty list when free). Periods or days outside the grid are dropped.
    """
    if period_count < 0:
        raise ValueError(f"period_count must be non-negative, got {period_count}")
    grid: Grid = {day: {p: [] for p in range(1, period_count + 1)} for day in days}

    seen: Set[int] = set()
    for course in selected:
        if course.id in seen:
            continue
        seen.add(course.id)
        for slot in course.slots:
            cells = grid.get(slot.day)
            if cells is None:
                continue
            for period in slot.periods:
                if period in cells:
                    cells[period].append(course)
    return grid


@dataclass
class Timetable:
    grid: Grid
    conflicts: Set[int] = field(default_factory=set)

    def cell(self, day: Day, period: int) -> List[Course]:
        return self.grid[day][period]

    def is_conflicted(self, course_id: int) -> bool:
        return course_id in self.conflicts


def build_timetable(
    selected: Iterable[Course],
    days: Sequence[Day] = DAY_ORDER,
    period_count: int = PERIOD_COUNT,
) -> Timetable:
    """Grid plus conflicted ids, both rebuilt from scratch."""
    selected = list(selected)
    return Timetable(
        grid=build_grid(selected, days, period_count),
        conflicts=grid_conflicts(selected),
    )


def total_credits(selected: Iterable[Course]) -> int:
    return sum(course.credit for course in selected)
