"""
Time conflicts between courses.

Two courses conflict when they share a (day, period) cell. Courses without
slots never conflict with anything.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, Optional, Set, Tuple

from .models import Course, Day


def overlap(a: Course, b: Course) -> bool:
    """True if a and b meet on the same day in at least one common period."""
    for slot_a in a.slots:
        for slot_b in b.slots:
            if slot_a.day == slot_b.day and set(slot_a.periods) & set(slot_b.periods):
                return True
    return False


def grid_conflicts(selected: Iterable[Course]) -> Set[int]:
    """
    Ids of selected courses that share a cell with another selected course.

    Cells are bucketed by course id, so a course repeated in the selection
    or carrying a period twice never conflicts with itself. Cells are not
    bounded by the grid size: two courses sharing a period past the last
    grid row still conflict even though build_grid does not draw them.
    """
    buckets: Dict[Tuple[Day, int], Set[int]] = defaultdict(set)
    for course in selected:
        for cell in course.cells():
            buckets[cell].add(course.id)

    conflicted: Set[int] = set()
    for ids in buckets.values():
        if len(ids) > 1:
            conflicted.update(ids)
    return conflicted


def conflicts_with_selection(
    candidate: Course,
    selected: Iterable[Course],
    conflicted: Optional[Set[int]] = None,
) -> bool:
    """
    Would the candidate clash with the current selection?

    A candidate that is already selected is answered from the grid-relative
    conflict set (pass it in to avoid recomputing), so it is never compared
    with itself.
    """
    selected = list(selected)
    if any(course.id == candidate.id for course in selected):
        if conflicted is None:
            conflicted = grid_conflicts(selected)
        return candidate.id in conflicted
    return any(overlap(candidate, course) for course in selected)
