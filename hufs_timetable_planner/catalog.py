"""
Course catalog: the bundled baseline plus everything merged in from the provider.

Identity rule: a course code keeps the id it was first given for as long
as the catalog lives. New codes draw ids from a counter owned by
CatalogMerger, seeded above every baseline id.
"""
from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from .config import API_ID_SEED
from .models import Course, CourseRow, Day
from .slots import parse_slots

log = logging.getLogger(__name__)


def load_baseline(path: str | Path | None = None) -> List[Course]:
    """Load baseline courses from JSON (defaults to the bundled data file)."""
    if path is None:
        text = (
            resources.files("hufs_timetable_planner")
            .joinpath("data").joinpath("baseline_courses.json")
            .read_text(encoding="utf-8")
        )
    else:
        text = Path(path).read_text(encoding="utf-8")
    return [Course.from_dict(item) for item in json.loads(text)]


def _grade(value: str) -> int:
    try:
        grade = int(value)
    except (TypeError, ValueError):
        return 0
    return grade if 0 <= grade <= 4 else 0


def course_from_row(row: CourseRow, course_id: int, source_label: str | None) -> Course:
    """Build a Course from a provider row; slots come from time, time_eng, then code."""
    return Course(
        id=course_id,
        code=row.code,
        name=row.name,
        professor=row.professor,
        credit=max(row.credit, 0),
        grade=_grade(row.grade),
        area=row.area,
        slots=parse_slots(row.time or row.time_eng or row.code),
        english=row.is_english,
        remarks=row.remark,
        source_major=source_label,
    )


class CatalogMerger:
    """Merges provider rows into a course list and owns the id counter."""

    def __init__(self, baseline: Iterable[Course] = (), seed: int = API_ID_SEED):
        highest = max((c.id for c in baseline), default=seed - 1)
        self._next_id = max(seed, highest + 1)

    @property
    def next_id(self) -> int:
        return self._next_id

    def _allocate(self) -> int:
        course_id = self._next_id
        self._next_id += 1
        return course_id

    def merge(
        self,
        catalog: Sequence[Course],
        rows: Iterable[CourseRow],
        source_label: str | None,
    ) -> List[Course]:
        """
        Return a new list: catalog entries whose code reappears are replaced
        (same id, fresh fields), unseen codes are appended with new ids.
        Nothing already in the catalog is dropped.
        """
        updated = list(catalog)
        if updated:
            self._next_id = max(self._next_id, max(c.id for c in updated) + 1)
        index_by_code: Dict[str, int] = {c.code: i for i, c in enumerate(updated)}

        added = replaced = 0
        for row in rows:
            i = index_by_code.get(row.code)
            if i is not None:
                updated[i] = course_from_row(row, updated[i].id, source_label)
                replaced += 1
            else:
                index_by_code[row.code] = len(updated)
                updated.append(course_from_row(row, self._allocate(), source_label))
                added += 1

        log.info(
            "Merged rows from %s: %d new, %d updated, %d total",
            source_label or "-", added, replaced, len(updated),
        )
        return updated


class Catalog:
    """
    The running catalog. Until something has been merged the baseline
    courses are the catalog; afterwards the merged courses are.
    """

    def __init__(
        self,
        baseline: Optional[Iterable[Course]] = None,
        merger: Optional[CatalogMerger] = None,
    ):
        self.baseline: List[Course] = list(baseline) if baseline is not None else []
        self.merger = merger if merger is not None else CatalogMerger(self.baseline)
        self.fetched: List[Course] = []
        self._generation = 0

    @property
    def courses(self) -> List[Course]:
        return self.fetched if self.fetched else self.baseline

    def __len__(self) -> int:
        return len(self.courses)

    def get(self, course_id: int) -> Course | None:
        for course in self.courses:
            if course.id == course_id:
                return course
        return None

    def by_ids(self, ids: Iterable[int]) -> List[Course]:
        """Courses for the given ids in the order given; unknown ids are skipped."""
        by_id = {c.id: c for c in self.courses}
        return [by_id[i] for i in ids if i in by_id]

    def visible(self, major: str | None = None) -> List[Course]:
        """Courses to list for the current major: untagged ones plus those fetched for it."""
        if not self.fetched:
            return list(self.baseline)
        return [c for c in self.fetched if not c.source_major or c.source_major == major]

    # ── fetch generations ──────────────────────────────────────────

    def begin_fetch(self) -> int:
        """Issue a token for a new fetch; batches carrying an older token are stale."""
        self._generation += 1
        return self._generation

    def is_stale(self, token: int | None) -> bool:
        return token is not None and token < self._generation

    def accept(
        self,
        rows: Iterable[CourseRow],
        source_label: str | None,
        token: int | None = None,
    ) -> bool:
        """Merge a batch. Returns False (and merges nothing) when the batch is stale."""
        if self.is_stale(token):
            log.info("Discarding stale batch for %s (token %s < %s)", source_label, token, self._generation)
            return False
        self.fetched = self.merger.merge(self.fetched, rows, source_label)
        return True


def filter_courses(
    courses: Iterable[Course],
    grade: int | None = None,
    day: Day | None = None,
    search: str = "",
) -> List[Course]:
    """Filter by grade, by meeting on a day, and by a search term over name/professor/code."""
    term = (search or "").strip().lower()
    out = []
    for course in courses:
        if grade is not None and course.grade != grade:
            continue
        if day is not None and day not in course.days:
            continue
        if term and not any(
            term in value.lower() for value in (course.name, course.professor, course.code)
        ):
            continue
        out.append(course)
    return out
