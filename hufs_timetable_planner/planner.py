"""
PlannerSession: the state a timetable UI drives.

It holds the catalog, the current selection (course ids in the order they
were picked) and the saved-plan repository, and turns provider outcomes
into user-facing messages without ever clearing what is already loaded.
"""
from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence, Union

from .catalog import Catalog, filter_courses, load_baseline
from .config import MSG_FETCH_FAILED, MSG_NO_COURSES, MSG_NO_MAJORS, PREFERRED_MAJOR, SECTION_MAJOR
from .conflicts import conflicts_with_selection
from .errors import PlannerError
from .grid import Timetable, build_timetable, total_credits
from .models import Course, CourseRow, Day, FieldOption, MajorOption, SavedPlan
from .plans import MemoryStore, PlanRepository

log = logging.getLogger(__name__)

Option = Union[MajorOption, FieldOption]


class PlannerSession:
    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        plans: Optional[PlanRepository] = None,
        major: str | None = None,
    ):
        self.catalog = catalog if catalog is not None else Catalog(load_baseline())
        self.plans = plans if plans is not None else PlanRepository(MemoryStore())
        self.major = major
        self.majors: List[Option] = []
        self.selected_ids: List[int] = []
        self.message: str | None = None

    # ── selection ──────────────────────────────────────────────────

    def is_selected(self, course_id: int) -> bool:
        return course_id in self.selected_ids

    def select(self, course_id: int) -> None:
        if course_id not in self.selected_ids:
            self.selected_ids.append(course_id)

    def deselect(self, course_id: int) -> None:
        self.selected_ids = [i for i in self.selected_ids if i != course_id]

    def toggle(self, course_id: int) -> bool:
        """Flip membership; returns True if the course is now selected."""
        if self.is_selected(course_id):
            self.deselect(course_id)
            return False
        self.select(course_id)
        return True

    def clear(self) -> None:
        self.selected_ids = []

    def selected_courses(self) -> List[Course]:
        """Selected courses still present in the catalog (unknown ids stay selected but inert)."""
        return self.catalog.by_ids(self.selected_ids)

    def timetable(self) -> Timetable:
        return build_timetable(self.selected_courses())

    def conflicts_with_selection(self, course: Course, timetable: Timetable | None = None) -> bool:
        selected = self.selected_courses()
        conflicted = timetable.conflicts if timetable is not None else None
        return conflicts_with_selection(course, selected, conflicted)

    def total_credits(self) -> int:
        return total_credits(self.selected_courses())

    def visible_courses(
        self,
        grade: int | None = None,
        day: Day | None = None,
        search: str = "",
    ) -> List[Course]:
        return filter_courses(self.catalog.visible(self.major), grade=grade, day=day, search=search)

    # ── catalog loading ────────────────────────────────────────────

    def begin_fetch(self) -> int:
        self.message = None
        return self.catalog.begin_fetch()

    def receive(
        self,
        rows: Iterable[CourseRow],
        source_label: str | None = None,
        token: int | None = None,
    ) -> str | None:
        """
        Merge a fetched batch. An empty batch only sets an informational
        message. Returns the message (None when rows were merged).
        """
        rows = list(rows)
        label = source_label if source_label is not None else self.major
        if self.catalog.is_stale(token):
            log.info("Ignoring stale result for %s", label)
            return None
        if not rows:
            self.message = MSG_NO_COURSES
            return self.message
        self.catalog.accept(rows, label, token)
        self.message = None
        return None

    def fetch_failed(self, error: BaseException) -> str:
        """Record a failed fetch; catalog and selection are left as they are."""
        log.warning("Course fetch failed: %s", error)
        self.message = str(error) or MSG_FETCH_FAILED
        return self.message

    def load(
        self,
        fetch: Callable[[], Iterable[CourseRow]],
        source_label: str | None = None,
    ) -> str | None:
        """Run a fetch callable and merge its rows, turning failures into a message."""
        token = self.begin_fetch()
        try:
            rows = list(fetch())
        except (PlannerError, OSError) as e:
            return self.fetch_failed(e)
        return self.receive(rows, source_label, token)

    # ── major / field lists ────────────────────────────────────────

    def receive_majors(
        self,
        options: Sequence[Option],
        section_kind: str = SECTION_MAJOR,
        preferred: str = PREFERRED_MAJOR,
    ) -> str | None:
        """
        Take a new major (or liberal-arts field) list and pick the current major:
        the preferred code for a major list if offered, else the current major
        if still listed, else the first entry. Course fetches still in flight
        for the old list become stale. Returns a message for an empty list.
        """
        self.majors = list(options)
        codes = [option.code for option in self.majors]
        if section_kind == SECTION_MAJOR and preferred in codes:
            self.major = preferred
        elif self.major not in codes:
            self.major = codes[0] if codes else None
        self.catalog.begin_fetch()

        if not self.majors:
            self.message = MSG_NO_MAJORS
            return self.message
        self.message = None
        log.info("Received %d major(s)/field(s); current %s", len(self.majors), self.major)
        return None

    # ── saved plans ────────────────────────────────────────────────

    def saved_plans(self) -> List[SavedPlan]:
        return self.plans.list()

    def save_plan(self, name: str | None = None) -> SavedPlan:
        return self.plans.save(name, self.selected_ids)

    def load_plan(self, plan: SavedPlan) -> None:
        """Replace (not merge) the selection with the plan's ids."""
        self.selected_ids = list(dict.fromkeys(PlanRepository.apply(plan)))

    def delete_plan(self, plan_id: str) -> None:
        self.plans.remove(plan_id)
