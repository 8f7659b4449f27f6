"""Tests for catalog.py – merging provider rows into the catalog."""
import json

import pytest

from hufs_timetable_planner.catalog import (
    Catalog,
    CatalogMerger,
    course_from_row,
    filter_courses,
    load_baseline,
)
from hufs_timetable_planner.config import API_ID_SEED
from hufs_timetable_planner.models import Course, CourseRow, Day


def _row(code, time="월 1 2", name=None, **kw):
    return CourseRow(code=code, name=name or f"Course {code}", time=time, **kw)


class TestCourseFromRow:
    def test_fields(self):
        row = _row("A1", time="화 3 4", professor="Kim", credit=3, grade="2",
                   area="전공필수", is_english=True, remark="note")
        course = course_from_row(row, 7, "ATJA1")
        assert course.id == 7
        assert course.code == "A1"
        assert course.professor == "Kim"
        assert course.credit == 3
        assert course.grade == 2
        assert course.area == "전공필수"
        assert course.english is True
        assert course.remarks == "note"
        assert course.source_major == "ATJA1"
        assert course.days == [Day.TUE]

    def test_grade_not_numeric(self):
        assert course_from_row(_row("A1", grade="전체"), 1, None).grade == 0
        assert course_from_row(_row("A1", grade="9"), 1, None).grade == 0

    def test_time_fallbacks(self):
        row = _row("A1", time="", time_eng="Wed. 5")
        assert course_from_row(row, 1, None).days == [Day.WED]
        assert course_from_row(_row("A1", time=""), 1, None).slots == ()


class TestCatalogMerger:
    def test_seed_above_baseline(self):
        baseline = [Course(1, "B1", "b"), Course(API_ID_SEED + 5, "B2", "b")]
        assert CatalogMerger(baseline).next_id == API_ID_SEED + 6
        assert CatalogMerger([Course(1, "B1", "b")]).next_id == API_ID_SEED

    def test_new_code_appended(self):
        merger = CatalogMerger()
        merged = merger.merge([], [_row("A1")], "ATJA1")
        assert len(merged) == 1
        assert merged[0].id == API_ID_SEED
        assert merged[0].source_major == "ATJA1"

    def test_same_row_twice_keeps_id_and_size(self):
        merger = CatalogMerger()
        first = merger.merge([], [_row("A1"), _row("A2")], "ATJA1")
        second = merger.merge(first, [_row("A1")], "ATJA1")
        assert len(second) == len(first)
        assert [c.id for c in second] == [c.id for c in first]

    def test_update_replaces_fields_keeps_id(self):
        merger = CatalogMerger()
        first = merger.merge([], [_row("A1", time="월 1")], "ATJA1")
        second = merger.merge(first, [_row("A1", time="금 5", name="Renamed")], "ATKR1")
        assert second[0].id == first[0].id
        assert second[0].name == "Renamed"
        assert second[0].days == [Day.FRI]
        assert second[0].source_major == "ATKR1"

    def test_new_code_gets_larger_id(self):
        merger = CatalogMerger()
        catalog = merger.merge([], [_row("A1"), _row("A2")], "X")
        grown = merger.merge(catalog, [_row("A3")], "Y")
        assert len(grown) == len(catalog) + 1
        assert grown[-1].id > max(c.id for c in catalog)

    def test_previous_courses_kept(self):
        merger = CatalogMerger()
        catalog = merger.merge([], [_row("A1")], "X")
        merged = merger.merge(catalog, [_row("B1")], "Y")
        assert {c.code for c in merged} == {"A1", "B1"}

    def test_input_not_mutated(self):
        merger = CatalogMerger()
        catalog = merger.merge([], [_row("A1")], "X")
        snapshot = list(catalog)
        merger.merge(catalog, [_row("A1", name="changed"), _row("A2")], "X")
        assert catalog == snapshot

    def test_duplicate_codes_in_batch(self):
        merged = CatalogMerger().merge([], [_row("A1", name="one"), _row("A1", name="two")], "X")
        assert len(merged) == 1
        assert merged[0].name == "two"

    def test_counter_never_reuses_catalog_ids(self):
        merger = CatalogMerger()
        foreign = [Course(API_ID_SEED + 50, "Z9", "z")]
        merged = merger.merge(foreign, [_row("A1")], "X")
        assert merged[-1].id == API_ID_SEED + 51


class TestCatalog:
    def test_baseline_until_merge(self):
        baseline = [Course(1, "B1", "b")]
        catalog = Catalog(baseline)
        assert catalog.courses == baseline
        catalog.accept([_row("A1")], "ATJA1")
        assert [c.code for c in catalog.courses] == ["A1"]

    def test_get_and_by_ids(self):
        catalog = Catalog()
        catalog.accept([_row("A1"), _row("A2")], "X")
        a1, a2 = catalog.courses
        assert catalog.get(a2.id) == a2
        assert catalog.get(-1) is None
        assert catalog.by_ids([a2.id, 999, a1.id]) == [a2, a1]

    def test_visible_filters_by_major(self):
        catalog = Catalog()
        catalog.accept([_row("A1")], "ATJA1")
        catalog.accept([_row("K1")], "ATKR1")
        assert [c.code for c in catalog.visible("ATJA1")] == ["A1"]
        assert [c.code for c in catalog.visible("ATKR1")] == ["K1"]
        assert len(catalog.courses) == 2

    def test_stale_batch_discarded(self, caplog):
        catalog = Catalog()
        old = catalog.begin_fetch()
        new = catalog.begin_fetch()
        assert catalog.accept([_row("N1")], "NEW", new) is True
        with caplog.at_level("INFO"):
            assert catalog.accept([_row("O1")], "OLD", old) is False
        assert [c.code for c in catalog.courses] == ["N1"]
        assert "stale" in caplog.text

    def test_without_token_last_write_wins(self):
        catalog = Catalog()
        catalog.begin_fetch()
        catalog.accept([_row("A1", name="first")], "X")
        catalog.accept([_row("A1", name="second")], "X")
        assert catalog.courses[0].name == "second"


class TestLoadBaseline:
    def test_bundled(self):
        courses = load_baseline()
        assert courses
        assert all(c.id < API_ID_SEED for c in courses)
        assert len({c.code for c in courses}) == len(courses)

    def test_from_path(self, tmp_path):
        path = tmp_path / "base.json"
        path.write_text(json.dumps([
            {"id": 3, "code": "X1", "name": "x", "slots": [{"day": "Tue", "periods": [2, 1]}]}
        ]), encoding="utf-8")
        (course,) = load_baseline(path)
        assert course.id == 3
        assert course.slots[0].periods == (1, 2)
        assert course.source_major is None


class TestFilterCourses:
    COURSES = [
        Course(1, "V1", "Japanese Grammar", professor="Kim", grade=1),
        Course(2, "V2", "Literature", professor="Park", grade=2),
    ]

    def test_grade(self):
        assert [c.id for c in filter_courses(self.COURSES, grade=2)] == [2]

    def test_search_case_insensitive(self):
        assert [c.id for c in filter_courses(self.COURSES, search="  grammar ")] == [1]
        assert [c.id for c in filter_courses(self.COURSES, search="park")] == [2]
        assert [c.id for c in filter_courses(self.COURSES, search="v")] == [1, 2]

    def test_day(self):
        catalog = Catalog()
        catalog.accept([_row("A1", time="월 1"), _row("A2", time="화 1")], "X")
        assert [c.code for c in filter_courses(catalog.courses, day=Day.TUE)] == ["A2"]

    def test_no_filters(self):
        assert filter_courses(self.COURSES) == self.COURSES
