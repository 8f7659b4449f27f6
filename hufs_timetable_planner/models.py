"""
Data types: weekdays, time slots, courses, provider rows and saved plans.

TimeSlot and Course are plain frozen dataclasses that live in memory only.
CourseRow and SavedPlan cross a boundary (provider payload, persisted JSON)
so they are pydantic models and validate what they are given.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Day(str, Enum):
    MON = "Mon"
    TUE = "Tue"
    WED = "Wed"
    THU = "Thu"
    FRI = "Fri"

    def __str__(self) -> str:
        return self.value


_DAY_INDEX = {day: i for i, day in enumerate(Day)}


@dataclass(frozen=True)
class TimeSlot:
    """The periods a course meets on one day: positive, sorted and unique (0 and below are dropped)."""

    day: Day
    periods: Tuple[int, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "day", Day(self.day))
        periods = {int(p) for p in self.periods}
        object.__setattr__(self, "periods", tuple(sorted(p for p in periods if p > 0)))

    def cells(self) -> List[Tuple[Day, int]]:
        return [(self.day, p) for p in self.periods]


def union_slots(slots: Iterable[TimeSlot]) -> Tuple[TimeSlot, ...]:
    """Collapse slots to one per day (periods unioned), ordered Mon..Fri."""
    by_day: dict[Day, set[int]] = {}
    for slot in slots:
        by_day.setdefault(slot.day, set()).update(slot.periods)
    return tuple(
        TimeSlot(day, tuple(periods))
        for day, periods in sorted(by_day.items(), key=lambda kv: _DAY_INDEX[kv[0]])
        if periods
    )


@dataclass(frozen=True)
class Course:
    id: int
    code: str
    name: str
    professor: str = ""
    credit: int = 0
    grade: int = 0
    area: str = ""
    slots: Tuple[TimeSlot, ...] = field(default_factory=tuple)
    english: bool = False
    remarks: str = ""
    source_major: Optional[str] = None

    def __post_init__(self):
        if self.credit < 0:
            raise ValueError(f"credit must be non-negative, got {self.credit}")
        if not 0 <= self.grade <= 4:
            raise ValueError(f"grade must be between 0 and 4, got {self.grade}")
        object.__setattr__(self, "slots", union_slots(self.slots))

    @property
    def days(self) -> List[Day]:
        return [slot.day for slot in self.slots]

    def cells(self) -> set[Tuple[Day, int]]:
        """Every (day, period) cell this course occupies."""
        return {cell for slot in self.slots for cell in slot.cells()}

    @classmethod
    def from_dict(cls, data: dict) -> "Course":
        """Build a course from the bundled baseline JSON shape."""
        slots = [
            TimeSlot(Day(s["day"]), tuple(s.get("periods", ())))
            for s in data.get("slots", [])
        ]
        return cls(
            id=int(data["id"]),
            code=data["code"],
            name=data["name"],
            professor=data.get("professor", ""),
            credit=int(data.get("credit", 0)),
            grade=int(data.get("grade", 0)),
            area=data.get("area", ""),
            slots=tuple(slots),
            english=bool(data.get("english", False)),
            remarks=data.get("remarks", ""),
            source_major=data.get("sourceMajor"),
        )


class CourseRow(BaseModel):
    """One course as delivered by the provider, after field mapping."""

    model_config = ConfigDict(frozen=True)

    code: str
    name: str = "-"
    name_eng: str = "-"
    professor: str = ""
    professor_eng: str = ""
    credit: int = 0
    grade: str = ""
    time: str = ""
    time_eng: str = ""
    area: str = ""
    is_english: bool = False
    is_online: bool = False
    syllabus: bool = False
    remark: str = ""


class MajorOption(BaseModel):
    code: str
    name: str
    name_eng: str = ""
    campus: str = ""
    campus_eng: str = ""
    dept_level: Optional[str] = None


class FieldOption(BaseModel):
    code: str
    name: str
    name_eng: str = ""
    campus: Optional[str] = None


class SavedPlan(BaseModel):
    """A named snapshot of a selection, stored as {id, name, selectedIds, createdAt}."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    selected_ids: List[int] = Field(default_factory=list, alias="selectedIds")
    created_at: int = Field(alias="createdAt")
