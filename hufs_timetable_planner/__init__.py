"""
HUFS timetable planner: merge course catalogs, detect time conflicts,
lay a selection out on a weekday × period grid and keep named plans.
"""
__version__ = "0.1.0"

from .catalog import Catalog, CatalogMerger, filter_courses, load_baseline
from .conflicts import conflicts_with_selection, grid_conflicts, overlap
from .grid import Timetable, build_grid, build_timetable, total_credits
from .models import Course, CourseRow, Day, SavedPlan, TimeSlot
from .planner import PlannerSession
from .plans import JsonFileStore, MemoryStore, PlanRepository
from .slots import format_slots, parse_slots

__all__ = [
    "Catalog",
    "CatalogMerger",
    "Course",
    "CourseRow",
    "Day",
    "JsonFileStore",
    "MemoryStore",
    "PlanRepository",
    "PlannerSession",
    "SavedPlan",
    "TimeSlot",
    "Timetable",
    "build_grid",
    "build_timetable",
    "conflicts_with_selection",
    "filter_courses",
    "format_slots",
    "grid_conflicts",
    "load_baseline",
    "overlap",
    "parse_slots",
    "total_credits",
]
