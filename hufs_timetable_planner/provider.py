"""
Decode HUFS course-provider responses into CourseRow / MajorOption / FieldOption.

The provider answers with URL-encoded JSON of the form
{"dataCount": "N", "data": [...]} where "data" may be a list, a single
object, or missing altogether. Transport is the caller's business; this
module only sees the response text or the decoded dict.
"""
from __future__ import annotations

import json
import logging
from typing import Any, List
from urllib.parse import unquote

from pydantic import ValidationError

from .errors import ProviderError
from .models import CourseRow, FieldOption, MajorOption

log = logging.getLogger(__name__)


def decode_body(text: str) -> Any:
    """URL-decode then JSON-decode a provider response body."""
    try:
        return json.loads(unquote(text))
    except (TypeError, ValueError) as e:
        raise ProviderError(f"Could not decode provider response: {e}") from e


def normalize_array(value: Any) -> List[Any]:
    """None/empty -> [], a single object -> [object], a list stays a list."""
    if not value:
        return []
    return list(value) if isinstance(value, list) else [value]


def _items(response: Any) -> List[dict]:
    if isinstance(response, str):
        response = decode_body(response)
    if not isinstance(response, dict):
        raise ProviderError(f"Unexpected provider response type: {type(response).__name__}")
    items = normalize_array(response.get("data"))
    if not all(isinstance(item, dict) for item in items):
        raise ProviderError("Provider data entries must be objects")
    return items


def _text(raw: dict, key: str) -> str:
    value = raw.get(key)
    return "" if value is None else str(value).strip()


def _credit(value: Any) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


# ──────────────────────────────────────────────────────────────────
#  Courses
# ──────────────────────────────────────────────────────────────────

def normalize_course_row(raw: dict) -> CourseRow:
    """
    Map one raw provider record onto CourseRow.

    Korean/English names fall back to each other and then to '-';
    area falls back to its English form; Y/N flags become booleans.
    """
    name_kr = _text(raw, "subjtNaKr")
    name_en = _text(raw, "subjtNaEng")
    try:
        return CourseRow(
            code=_text(raw, "lssnCd"),
            name=name_kr or name_en or "-",
            name_eng=name_en or name_kr or "-",
            professor=_text(raw, "empNm"),
            professor_eng=_text(raw, "empNmEng"),
            credit=_credit(raw.get("unitNum")),
            grade=_text(raw, "dstGrad"),
            time=_text(raw, "dayTimeDisplay"),
            time_eng=_text(raw, "dayTimeDisplayE"),
            area=_text(raw, "comptFldNm") or _text(raw, "comptFldNaEng"),
            is_english=raw.get("wongangFlag") == "Y",
            is_online=raw.get("cyberFlag") == "Y",
            syllabus=raw.get("syllabusFlag") == "Y",
            remark=_text(raw, "etc"),
        )
    except ValidationError as e:
        raise ProviderError(f"Malformed course record: {e}") from e


def normalize_course_rows(response: Any) -> List[CourseRow]:
    """All course rows of a response (text or decoded dict)."""
    rows = [normalize_course_row(item) for item in _items(response)]
    log.debug("Decoded %d course row(s)", len(rows))
    return rows


# ──────────────────────────────────────────────────────────────────
#  Majors / liberal-arts fields
# ──────────────────────────────────────────────────────────────────

def normalize_majors(response: Any) -> List[MajorOption]:
    try:
        return [
            MajorOption(
                code=_text(item, "hakkwaCode1"),
                name=_text(item, "hakkwaName1"),
                name_eng=_text(item, "hakkwaName1E"),
                campus=_text(item, "campusName1"),
                campus_eng=_text(item, "campusName1E"),
                dept_level=item.get("deptLevel"),
            )
            for item in _items(response)
        ]
    except ValidationError as e:
        raise ProviderError(f"Malformed major record: {e}") from e


def normalize_fields(response: Any) -> List[FieldOption]:
    try:
        return [
            FieldOption(
                code=_text(item, "fieldCode2"),
                name=_text(item, "fieldName2"),
                name_eng=_text(item, "fieldName2E"),
                campus=_text(item, "campusName2") or None,
            )
            for item in _items(response)
        ]
    except ValidationError as e:
        raise ProviderError(f"Malformed field record: {e}") from e
