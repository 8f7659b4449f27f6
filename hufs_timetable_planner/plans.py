"""
Saved timetables.

Plans live as one JSON array under a single key of a key-value store:
[{"id": "...", "name": "...", "selectedIds": [...], "createdAt": 1700000000000}, ...]
newest first. Every change rewrites the whole array.
"""
from __future__ import annotations

import logging
import os
import tempfile
import time
import uuid
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Protocol

from pydantic import TypeAdapter, ValidationError

from .config import DEFAULT_PLAN_NAME, STORAGE_KEY, store_dir
from .models import SavedPlan

log = logging.getLogger(__name__)

_PLAN_LIST = TypeAdapter(List[SavedPlan])


# ──────────────────────────────────────────────────────────────────
#  Stores
# ──────────────────────────────────────────────────────────────────

class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Dict-backed store, for tests and throwaway sessions."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """One <key>.json file per key under a directory; writes replace the file atomically."""

    def __init__(self, directory: str | Path | None = None):
        self.directory = Path(directory) if directory is not None else store_dir()

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        try:
            return self._path(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


# ──────────────────────────────────────────────────────────────────
#  Repository
# ──────────────────────────────────────────────────────────────────

def _now_millis() -> int:
    return int(time.time() * 1000)


def _new_id() -> str:
    return str(uuid.uuid4())


class PlanRepository:
    def __init__(
        self,
        store: KeyValueStore,
        key: str = STORAGE_KEY,
        clock: Callable[[], int] = _now_millis,
        id_factory: Callable[[], str] = _new_id,
    ):
        self.store = store
        self.key = key
        self.clock = clock
        self.id_factory = id_factory

    def list(self) -> List[SavedPlan]:
        """Stored plans, newest first. Missing or unreadable data reads as no plans."""
        try:
            raw = self.store.get(self.key)
        except (OSError, ValueError) as e:
            log.warning("Failed to read saved plans from %r: %s", self.key, e)
            return []
        if not raw:
            return []
        try:
            return _PLAN_LIST.validate_json(raw)
        except ValidationError as e:
            log.warning("Ignoring malformed saved plans under %r: %s", self.key, e)
            return []

    def save(self, name: str | None, selection: Iterable[int]) -> SavedPlan:
        """Snapshot a selection as a new plan, put it first and persist the list."""
        plans = self.list()
        label = (name or "").strip() or DEFAULT_PLAN_NAME.format(n=len(plans) + 1)
        plan = SavedPlan(
            id=self.id_factory(),
            name=label,
            selected_ids=list(dict.fromkeys(selection)),
            created_at=self.clock(),
        )
        self._write([plan, *plans])
        log.info("Saved plan %r with %d course(s)", plan.name, len(plan.selected_ids))
        return plan

    def remove(self, plan_id: str) -> None:
        plans = self.list()
        kept = [p for p in plans if p.id != plan_id]
        if len(kept) == len(plans):
            log.debug("No saved plan with id %r", plan_id)
            return
        self._write(kept)
        log.info("Removed plan %r", plan_id)

    @staticmethod
    def apply(plan: SavedPlan) -> List[int]:
        """The selection a plan restores: its ids verbatim, unknown ones included."""
        return list(plan.selected_ids)

    def _write(self, plans: List[SavedPlan]) -> None:
        self.store.set(self.key, _PLAN_LIST.dump_json(plans, by_alias=True).decode("utf-8"))
