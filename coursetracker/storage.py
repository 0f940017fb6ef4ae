"""
Persistent storage for the user's course list (local binding).

This module manages the file:

    data/courses.json

The file is a small key/value store: a JSON object whose "courses" key
holds the whole record list as a JSON array. Every save replaces the
entire list; there are no partial writes.

Any binding (this one or coursetracker.remote) offers the same two calls:

    load_all() -> list[Course] | None    (None = nothing persisted yet)
    save_all(courses) -> dict | None     (raises PersistenceFailure)

save_all may return a mapping of local id -> id the binding stored the
record under, when it assigned ids of its own (the remote binding does).
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional, Protocol

from coursetracker.errors import CourseTrackerError, PersistenceFailure
from coursetracker.model import Course

logger = logging.getLogger(__name__)

STORAGE_KEY = "courses"


class CoursePersistence(Protocol):
    def load_all(self) -> Optional[list[Course]]: ...

    def save_all(self, courses: Iterable[Course]) -> Optional[dict[str, str]]: ...


def default_data_path() -> Path:
    """
    Return the default path of courses.json inside the package.

    Using a function instead of a constant makes testing easier,
    because tests can override the path.
    """
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data" / "courses.json"


class LocalCourseStore:
    """
    Keeps the course list under a fixed key in a local JSON file.
    """

    def __init__(self, path: str | Path | None = None, key: str = STORAGE_KEY) -> None:
        self.path = Path(path) if path is not None else default_data_path()
        self.key = key

    def _read_all_keys(self) -> Optional[dict]:
        # First run: file does not exist yet
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise PersistenceFailure(f"Could not read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceFailure(f"Unexpected content in {self.path}: expected a JSON object")
        return data

    def load_all(self) -> Optional[list[Course]]:
        data = self._read_all_keys()
        if data is None or self.key not in data:
            return None

        raw = data[self.key]
        if not isinstance(raw, list):
            raise PersistenceFailure(f"Unexpected value under {self.key!r} in {self.path}: expected a list")
        try:
            courses = [Course.from_dict(item) for item in raw]
        except CourseTrackerError as e:
            raise PersistenceFailure(f"Invalid course in {self.path}: {e}") from e

        logger.debug("Loaded %s courses from %s", len(courses), self.path)
        return courses

    def save_all(self, courses: Iterable[Course]) -> None:
        payload = [c.to_dict() for c in courses]
        # an unreadable file raises here and is left as it is
        data = self._read_all_keys() or {}
        data[self.key] = payload

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=".courses-", suffix=".json", dir=self.path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(json.dumps(data, indent=2, ensure_ascii=False))
                os.replace(tmp, self.path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceFailure(f"Could not write {self.path}: {e}") from e

        logger.debug("Saved %s courses to %s", len(payload), self.path)
