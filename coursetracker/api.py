"""
Course API (Flask).

Serves the course collection on one resource path:

    GET    /api/courses          list all records
    POST   /api/courses          create; 409 if the course/instructor pair exists
    PUT    /api/courses          replace by id; 404 if the id is unknown (no pair check)
    DELETE /api/courses?id=<id>  delete; 400 without id, 404 if unknown

Records live in a CourseCollection, a JSON-file document collection.
Every handler catches unexpected errors and answers 500 with a generic
message instead of crashing the server.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
import uuid
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify, request

from coursetracker.errors import CourseTrackerError, InvalidRecord
from coursetracker.model import Course, CourseDraft, pair_key, validate_draft

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "This course with the same instructor already exists!"


def default_collection_path() -> Path:
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data" / "api_courses.json"


class CourseCollection:
    """
    Document collection persisted as a JSON array; one lock guards every call.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else default_collection_path()
        self._lock = threading.Lock()

    def _read(self) -> list[Course]:
        if not self.path.exists():
            return []
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError(f"Unexpected content in {self.path}: expected a JSON array")
        return [Course.from_dict(item) for item in data]

    def _write(self, courses: list[Course]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".api-courses-", suffix=".json", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(json.dumps([c.to_dict() for c in courses], indent=2, ensure_ascii=False))
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def find_all(self) -> list[Course]:
        with self._lock:
            return self._read()

    def find_one(self, course_id: str) -> Optional[Course]:
        with self._lock:
            return next((c for c in self._read() if c.id == course_id), None)

    def find_by_pair(self, course_name: str, instructor_name: str) -> Optional[Course]:
        key = pair_key(course_name, instructor_name)
        with self._lock:
            return next((c for c in self._read() if c.pair_key() == key), None)

    def insert(self, draft: CourseDraft) -> Course:
        with self._lock:
            courses = self._read()
            course = Course.from_draft(uuid.uuid4().hex, draft)
            courses.append(course)
            self._write(courses)
            return course

    def replace(self, course: Course) -> bool:
        with self._lock:
            courses = self._read()
            for i, c in enumerate(courses):
                if c.id == course.id:
                    courses[i] = course
                    self._write(courses)
                    return True
            return False

    def delete(self, course_id: str) -> bool:
        with self._lock:
            courses = self._read()
            kept = [c for c in courses if c.id != course_id]
            if len(kept) == len(courses):
                return False
            self._write(kept)
            return True


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def _clashes(collection: CourseCollection, draft: CourseDraft) -> bool:
    return collection.find_by_pair(draft.course_name, draft.instructor_name) is not None


def create_app(collection: Optional[CourseCollection] = None) -> Flask:
    """
    Build the API app around `collection` (default: the package data file).
    """
    app = Flask(__name__)
    app.config["COURSE_COLLECTION"] = collection or CourseCollection()

    def _collection() -> CourseCollection:
        return app.config["COURSE_COLLECTION"]

    @app.get("/api/courses")
    def list_courses():
        try:
            return jsonify([c.to_dict() for c in _collection().find_all()])
        except Exception:
            logger.exception("GET /api/courses failed")
            return _error("Failed to fetch courses", 500)

    @app.post("/api/courses")
    def create_course():
        try:
            try:
                draft = validate_draft(CourseDraft.from_dict(request.get_json(silent=True)))
            except InvalidRecord as e:
                return _error(str(e), 400)

            if _clashes(_collection(), draft):
                return _error(DUPLICATE_MESSAGE, 409)

            course = _collection().insert(draft)
            logger.info("Created course %s (%s)", course.id, course.course_name)
            return jsonify(course.to_dict()), 201
        except Exception:
            logger.exception("POST /api/courses failed")
            return _error("Failed to create course", 500)

    @app.put("/api/courses")
    def update_course():
        try:
            try:
                course = Course.from_dict(request.get_json(silent=True))
                validate_draft(course.draft())
            except CourseTrackerError as e:
                return _error(str(e), 400)

            if _collection().find_one(course.id) is None:
                return _error("Course not found", 404)

            _collection().replace(course)
            logger.info("Updated course %s", course.id)
            return jsonify(course.to_dict())
        except Exception:
            logger.exception("PUT /api/courses failed")
            return _error("Failed to update course", 500)

    @app.delete("/api/courses")
    def delete_course():
        try:
            course_id = (request.args.get("id") or "").strip()
            if not course_id:
                return _error("Course ID is required", 400)

            if not _collection().delete(course_id):
                return _error("Course not found", 404)

            logger.info("Deleted course %s", course_id)
            return jsonify({"message": "Course deleted successfully"})
        except Exception:
            logger.exception("DELETE /api/courses failed")
            return _error("Failed to delete course", 500)

    return app
