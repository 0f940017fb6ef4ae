"""
Central data model definitions used across the project.

This module defines the canonical structure of course records so that:
- the tracker, the storage bindings and the API share the same field names
- JSON files and HTTP bodies use one stable format
- validation happens in one place
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, List

from coursetracker.errors import InvalidRecord

IN_PROGRESS = "in_progress"
FINISHED = "finished"
STATUSES = (IN_PROGRESS, FINISHED)

STATUS_LABELS = {IN_PROGRESS: "In Progress", FINISHED: "Finished"}


@dataclass(frozen=True)
class CourseDraft:
    """
    The form payload for creating or editing a course (everything but the id).
    """

    course_name: str
    hours: int = 0
    tags: str = ""
    instructor_name: str = ""
    status: str = IN_PROGRESS

    def pair_key(self) -> tuple[str, str]:
        return pair_key(self.course_name, self.instructor_name)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CourseDraft":
        if not isinstance(data, dict):
            raise InvalidRecord("Course data must be a JSON object")
        return cls(
            course_name=_as_text(data.get("course_name")),
            hours=_as_hours(data.get("hours", 0)),
            tags=_as_text(data.get("tags")),
            instructor_name=_as_text(data.get("instructor_name")),
            status=_as_text(data.get("status")) or IN_PROGRESS,
        )


@dataclass(frozen=True)
class Course:
    """
    One tracked course/instructor pairing as stored in courses.json.
    """

    id: str
    course_name: str
    hours: int
    tags: str
    instructor_name: str
    status: str

    @classmethod
    def from_draft(cls, course_id: str, draft: CourseDraft) -> "Course":
        return cls(id=course_id, **draft.to_dict())

    def with_draft(self, draft: CourseDraft) -> "Course":
        return replace(self, **draft.to_dict())

    def draft(self) -> CourseDraft:
        return CourseDraft(
            course_name=self.course_name,
            hours=self.hours,
            tags=self.tags,
            instructor_name=self.instructor_name,
            status=self.status,
        )

    def pair_key(self) -> tuple[str, str]:
        return pair_key(self.course_name, self.instructor_name)

    def tag_list(self) -> List[str]:
        return split_tags(self.tags)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Course":
        draft = CourseDraft.from_dict(data)
        course_id = _as_text(data.get("id")).strip()
        if not course_id:
            raise InvalidRecord("Course is missing its id")
        return cls.from_draft(course_id, draft)


def pair_key(course_name: str, instructor_name: str) -> tuple[str, str]:
    """
    Key used by the uniqueness rule: course and instructor, case-insensitive.
    """
    return (course_name.casefold(), instructor_name.casefold())


def split_tags(tags: str) -> List[str]:
    """
    Split a comma-separated tag field into trimmed labels.

    Empty segments are kept as the empty-string tag, so ",React" yields
    ["", "React"] and "" yields [""].
    """
    return [t.strip() for t in (tags or "").split(",")]


def validate_draft(draft: CourseDraft) -> CourseDraft:
    """
    Check the form rules and return the draft unchanged.

    Raises InvalidRecord on the first broken rule.
    """
    if not draft.course_name.strip():
        raise InvalidRecord("Course name is required")
    if not draft.instructor_name.strip():
        raise InvalidRecord("Instructor name is required")
    if isinstance(draft.hours, bool) or not isinstance(draft.hours, int):
        raise InvalidRecord(f"Hours must be a whole number, got {draft.hours!r}")
    if draft.hours < 0:
        raise InvalidRecord(f"Hours must not be negative, got {draft.hours}")
    if draft.status not in STATUSES:
        raise InvalidRecord(f"Status must be one of {', '.join(STATUSES)}, got {draft.status!r}")
    return draft


def _as_text(x: Any) -> str:
    return "" if x is None else str(x)


def _as_hours(x: Any) -> int:
    # JSON may carry 5.0, form input may carry "5"
    if isinstance(x, bool):
        raise InvalidRecord(f"Hours must be a number, got {x!r}")
    if isinstance(x, int):
        return x
    try:
        value = float(str(x).strip() or "0")
    except ValueError:
        raise InvalidRecord(f"Hours must be a number, got {x!r}") from None
    if not value.is_integer():
        raise InvalidRecord(f"Hours must be a whole number, got {x!r}")
    return int(value)
