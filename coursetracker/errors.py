"""
Error taxonomy shared by the tracker, the storage bindings and the API.

All of these are recoverable: the UI layers print them as notifications
and keep running.
"""

from __future__ import annotations


class CourseTrackerError(Exception):
    """Base class for every error the course tracker reports to the user."""


class InvalidRecord(CourseTrackerError, ValueError):
    """A draft has an empty name, negative hours or an unknown status."""


class DuplicateRecord(CourseTrackerError):
    """Another record already uses the same course/instructor pair."""

    def __init__(self, course_name: str, instructor_name: str) -> None:
        super().__init__(
            f"This course with the same instructor already exists: {course_name!r} ({instructor_name!r})"
        )
        self.course_name = course_name
        self.instructor_name = instructor_name


class NotFound(CourseTrackerError):
    """No record with the given id exists."""

    def __init__(self, course_id: str) -> None:
        super().__init__(f"Course not found: {course_id}")
        self.course_id = course_id


class PersistenceFailure(CourseTrackerError):
    """The persistence binding could not load or save the record list."""


class ClearAllNotReady(CourseTrackerError):
    """Clear-all was confirmed while disarmed or before the countdown finished."""
