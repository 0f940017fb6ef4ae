"""
Record store and derived views.

The store owns the canonical, insertion-ordered list of courses.
Everything else in this module is a pure projection of a given list:

    facet_counts(courses)                     -> counts per tag / instructor / status
    filtered(courses, selection)              -> courses matching every set criterion
    paginate(courses, page_size, page_number) -> one page plus the page count
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Optional

from coursetracker.model import Course


@dataclass(frozen=True)
class FilterSelection:
    """
    Exact-match criteria for the table view. None means "any".
    """

    tag: Optional[str] = None
    instructor: Optional[str] = None
    status: Optional[str] = None

    def is_empty(self) -> bool:
        return self.tag is None and self.instructor is None and self.status is None


@dataclass(frozen=True)
class FacetCounts:
    tag: dict[str, int] = field(default_factory=dict)
    instructor: dict[str, int] = field(default_factory=dict)
    status: dict[str, int] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not (self.tag or self.instructor or self.status)


@dataclass(frozen=True)
class Page:
    items: list[Course]
    total_pages: int
    page_number: int


class RecordStore:
    """
    Holds the canonical course list.

    Callers only ever receive copies; replace() installs a new list value and
    bumps `version` so derived views can be cached against it.
    """

    def __init__(self, courses: Iterable[Course] = ()) -> None:
        self._courses: tuple[Course, ...] = ()
        self.version = 0
        self.replace(courses)

    def all(self) -> list[Course]:
        return list(self._courses)

    def get(self, course_id: str) -> Optional[Course]:
        for c in self._courses:
            if c.id == course_id:
                return c
        return None

    def index_of(self, course_id: str) -> int:
        for i, c in enumerate(self._courses):
            if c.id == course_id:
                return i
        return -1

    def replace(self, courses: Iterable[Course]) -> None:
        new = tuple(courses)
        seen: set[str] = set()
        for c in new:
            if c.id in seen:
                raise ValueError(f"Duplicate course id in record list: {c.id}")
            seen.add(c.id)
        self._courses = new
        self.version += 1

    def __len__(self) -> int:
        return len(self._courses)


def facet_counts(courses: Iterable[Course]) -> FacetCounts:
    """
    Count records per distinct tag, instructor and status.

    A record listing the same tag twice is counted once for that tag.
    Keys keep the order in which they first appear.
    """
    tags: dict[str, int] = {}
    instructors: dict[str, int] = {}
    statuses: dict[str, int] = {}

    for c in courses:
        for tag in dict.fromkeys(c.tag_list()):
            tags[tag] = tags.get(tag, 0) + 1
        instructors[c.instructor_name] = instructors.get(c.instructor_name, 0) + 1
        statuses[c.status] = statuses.get(c.status, 0) + 1

    return FacetCounts(tag=tags, instructor=instructors, status=statuses)


def _matches(course: Course, selection: FilterSelection) -> bool:
    if selection.tag is not None and selection.tag not in course.tag_list():
        return False
    if selection.instructor is not None and course.instructor_name != selection.instructor:
        return False
    if selection.status is not None and course.status != selection.status:
        return False
    return True


def filtered(courses: Iterable[Course], selection: FilterSelection) -> list[Course]:
    """
    Keep the courses that satisfy every set criterion (exact, case-sensitive).
    """
    return [c for c in courses if _matches(c, selection)]


def paginate(courses: list[Course], page_size: int, page_number: int) -> Page:
    """
    Slice one 1-based page out of `courses`.

    An empty list has 0 pages. Page numbers outside 1..total_pages give an
    empty slice.
    """
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")

    total_pages = math.ceil(len(courses) / page_size)
    if page_number < 1:
        return Page(items=[], total_pages=total_pages, page_number=page_number)

    start = (page_number - 1) * page_size
    return Page(items=list(courses[start : start + page_size]), total_pages=total_pages, page_number=page_number)
