"""
Course tracker controller.

CourseTracker is the one state object behind every UI: it owns the record
store, the filter selection, the pagination cursor and the clear-all
confirmation, and it is the only place where the course list changes.

Every successful mutation:
1. builds a new list value and installs it in the store
2. hands the full list to the persistence binding (save_all) and adopts
   any ids the binding assigned in its place
3. reports the outcome through the notifier

A failed save is reported but never rolls back the in-memory change:
the in-memory list is the source of truth for the running session.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from coursetracker.countdown import CLEAR_ALL_SECONDS, ClearAllConfirmation, Scheduler, thread_scheduler
from coursetracker.errors import ClearAllNotReady, DuplicateRecord, NotFound, PersistenceFailure
from coursetracker.model import Course, CourseDraft, validate_draft
from coursetracker.storage import CoursePersistence
from coursetracker.store import FacetCounts, FilterSelection, Page, RecordStore, facet_counts, filtered, paginate

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10

INFO = "info"
SUCCESS = "success"
WARNING = "warning"
ERROR = "error"

_LOG_LEVELS = {INFO: logging.INFO, SUCCESS: logging.INFO, WARNING: logging.WARNING, ERROR: logging.ERROR}


@dataclass(frozen=True)
class Notification:
    level: str
    message: str


Notifier = Callable[[Notification], None]


@dataclass(frozen=True)
class TrackerView:
    facets: FacetCounts
    filtered: list[Course]
    page: Page


class CourseIdFactory:
    """
    Issue ids as millisecond timestamps, strictly increasing for the process lifetime.

    Numeric ids seen in loaded data are observed so new ids never collide with them.
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None) -> None:
        self._clock = clock or (lambda: time.time_ns() // 1_000_000)
        self._last = 0

    def observe(self, ids: Iterable[str]) -> None:
        for x in ids:
            if x.isdigit():
                self._last = max(self._last, int(x))

    def __call__(self) -> str:
        self._last = max(self._clock(), self._last + 1)
        return str(self._last)


class CourseTracker:
    def __init__(
        self,
        persistence: CoursePersistence,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        notifier: Optional[Notifier] = None,
        scheduler: Scheduler = thread_scheduler,
        clear_all_seconds: int = CLEAR_ALL_SECONDS,
        on_countdown_tick: Optional[Callable[[int], None]] = None,
        id_factory: Optional[CourseIdFactory] = None,
    ) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        self.persistence = persistence
        self.store = RecordStore()
        self.selection = FilterSelection()
        self.page_number = 1
        self.page_size = page_size
        self.clear_all = ClearAllConfirmation(
            duration=clear_all_seconds, scheduler=scheduler, on_tick=on_countdown_tick
        )
        self.last_persistence_error: Optional[PersistenceFailure] = None
        self._notifier = notifier
        self._new_id = id_factory or CourseIdFactory()
        self._view_key: Optional[tuple] = None
        self._view: Optional[TrackerView] = None

    # ------------------------------------------------------------------
    # Startup / teardown
    # ------------------------------------------------------------------

    def load(self, seed: Optional[Callable[[], Iterable[Course]]] = None) -> bool:
        """
        Seed the store from the persistence binding. Call once at startup.

        If nothing was persisted yet and `seed` is given, its courses become the
        initial list and are saved. Returns True if a persisted list was found.
        """
        try:
            loaded = self.persistence.load_all()
        except PersistenceFailure as e:
            self._persistence_failed(e, "Could not load saved courses")
            return False
        except Exception as e:
            self._persistence_failed(PersistenceFailure(str(e)), "Could not load saved courses")
            return False

        if loaded is None:
            if seed is not None:
                self._install(seed())
                self._persist()
            return False

        try:
            self._install(loaded)
        except ValueError as e:
            self._persistence_failed(PersistenceFailure(str(e)), "Saved courses are inconsistent")
            return False
        logger.info("Loaded %s courses", len(self.store))
        return True

    def close(self) -> None:
        """Teardown: stop any running clear-all countdown."""
        self.clear_all.disarm()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def courses(self) -> list[Course]:
        return self.store.all()

    def get(self, course_id: str) -> Course:
        course = self.store.get(course_id)
        if course is None:
            raise NotFound(course_id)
        return course

    def view(self) -> TrackerView:
        """
        Facets, filtered list and current page, recomputed only when the list
        version, the selection or the cursor changed.
        """
        key = (self.store.version, self.selection, self.page_number, self.page_size)
        if self._view is None or key != self._view_key:
            courses = self.store.all()
            matching = filtered(courses, self.selection)
            self._view = TrackerView(
                facets=facet_counts(courses),
                filtered=matching,
                page=paginate(matching, self.page_size, self.page_number),
            )
            self._view_key = key
        return self._view

    def facets(self) -> FacetCounts:
        return self.view().facets

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, draft: CourseDraft) -> Course:
        validate_draft(draft)
        self._ensure_unique(draft)

        course = Course.from_draft(self._new_id(), draft)
        self._install([*self.store.all(), course])
        logger.info("Added course %s (%s)", course.id, course.course_name)
        if self._persist():
            course = self.store.all()[-1]
        self._report(SUCCESS, f"Course added: {course.course_name}")
        return course

    def update(self, course_id: str, draft: CourseDraft) -> Course:
        idx = self.store.index_of(course_id)
        if idx < 0:
            raise NotFound(course_id)
        validate_draft(draft)
        self._ensure_unique(draft, exclude_id=course_id)

        courses = self.store.all()
        updated = courses[idx].with_draft(draft)
        courses[idx] = updated
        self._install(courses)
        logger.info("Updated course %s", course_id)
        self._persist()
        self._report(SUCCESS, f"Course updated: {updated.course_name}")
        return updated

    def delete(self, course_id: str) -> Course:
        course = self.store.get(course_id)
        if course is None:
            raise NotFound(course_id)

        self._install([c for c in self.store.all() if c.id != course_id])
        logger.info("Deleted course %s", course_id)
        self._persist()
        self._report(SUCCESS, f"Course deleted: {course.course_name}")
        return course

    def begin_clear_all(self) -> None:
        """Arm clear-all; confirming is allowed once the countdown reaches zero."""
        self.clear_all.arm()
        self._report(WARNING, f"Clearing all courses can be confirmed in {self.clear_all.duration} seconds")

    def cancel_clear_all(self) -> None:
        if self.clear_all.armed:
            self.clear_all.disarm()
            self._report(INFO, "Clear all cancelled")

    def confirm_clear_all(self) -> None:
        if not self.clear_all.armed:
            raise ClearAllNotReady("Clear all was not started")
        if not self.clear_all.ready:
            raise ClearAllNotReady(f"Please wait {self.clear_all.remaining} more seconds before confirming")

        self.clear_all.disarm()
        removed = len(self.store)
        self._install([])
        logger.info("Cleared all %s courses", removed)
        self._persist()
        self._report(SUCCESS, "All courses cleared")

    # ------------------------------------------------------------------
    # Filter / pagination cursor
    # ------------------------------------------------------------------

    def set_filter(
        self, tag: Optional[str] = None, instructor: Optional[str] = None, status: Optional[str] = None
    ) -> None:
        # "" from a select box means "any", except for the empty-string tag
        self.selection = FilterSelection(tag=tag, instructor=instructor or None, status=status or None)
        self.page_number = 1

    def clear_filter(self) -> None:
        self.set_filter()

    def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        self.page_size = page_size
        self.page_number = 1

    def set_page(self, page_number: int) -> None:
        self.page_number = page_number

    def next_page(self) -> int:
        total = self.view().page.total_pages
        self.page_number = min(self.page_number + 1, max(total, 1))
        return self.page_number

    def previous_page(self) -> int:
        self.page_number = max(self.page_number - 1, 1)
        return self.page_number

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ensure_unique(self, draft: CourseDraft, exclude_id: Optional[str] = None) -> None:
        key = draft.pair_key()
        for c in self.store.all():
            if c.id != exclude_id and c.pair_key() == key:
                raise DuplicateRecord(draft.course_name, draft.instructor_name)

    def _install(self, courses: Iterable[Course]) -> None:
        self.store.replace(courses)
        self._new_id.observe(c.id for c in self.store.all())
        # keep the cursor on an existing page after the list shrank
        total = paginate(filtered(self.store.all(), self.selection), self.page_size, 1).total_pages
        if self.page_number > max(total, 1):
            self.page_number = max(total, 1)

    def _persist(self) -> bool:
        try:
            renamed = self.persistence.save_all(self.store.all())
        except PersistenceFailure as e:
            self._persistence_failed(e, "Could not save courses")
            return False
        except Exception as e:
            logger.exception("Unexpected error while saving courses")
            self._persistence_failed(PersistenceFailure(str(e)), "Could not save courses")
            return False
        self.last_persistence_error = None
        if renamed:
            self._adopt_ids(renamed)
        return True

    def _adopt_ids(self, renamed: dict[str, str]) -> None:
        # the binding stored some records under ids of its own choosing
        self._install([Course.from_draft(renamed[c.id], c.draft()) if c.id in renamed else c for c in self.store.all()])
        logger.debug("Adopted %s ids from the persistence binding", len(renamed))

    def _persistence_failed(self, error: PersistenceFailure, what: str) -> None:
        self.last_persistence_error = error
        self._report(ERROR, f"{what}: {error}")

    def _report(self, level: str, message: str) -> None:
        logger.log(_LOG_LEVELS.get(level, logging.INFO), message)
        if self._notifier is not None:
            self._notifier(Notification(level=level, message=message))
