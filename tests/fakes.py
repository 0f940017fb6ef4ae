"""
Test doubles shared by the test modules:
- MemoryPersistence: records every save instead of touching disk
- ManualScheduler: countdown timers that tick only when a test says so
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from coursetracker.errors import PersistenceFailure
from coursetracker.model import Course, CourseDraft


class MemoryPersistence:
    def __init__(self, stored: Optional[list[Course]] = None) -> None:
        self.stored = stored
        self.saves: list[list[Course]] = []
        self.loads = 0
        self.fail_load = False
        self.fail_save = False

    def load_all(self) -> Optional[list[Course]]:
        self.loads += 1
        if self.fail_load:
            raise PersistenceFailure("disk on fire")
        return None if self.stored is None else list(self.stored)

    def save_all(self, courses: Iterable[Course]) -> None:
        if self.fail_save:
            raise PersistenceFailure("disk full")
        self.stored = list(courses)
        self.saves.append(list(self.stored))


class ManualTimer:
    def __init__(self, callback: Callable[[], None]) -> None:
        self.callback = callback
        self.cancel_calls = 0

    @property
    def cancelled(self) -> bool:
        return self.cancel_calls > 0

    def cancel(self) -> None:
        self.cancel_calls += 1


class ManualScheduler:
    def __init__(self) -> None:
        self.timers: list[ManualTimer] = []
        self.intervals: list[float] = []

    def __call__(self, interval: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(callback)
        self.timers.append(timer)
        self.intervals.append(interval)
        return timer

    def tick(self, n: int = 1) -> None:
        for _ in range(n):
            for timer in list(self.timers):
                if not timer.cancelled:
                    timer.callback()


def draft(
    name: str = "Intro",
    hours: int = 5,
    tags: str = "A, B",
    instructor: str = "X",
    status: str = "in_progress",
) -> CourseDraft:
    return CourseDraft(course_name=name, hours=hours, tags=tags, instructor_name=instructor, status=status)


def course(course_id: str, name: str, tags: str = "", instructor: str = "X", status: str = "in_progress") -> Course:
    return Course(id=course_id, course_name=name, hours=1, tags=tags, instructor_name=instructor, status=status)
