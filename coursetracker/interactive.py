from __future__ import annotations

import time
from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table

from coursetracker.config import Settings
from coursetracker.errors import CourseTrackerError
from coursetracker.model import FINISHED, STATUS_LABELS, STATUSES, Course, CourseDraft
from coursetracker.tracker import ERROR, SUCCESS, WARNING, CourseTracker, Notification

console = Console()

_LEVEL_STYLES = {SUCCESS: "green", WARNING: "yellow", ERROR: "bold red"}


def _println(msg: str = "") -> None:
    console.print(msg)


def _prompt(msg: str, markup: bool = False) -> str:
    return console.input(msg, markup=markup)


def _notify(n: Notification) -> None:
    style = _LEVEL_STYLES.get(n.level)
    msg = escape(n.message)
    _println(f"[{style}]{msg}[/]" if style else msg)


def run_interactive(settings: Settings) -> int:
    """
    Interactive menu loop: course table with filters and paging, add/edit/delete
    forms, and clear-all with a countdown.

    Returns the exit code: 1 when the saved courses could not be loaded.
    """
    from coursetracker.cli import build_tracker

    tracker = build_tracker(settings, notifier=_notify)
    try:
        if tracker.last_persistence_error is not None:
            # never overwrite data we could not read
            _println("Fix or move the storage file, then start again.")
            return 1
        _loop(tracker)
    finally:
        tracker.close()
    return 0


def _loop(tracker: CourseTracker) -> None:
    while True:
        _print_table(tracker)

        choice = _prompt(
            "\n[1] Add course\n"
            "[2] Edit course\n"
            "[3] Delete course\n"
            "[4] Filter\n"
            "[5] Next page\n"
            "[6] Previous page\n"
            "[7] Clear all courses\n"
            "[0] Exit\n"
            "Select: "
        ).strip()

        if choice == "0":
            _println("Bye.")
            return

        try:
            if choice == "1":
                _flow_add(tracker)
            elif choice == "2":
                _flow_edit(tracker)
            elif choice == "3":
                _flow_delete(tracker)
            elif choice == "4":
                _flow_filter(tracker)
            elif choice == "5":
                tracker.next_page()
            elif choice == "6":
                tracker.previous_page()
            elif choice == "7":
                _flow_clear_all(tracker)
            else:
                _println("Invalid choice.")
        except CourseTrackerError as e:
            _notify(Notification(level=ERROR, message=str(e)))


def _status_badge(status: str) -> str:
    label = STATUS_LABELS.get(status, status)
    return f"[green]{label}[/]" if status == FINISHED else f"[yellow]{label}[/]"


def _filter_label(tracker: CourseTracker) -> str:
    s = tracker.selection
    bits = []
    if s.tag is not None:
        bits.append(f"tag={s.tag or '(empty)'}")
    if s.instructor is not None:
        bits.append(f"instructor={s.instructor}")
    if s.status is not None:
        bits.append(f"status={STATUS_LABELS.get(s.status, s.status)}")
    return escape(", ".join(bits)) if bits else "none"


def _print_table(tracker: CourseTracker) -> None:
    view = tracker.view()

    _println("\n=== Course Tracker ===")
    _println(f"Courses: {len(tracker.store)} | Matching: {len(view.filtered)} | Filter: {_filter_label(tracker)}")

    if not view.filtered:
        _println("No courses yet." if len(tracker.store) == 0 else "No courses match the filter.")
        return

    table = Table(box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Course")
    table.add_column("Hours", justify="right")
    table.add_column("Tags")
    table.add_column("Instructor")
    table.add_column("Status")
    for i, c in enumerate(view.page.items, start=1):
        table.add_row(
            str(i),
            f"[bold cyan]{escape(c.course_name)}[/]",
            str(c.hours),
            escape(c.tags),
            f"[magenta]{escape(c.instructor_name)}[/]",
            _status_badge(c.status),
        )
    console.print(table)

    if view.page.total_pages > 1:
        _println(f"Page {view.page.page_number}/{view.page.total_pages}")


def _pick_course(tracker: CourseTracker, verb: str) -> Optional[Course]:
    items = tracker.view().page.items
    if not items:
        _println("No courses on this page.")
        return None

    pick = _prompt(f"Enter number to {verb} [blank = back]: ").strip()
    if not pick:
        return None
    if not pick.isdigit():
        _println("Not a number.")
        return None
    i = int(pick)
    if not (1 <= i <= len(items)):
        _println("Out of range.")
        return None
    return items[i - 1]


def _ask_draft(current: Optional[CourseDraft] = None) -> Optional[CourseDraft]:
    """
    Prompt for every form field; blank keeps the current value when editing.
    """

    def ask(label: str, default: str) -> str:
        suffix = f" [{default}]" if default else ""
        value = _prompt(f"{label}{suffix}: ").strip()
        return value or default

    name = ask("Course name", current.course_name if current else "")
    hours_in = ask("Hours", str(current.hours) if current else "0")
    tags = ask("Tags (comma-separated)", current.tags if current else "")
    instructor = ask("Instructor name", current.instructor_name if current else "")

    default_status = current.status if current else STATUSES[0]
    for i, s in enumerate(STATUSES, start=1):
        _println(f"{i}) {STATUS_LABELS[s]}")
    status_in = _prompt(f"Status [{STATUS_LABELS[default_status]}]: ").strip()
    if status_in.isdigit() and 1 <= int(status_in) <= len(STATUSES):
        status = STATUSES[int(status_in) - 1]
    else:
        status = default_status

    try:
        hours = int(hours_in)
    except ValueError:
        _println("Hours must be a whole number.")
        return None

    return CourseDraft(course_name=name, hours=hours, tags=tags, instructor_name=instructor, status=status)


def _flow_add(tracker: CourseTracker) -> None:
    draft = _ask_draft()
    if draft is not None:
        tracker.add(draft)


def _flow_edit(tracker: CourseTracker) -> None:
    course = _pick_course(tracker, "edit")
    if course is None:
        return
    draft = _ask_draft(course.draft())
    if draft is not None:
        tracker.update(course.id, draft)


def _flow_delete(tracker: CourseTracker) -> None:
    course = _pick_course(tracker, "delete")
    if course is None:
        return
    sure = _prompt(f"Delete {course.course_name}? [y/N]: ").strip().lower()
    if sure == "y":
        tracker.delete(course.id)


def _flow_filter(tracker: CourseTracker) -> None:
    facets = tracker.facets()
    s = tracker.selection

    kind = _prompt("Filter by [1] Tag  [2] Instructor  [3] Status  [4] Clear filters [blank = back]: ").strip()
    if kind == "4":
        tracker.clear_filter()
        return

    counts = {"1": facets.tag, "2": facets.instructor, "3": facets.status}.get(kind)
    if counts is None:
        return
    if not counts:
        _println("Nothing to filter by yet.")
        return

    values = list(counts)
    _println("0) Any")
    for i, v in enumerate(values, start=1):
        label = STATUS_LABELS.get(v, v) if kind == "3" else (v or "(empty)")
        _println(f"{i}) {escape(label)} ({counts[v]})")

    pick = _prompt("Select: ").strip()
    if not pick.isdigit() or int(pick) > len(values):
        _println("Invalid choice.")
        return
    value = values[int(pick) - 1] if int(pick) > 0 else None

    if kind == "1":
        tracker.set_filter(tag=value, instructor=s.instructor, status=s.status)
    elif kind == "2":
        tracker.set_filter(tag=s.tag, instructor=value, status=s.status)
    else:
        tracker.set_filter(tag=s.tag, instructor=s.instructor, status=value)


def _flow_clear_all(tracker: CourseTracker) -> None:
    if len(tracker.store) == 0:
        _println("No courses to clear.")
        return

    tracker.begin_clear_all()
    total = tracker.clear_all.duration
    progress = Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.fields[left]}s"),
        console=console,
    )
    try:
        with progress:
            task = progress.add_task("Confirm possible in", total=total, left=total)
            while not tracker.clear_all.ready:
                left = tracker.clear_all.remaining
                progress.update(task, completed=total - left, left=left)
                time.sleep(0.1)
            progress.update(task, completed=total, left=0)

        answer = _prompt(
            f"[bold red]Delete all {len(tracker.store)} courses? This cannot be undone.[/] Type 'yes' to confirm: ",
            markup=True,
        )
    except KeyboardInterrupt:
        tracker.cancel_clear_all()
        return

    if answer.strip().lower() == "yes":
        tracker.confirm_clear_all()
    else:
        tracker.cancel_clear_all()
