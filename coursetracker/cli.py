"""
CLI (Command Line Interface).

This module provides quick terminal commands for power users and for testing, e.g.:

    coursetracker list --tag React --status finished --page 2
    coursetracker facets
    coursetracker add "React Fundamentals" --hours 12 --tags "React, JavaScript" --instructor "Sarah Johnson"
    coursetracker update <id> --status finished
    coursetracker delete <id>
    coursetracker clear
    coursetracker serve --port 5000
    coursetracker interactive

Global options pick the persistence binding:
    --data-file PATH   local JSON file (default, or COURSETRACKER_DATA_FILE)
    --remote URL       course API (or COURSETRACKER_API_URL)

Note:
- The interactive UI lives in coursetracker/interactive.py
- This CLI is intentionally simple and prints plain text (no rich formatting)
"""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional

from coursetracker.config import Settings
from coursetracker.errors import CourseTrackerError
from coursetracker.model import STATUS_LABELS, STATUSES, Course, CourseDraft
from coursetracker.remote import RemoteCourseStore
from coursetracker.seed import demo_courses
from coursetracker.storage import CoursePersistence, LocalCourseStore
from coursetracker.tracker import ERROR, WARNING, CourseTracker, Notification

logger = logging.getLogger(__name__)


def _configure_logging(*, verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _settings_from_args(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    if args.data_file:
        settings = replace(settings, data_file=Path(args.data_file), api_url=None)
    if args.remote:
        settings = replace(settings, api_url=args.remote)
    if getattr(args, "seed_demo", False):
        settings = replace(settings, seed_demo=True)
    return settings


def build_persistence(settings: Settings) -> CoursePersistence:
    """
    Pick the binding: the course API when a URL is configured, else the local file.
    """
    if settings.api_url:
        logger.debug("Using remote binding at %s", settings.api_url)
        return RemoteCourseStore(settings.api_url, timeout=settings.timeout)
    logger.debug("Using local binding at %s", settings.data_file)
    return LocalCourseStore(settings.data_file)


def print_notification(n: Notification) -> None:
    stream = sys.stderr if n.level in (ERROR, WARNING) else sys.stdout
    print(n.message, file=stream)


def build_tracker(
    settings: Settings,
    notifier: Optional[Callable[[Notification], None]] = print_notification,
    on_countdown_tick: Optional[Callable[[int], None]] = None,
) -> CourseTracker:
    tracker = CourseTracker(
        build_persistence(settings),
        page_size=settings.page_size,
        notifier=notifier,
        on_countdown_tick=on_countdown_tick,
    )
    tracker.load(seed=demo_courses if settings.seed_demo else None)
    return tracker


def _saved(tracker: CourseTracker) -> int:
    # the change stands in memory, but the exit code reports the failed save
    return 1 if tracker.last_persistence_error is not None else 0


def _course_line(c: Course) -> str:
    return " | ".join(
        [c.id, c.course_name, f"{c.hours}h", c.tags or "-", c.instructor_name, STATUS_LABELS.get(c.status, c.status)]
    )


def _cmd_list(args: argparse.Namespace, tracker: CourseTracker) -> int:
    """
    Print one page of the filtered course table.
    """
    if args.page_size is not None:
        tracker.set_page_size(args.page_size)
    tracker.set_filter(tag=args.tag, instructor=args.instructor, status=args.status)
    tracker.set_page(args.page)

    view = tracker.view()
    if not view.filtered:
        print("No courses found." if len(tracker.store) == 0 else "No courses match the filter.")
        return 0

    for c in view.page.items:
        print(_course_line(c))
    if not view.page.items:
        print(f"Page {args.page} is out of range.")
    print(f"Page {view.page.page_number}/{view.page.total_pages} ({len(view.filtered)} courses)")
    return 0


def _cmd_facets(args: argparse.Namespace, tracker: CourseTracker) -> int:
    """
    Print the tag / instructor / status counts used for filtering.
    """
    facets = tracker.facets()
    if facets.is_empty():
        print("No courses found.")
        return 0

    for title, counts in (("Tags", facets.tag), ("Instructors", facets.instructor), ("Status", facets.status)):
        print(f"{title}:")
        for value, n in counts.items():
            label = STATUS_LABELS.get(value, value) if title == "Status" else value
            print(f"  {label or '(empty)'}: {n}")
    return 0


def _cmd_add(args: argparse.Namespace, tracker: CourseTracker) -> int:
    draft = CourseDraft(
        course_name=args.name,
        hours=args.hours,
        tags=args.tags,
        instructor_name=args.instructor,
        status=args.status,
    )
    course = tracker.add(draft)
    print(f"id: {course.id}")
    return _saved(tracker)


def _cmd_update(args: argparse.Namespace, tracker: CourseTracker) -> int:
    current = tracker.get(args.id).draft()
    draft = CourseDraft(
        course_name=args.name if args.name is not None else current.course_name,
        hours=args.hours if args.hours is not None else current.hours,
        tags=args.tags if args.tags is not None else current.tags,
        instructor_name=args.instructor if args.instructor is not None else current.instructor_name,
        status=args.status if args.status is not None else current.status,
    )
    tracker.update(args.id, draft)
    return _saved(tracker)


def _cmd_delete(args: argparse.Namespace, tracker: CourseTracker) -> int:
    tracker.delete(args.id)
    return _saved(tracker)


def _cmd_clear(args: argparse.Namespace, tracker: CourseTracker, countdown_done: threading.Event) -> int:
    """
    Arm clear-all, wait for the countdown, then ask for the final confirmation.
    """
    if len(tracker.store) == 0:
        print("No courses to clear.")
        return 0

    tracker.begin_clear_all()
    try:
        countdown_done.wait()
        if not args.yes:
            answer = input(f"Delete all {len(tracker.store)} courses? Type 'yes' to confirm: ").strip().lower()
            if answer != "yes":
                tracker.cancel_clear_all()
                return 0
        tracker.confirm_clear_all()
    except (KeyboardInterrupt, EOFError):
        tracker.cancel_clear_all()
        return 1
    return _saved(tracker)


def _cmd_serve(args: argparse.Namespace, settings: Settings) -> int:
    from coursetracker.api import CourseCollection, create_app

    app = create_app(CourseCollection(settings.api_db))
    app.run(host=args.host, port=args.port, debug=False)
    return 0


def _add_draft_options(p: argparse.ArgumentParser, required: bool) -> None:
    p.add_argument("--hours", type=int, required=required, help="Course hours (non-negative)")
    p.add_argument("--tags", type=str, default="" if required else None, help="Comma-separated tags")
    p.add_argument("--instructor", type=str, required=required, help="Instructor name")
    p.add_argument(
        "--status",
        choices=STATUSES,
        default=STATUSES[0] if required else None,
        help="Course status",
    )


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="coursetracker", description="Course Tracker CLI")
    parser.add_argument("--data-file", type=str, default=None, help="Local JSON storage file")
    parser.add_argument("--remote", type=str, default=None, help="Course API base URL (e.g. http://localhost:5000)")
    parser.add_argument("--seed-demo", action="store_true", help="Seed demo courses when nothing is saved yet")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List courses (filtered, one page)")
    p_list.add_argument("--tag", type=str, default=None, help="Exact tag")
    p_list.add_argument("--instructor", type=str, default=None, help="Exact instructor name")
    p_list.add_argument("--status", choices=STATUSES, default=None, help="Course status")
    p_list.add_argument("--page", type=int, default=1, help="Page number (1-based)")
    p_list.add_argument("--page-size", type=int, default=None, help="Courses per page")

    sub.add_parser("facets", help="Show tag / instructor / status counts")

    p_add = sub.add_parser("add", help="Add a course")
    p_add.add_argument("name", type=str, help="Course name")
    _add_draft_options(p_add, required=True)

    p_update = sub.add_parser("update", help="Edit a course by id")
    p_update.add_argument("id", type=str, help="Course id")
    p_update.add_argument("--name", type=str, default=None, help="Course name")
    _add_draft_options(p_update, required=False)

    p_delete = sub.add_parser("delete", help="Delete a course by id")
    p_delete.add_argument("id", type=str, help="Course id")

    p_clear = sub.add_parser("clear", help="Delete all courses (after a countdown)")
    p_clear.add_argument("--yes", action="store_true", help="Skip the final prompt after the countdown")

    p_serve = sub.add_parser("serve", help="Run the course API")
    p_serve.add_argument("--host", type=str, default="127.0.0.1", help="Bind address")
    p_serve.add_argument("--port", type=int, default=5000, help="Port")

    sub.add_parser("interactive", help="Interactive menu mode")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(verbose=args.verbose)

    try:
        settings = _settings_from_args(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)

    if args.command == "serve":
        raise SystemExit(_cmd_serve(args, settings))

    if args.command == "interactive":
        from coursetracker.interactive import run_interactive

        raise SystemExit(run_interactive(settings))

    countdown_done = threading.Event()

    def on_tick(remaining: int) -> None:
        print(f"Confirm in {remaining}s..." if remaining else "Countdown finished.")
        if remaining == 0:
            countdown_done.set()

    tracker = build_tracker(settings, on_countdown_tick=on_tick)
    if tracker.last_persistence_error is not None:
        # never overwrite data we could not read
        raise SystemExit(1)

    try:
        if args.command == "list":
            raise SystemExit(_cmd_list(args, tracker))
        if args.command == "facets":
            raise SystemExit(_cmd_facets(args, tracker))
        if args.command == "add":
            raise SystemExit(_cmd_add(args, tracker))
        if args.command == "update":
            raise SystemExit(_cmd_update(args, tracker))
        if args.command == "delete":
            raise SystemExit(_cmd_delete(args, tracker))
        if args.command == "clear":
            raise SystemExit(_cmd_clear(args, tracker, countdown_done))
    except (CourseTrackerError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)
    finally:
        tracker.close()

    raise SystemExit(2)
