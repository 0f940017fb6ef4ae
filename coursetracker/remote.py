"""
Remote binding: mirror the course list through the course API.

The API exposes four verbs on one resource path (see coursetracker.api):

    GET    /api/courses          -> all records
    POST   /api/courses          -> create (server assigns the id)
    PUT    /api/courses          -> replace one record (body carries the id)
    DELETE /api/courses?id=<id>  -> delete one record

save_all() keeps the whole-list contract of the local binding by
reconciling: records missing locally are deleted, changed records are
PUT, new records are POSTed. Ids the server assigns to new records are
remembered so later saves address the same server record, and save_all
returns them so the caller can adopt the server ids.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

import requests

from coursetracker.errors import CourseTrackerError, PersistenceFailure
from coursetracker.model import Course

logger = logging.getLogger(__name__)

COURSES_PATH = "/api/courses"
DEFAULT_TIMEOUT = 10.0


class RemoteCourseStore:
    """HTTP client for the course API."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = base_url.rstrip("/") + COURSES_PATH
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.setdefault("Accept", "application/json")
        # locally issued id -> server-assigned id
        self._server_ids: dict[str, str] = {}

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    def _request(self, method: str, **kwargs: Any) -> Any:
        try:
            resp = self._session.request(method, self.url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise PersistenceFailure(f"{method} {self.url} failed: {e}") from e

        if not resp.ok:
            raise PersistenceFailure(f"{method} {self.url} returned {resp.status_code}: {_error_message(resp)}")
        try:
            return resp.json()
        except ValueError as e:
            raise PersistenceFailure(f"{method} {self.url} returned invalid JSON") from e

    def list_courses(self) -> list[Course]:
        data = self._request("GET")
        if not isinstance(data, list):
            raise PersistenceFailure(f"GET {self.url} returned {type(data).__name__}, expected a list")
        try:
            return [Course.from_dict(item) for item in data]
        except CourseTrackerError as e:
            raise PersistenceFailure(f"GET {self.url} returned an invalid course: {e}") from e

    def create(self, course: Course) -> Course:
        body = course.draft().to_dict()
        created = Course.from_dict(self._request("POST", json=body))
        logger.debug("Created %s on server as %s", course.id, created.id)
        return created

    def replace(self, course: Course) -> Course:
        return Course.from_dict(self._request("PUT", json=course.to_dict()))

    def delete(self, course_id: str) -> None:
        self._request("DELETE", params={"id": course_id})

    # ------------------------------------------------------------------
    # Persistence binding
    # ------------------------------------------------------------------

    def load_all(self) -> Optional[list[Course]]:
        courses = self.list_courses()
        self._server_ids = {c.id: c.id for c in courses}
        logger.debug("Loaded %s courses from %s", len(courses), self.url)
        return courses

    def save_all(self, courses: Iterable[Course]) -> dict[str, str]:
        """
        Reconcile the server with `courses`. Returns local id -> server id for
        every record the server holds under a different id.
        """
        local = list(courses)
        on_server = {c.id: c for c in self.list_courses()}

        wanted: dict[str, Course] = {}
        for c in local:
            server_id = self._server_ids.get(c.id, c.id)
            if server_id in on_server:
                wanted[server_id] = Course.from_draft(server_id, c.draft())

        # deletes first, so a re-added pair does not clash with its old copy
        for server_id in on_server:
            if server_id not in wanted:
                self.delete(server_id)
                logger.debug("Deleted %s on server", server_id)

        for server_id, course in wanted.items():
            if on_server[server_id] != course:
                self.replace(course)
                logger.debug("Updated %s on server", server_id)

        for c in local:
            if self._server_ids.get(c.id, c.id) not in on_server:
                created = self.create(c)
                self._server_ids[c.id] = created.id

        live = {self._server_ids.get(c.id, c.id) for c in local}
        self._server_ids = {k: v for k, v in self._server_ids.items() if v in live}
        return {c.id: self._server_ids[c.id] for c in local if self._server_ids.get(c.id, c.id) != c.id}


def _error_message(resp: requests.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text.strip() or resp.reason or "no details"
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return str(data)
