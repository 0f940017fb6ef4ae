"""
Tests for the interactive menu.

The menu is driven with scripted answers to _prompt, and the rich console
is pointed at a buffer so the rendered table and messages can be checked.
"""

import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from rich.console import Console

from coursetracker import interactive
from coursetracker.config import Settings
from coursetracker.storage import LocalCourseStore

from fakes import course


class TestInteractive(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.data_file = Path(self._tmp.name) / "courses.json"
        self.settings = Settings(data_file=self.data_file)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, answers: list[str]) -> tuple[int, str, mock.Mock]:
        out = io.StringIO()
        prompt = mock.Mock(side_effect=answers)
        with mock.patch.object(interactive, "console", Console(file=out, width=200)), mock.patch.object(
            interactive, "_prompt", prompt
        ):
            code = interactive.run_interactive(self.settings)
        return code, out.getvalue(), prompt

    def _saved(self) -> list[dict]:
        return json.loads(self.data_file.read_text(encoding="utf-8"))["courses"]

    def test_unreadable_file_stops_before_the_menu(self) -> None:
        broken = '{"courses": [{"id": "1", "course_name": "Keep"'
        self.data_file.write_text(broken, encoding="utf-8")

        code, out, prompt = self._run([])

        self.assertEqual(code, 1)
        self.assertIn("Could not load saved courses", out)
        prompt.assert_not_called()
        self.assertEqual(self.data_file.read_text(encoding="utf-8"), broken)

    def test_add_course(self) -> None:
        code, out, _ = self._run(["1", "React Basics", "12", "React, JS", "Sarah", "2", "0"])

        self.assertEqual(code, 0)
        self.assertIn("Course added: React Basics", out)
        self.assertIn("Bye.", out)
        saved = self._saved()
        self.assertEqual(len(saved), 1)
        self.assertEqual(saved[0]["course_name"], "React Basics")
        self.assertEqual(saved[0]["hours"], 12)
        self.assertEqual(saved[0]["status"], "finished")

    def test_duplicate_is_shown_and_menu_continues(self) -> None:
        LocalCourseStore(self.data_file).save_all([course("1", "Intro", instructor="Sarah")])

        code, out, _ = self._run(["1", "intro", "3", "", "SARAH", "", "0"])

        self.assertEqual(code, 0)
        self.assertIn("already exists", out)
        self.assertIn("Bye.", out)
        self.assertEqual(len(self._saved()), 1)

    def test_edit_keeps_blank_fields(self) -> None:
        LocalCourseStore(self.data_file).save_all([course("1", "Intro", tags="React", instructor="Sarah")])

        self._run(["2", "1", "", "8", "", "", "2", "0"])

        saved = self._saved()[0]
        self.assertEqual(saved["id"], "1")
        self.assertEqual(saved["course_name"], "Intro")
        self.assertEqual(saved["tags"], "React")
        self.assertEqual(saved["hours"], 8)
        self.assertEqual(saved["status"], "finished")

    def test_delete_asks_first(self) -> None:
        LocalCourseStore(self.data_file).save_all([course("1", "Intro"), course("2", "SQL")])

        self._run(["3", "1", "n", "3", "2", "y", "0"])

        self.assertEqual([c["course_name"] for c in self._saved()], ["Intro"])

    def test_filter_by_tag(self) -> None:
        LocalCourseStore(self.data_file).save_all(
            [course("1", "Intro", tags="React"), course("2", "SQL", tags="Data", instructor="Emily")]
        )

        _, out, _ = self._run(["4", "1", "2", "0"])

        self.assertIn("Courses: 2 | Matching: 1 | Filter: tag=Data", out)

    def test_invalid_choice(self) -> None:
        _, out, _ = self._run(["9", "0"])
        self.assertIn("Invalid choice.", out)
        self.assertIn("No courses yet.", out)


if __name__ == "__main__":
    unittest.main()
