"""
Unit tests for the local storage binding.

Storage contract:
- Missing file or missing key -> None (nothing persisted yet)
- The list lives under the "courses" key; other keys are preserved
- Corrupt content -> PersistenceFailure, on load and on save (the file is left alone)
"""

import json
import tempfile
import unittest
from pathlib import Path

from coursetracker.errors import PersistenceFailure
from coursetracker.storage import LocalCourseStore

from fakes import course


class TestLocalCourseStore(unittest.TestCase):
    def test_load_missing_file_returns_none(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            store = LocalCourseStore(Path(d) / "missing.json")
            self.assertIsNone(store.load_all())

    def test_save_and_load_roundtrip(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "nested" / "courses.json"
            store = LocalCourseStore(p)
            items = [course("1", "React", tags="React, JS"), course("2", "SQL", status="finished")]
            store.save_all(items)

            self.assertEqual(store.load_all(), items)
            data = json.loads(p.read_text(encoding="utf-8"))
            self.assertEqual([c["id"] for c in data["courses"]], ["1", "2"])

    def test_empty_list_is_not_absent(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            store = LocalCourseStore(Path(d) / "courses.json")
            store.save_all([])
            self.assertEqual(store.load_all(), [])

    def test_other_keys_are_preserved(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "courses.json"
            p.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")
            store = LocalCourseStore(p)
            self.assertIsNone(store.load_all())

            store.save_all([course("1", "A")])
            data = json.loads(p.read_text(encoding="utf-8"))
            self.assertEqual(data["theme"], "dark")
            self.assertEqual(len(data["courses"]), 1)

    def test_corrupt_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "courses.json"
            p.write_text("{not json", encoding="utf-8")
            with self.assertRaises(PersistenceFailure):
                LocalCourseStore(p).load_all()

    def test_save_never_overwrites_unreadable_file(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "courses.json"
            broken = '{"courses": [{"id": "1", "course_name": "Keep"'
            p.write_text(broken, encoding="utf-8")
            with self.assertRaises(PersistenceFailure):
                LocalCourseStore(p).save_all([course("2", "New")])
            self.assertEqual(p.read_text(encoding="utf-8"), broken)

    def test_wrong_shape_raises(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "courses.json"
            p.write_text(json.dumps({"courses": {"1": "A"}}), encoding="utf-8")
            with self.assertRaises(PersistenceFailure):
                LocalCourseStore(p).load_all()

    def test_invalid_record_raises(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "courses.json"
            p.write_text(json.dumps({"courses": [{"course_name": "no id"}]}), encoding="utf-8")
            with self.assertRaises(PersistenceFailure):
                LocalCourseStore(p).load_all()


if __name__ == "__main__":
    unittest.main()
