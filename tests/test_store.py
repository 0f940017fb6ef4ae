"""
Unit tests for the record store and its derived views.

Conventions checked here:
- filtering is exact and case-sensitive, all set criteria are ANDed
- an empty list has 0 pages; pages past the end are empty
- an empty tag segment is its own facet key
"""

import unittest

from coursetracker.store import FilterSelection, RecordStore, facet_counts, filtered, paginate

from fakes import course


def _sample():
    return [
        course("1", "React Basics", tags="React, JavaScript", instructor="Sarah", status="finished"),
        course("2", "TypeScript", tags="TypeScript, JavaScript", instructor="Mike", status="in_progress"),
        course("3", "Hooks", tags="React", instructor="Sarah", status="in_progress"),
        course("4", "SQL", tags="SQL", instructor="Emily", status="finished"),
    ]


class TestRecordStore(unittest.TestCase):
    def test_all_returns_copy_in_insertion_order(self) -> None:
        store = RecordStore(_sample())
        items = store.all()
        self.assertEqual([c.id for c in items], ["1", "2", "3", "4"])
        items.clear()
        self.assertEqual(len(store), 4)

    def test_replace_bumps_version(self) -> None:
        store = RecordStore()
        v = store.version
        store.replace(_sample())
        self.assertGreater(store.version, v)

    def test_duplicate_ids_rejected(self) -> None:
        store = RecordStore()
        with self.assertRaises(ValueError):
            store.replace([course("1", "A"), course("1", "B")])

    def test_get_and_index_of(self) -> None:
        store = RecordStore(_sample())
        self.assertEqual(store.get("3").course_name, "Hooks")
        self.assertIsNone(store.get("99"))
        self.assertEqual(store.index_of("2"), 1)
        self.assertEqual(store.index_of("99"), -1)


class TestFacetCounts(unittest.TestCase):
    def test_counts_per_facet(self) -> None:
        facets = facet_counts(_sample())
        self.assertEqual(facets.tag, {"React": 2, "JavaScript": 2, "TypeScript": 1, "SQL": 1})
        self.assertEqual(facets.instructor, {"Sarah": 2, "Mike": 1, "Emily": 1})
        self.assertEqual(facets.status, {"finished": 2, "in_progress": 2})

    def test_empty_list_gives_empty_facets(self) -> None:
        facets = facet_counts([])
        self.assertTrue(facets.is_empty())

    def test_empty_tag_segment_is_its_own_key(self) -> None:
        facets = facet_counts([course("1", "A", tags=",React"), course("2", "B", tags="")])
        self.assertEqual(facets.tag, {"": 2, "React": 1})

    def test_repeated_tag_counts_record_once(self) -> None:
        facets = facet_counts([course("1", "A", tags="React, React ")])
        self.assertEqual(facets.tag, {"React": 1})


class TestFiltered(unittest.TestCase):
    def test_no_criteria_is_identity(self) -> None:
        items = _sample()
        self.assertEqual(filtered(items, FilterSelection()), items)

    def test_status_subset_keeps_order(self) -> None:
        result = filtered(_sample(), FilterSelection(status="finished"))
        self.assertEqual([c.id for c in result], ["1", "4"])

    def test_tag_match_is_exact_and_case_sensitive(self) -> None:
        items = [course("1", "A", tags="React, JavaScript")]
        self.assertEqual(len(filtered(items, FilterSelection(tag="React"))), 1)
        self.assertEqual(len(filtered(items, FilterSelection(tag="react"))), 0)
        self.assertEqual(len(filtered(items, FilterSelection(tag="Reac"))), 0)

    def test_criteria_are_anded(self) -> None:
        result = filtered(_sample(), FilterSelection(tag="React", instructor="Sarah", status="in_progress"))
        self.assertEqual([c.id for c in result], ["3"])

    def test_instructor_exact(self) -> None:
        self.assertEqual(filtered(_sample(), FilterSelection(instructor="sarah")), [])

    def test_empty_tag_filter(self) -> None:
        items = [course("1", "A", tags=",React"), course("2", "B", tags="React")]
        self.assertEqual([c.id for c in filtered(items, FilterSelection(tag=""))], ["1"])


class TestPaginate(unittest.TestCase):
    def test_fifteen_records_page_size_ten(self) -> None:
        items = [course(str(i), f"C{i}") for i in range(15)]
        p1 = paginate(items, 10, 1)
        p2 = paginate(items, 10, 2)
        p3 = paginate(items, 10, 3)
        self.assertEqual(p1.total_pages, 2)
        self.assertEqual(len(p1.items), 10)
        self.assertEqual([c.id for c in p2.items], [str(i) for i in range(10, 15)])
        self.assertEqual(p3.items, [])

    def test_empty_list_has_zero_pages(self) -> None:
        page = paginate([], 10, 1)
        self.assertEqual(page.total_pages, 0)
        self.assertEqual(page.items, [])

    def test_page_below_one_is_empty(self) -> None:
        items = [course("1", "A")]
        self.assertEqual(paginate(items, 10, 0).items, [])

    def test_exact_multiple(self) -> None:
        items = [course(str(i), f"C{i}") for i in range(20)]
        self.assertEqual(paginate(items, 10, 1).total_pages, 2)

    def test_invalid_page_size(self) -> None:
        with self.assertRaises(ValueError):
            paginate([], 0, 1)


if __name__ == "__main__":
    unittest.main()
