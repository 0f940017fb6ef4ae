"""Course Tracker: a single-user course list with filters, paging and JSON/API persistence."""
