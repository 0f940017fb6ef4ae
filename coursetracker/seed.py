"""
Demonstration records for a first run.

Only the UI layers use these, and only when nothing was persisted yet and
seeding is enabled (COURSETRACKER_SEED_DEMO=1 or --seed-demo).
"""

from __future__ import annotations

from coursetracker.model import FINISHED, IN_PROGRESS, Course

_DEMO = [
    ("React Fundamentals", 12, "React, JavaScript", "Sarah Johnson", FINISHED),
    ("Advanced TypeScript", 8, "TypeScript, JavaScript", "Michael Chen", IN_PROGRESS),
    ("Python for Data Analysis", 20, "Python, Data", "Emily Rodriguez", IN_PROGRESS),
    ("Node.js Backend Basics", 10, "Node.js, JavaScript, Backend", "David Kim", FINISHED),
    ("SQL Essentials", 6, "SQL, Data", "Emily Rodriguez", FINISHED),
    ("Docker in Practice", 9, "DevOps, Docker", "Lisa Anderson", IN_PROGRESS),
    ("CSS Layout Mastery", 5, "CSS, Frontend", "Sarah Johnson", IN_PROGRESS),
    ("Machine Learning Intro", 24, "Python, ML", "James Wilson", IN_PROGRESS),
    ("Git Workflows", 3, "Git, Tools", "David Kim", FINISHED),
    ("GraphQL APIs", 7, "GraphQL, Backend", "Michael Chen", IN_PROGRESS),
    ("Testing with Jest", 6, "JavaScript, Testing", "Lisa Anderson", FINISHED),
    ("Kubernetes Basics", 15, "DevOps, Kubernetes", "James Wilson", IN_PROGRESS),
]


def demo_courses() -> list[Course]:
    return [
        Course(
            id=f"demo-{i:02d}",
            course_name=name,
            hours=hours,
            tags=tags,
            instructor_name=instructor,
            status=status,
        )
        for i, (name, hours, tags, instructor, status) in enumerate(_DEMO, start=1)
    ]
