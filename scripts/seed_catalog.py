"""
Seed the course catalog (courses + ordered modules) into DATABASE_URL.

Courses are authored outside the dashboard; this script stands in for that
process on a fresh database. Existing courses with the same id are left alone.

Usage:
    python scripts/seed_catalog.py [--reset]
"""

import argparse
import sys
from pathlib import Path

project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from aspyr.config import SessionLocal, create_db, reset_db  # noqa: E402
from aspyr.models.models import Course, Module  # noqa: E402

CATALOG = [
    {
        "id": "ui-magic",
        "title": "UI Magic",
        "description": "Design delightful interfaces with layout, color and motion.",
        "category": "Design",
        "icon": "Palette",
        "color": "purple",
        "modules": [
            ("Design Principles", "Hierarchy, contrast and rhythm.", "30 min"),
            ("Color & Typography", "Palettes and type scales that work.", "45 min"),
            ("Motion Basics", "Meaningful transitions and micro-interactions.", "40 min"),
        ],
    },
    {
        "id": "backend-essentials",
        "title": "Backend Essentials",
        "description": "APIs, databases and authentication from the ground up.",
        "category": "Backend",
        "icon": "Server",
        "color": "blue",
        "modules": [
            ("HTTP & REST", "Requests, responses and resource design.", "45 min"),
            ("Relational Data", "Tables, keys and queries.", "60 min"),
            ("Auth Fundamentals", "Sessions, tokens and password hashing.", "50 min"),
            ("Deploying Services", "Configuration, logging and health checks.", "40 min"),
        ],
    },
    {
        "id": "frontend-foundations",
        "title": "Frontend Foundations",
        "description": "Modern JavaScript, components and state.",
        "category": "Frontend",
        "icon": "Code",
        "color": "pink",
        "modules": [
            ("Modern JavaScript", "Modules, promises and async/await.", "50 min"),
            ("Components", "Props, composition and reuse.", "45 min"),
            ("State Management", "Local state, effects and data fetching.", "55 min"),
        ],
    },
]


def seed() -> int:
    db = SessionLocal()
    created = 0
    try:
        for spec in CATALOG:
            if db.query(Course).filter(Course.id == spec["id"]).first() is not None:
                print(f"{spec['title']}: already present. Skipping.")
                continue
            db.add(
                Course(
                    id=spec["id"],
                    title=spec["title"],
                    description=spec["description"],
                    category=spec["category"],
                    icon=spec["icon"],
                    color=spec["color"],
                )
            )
            for idx, (title, description, duration) in enumerate(spec["modules"], start=1):
                db.add(
                    Module(
                        id=f"{spec['id']}-{idx}",
                        course_id=spec["id"],
                        title=title,
                        description=description,
                        order_index=idx,
                        duration=duration,
                    )
                )
            created += 1
            print(f"{spec['title']}: added {len(spec['modules'])} modules")
        db.commit()
    finally:
        db.close()
    return created


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--reset", action="store_true", help="drop and recreate all tables first")
    args = parser.parse_args()
    if args.reset:
        reset_db()
    else:
        create_db()
    created = seed()
    print(f"Seeded {created} course(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
