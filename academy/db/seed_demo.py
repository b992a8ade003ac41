"""
First-run sample data: four students, two classes and their enrollments.

Does nothing when any student already exists.
"""
import argparse
import asyncio
import logging
import logging.config
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.config import LOGGING
from academy.core.models import ClassOffering, Enrollment, Student
from academy.db.session import AsyncSessionLocal

logger = logging.getLogger(__name__)

SAMPLE_STUDENTS = [
    ("GM001", "Alex Johnson", "alex@example.com", "555-0101"),
    ("GM002", "Sarah Williams", "sarah@example.com", "555-0102"),
    ("GM003", "Michael Chen", "michael@example.com", "555-0103"),
    ("GM004", "Emma Davis", "emma@example.com", "555-0104"),
]

SAMPLE_CLASSES = [
    ("Elementary Robotics", "Block coding and robots", 12),
    ("Middle School Python", "Introduction to Python", 10),
]

# (student index, class index)
SAMPLE_ENROLLMENTS = [(0, 0), (1, 0), (2, 0), (3, 1)]


async def seed_demo(db: AsyncSession, start_date: date = date(2026, 1, 15), end_date: date = date(2026, 5, 30)) -> bool:
    """Insert the sample dataset. Returns False when data already exists."""
    existing = await db.execute(select(Student.id).limit(1))
    if existing.scalar_one_or_none() is not None:
        logger.info("Data already exists; skipping sample data.")
        return False

    students = [
        Student(student_code=code, full_name=name, email=email, phone=phone, status="Active")
        for code, name, email, phone in SAMPLE_STUDENTS
    ]
    classes = [
        ClassOffering(
            name=name,
            description=description,
            start_date=start_date,
            end_date=end_date,
            max_capacity=capacity,
            status="Active",
        )
        for name, description, capacity in SAMPLE_CLASSES
    ]
    db.add_all(students + classes)
    await db.flush()  # populate ids
    db.add_all(
        Enrollment(student_id=students[s].id, class_id=classes[c].id)
        for s, c in SAMPLE_ENROLLMENTS
    )
    await db.commit()
    logger.info("Sample data created: %d students, %d classes", len(students), len(classes))
    return True


async def main(start: date, end: date) -> None:
    async with AsyncSessionLocal() as db:
        try:
            await seed_demo(db, start, end)
        except Exception:
            await db.rollback()
            logger.exception("Sample data seed failed")
            raise


if __name__ == "__main__":
    logging.config.dictConfig(LOGGING)
    parser = argparse.ArgumentParser(description="Load first-run sample students and classes")
    parser.add_argument("--start", type=date.fromisoformat, default=date(2026, 1, 15), help="Class start date (YYYY-MM-DD)")
    parser.add_argument("--end", type=date.fromisoformat, default=date(2026, 5, 30), help="Class end date (YYYY-MM-DD)")
    args = parser.parse_args()
    asyncio.run(main(args.start, args.end))
