# Seed the database with the default skill catalogue and a few developers.
# Run with: python -m taskboard.db.seed

import logging

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from taskboard.db.database import create_database_engine, init_database, session_scope
from taskboard.models.models import Developer, DeveloperSkill
from taskboard.services.skill_service import get_or_create_skill, resolve_skill_ids

logger = logging.getLogger(__name__)

SKILLS = [
    "Frontend",
    "Backend",
    "Database",
    "DevOps",
    "UI/UX",
    "Testing",
    "Mobile",
    "AI/ML",
]

DEVELOPERS = [
    {"name": "Alice", "email": "alice@gmail.com", "skills": ["Frontend", "UI/UX"]},
    {"name": "Bob", "email": "bob@gmail.com", "skills": ["Backend", "Database"]},
    {"name": "Carol", "email": "carol@gmail.com", "skills": ["Frontend", "Backend"]},
    {"name": "Dave", "email": "dave@gmail.com", "skills": ["Backend"]},
]


def seed_database(session: Session) -> int:
    """Insert missing skills and developers. Returns the number of developers added."""
    for name in SKILLS:
        get_or_create_skill(session, name)

    added = 0
    for entry in DEVELOPERS:
        existing = session.exec(select(Developer).where(Developer.email == entry["email"])).first()
        if existing is not None:
            continue

        developer = Developer(name=entry["name"], email=entry["email"])
        session.add(developer)
        session.flush()
        for skill_id in resolve_skill_ids(session, entry["skills"]):
            session.add(DeveloperSkill(developer_id=developer.id, skill_id=skill_id))
        added += 1

    return added


def run(engine: Engine) -> None:
    init_database(engine)
    with session_scope(engine) as session:
        added = seed_database(session)
    logger.info(f"Database seeded successfully ({added} developer(s) added)")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run(create_database_engine())
