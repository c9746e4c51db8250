"""Tests for the seed script."""

from sqlmodel import select

from taskboard.db.seed import DEVELOPERS, SKILLS, run
from taskboard.models.models import Developer, DeveloperSkill, Skill
from taskboard.services.skill_service import developer_skill_names


def test_seed_is_idempotent(engine, session):
    run(engine)
    run(engine)

    assert sorted(s.name for s in session.exec(select(Skill))) == sorted(SKILLS)
    developers = session.exec(select(Developer)).all()
    assert len(developers) == len(DEVELOPERS)
    assert len(session.exec(select(DeveloperSkill)).all()) == sum(len(d["skills"]) for d in DEVELOPERS)


def test_seeded_developers_hold_their_skills(engine, session):
    run(engine)

    bob = session.exec(select(Developer).where(Developer.email == "bob@gmail.com")).one()
    assert sorted(developer_skill_names(session, bob.id)) == ["Backend", "Database"]
