"""
Pytest configuration and fixtures for taskboard tests.

Every test gets its own in-memory SQLite database and a fake skill
identifier, so nothing here talks to Gemini. Tests that need separate
connections per request use ``file_engine``, backed by a file under tmp_path.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from taskboard.db.database import create_database_engine, init_database
from taskboard.main import create_app
from taskboard.models.models import Developer, DeveloperSkill
from taskboard.services.skill_service import resolve_skill_ids
from taskboard.services.task_service import TaskService


class FakeSkillIdentifier:
    """Records every title it is asked about and answers with fixed skills."""

    def __init__(self, skills=None):
        self.skills = list(skills) if skills is not None else ["Backend"]
        self.calls = []

    async def identify(self, title):
        self.calls.append(title)
        return list(self.skills)


class SlowSkillIdentifier(FakeSkillIdentifier):
    """Like FakeSkillIdentifier, but each answer takes ``delay`` seconds."""

    def __init__(self, skills=None, delay=0.3):
        super().__init__(skills)
        self.delay = delay

    async def identify(self, title):
        await asyncio.sleep(self.delay)
        return await super().identify(title)


@pytest.fixture
def engine():
    """Fresh in-memory database with all tables."""
    engine = create_database_engine("sqlite://")
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path):
    """Database in a real file, with its own connection per session."""
    engine = create_database_engine(f"sqlite:///{tmp_path / 'taskboard.db'}")
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def identifier():
    return FakeSkillIdentifier()


@pytest.fixture
def slow_identifier():
    return SlowSkillIdentifier(delay=0.3)


@pytest.fixture
def service(session, identifier):
    return TaskService(session, identifier)


@pytest.fixture
def client(engine, identifier):
    """HTTP client over an app wired to the test database."""
    app = create_app(engine=engine, skill_identifier=identifier)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def make_developer(session):
    """Insert a developer holding the given skill names."""

    def _make(name="Alice", email=None, skills=()):
        developer = Developer(name=name, email=email or f"{name.lower()}@example.com")
        session.add(developer)
        session.flush()
        for skill_id in resolve_skill_ids(session, skills):
            session.add(DeveloperSkill(developer_id=developer.id, skill_id=skill_id))
        session.commit()
        return developer.id

    return _make
