"""Per-request dependencies.

The engine and the skill identifier are built once by ``create_app`` and kept
on ``app.state``; each request gets its own session.
"""

from typing import Generator

from fastapi import Depends, Request
from sqlmodel import Session

from taskboard.services.developer_service import DeveloperService
from taskboard.services.llm_service import SkillIdentifier
from taskboard.services.task_service import TaskService


def get_session(request: Request) -> Generator[Session, None, None]:
    session = Session(request.app.state.engine)
    try:
        yield session
    finally:
        session.close()


def get_skill_identifier(request: Request) -> SkillIdentifier:
    return request.app.state.skill_identifier


def get_task_service(
    session: Session = Depends(get_session),
    skill_identifier: SkillIdentifier = Depends(get_skill_identifier),
) -> TaskService:
    return TaskService(session, skill_identifier)


def get_developer_service(session: Session = Depends(get_session)) -> DeveloperService:
    return DeveloperService(session)
