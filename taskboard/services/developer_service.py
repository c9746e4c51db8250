import logging
from typing import List

from sqlmodel import Session, select

from taskboard.db.database import atomic
from taskboard.errors import NotFoundError
from taskboard.models.models import Developer, DeveloperSkill, Skill, Task
from taskboard.models.schemas import (
    DeveloperCreate,
    DeveloperRead,
    DeveloperSkillRead,
    DeveloperUpdate,
    SkillRead,
    TaskWithSkills,
    task_columns,
)
from taskboard.services.skill_service import resolve_skill_ids, task_skill_links

logger = logging.getLogger(__name__)


class DeveloperService:
    def __init__(self, session: Session):
        self.session = session

    def list_developers(self) -> List[DeveloperRead]:
        developers = self.session.exec(select(Developer).order_by(Developer.name)).all()
        return [self._present(developer) for developer in developers]

    def get_developer(self, developer_id: str) -> DeveloperRead:
        return self._present(self._require_developer(developer_id))

    def create_developer(self, payload: DeveloperCreate) -> DeveloperRead:
        with atomic(self.session):
            developer = Developer(name=payload.name, email=payload.email)
            self.session.add(developer)
            self.session.flush()
            if payload.skills:
                self._attach_skills(developer.id, payload.skills)

        logger.info(f"Created developer {developer.email} ({developer.id})")
        return self.get_developer(developer.id)

    def update_developer(self, developer_id: str, payload: DeveloperUpdate) -> DeveloperRead:
        with atomic(self.session):
            developer = self._require_developer(developer_id)
            if payload.name:
                developer.name = payload.name
            if payload.email:
                developer.email = payload.email
            self.session.add(developer)

            if payload.skills is not None:
                links = self.session.exec(
                    select(DeveloperSkill).where(DeveloperSkill.developer_id == developer_id)
                ).all()
                for link in links:
                    self.session.delete(link)
                self.session.flush()
                self._attach_skills(developer_id, payload.skills)

        logger.info(f"Updated developer {developer_id}")
        return self.get_developer(developer_id)

    def _require_developer(self, developer_id: str) -> Developer:
        developer = self.session.get(Developer, developer_id)
        if developer is None:
            raise NotFoundError("Developer not found")
        return developer

    def _attach_skills(self, developer_id: str, skill_names: List[str]) -> None:
        for skill_id in resolve_skill_ids(self.session, skill_names):
            self.session.add(DeveloperSkill(developer_id=developer_id, skill_id=skill_id))
        self.session.flush()

    def _present(self, developer: Developer) -> DeveloperRead:
        skill_rows = self.session.exec(
            select(DeveloperSkill, Skill)
            .join(Skill, DeveloperSkill.skill_id == Skill.id)
            .where(DeveloperSkill.developer_id == developer.id)
        )
        skills = [
            DeveloperSkillRead(
                id=link.id,
                developer_id=link.developer_id,
                skill_id=link.skill_id,
                skill=SkillRead(id=skill.id, name=skill.name),
            )
            for link, skill in skill_rows
        ]

        tasks = []
        assigned = self.session.exec(
            select(Task).where(Task.developer_id == developer.id).order_by(Task.created_at)
        ).all()
        for task in assigned:
            tasks.append(TaskWithSkills(**task_columns(task), skills=task_skill_links(self.session, task.id)))

        return DeveloperRead(
            id=developer.id,
            name=developer.name,
            email=developer.email,
            skills=skills,
            tasks=tasks,
        )
