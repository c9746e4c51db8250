import logging
from typing import Iterable, List

from sqlmodel import Session, select

from taskboard.errors import NotFoundError
from taskboard.models.models import DeveloperSkill, Skill, Task, TaskSkill
from taskboard.models.schemas import SkillDetail, SkillRead, SkillTaskRead, TaskSkillRead, TaskSummary, task_columns

logger = logging.getLogger(__name__)


def get_or_create_skill(session: Session, name: str) -> Skill:
    """Find a skill by exact name, creating it on first reference."""
    skill = session.exec(select(Skill).where(Skill.name == name)).first()
    if skill is None:
        skill = Skill(name=name)
        session.add(skill)
        session.flush()
        logger.info(f"Created skill '{name}'")
    return skill


def resolve_skill_ids(session: Session, names: Iterable[str]) -> List[str]:
    return [get_or_create_skill(session, name).id for name in names]


def task_skill_names(session: Session, task_id: str) -> List[str]:
    statement = (
        select(Skill.name)
        .join(TaskSkill, TaskSkill.skill_id == Skill.id)
        .where(TaskSkill.task_id == task_id)
    )
    return list(session.exec(statement))


def developer_skill_names(session: Session, developer_id: str) -> List[str]:
    statement = (
        select(Skill.name)
        .join(DeveloperSkill, DeveloperSkill.skill_id == Skill.id)
        .where(DeveloperSkill.developer_id == developer_id)
    )
    return list(session.exec(statement))


def _skill_detail(session: Session, skill: Skill) -> SkillDetail:
    statement = (
        select(TaskSkill, Task)
        .join(Task, TaskSkill.task_id == Task.id)
        .where(TaskSkill.skill_id == skill.id)
        .order_by(Task.created_at)
    )
    tasks = [
        SkillTaskRead(id=link.id, task_id=link.task_id, skill_id=link.skill_id, task=TaskSummary(**task_columns(task)))
        for link, task in session.exec(statement)
    ]
    return SkillDetail(id=skill.id, name=skill.name, tasks=tasks)


def list_skills(session: Session) -> List[SkillDetail]:
    skills = session.exec(select(Skill).order_by(Skill.name)).all()
    return [_skill_detail(session, skill) for skill in skills]


def get_skill(session: Session, skill_id: str) -> SkillDetail:
    skill = session.get(Skill, skill_id)
    if skill is None:
        raise NotFoundError("Skill not found")
    return _skill_detail(session, skill)


def task_skill_links(session: Session, task_id: str) -> List[TaskSkillRead]:
    statement = (
        select(TaskSkill, Skill)
        .join(Skill, TaskSkill.skill_id == Skill.id)
        .where(TaskSkill.task_id == task_id)
    )
    return [
        TaskSkillRead(
            id=link.id,
            task_id=link.task_id,
            skill_id=link.skill_id,
            skill=SkillRead(id=skill.id, name=skill.name),
        )
        for link, skill in session.exec(statement)
    ]
