"""SQLModel tables for developers, skills and the task tree."""

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, timezone
from enum import Enum
import uuid


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "In Progress"
    DONE = "Done"


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Skill(SQLModel, table=True):
    __tablename__ = "skills"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(max_length=100, unique=True, index=True, nullable=False)


class Developer(SQLModel, table=True):
    __tablename__ = "developers"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(max_length=200, nullable=False)
    email: str = Field(max_length=200, unique=True, index=True, nullable=False)


class Task(SQLModel, table=True):
    """A node of a task tree.

    ``parent_task_id`` is a plain indexed column: children are found by
    lookup on it, and a deleted parent may leave grandchildren pointing
    at a row that no longer exists.
    """

    __tablename__ = "tasks"

    id: str = Field(default_factory=new_id, primary_key=True)
    title: str = Field(nullable=False)
    status: str = Field(default=TaskStatus.TODO.value, max_length=20, nullable=False)
    developer_id: Optional[str] = Field(default=None, foreign_key="developers.id", index=True)
    parent_task_id: Optional[str] = Field(default=None, index=True)

    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)


# Join rows. (entity, skill) pairs are not unique at the storage level.
class DeveloperSkill(SQLModel, table=True):
    __tablename__ = "developer_skills"

    id: str = Field(default_factory=new_id, primary_key=True)
    developer_id: str = Field(foreign_key="developers.id", index=True, nullable=False)
    skill_id: str = Field(foreign_key="skills.id", index=True, nullable=False)


class TaskSkill(SQLModel, table=True):
    __tablename__ = "task_skills"

    id: str = Field(default_factory=new_id, primary_key=True)
    task_id: str = Field(foreign_key="tasks.id", index=True, nullable=False)
    skill_id: str = Field(foreign_key="skills.id", index=True, nullable=False)
