from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime

from taskboard.models.models import TaskStatus


class CamelModel(BaseModel):
    """Serialized with camelCase keys; accepts either camelCase or snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _strip(value):
    if isinstance(value, str):
        return value.strip()
    return value


# --- Requests ---

class TaskCreate(CamelModel):
    title: str = Field(min_length=1)
    developer_id: Optional[str] = None
    skills: Optional[List[str]] = None
    subtasks: Optional[List["TaskCreate"]] = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value):
        return _strip(value)


class TaskUpdate(CamelModel):
    title: Optional[str] = None
    status: Optional[TaskStatus] = None
    developer_id: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def blank_status_is_absent(cls, value):
        return _blank_to_none(value)

    # A blank title or developerId ends up falsy and is ignored; only an
    # explicit null unassigns.
    @field_validator("title", "developer_id", mode="before")
    @classmethod
    def strip_text(cls, value):
        return _strip(value)


class TaskTreeUpdate(CamelModel):
    # ``id`` is only meaningful on nested entries: present means "update",
    # absent with a title means "create under the enclosing task".
    id: Optional[str] = None
    title: Optional[str] = None
    status: Optional[TaskStatus] = None
    skills: Optional[List[str]] = None
    subtasks: Optional[List["TaskTreeUpdate"]] = None

    @field_validator("status", mode="before")
    @classmethod
    def blank_status_is_absent(cls, value):
        return _blank_to_none(value)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value):
        return _strip(value)


class DeveloperCreate(CamelModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    skills: Optional[List[str]] = None


class DeveloperUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    skills: Optional[List[str]] = None


# --- Responses ---

class SkillRead(CamelModel):
    id: str
    name: str


class DeveloperSummary(CamelModel):
    id: str
    name: str
    email: str


class TaskSummary(CamelModel):
    id: str
    title: str
    status: str
    developer_id: Optional[str] = None
    parent_task_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TaskSkillRead(CamelModel):
    id: str
    task_id: str
    skill_id: str
    skill: SkillRead


class TaskWithSkills(TaskSummary):
    skills: List[TaskSkillRead] = []


class TaskRead(TaskWithSkills):
    developer: Optional[DeveloperSummary] = None
    subtasks: List["TaskRead"] = []


class DeveloperSkillRead(CamelModel):
    id: str
    developer_id: str
    skill_id: str
    skill: SkillRead


class DeveloperRead(DeveloperSummary):
    skills: List[DeveloperSkillRead] = []
    tasks: List[TaskWithSkills] = []


class SkillTaskRead(CamelModel):
    id: str
    task_id: str
    skill_id: str
    task: TaskSummary


class SkillDetail(SkillRead):
    tasks: List[SkillTaskRead] = []


class MessageResponse(BaseModel):
    message: str


def task_columns(task) -> dict:
    # Attribute access reloads rows expired by a commit, model_dump() does not
    return {
        "id": task.id,
        "title": task.title,
        "status": task.status,
        "developer_id": task.developer_id,
        "parent_task_id": task.parent_task_id,
        "created_at": task.created_at,
        "updated_at": task.updated_at,
    }
