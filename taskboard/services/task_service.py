"""Task tree engine.

Creates and updates a task together with its nested subtasks and skill
associations, and enforces the two business rules on tasks:

- a task becomes ``Done`` only when every direct subtask is ``Done``;
- a developer is assigned only when they hold every skill the task requires.

Trees are rebuilt by looking up children on ``parent_task_id`` rather than
through ORM relationships. Both the Done check and the delete cascade look
one level down only.

Skill inference for a whole payload tree runs before any row is written, and
the writes themselves run in the threadpool, so no transaction stays open
across a call to the identifier.
"""

import logging
from typing import List, Optional

from fastapi.concurrency import run_in_threadpool
from sqlmodel import Session, select

from taskboard.db.database import atomic
from taskboard.errors import BusinessRuleViolation, NotFoundError
from taskboard.models.models import Developer, Task, TaskSkill, TaskStatus, utcnow
from taskboard.models.schemas import (
    DeveloperSummary,
    TaskCreate,
    TaskRead,
    TaskTreeUpdate,
    TaskUpdate,
    task_columns,
)
from taskboard.services.llm_service import SkillIdentifier
from taskboard.services.skill_service import (
    developer_skill_names,
    resolve_skill_ids,
    task_skill_links,
    task_skill_names,
)

logger = logging.getLogger(__name__)

# Nested subtask levels included when a task is read back
READ_DEPTH = 2

DONE_BLOCKED_MESSAGE = "Cannot mark task as Done until all subtasks are Done"
SKILL_MISMATCH_MESSAGE = "Developer does not have the required skills for this task"
DELETE_DONE_MESSAGE = "A completed task cannot be deleted"


class TaskService:
    def __init__(self, session: Session, skill_identifier: SkillIdentifier):
        self.session = session
        self.skill_identifier = skill_identifier

    # ---- reads ----

    def get_task(self, task_id: str, depth: Optional[int] = READ_DEPTH) -> TaskRead:
        return self._present(self._require_task(task_id), depth)

    def list_root_tasks(self) -> List[TaskRead]:
        statement = select(Task).where(Task.parent_task_id == None).order_by(Task.created_at)  # noqa: E711
        return [self._present(task, READ_DEPTH) for task in self.session.exec(statement)]

    # ---- guards ----

    def can_transition(self, task_id: str, new_status: str) -> bool:
        if new_status != TaskStatus.DONE:
            return True

        if self.session.get(Task, task_id) is None:
            return False

        return all(child.status == TaskStatus.DONE for child in self._children(task_id))

    def can_assign(self, developer_id: str, task_id: str) -> bool:
        if self.session.get(Developer, developer_id) is None or self.session.get(Task, task_id) is None:
            return False

        required = set(task_skill_names(self.session, task_id))
        possessed = set(developer_skill_names(self.session, developer_id))
        return required <= possessed

    # ---- mutations ----

    async def create_task_tree(self, payload: TaskCreate, parent_id: Optional[str] = None) -> TaskRead:
        resolved = await self._infer_skills(payload)
        created = await run_in_threadpool(self._write_tree, resolved, parent_id)
        logger.info(f"Created task tree '{created.title}' ({created.id})")
        return created

    def update_task(self, task_id: str, payload: TaskUpdate) -> TaskRead:
        task = self._require_task(task_id)

        if payload.status and not self.can_transition(task_id, payload.status):
            logger.warning(f"Refused Done transition for task {task_id}: open subtasks")
            raise BusinessRuleViolation(DONE_BLOCKED_MESSAGE)

        if payload.developer_id and not self.can_assign(payload.developer_id, task_id):
            logger.warning(f"Refused assigning developer {payload.developer_id} to task {task_id}")
            raise BusinessRuleViolation(SKILL_MISMATCH_MESSAGE)

        with atomic(self.session):
            if payload.title:
                task.title = payload.title
            if payload.status:
                task.status = payload.status.value
            if payload.developer_id:
                task.developer_id = payload.developer_id
            elif payload.developer_id is None and "developer_id" in payload.model_fields_set:
                # An explicit null unassigns
                task.developer_id = None
            task.updated_at = utcnow()
            self.session.add(task)

        logger.info(f"Updated task {task_id}")
        return self.get_task(task_id, depth=1)

    async def update_task_tree(self, task_id: str, payload: TaskTreeUpdate) -> TaskRead:
        await run_in_threadpool(self._require_task, task_id)

        subtasks = await self._infer_new_entries(payload.subtasks)
        resolved = payload.model_copy(update={"subtasks": subtasks})
        updated = await run_in_threadpool(self._write_tree_update, task_id, resolved)

        logger.info(f"Updated task tree {task_id}")
        return updated

    def delete_task(self, task_id: str) -> None:
        task = self._require_task(task_id)
        if task.status == TaskStatus.DONE:
            logger.warning(f"Refused deleting completed task {task_id}")
            raise BusinessRuleViolation(DELETE_DONE_MESSAGE)

        with atomic(self.session):
            children = self._children(task_id)
            for child in children:
                self._delete_row(child)
            self._delete_row(task)

        logger.info(f"Deleted task {task_id} and {len(children)} direct subtask(s)")

    # ---- skill inference ----

    async def _infer_skills(self, payload: TaskCreate) -> TaskCreate:
        """Copy of ``payload`` where every node carries its skill names."""
        skills = payload.skills or await self.skill_identifier.identify(payload.title)
        subtasks = [await self._infer_skills(subtask) for subtask in payload.subtasks or []]
        return payload.model_copy(update={"skills": skills, "subtasks": subtasks})

    async def _infer_new_entries(
        self, entries: Optional[List[TaskTreeUpdate]], under_new: bool = False
    ) -> List[TaskTreeUpdate]:
        # Entries without an id, and everything nested under them, will be created.
        # Untitled ones are dropped here.
        resolved = []
        for entry in entries or []:
            is_new = under_new or not entry.id
            if is_new and not entry.title:
                continue

            update = {}
            if is_new and not entry.skills:
                update["skills"] = await self.skill_identifier.identify(entry.title)
            update["subtasks"] = await self._infer_new_entries(entry.subtasks, is_new)
            resolved.append(entry.model_copy(update=update))
        return resolved

    # ---- tree recursion ----

    def _write_tree(self, payload: TaskCreate, parent_id: Optional[str]) -> TaskRead:
        with atomic(self.session):
            return self._create_node(payload, parent_id)

    def _write_tree_update(self, task_id: str, payload: TaskTreeUpdate) -> TaskRead:
        with atomic(self.session):
            task = self._require_task(task_id)
            self._apply_node_update(task, payload)
            self._update_subtasks(payload.subtasks, task.id)
        return self.get_task(task_id)

    def _create_node(self, payload: TaskCreate, parent_id: Optional[str]) -> TaskRead:
        skill_ids = resolve_skill_ids(self.session, payload.skills or [])

        task = Task(title=payload.title, developer_id=payload.developer_id, parent_task_id=parent_id)
        self.session.add(task)
        self.session.flush()
        self._attach_skills(task.id, skill_ids)

        subtasks = [self._create_node(subtask, task.id) for subtask in payload.subtasks or []]

        node = self._present(task, depth=0)
        node.subtasks = subtasks
        return node

    def _apply_node_update(self, task: Task, payload: TaskTreeUpdate) -> None:
        if payload.title:
            task.title = payload.title
        if payload.status:
            task.status = payload.status.value
        if payload.title or payload.status:
            task.updated_at = utcnow()
            self.session.add(task)

        # Present (even empty) means replace
        if payload.skills is not None:
            self._detach_skills(task.id)
            self._attach_skills(task.id, resolve_skill_ids(self.session, payload.skills))

    def _update_subtasks(self, entries: Optional[List[TaskTreeUpdate]], parent_id: str) -> None:
        for entry in entries or []:
            if entry.id:
                subtask = self._require_task(entry.id)
                self._apply_node_update(subtask, entry)
                self._update_subtasks(entry.subtasks, subtask.id)
            elif entry.title:
                self._create_node(_as_create(entry), parent_id)

    # ---- row helpers ----

    def _require_task(self, task_id: str) -> Task:
        task = self.session.get(Task, task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    def _children(self, task_id: str) -> List[Task]:
        statement = select(Task).where(Task.parent_task_id == task_id).order_by(Task.created_at)
        return list(self.session.exec(statement))

    def _attach_skills(self, task_id: str, skill_ids: List[str]) -> None:
        for skill_id in skill_ids:
            self.session.add(TaskSkill(task_id=task_id, skill_id=skill_id))
        self.session.flush()

    def _detach_skills(self, task_id: str) -> None:
        for link in self.session.exec(select(TaskSkill).where(TaskSkill.task_id == task_id)).all():
            self.session.delete(link)
        self.session.flush()

    def _delete_row(self, task: Task) -> None:
        self._detach_skills(task.id)
        self.session.delete(task)
        self.session.flush()

    def _present(self, task: Task, depth: Optional[int]) -> TaskRead:
        """Build the response tree. ``depth`` counts nested levels; None means all."""
        subtasks = []
        if depth is None or depth > 0:
            next_depth = None if depth is None else depth - 1
            subtasks = [self._present(child, next_depth) for child in self._children(task.id)]

        skills = task_skill_links(self.session, task.id)

        developer = None
        if task.developer_id:
            row = self.session.get(Developer, task.developer_id)
            if row is not None:
                developer = DeveloperSummary(id=row.id, name=row.name, email=row.email)

        return TaskRead(**task_columns(task), skills=skills, developer=developer, subtasks=subtasks)


def _as_create(entry: TaskTreeUpdate) -> TaskCreate:
    """New nested entries keep their skills and subtasks; untitled ones are dropped."""
    return TaskCreate(
        title=entry.title,
        skills=entry.skills,
        subtasks=[_as_create(subtask) for subtask in entry.subtasks or [] if subtask.title],
    )
