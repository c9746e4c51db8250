from fastapi import APIRouter, Depends, HTTPException
from typing import List
import logging

from taskboard.dependencies import get_task_service
from taskboard.errors import TaskboardError
from taskboard.models.schemas import MessageResponse, TaskCreate, TaskRead, TaskTreeUpdate, TaskUpdate
from taskboard.services.task_service import TaskService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("/create", response_model=TaskRead, status_code=201)
async def create_task(payload: TaskCreate, service: TaskService = Depends(get_task_service)):
    try:
        return await service.create_task_tree(payload)
    except TaskboardError:
        raise
    except Exception:
        logger.exception("Error creating task")
        raise HTTPException(status_code=500, detail="Failed to create task")


@router.get("", response_model=List[TaskRead])
def get_all_tasks(service: TaskService = Depends(get_task_service)):
    try:
        return service.list_root_tasks()
    except Exception:
        logger.exception("Error fetching tasks")
        raise HTTPException(status_code=500, detail="Failed to fetch tasks")


@router.get("/{task_id}", response_model=TaskRead)
def get_task(task_id: str, service: TaskService = Depends(get_task_service)):
    try:
        return service.get_task(task_id)
    except TaskboardError:
        raise
    except Exception:
        logger.exception(f"Error fetching task {task_id}")
        raise HTTPException(status_code=500, detail="Failed to fetch task")


@router.put("/update/{task_id}", response_model=TaskRead)
def update_task(task_id: str, payload: TaskUpdate, service: TaskService = Depends(get_task_service)):
    try:
        return service.update_task(task_id, payload)
    except TaskboardError:
        raise
    except Exception:
        logger.exception(f"Error updating task {task_id}")
        raise HTTPException(status_code=500, detail="Failed to update task")


@router.put("/update-with-subtasks/{task_id}", response_model=TaskRead)
async def update_task_and_subtasks(
    task_id: str,
    payload: TaskTreeUpdate,
    service: TaskService = Depends(get_task_service),
):
    try:
        return await service.update_task_tree(task_id, payload)
    except TaskboardError:
        raise
    except Exception:
        logger.exception(f"Error updating task and subtasks {task_id}")
        raise HTTPException(status_code=500, detail="Failed to update task and subtasks")


@router.delete("/delete/{task_id}", response_model=MessageResponse)
def delete_task(task_id: str, service: TaskService = Depends(get_task_service)):
    try:
        service.delete_task(task_id)
        return MessageResponse(message="Task deleted successfully")
    except TaskboardError:
        raise
    except Exception:
        logger.exception(f"Error deleting task {task_id}")
        raise HTTPException(status_code=500, detail="Failed to delete task")
