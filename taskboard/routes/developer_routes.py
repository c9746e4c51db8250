from fastapi import APIRouter, Depends, HTTPException
from typing import List
import logging

from taskboard.dependencies import get_developer_service
from taskboard.errors import TaskboardError
from taskboard.models.schemas import DeveloperCreate, DeveloperRead, DeveloperUpdate
from taskboard.services.developer_service import DeveloperService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/developers", tags=["developers"])


@router.get("", response_model=List[DeveloperRead])
def get_all_developers(service: DeveloperService = Depends(get_developer_service)):
    try:
        return service.list_developers()
    except Exception:
        logger.exception("Error fetching developers")
        raise HTTPException(status_code=500, detail="Failed to fetch developers")


@router.get("/{developer_id}", response_model=DeveloperRead)
def get_developer(developer_id: str, service: DeveloperService = Depends(get_developer_service)):
    try:
        return service.get_developer(developer_id)
    except TaskboardError:
        raise
    except Exception:
        logger.exception(f"Error fetching developer {developer_id}")
        raise HTTPException(status_code=500, detail="Failed to fetch developer")


@router.post("", response_model=DeveloperRead, status_code=201)
def create_developer(payload: DeveloperCreate, service: DeveloperService = Depends(get_developer_service)):
    try:
        return service.create_developer(payload)
    except Exception:
        logger.exception("Error creating developer")
        raise HTTPException(status_code=500, detail="Failed to create developer")


@router.put("/{developer_id}", response_model=DeveloperRead)
def update_developer(
    developer_id: str,
    payload: DeveloperUpdate,
    service: DeveloperService = Depends(get_developer_service),
):
    try:
        return service.update_developer(developer_id, payload)
    except TaskboardError:
        raise
    except Exception:
        logger.exception(f"Error updating developer {developer_id}")
        raise HTTPException(status_code=500, detail="Failed to update developer")
