from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from typing import List
import logging

from taskboard.dependencies import get_session
from taskboard.errors import TaskboardError
from taskboard.models.schemas import SkillDetail
from taskboard.services import skill_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/skills", tags=["skills"])


@router.get("", response_model=List[SkillDetail])
def get_all_skills(session: Session = Depends(get_session)):
    try:
        return skill_service.list_skills(session)
    except Exception:
        logger.exception("Error fetching skills")
        raise HTTPException(status_code=500, detail="Failed to fetch skills")


@router.get("/{skill_id}", response_model=SkillDetail)
def get_skill(skill_id: str, session: Session = Depends(get_session)):
    try:
        return skill_service.get_skill(session, skill_id)
    except TaskboardError:
        raise
    except Exception:
        logger.exception(f"Error fetching skill {skill_id}")
        raise HTTPException(status_code=500, detail="Failed to fetch skill")
