"""Job 일시정지 API 라우터."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from core.database import get_db
from core.errors import ConstraintViolation
from schemas import PausedJobsResponse, PauseToggleResponse
from services import PauseService

router = APIRouter()


@router.get("/paused", response_model=PausedJobsResponse)
def list_paused(db: Session = Depends(get_db)):
    return PausedJobsResponse(paused=sorted(PauseService(db).list_paused_ids()))


@router.post("/{job_id}/pause", response_model=PauseToggleResponse)
def pause_job(job_id: str, db: Session = Depends(get_db)):
    try:
        PauseService(db).pause(job_id)
    except ConstraintViolation as e:
        raise HTTPException(status_code=409, detail=str(e))
    return PauseToggleResponse(job_id=job_id, is_paused=True)


@router.post("/{job_id}/unpause", response_model=PauseToggleResponse)
def unpause_job(job_id: str, db: Session = Depends(get_db)):
    PauseService(db).unpause(job_id)
    return PauseToggleResponse(job_id=job_id, is_paused=False)
