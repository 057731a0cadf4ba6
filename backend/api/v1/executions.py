"""실행 기록 조회 API 라우터."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from core.database import get_db
from core.errors import InvalidArgument
from schemas import ExecutionLog, PaginatedExecutions
from services import ExecutionService, StreamArchiveService, SortKey, context_query

router = APIRouter()


@router.get("", response_model=PaginatedExecutions)
def list_executions(
    jobs: List[str] = Query([]),
    sort: str = SortKey.END_TIME.value,
    asc: bool = False,
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(25, ge=0),
    db: Session = Depends(get_db),
):
    """실행 이력 페이지 조회 (total + data)."""
    service = ExecutionService(db)
    try:
        total = service.count(jobs)
        data = service.list(context_query(), jobs, sort=sort, asc=asc, offset=offset, limit=limit)
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PaginatedExecutions(total=total, data=data)


@router.get("/{execution_id}", response_model=ExecutionLog)
def get_execution(execution_id: str, db: Session = Depends(get_db)):
    execution = ExecutionService(db).get_by_id(context_query(), execution_id)
    if not execution:
        raise HTTPException(status_code=404, detail="Execution not found")
    return execution


@router.get("/{execution_id}/streams", response_class=PlainTextResponse)
def get_execution_streams(execution_id: str, db: Session = Depends(get_db)):
    """아카이브된 실행 로그."""
    streams = StreamArchiveService(db).retrieve(execution_id)
    if streams is None:
        raise HTTPException(status_code=404, detail="Streams not found")
    return streams
