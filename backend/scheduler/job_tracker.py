"""Job 실행 추적 데코레이터."""
import asyncio
import logging
import functools
import uuid
from typing import Any, Optional

from core.database import Database
from core.timezone import now_utc
from models.execution import ExecutionStatus
from schemas.execution import ExecutionRecord
from services.context_service import ContextService
from services.execution_service import ExecutionService
from services.pause_service import PauseService

logger = logging.getLogger(__name__)


def track_job_execution(job_id: str, database: Database, context: Optional[Any] = None):
    """Job 실행 결과를 실행 기록으로 남기는 데코레이터.

    일시정지된 job은 실행하지 않고 None을 반환한다.
    DB 작업은 이벤트 루프를 막지 않도록 별도 스레드에서 실행한다.

    Usage:
        @track_job_execution("daily_report", database, context={"region": "eu"})
        async def build_daily_report():
            ...
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            if await asyncio.to_thread(_is_paused, database, job_id):
                logger.info(f"Skipping paused job {job_id}")
                return None

            run_id = str(uuid.uuid4())
            started_at = now_utc()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                logger.error(f"Job {job_id} failed (run {run_id}): {e}")
                try:
                    await asyncio.to_thread(
                        _record, database, run_id, job_id, started_at, ExecutionStatus.FAILED, context
                    )
                except Exception as record_error:
                    # job 자체의 예외를 우선한다
                    logger.error(f"Failed to record failed run {run_id} of {job_id}: {record_error}")
                raise

            await asyncio.to_thread(
                _record, database, run_id, job_id, started_at, ExecutionStatus.SUCCESSFUL, context
            )
            return result

        return wrapper
    return decorator


def _is_paused(database: Database, job_id: str) -> bool:
    with database.session() as db:
        return PauseService(db).is_paused(job_id)


def _record(database: Database, run_id: str, job_id: str, started_at, status: ExecutionStatus, context) -> None:
    record = ExecutionRecord(
        id=run_id,
        job=job_id,
        start_time=started_at,
        end_time=now_utc(),
        status=status,
    )
    with database.session() as db:
        ExecutionService(db).log_execution(record, ContextService.resolver(context or {}))
