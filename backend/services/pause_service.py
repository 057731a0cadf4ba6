"""Job 일시정지 레지스트리 서비스."""
import logging
from typing import Set

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.errors import ConstraintViolation
from models.paused_job import PausedJob

logger = logging.getLogger(__name__)


class PauseService:
    def __init__(self, db: Session):
        self.db = db

    def _delete(self, job_id: str) -> int:
        result = self.db.execute(delete(PausedJob).where(PausedJob.id == job_id))
        return result.rowcount

    def pause(self, job_id: str) -> int:
        """job 일시정지. 기존 항목을 지우고 다시 넣으므로 중복이 생기지 않는다."""
        try:
            self._delete(job_id)
            result = self.db.execute(insert(PausedJob).values(id=job_id))
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConstraintViolation(f"Job {job_id} was paused concurrently") from e
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Paused job {job_id}")
        return result.rowcount

    def unpause(self, job_id: str) -> int:
        """일시정지 해제. 없으면 0 반환."""
        try:
            removed = self._delete(job_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        if removed:
            logger.info(f"Unpaused job {job_id}")
        return removed

    def is_paused(self, job_id: str) -> bool:
        stmt = select(PausedJob.id).where(PausedJob.id == job_id)
        return self.db.execute(stmt).first() is not None

    def list_paused_ids(self) -> Set[str]:
        return set(self.db.execute(select(PausedJob.id)).scalars())
