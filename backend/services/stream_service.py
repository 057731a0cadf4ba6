"""실행 로그 스트림 아카이브 서비스."""
import logging
from typing import Optional

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.errors import ConstraintViolation
from models.execution_stream import ExecutionStream

logger = logging.getLogger(__name__)


class StreamArchiveService:
    def __init__(self, db: Session):
        self.db = db

    def archive(self, execution_id: str, streams: str) -> int:
        """실행 로그 저장. 같은 실행 id로 두 번 저장하면 ConstraintViolation."""
        try:
            result = self.db.execute(
                insert(ExecutionStream).values(id=execution_id, streams=streams)
            )
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConstraintViolation(f"Streams for execution {execution_id} are already archived") from e
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Archived streams for execution {execution_id} ({len(streams)} chars)")
        return result.rowcount

    def retrieve(self, execution_id: str) -> Optional[str]:
        """저장된 로그 반환. 없으면 None."""
        stmt = select(ExecutionStream.streams).where(ExecutionStream.id == execution_id)
        row = self.db.execute(stmt).first()
        return row[0] if row else None
