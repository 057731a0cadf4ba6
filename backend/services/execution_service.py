"""실행 기록 저장 및 대시보드 조회 서비스."""
import logging
from enum import Enum as PyEnum
from typing import Iterable, List, Optional

from sqlalchemy import Select, func, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.errors import ConstraintViolation, InvalidArgument
from models.execution import Execution, ExecutionStatus, success_flag
from schemas.execution import ExecutionLog, ExecutionRecord
from services.context_service import ContextResolver, decode_context

logger = logging.getLogger(__name__)


class SortKey(str, PyEnum):
    """대시보드 정렬 키."""
    CONTEXT = "context"
    JOB = "job"
    STATUS = "status"
    START_TIME = "startTime"
    END_TIME = "endTime"

    @classmethod
    def parse(cls, value) -> Optional["SortKey"]:
        """알 수 없는 키는 None."""
        try:
            return cls(value)
        except ValueError:
            return None


_SORT_COLUMNS = {
    SortKey.CONTEXT: Execution.context_id,
    SortKey.JOB: Execution.job,
    SortKey.STATUS: Execution.success,
    SortKey.START_TIME: Execution.start_time,
    SortKey.END_TIME: Execution.end_time,
}


def _job_filter(jobs: Iterable[str]) -> List[str]:
    job_list = sorted(set(jobs))
    if not job_list:
        raise InvalidArgument("Job filter must not be empty")
    return job_list


class ExecutionService:
    def __init__(self, db: Session):
        self.db = db

    def log_execution(self, record: ExecutionRecord, resolve_context: ContextResolver) -> int:
        """컨텍스트 resolve와 실행 기록 삽입을 한 트랜잭션으로 커밋.

        둘 중 하나라도 실패하면 롤백되어 어떤 행도 남지 않는다.
        """
        success = success_flag(record.status)
        try:
            context_id = resolve_context(self.db)
            result = self.db.execute(
                insert(Execution).values(
                    id=record.id,
                    job=record.job,
                    start_time=record.start_time,
                    end_time=record.end_time,
                    success=success,
                    context_id=context_id,
                )
            )
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Execution {record.id} rejected: {e.orig}")
            raise ConstraintViolation(f"Execution {record.id} violates a constraint") from e
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Logged execution {record.id} ({record.job}, {record.status.value})")
        return result.rowcount

    def count(self, jobs: Iterable[str]) -> int:
        """job 필터에 해당하는 실행 기록 수."""
        stmt = (
            select(func.count())
            .select_from(Execution)
            .where(Execution.job.in_(_job_filter(jobs)))
        )
        return self.db.execute(stmt).scalar() or 0

    def list(
        self,
        context_query: Select,
        jobs: Iterable[str],
        sort: str = SortKey.END_TIME.value,
        asc: bool = False,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[ExecutionLog]:
        """컨텍스트와 조인된 실행 기록 페이지 조회.

        동일 정렬값은 실행 id 오름차순으로 정렬한다. limit=None이면 전체.
        """
        if offset < 0 or (limit is not None and limit < 0):
            raise InvalidArgument(f"Invalid pagination offset={offset} limit={limit}")

        stmt = (
            self._joined(context_query)
            .where(Execution.job.in_(_job_filter(jobs)))
            .order_by(*self._order_by(sort, asc))
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        return [self._to_log(row) for row in self.db.execute(stmt)]

    def get_by_id(self, context_query: Select, execution_id: str) -> Optional[ExecutionLog]:
        stmt = self._joined(context_query).where(Execution.id == execution_id)
        row = self.db.execute(stmt).first()
        return self._to_log(row) if row else None

    @staticmethod
    def _joined(context_query: Select) -> Select:
        contexts = context_query.subquery("contexts")
        if "id" not in contexts.c or "json" not in contexts.c:
            raise InvalidArgument("Context query must yield 'id' and 'json' columns")
        return (
            select(
                Execution.id,
                Execution.job,
                Execution.start_time,
                Execution.end_time,
                contexts.c.json.label("context"),
                Execution.success,
            )
            .select_from(Execution)
            .join(contexts, Execution.context_id == contexts.c.id)
        )

    @staticmethod
    def _order_by(sort: str, asc: bool) -> List:
        key = SortKey.parse(sort)
        if key is None:
            # 알 수 없는 키는 종료 시간 내림차순
            return [Execution.end_time.desc(), Execution.id.asc()]
        column = _SORT_COLUMNS[key]
        return [column.asc() if asc else column.desc(), Execution.id.asc()]

    @staticmethod
    def _to_log(row) -> ExecutionLog:
        return ExecutionLog(
            id=row.id,
            job=row.job,
            start_time=row.start_time,
            end_time=row.end_time,
            status=ExecutionStatus.from_success(row.success),
            context=decode_context(row.context),
        )
