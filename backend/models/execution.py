"""Job 실행 기록 모델.

테이블은 core.migrations에서 생성되며 이 매핑은 조회/삽입용이다.
실행 기록은 insert-only로, 수정/삭제 경로를 두지 않는다.
"""
from enum import Enum as PyEnum

from sqlalchemy import Column, String, DateTime, Boolean

from core.database import Base
from core.errors import InvalidArgument


class ExecutionStatus(str, PyEnum):
    """실행 결과. success 컬럼(boolean)으로 저장되며 successful > failed 순."""
    SUCCESSFUL = "successful"
    FAILED = "failed"

    @classmethod
    def from_success(cls, success) -> "ExecutionStatus":
        return cls.SUCCESSFUL if success else cls.FAILED

    def to_success(self) -> bool:
        return self is ExecutionStatus.SUCCESSFUL


def success_flag(status) -> bool:
    """저장할 상태값을 success 플래그로 변환. 알 수 없는 값은 거부."""
    if not isinstance(status, ExecutionStatus):
        try:
            status = ExecutionStatus(status)
        except ValueError:
            raise InvalidArgument(f"Unexpected execution status to write in database: {status!r}")
    return status.to_success()


class Execution(Base):
    __tablename__ = "executions"

    id = Column(String(36), primary_key=True)
    job = Column(String(1000), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    context_id = Column(String(1000), nullable=False, index=True)
    success = Column(Boolean, nullable=False)

    def __repr__(self):
        return f"<Execution {self.id} - {self.job}>"
