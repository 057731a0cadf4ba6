"""실행 기록 스키마."""
from datetime import datetime
from typing import Any, List

from pydantic import BaseModel, Field, field_validator, model_validator

from core.timezone import to_naive_utc
from models.execution import ExecutionStatus


class ExecutionRecord(BaseModel):
    """완료된 job 실행 한 건. 컨텍스트 id는 저장 시점에 resolver가 결정."""
    id: str = Field(min_length=1, max_length=36)
    job: str = Field(min_length=1, max_length=1000)
    start_time: datetime
    end_time: datetime
    status: ExecutionStatus

    class Config:
        frozen = True

    @field_validator("start_time", "end_time")
    @classmethod
    def _naive_utc(cls, value: datetime) -> datetime:
        return to_naive_utc(value)

    @model_validator(mode="after")
    def _check_times(self):
        if self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time")
        return self


class ExecutionLog(ExecutionRecord):
    """컨텍스트 payload가 채워진 실행 기록 (조회 결과)."""
    context: Any = None


class PaginatedExecutions(BaseModel):
    total: int
    data: List[ExecutionLog]
