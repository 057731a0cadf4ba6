"""Job 일시정지 스키마."""
from typing import List

from pydantic import BaseModel


class PausedJobsResponse(BaseModel):
    paused: List[str]


class PauseToggleResponse(BaseModel):
    job_id: str
    is_paused: bool
