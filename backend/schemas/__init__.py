from .execution import ExecutionRecord, ExecutionLog, PaginatedExecutions
from .job import PausedJobsResponse, PauseToggleResponse

__all__ = [
    "ExecutionRecord",
    "ExecutionLog",
    "PaginatedExecutions",
    "PausedJobsResponse",
    "PauseToggleResponse",
]
