from .context_service import ContextService, context_query
from .execution_service import ExecutionService, SortKey
from .pause_service import PauseService
from .stream_service import StreamArchiveService

__all__ = [
    "ContextService",
    "context_query",
    "ExecutionService",
    "SortKey",
    "PauseService",
    "StreamArchiveService",
]
