from .execution import Execution, ExecutionStatus, success_flag
from .paused_job import PausedJob
from .execution_stream import ExecutionStream
from .execution_context import ExecutionContext
from .schema_evolution import SchemaEvolution

__all__ = [
    "Execution",
    "ExecutionStatus",
    "success_flag",
    "PausedJob",
    "ExecutionStream",
    "ExecutionContext",
    "SchemaEvolution",
]
