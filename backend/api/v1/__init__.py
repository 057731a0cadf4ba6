from . import executions, jobs

__all__ = [
    "executions",
    "jobs",
]
