from .job_tracker import track_job_execution

__all__ = ["track_job_execution"]
