"""일시정지된 job 모델."""
from sqlalchemy import Column, String

from core.database import Base


class PausedJob(Base):
    __tablename__ = "paused_jobs"

    id = Column(String(1000), primary_key=True)
