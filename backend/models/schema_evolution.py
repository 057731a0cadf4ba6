"""스키마 버전 기록 모델."""
from sqlalchemy import Column, SmallInteger, DateTime

from core.database import Base


class SchemaEvolution(Base):
    __tablename__ = "schema_evolutions"

    schema_version = Column(SmallInteger, primary_key=True)
    schema_update = Column(DateTime, nullable=False)
