"""기본 실행 컨텍스트 모델 (id, json)."""
from sqlalchemy import Column, String, Text

from core.database import Base


class ExecutionContext(Base):
    __tablename__ = "execution_contexts"

    id = Column(String(1000), primary_key=True)
    json = Column(Text, nullable=False)
