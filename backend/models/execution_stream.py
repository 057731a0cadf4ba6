"""실행별 로그 스트림 아카이브 모델."""
from sqlalchemy import Column, String, Text

from core.database import Base


class ExecutionStream(Base):
    __tablename__ = "executions_streams"

    # 테이블에 PK는 없고 v2의 unique index로 중복을 막는다
    id = Column(String(36), primary_key=True)
    streams = Column(Text, nullable=True)
