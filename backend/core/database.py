from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from .config import Settings

Base = declarative_base()


class Database:
    """엔진과 세션 팩토리를 소유하는 DB 핸들.

    서비스 수명 동안 하나만 만들어 각 컴포넌트에 세션으로 전달한다.
    """

    def __init__(self, url, **engine_kwargs):
        self.engine: Engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,
            pool_recycle=1800,
        )

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    """동기 DB 세션 의존성."""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
