"""버전 기반 스키마 마이그레이션.

SCHEMA_EVOLUTIONS는 append-only 목록이다. 이미 적용된 항목을 삭제하거나
순서를 바꾸면 schema_version의 의미가 깨지므로 새 변경은 항상 끝에 추가한다.
각 단계와 해당 버전 기록은 하나의 트랜잭션으로 커밋된다.
"""
import logging
from typing import Sequence

from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from .errors import MigrationFailure
from .timezone import now_utc

logger = logging.getLogger(__name__)


SCHEMA_EVOLUTIONS: list[list[str]] = [
    # v1: 실행 기록, 일시정지 job, 로그 스트림
    [
        """
        CREATE TABLE executions (
            id          VARCHAR(36) NOT NULL,
            job         VARCHAR(1000) NOT NULL,
            start_time  TIMESTAMP NOT NULL,
            end_time    TIMESTAMP NOT NULL,
            context_id  VARCHAR(1000) NOT NULL,
            success     BOOLEAN NOT NULL,
            PRIMARY KEY (id)
        )
        """,
        "CREATE INDEX execution_by_context_id ON executions (context_id)",
        "CREATE INDEX execution_by_job ON executions (job)",
        "CREATE INDEX execution_by_start_time ON executions (start_time)",
        """
        CREATE TABLE paused_jobs (
            id          VARCHAR(1000) NOT NULL,
            PRIMARY KEY (id)
        )
        """,
        """
        CREATE TABLE executions_streams (
            id          VARCHAR(36) NOT NULL,
            streams     TEXT
        )
        """,
    ],
    # v2: 실행당 스트림 아카이브는 하나만 허용
    [
        "CREATE UNIQUE INDEX executions_streams_by_id ON executions_streams (id)",
    ],
    # v3: 기본 컨텍스트 저장 테이블
    [
        """
        CREATE TABLE execution_contexts (
            id          VARCHAR(1000) NOT NULL,
            json        TEXT NOT NULL,
            PRIMARY KEY (id)
        )
        """,
    ],
]

_CREATE_VERSION_TABLE = """
    CREATE TABLE IF NOT EXISTS schema_evolutions (
        schema_version  SMALLINT NOT NULL,
        schema_update   TIMESTAMP NOT NULL,
        PRIMARY KEY     (schema_version)
    )
"""


class SchemaMigrator:
    """스키마 버전 관리자.

    서비스 시작 시 다른 컴포넌트보다 먼저 ensure_schema()를 호출한다.
    여러 번 호출해도 결과는 한 번 호출한 것과 같다.
    """

    def __init__(self, engine: Engine, evolutions: Sequence[Sequence[str]] = SCHEMA_EVOLUTIONS):
        self.engine = engine
        self.evolutions = evolutions

    def current_version(self) -> int:
        """적용된 최신 스키마 버전 (없으면 0)."""
        with self.engine.begin() as conn:
            conn.execute(text(_CREATE_VERSION_TABLE))
            return self._read_version(conn)

    def ensure_schema(self) -> int:
        """미적용 스키마 변경을 순서대로 적용하고 최종 버전을 반환."""
        try:
            current = self.current_version()
        except SQLAlchemyError as e:
            logger.error(f"Cannot read schema version: {e}")
            raise MigrationFailure(f"Cannot read schema version: {e}") from e

        if current > len(self.evolutions):
            raise MigrationFailure(
                f"Database schema version {current} is newer than this program "
                f"(knows {len(self.evolutions)})"
            )

        if current == len(self.evolutions):
            logger.info(f"Schema is up to date (version {current})")
            return current

        for version in range(current + 1, len(self.evolutions) + 1):
            statements = self.evolutions[version - 1]
            try:
                with self.engine.begin() as conn:
                    for sql in statements:
                        conn.execute(text(sql.strip()))
                    self._stamp(conn, version)
            except SQLAlchemyError as e:
                logger.error(f"Schema evolution {version} failed: {e}")
                raise MigrationFailure(f"Schema evolution {version} failed: {e}") from e
            logger.info(f"Applied schema evolution {version}/{len(self.evolutions)}")

        return len(self.evolutions)

    @staticmethod
    def _read_version(conn: Connection) -> int:
        result = conn.execute(text("SELECT MAX(schema_version) FROM schema_evolutions"))
        return result.scalar() or 0

    @staticmethod
    def _stamp(conn: Connection, version: int) -> None:
        conn.execute(
            text(
                "INSERT INTO schema_evolutions (schema_version, schema_update) "
                "VALUES (:version, :applied_at)"
            ).bindparams(bindparam("applied_at", type_=DateTime)),
            {"version": version, "applied_at": now_utc()},
        )
