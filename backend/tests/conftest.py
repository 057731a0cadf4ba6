"""pytest 설정 및 fixtures."""
import os
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.pool import StaticPool

from core.database import Database
from core.migrations import SchemaMigrator
from main import create_app
from models.execution import ExecutionStatus
from schemas.execution import ExecutionRecord


# 테스트용 인메모리 SQLite DB
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

BASE_TIME = datetime(2024, 1, 1, 9, 0, 0)


def make_database() -> Database:
    return Database(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def make_transactional_database() -> Database:
    """DDL도 트랜잭션으로 묶이는 SQLite DB.

    pysqlite는 DDL 전에 BEGIN을 내지 않으므로 직접 BEGIN을 발행한다.
    """
    database = make_database()

    @event.listens_for(database.engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(database.engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return database


def make_record(run_id: str, job: str, status=ExecutionStatus.SUCCESSFUL, start_offset: int = 0, duration: int = 60) -> ExecutionRecord:
    """BASE_TIME 기준 실행 기록 생성 (offset, duration은 초 단위)."""
    start_time = BASE_TIME + timedelta(seconds=start_offset)
    return ExecutionRecord(
        id=run_id,
        job=job,
        start_time=start_time,
        end_time=start_time + timedelta(seconds=duration),
        status=status,
    )


@pytest.fixture(scope="function")
def database():
    """마이그레이션 전의 빈 DB."""
    database = make_database()
    yield database
    database.dispose()


@pytest.fixture(scope="function")
def migrated(database):
    """각 테스트마다 새로 마이그레이션된 DB."""
    SchemaMigrator(database.engine).ensure_schema()
    return database


@pytest.fixture(scope="function")
def db(migrated):
    db = migrated.session()
    yield db
    db.close()


@pytest.fixture(scope="function")
def client(database):
    """테스트 클라이언트 (lifespan에서 마이그레이션 수행)."""
    app = create_app(database=database)
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="function")
def transactional_database():
    database = make_transactional_database()
    yield database
    database.dispose()


@pytest.fixture(scope="function")
def postgres_database():
    """TEST_POSTGRES_URL이 설정된 경우에만 사용하는 실제 PostgreSQL DB.

    테스트 전후로 public 스키마를 비운다.
    """
    url = os.environ.get("TEST_POSTGRES_URL")
    if not url:
        pytest.skip("TEST_POSTGRES_URL is not set")

    database = Database(url)
    _reset_postgres(database)
    yield database
    _reset_postgres(database)
    database.dispose()


def _reset_postgres(database: Database) -> None:
    with database.engine.begin() as conn:
        conn.exec_driver_sql("DROP SCHEMA public CASCADE")
        conn.exec_driver_sql("CREATE SCHEMA public")
