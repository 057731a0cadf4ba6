"""스키마 마이그레이션 테스트."""
import pytest
from sqlalchemy import CHAR, String, inspect, select, text
from sqlalchemy.orm import Session

from core.errors import MigrationFailure
from core.migrations import SchemaMigrator, SCHEMA_EVOLUTIONS
from models.schema_evolution import SchemaEvolution


def _versions(engine) -> list[int]:
    with Session(engine) as session:
        stmt = select(SchemaEvolution.schema_version).order_by(SchemaEvolution.schema_version)
        return list(session.execute(stmt).scalars())


class TestSchemaMigrator:
    """버전 기반 마이그레이션 테스트."""

    def test_fresh_database(self, database):
        """빈 DB에 전체 스키마 적용."""
        migrator = SchemaMigrator(database.engine)
        assert migrator.current_version() == 0

        version = migrator.ensure_schema()

        assert version == len(SCHEMA_EVOLUTIONS)
        assert migrator.current_version() == len(SCHEMA_EVOLUTIONS)
        tables = set(inspect(database.engine).get_table_names())
        assert {
            "schema_evolutions",
            "executions",
            "paused_jobs",
            "executions_streams",
            "execution_contexts",
        } <= tables

    def test_indexes_created(self, migrated):
        """실행 기록 인덱스 확인."""
        indexes = {ix["name"] for ix in inspect(migrated.engine).get_indexes("executions")}
        assert {"execution_by_context_id", "execution_by_job", "execution_by_start_time"} <= indexes

    def test_idempotent(self, database):
        """여러 번 실행해도 한 번 실행한 것과 같음."""
        migrator = SchemaMigrator(database.engine)
        migrator.ensure_schema()
        migrator.ensure_schema()
        migrator.ensure_schema()

        assert _versions(database.engine) == list(range(1, len(SCHEMA_EVOLUTIONS) + 1))

    def test_rerun_keeps_data(self, migrated):
        """재실행 시 기존 데이터 유지."""
        with migrated.engine.begin() as conn:
            conn.execute(text("INSERT INTO paused_jobs (id) VALUES ('job-a')"))

        SchemaMigrator(migrated.engine).ensure_schema()

        with migrated.engine.connect() as conn:
            assert conn.execute(text("SELECT id FROM paused_jobs")).scalars().all() == ["job-a"]

    def test_appended_evolutions_use_absolute_versions(self, database):
        """나중에 추가된 변경은 이어지는 버전 번호로 기록."""
        SchemaMigrator(database.engine, SCHEMA_EVOLUTIONS[:1]).ensure_schema()
        assert _versions(database.engine) == [1]

        SchemaMigrator(database.engine, SCHEMA_EVOLUTIONS).ensure_schema()
        assert _versions(database.engine) == list(range(1, len(SCHEMA_EVOLUTIONS) + 1))

    def test_failed_step_stops_migration(self, database):
        """실패한 단계는 기록되지 않고 이후 단계도 실행되지 않음."""
        evolutions = [
            ["CREATE TABLE first_table (id INTEGER PRIMARY KEY)"],
            ["INSERT INTO missing_table (id) VALUES (1)"],
            ["CREATE TABLE third_table (id INTEGER PRIMARY KEY)"],
        ]
        migrator = SchemaMigrator(database.engine, evolutions)

        with pytest.raises(MigrationFailure):
            migrator.ensure_schema()

        assert migrator.current_version() == 1
        assert "third_table" not in inspect(database.engine).get_table_names()

    def test_fixed_step_resumes(self, database):
        """실패한 단계를 고친 뒤에는 그 단계부터 이어서 적용."""
        broken = [
            ["CREATE TABLE first_table (id INTEGER PRIMARY KEY)"],
            ["INSERT INTO missing_table (id) VALUES (1)"],
        ]
        with pytest.raises(MigrationFailure):
            SchemaMigrator(database.engine, broken).ensure_schema()

        fixed = [
            broken[0],
            ["CREATE TABLE second_table (id INTEGER PRIMARY KEY)"],
        ]
        assert SchemaMigrator(database.engine, fixed).ensure_schema() == 2
        assert _versions(database.engine) == [1, 2]

    def test_newer_schema_rejected(self, migrated):
        """프로그램보다 새로운 스키마 버전이면 시작 불가."""
        with pytest.raises(MigrationFailure):
            SchemaMigrator(migrated.engine, SCHEMA_EVOLUTIONS[:1]).ensure_schema()

    def test_id_columns_are_varchar(self, migrated):
        """실행 id 컬럼은 공백 패딩이 없는 가변 길이 문자열."""
        inspector = inspect(migrated.engine)
        for table in ("executions", "executions_streams"):
            id_column = next(c for c in inspector.get_columns(table) if c["name"] == "id")
            assert isinstance(id_column["type"], String)
            assert not isinstance(id_column["type"], CHAR)
            assert id_column["type"].length == 36


class TestAtomicEvolution:
    """여러 문장으로 된 변경 단계의 원자성 테스트."""

    HALF_BROKEN = [
        [
            "CREATE TABLE first_table (id INTEGER PRIMARY KEY)",
            "INSERT INTO missing_table (id) VALUES (1)",
        ],
    ]

    def _assert_step_rolled_back(self, database):
        migrator = SchemaMigrator(database.engine, self.HALF_BROKEN)

        with pytest.raises(MigrationFailure):
            migrator.ensure_schema()

        assert migrator.current_version() == 0
        assert "first_table" not in inspect(database.engine).get_table_names()

        fixed = [["CREATE TABLE first_table (id INTEGER PRIMARY KEY)"]]
        assert SchemaMigrator(database.engine, fixed).ensure_schema() == 1

    def test_failed_step_rolled_back(self, transactional_database):
        """단계 중간에 실패하면 앞선 DDL도 남지 않고 재시작 시 다시 적용."""
        self._assert_step_rolled_back(transactional_database)

    def test_failed_step_rolled_back_on_postgres(self, postgres_database):
        self._assert_step_rolled_back(postgres_database)
