"""스키마 마이그레이션 수동 실행.

실행: cd backend && python scripts/migrate.py
"""
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import get_settings
from core.database import Database
from core.errors import StoreError
from core.migrations import SchemaMigrator, SCHEMA_EVOLUTIONS


def migrate() -> int:
    settings = get_settings()
    database = Database.from_settings(settings)
    try:
        migrator = SchemaMigrator(database.engine)
        before = migrator.current_version()
        after = migrator.ensure_schema()
    finally:
        database.dispose()

    if before == after:
        print(f"스키마가 이미 최신입니다 (version {after}).")
    else:
        print(f"스키마 {before} → {after} 적용 완료 (총 {len(SCHEMA_EVOLUTIONS)}단계)")
    return after


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    try:
        migrate()
    except StoreError as e:
        print(f"마이그레이션 실패: {e}", file=sys.stderr)
        sys.exit(1)
