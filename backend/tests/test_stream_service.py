"""로그 스트림 아카이브 테스트."""
import pytest

from core.errors import ConstraintViolation
from services.stream_service import StreamArchiveService


class TestStreamArchiveService:

    def test_archive_and_retrieve(self, db):
        service = StreamArchiveService(db)
        assert service.archive("run-1", "abc") == 1
        assert service.retrieve("run-1") == "abc"

    def test_retrieve_unknown(self, db):
        """없는 실행 id는 None (에러 아님)."""
        assert StreamArchiveService(db).retrieve("unknown") is None

    def test_duplicate_archive_rejected(self, db):
        """같은 실행 id 재저장은 거부하고 기존 로그 유지."""
        service = StreamArchiveService(db)
        service.archive("run-1", "first")

        with pytest.raises(ConstraintViolation):
            service.archive("run-1", "second")

        assert service.retrieve("run-1") == "first"

    def test_large_payload(self, db):
        streams = "\n".join(f"line {i}: output" for i in range(5000))
        service = StreamArchiveService(db)
        service.archive("run-1", streams)
        assert service.retrieve("run-1") == streams
