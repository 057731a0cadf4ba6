"""UTC 시간 유틸리티.

DB에는 항상 tzinfo 없는 UTC 시간을 저장한다.
모든 모듈에서 datetime.now() 대신 now_utc()를 사용할 것.
"""
from datetime import datetime, timezone


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (naive)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """aware datetime은 UTC로 변환 후 tzinfo 제거, naive는 UTC로 간주."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
