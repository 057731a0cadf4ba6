"""기본 실행 컨텍스트 저장소.

컨텍스트 조회는 `id`, `json` 라벨을 가진 컬럼을 내는 임의의 Select면 되고,
이 모듈은 그중 execution_contexts 테이블을 쓰는 기본 구현을 제공한다.
"""
import hashlib
import json
import logging
from typing import Any, Callable

from sqlalchemy import Select, insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.execution_context import ExecutionContext

logger = logging.getLogger(__name__)

# 같은 트랜잭션 안에서 컨텍스트 id를 만들어 반환하는 함수
ContextResolver = Callable[[Session], str]

# 충돌 시 무시하는 INSERT를 지원하는 dialect
_INSERT_IGNORE = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def canonical_json(payload: Any) -> str:
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def context_id_for(payload: Any) -> str:
    """payload의 정규화 JSON 해시를 컨텍스트 id로 사용."""
    return hashlib.sha256(canonical_json(payload).encode("utf-8")).hexdigest()


def context_query() -> Select:
    """기본 컨텍스트 조회 (id, json)."""
    return select(ExecutionContext.id.label("id"), ExecutionContext.json.label("json"))


def decode_context(raw: Any) -> Any:
    if isinstance(raw, (str, bytes)):
        return json.loads(raw)
    return raw


class ContextService:
    def __init__(self, db: Session):
        self.db = db

    def save(self, payload: Any) -> str:
        """컨텍스트 저장 후 id 반환. 이미 있으면 그대로 재사용 (커밋은 호출자 몫).

        동시에 같은 컨텍스트를 저장하는 실행이 있어도 실패하지 않도록
        조회 후 삽입 대신 충돌을 무시하는 INSERT를 사용한다.
        """
        context_id = context_id_for(payload)
        values = {"id": context_id, "json": canonical_json(payload)}

        dialect = self.db.get_bind().dialect.name
        insert_ignore = _INSERT_IGNORE.get(dialect)
        if insert_ignore is not None:
            stmt = insert_ignore(ExecutionContext).values(**values).on_conflict_do_nothing(index_elements=["id"])
            result = self.db.execute(stmt)
            stored = result.rowcount > 0
        else:
            try:
                with self.db.begin_nested():
                    self.db.execute(insert(ExecutionContext).values(**values))
                stored = True
            except IntegrityError:
                stored = False

        if stored:
            logger.debug(f"Stored execution context {context_id}")
        return context_id

    def get(self, context_id: str) -> Any:
        context = self.db.get(ExecutionContext, context_id)
        return decode_context(context.json) if context else None

    @staticmethod
    def resolver(payload: Any) -> ContextResolver:
        """logExecution에 넘길 컨텍스트 resolver 생성."""
        def resolve(db: Session) -> str:
            return ContextService(db).save(payload)
        return resolve
