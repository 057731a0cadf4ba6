import logging
from functools import lru_cache

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL

from .errors import ConfigurationMissing

logger = logging.getLogger(__name__)

DEFAULT_DB_PORT = 5432


class Settings(BaseSettings):
    # DB 접속 설정 (host, port만 기본값 제공)
    db_host: str = "localhost"
    db_port: int = DEFAULT_DB_PORT
    db_name: str
    db_user: str
    db_password: str

    # 커넥션 풀 설정
    db_pool_size: int = 10
    db_max_overflow: int = 20

    cors_origins: str = "http://localhost:5173"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "allow"

    @field_validator("db_port", mode="before")
    @classmethod
    def _fallback_port(cls, value):
        """숫자가 아닌 포트는 기본 포트로 대체."""
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid DB_PORT {value!r}, falling back to {DEFAULT_DB_PORT}")
            return DEFAULT_DB_PORT

    @property
    def database_url(self) -> URL:
        return URL.create(
            "postgresql+psycopg2",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )


@lru_cache()
def get_settings() -> Settings:
    """환경변수에서 설정 로드. 필수 값이 없으면 ConfigurationMissing."""
    try:
        return Settings()
    except ValidationError as e:
        missing = [
            str(err["loc"][0]).upper()
            for err in e.errors()
            if err["type"] == "missing"
        ]
        if missing:
            raise ConfigurationMissing(f"Missing env {', '.join('$' + m for m in missing)}") from e
        raise
