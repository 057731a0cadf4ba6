"""API 서버 진입점.

실행: cd backend && uvicorn main:create_app --factory
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from core.config import get_settings
from core.database import Database
from core.migrations import SchemaMigrator
from api.v1 import executions, jobs

logger = logging.getLogger(__name__)


def create_app(database: Optional[Database] = None) -> FastAPI:
    """FastAPI 앱 생성. database를 넘기면 환경설정 대신 그 핸들을 사용."""
    settings = None
    cors_origins = ["*"]
    if database is None:
        settings = get_settings()
        logging.basicConfig(level=settings.log_level)
        cors_origins = settings.cors_origins.split(",")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: 스키마 마이그레이션이 끝나야 요청을 받는다
        db = database or Database.from_settings(settings)
        version = SchemaMigrator(db.engine).ensure_schema()
        app.state.database = db
        logger.info(f"Application started (schema version {version})")

        yield

        # Shutdown
        if database is None:
            db.dispose()
        logger.info("Application shutdown")

    app = FastAPI(
        title="Job Execution Tracker API",
        description="Job 실행 이력, 일시정지, 로그 아카이브 조회",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(executions.router, prefix="/api/v1/executions", tags=["executions"])
    app.include_router(jobs.router, prefix="/api/v1/jobs", tags=["jobs"])

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app
