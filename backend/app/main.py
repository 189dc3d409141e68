import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from app.api.v1 import reports, templates
from app.config import settings
from app.core.logging import RequestLoggingMiddleware, setup_logging
from app.models.database import create_tables, dispose_engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    settings.templates_dir.mkdir(parents=True, exist_ok=True)
    settings.uploads_dir.mkdir(parents=True, exist_ok=True)
    if settings.database_url.startswith("sqlite"):
        await create_tables()
    logger.info("%s started (%s)", settings.app_name, settings.environment)
    yield
    await dispose_engine()


def create_app() -> FastAPI:
    setup_logging(json_format=settings.log_json)

    application = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
    )

    application.add_middleware(RequestLoggingMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(templates.router, prefix="/api/v1/templates", tags=["templates"])
    application.include_router(reports.router, prefix="/api/v1/reports", tags=["reports"])

    @application.get("/health")
    async def health_check() -> dict:
        from app.models.database import get_session_factory

        result: dict = {"status": "ok", "services": {}}
        try:
            async with get_session_factory()() as session:
                await session.execute(text("SELECT 1"))
            result["services"]["database"] = "ok"
        except Exception as e:
            result["services"]["database"] = f"error: {e}"
            result["status"] = "degraded"
        return result

    return application


app = create_app()
