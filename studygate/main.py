"""studygate — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from studygate.adapters.persistence.database import engine
from studygate.config import settings
from studygate.infrastructure.api.routes_groups import router as groups_router
from studygate.infrastructure.api.routes_health import router as health_router
from studygate.infrastructure.api.routes_submissions import router as submissions_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(levelname)s | %(name)s | %(message)s",
    )
    if not settings.survey_token:
        logger.warning("SURVEY_TOKEN is not set; every register/finalize call will be rejected")

    app = FastAPI(
        title="studygate",
        description="Balanced group assignment and exactly-once participant counting",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(submissions_router, prefix="/api")
    app.include_router(groups_router, prefix="/api")

    return app


app = create_app()
