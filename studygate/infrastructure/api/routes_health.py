"""Health check endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from studygate.infrastructure.api.dependencies import get_session_factory

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    sessions: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """Check API and database connectivity."""
    try:
        async with sessions() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
        db_status = "connected"
    except Exception as e:
        db_status = f"error: {e}"

    return {
        "status": "ok" if db_status == "connected" else "degraded",
        "database": db_status,
        "service": "studygate",
    }
