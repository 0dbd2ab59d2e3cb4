import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_async_session

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/health", summary="Health check")
async def health_check(session: AsyncSession = Depends(get_async_session)):
    """
    Health-check: приложение живо и база отвечает.
    """
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check: database is unreachable")
        return JSONResponse(
            status_code=503,
            content={"status": "degraded", "database": "unreachable"},
        )

    return {
        "status": "ok",
        "database": "ok",
        "timestamp": datetime.now(timezone.utc),
    }
