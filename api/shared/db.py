"""Shared database dependencies for FastAPI routers."""
from typing import Any, AsyncGenerator

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.di.container import ApplicationContainer
from infra.resources import DatabaseResource

logger = structlog.get_logger("chat.db")


@inject
async def get_db_session(
    db: DatabaseResource = Depends(
        Provide[ApplicationContainer.infrastructure.database]
    ),
) -> AsyncGenerator[AsyncSession, Any]:
    """Yield an AsyncSession per-request and ensure proper close.

    Uncommitted work is discarded when the session closes.
    """
    session = db.get_session()
    try:
        yield session
    finally:
        try:
            await session.close()
        except Exception as e:
            logger.warning("session_close_failed", error=str(e))
