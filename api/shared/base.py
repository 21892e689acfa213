"""Base classes and common patterns for the application repositories."""
from abc import ABC
from typing import Any, Generic, List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase

T = TypeVar("T", bound=DeclarativeBase)


class BaseRepository(ABC, Generic[T]):
    """Base repository with the CRUD operations shared by features."""

    model: Type[T]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, entity_id: UUID | str) -> Optional[T]:
        """Get entity by ID."""
        stmt = select(self.model).where(self.model.id == str(entity_id))  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_fields(self, limit: Optional[int] = None, **filters: Any) -> List[T]:
        """Get entities by multiple field values."""
        stmt = select(self.model)

        for field_name, value in filters.items():
            if hasattr(self.model, field_name):
                field = getattr(self.model, field_name)
                stmt = stmt.where(field == value)  # type: ignore[attr-defined]

        if limit:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def save(self, entity: T) -> T:
        """Insert or update entity; flushes so generated fields are populated."""
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity
