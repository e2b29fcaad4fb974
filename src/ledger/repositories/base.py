"""Base repository with generic CRUD operations.

Repositories never commit. The caller owns the transaction scope
(``Database.transaction()``) so several writes can succeed or fail together.
"""
from typing import Generic, Type, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.models.base import BaseModel

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """Generic repository providing CRUD operations for any model."""

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    async def get_by_id(self, id: str) -> T | None:
        """Get a single record by ID."""
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def exists(self, id: str) -> bool:
        result = await self.db.execute(select(self.model.id).where(self.model.id == id))
        return result.scalar_one_or_none() is not None

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[T]:
        """Get multiple records with pagination."""
        result = await self.db.execute(
            select(self.model).order_by(self.model.created_at).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def create(self, obj: T) -> T:
        """Add a new record and flush so defaults (id, timestamps) are populated."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def update(self, id: str, data: dict) -> T | None:
        """Update a record by ID with provided data."""
        obj = await self.get_by_id(id)
        if not obj:
            return None

        for key, value in data.items():
            if hasattr(obj, key):
                setattr(obj, key, value)

        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, id: str) -> bool:
        """Delete a record by ID. Returns False when nothing was deleted."""
        result = await self.db.execute(delete(self.model).where(self.model.id == id))
        return bool(result.rowcount)
