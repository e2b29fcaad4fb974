"""Budget repository."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.models.budget import Budget
from ledger.repositories.base import BaseRepository


class BudgetRepository(BaseRepository[Budget]):
    """Repository for Budget model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Budget)

    async def get_active(self) -> list[Budget]:
        result = await self.db.execute(
            select(Budget).where(Budget.is_active == True).order_by(Budget.created_at)
        )
        return list(result.scalars().all())

    async def get_by_category(self, category_id: str) -> list[Budget]:
        result = await self.db.execute(select(Budget).where(Budget.category_id == category_id))
        return list(result.scalars().all())
