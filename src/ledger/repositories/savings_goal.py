"""Savings goal repository."""
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.models.savings_goal import SavingsGoal
from ledger.repositories.base import BaseRepository


class SavingsGoalRepository(BaseRepository[SavingsGoal]):
    """Repository for SavingsGoal model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, SavingsGoal)

    async def get_all_ordered(self) -> list[SavingsGoal]:
        result = await self.db.execute(select(SavingsGoal).order_by(SavingsGoal.created_at))
        return list(result.scalars().all())

    async def get_saved_amount(self, goal_id: str) -> int | None:
        result = await self.db.execute(
            select(SavingsGoal.saved_amount).where(SavingsGoal.id == goal_id)
        )
        return result.scalar_one_or_none()

    async def adjust_saved(self, goal_id: str, delta: int) -> int:
        """Atomically add ``delta`` to saved_amount, refusing to go below zero.

        Returns:
            Number of rows updated. 0 means the goal does not exist or the
            adjustment would make saved_amount negative.
        """
        result = await self.db.execute(
            update(SavingsGoal)
            .where(SavingsGoal.id == goal_id, SavingsGoal.saved_amount + delta >= 0)
            .values(saved_amount=SavingsGoal.saved_amount + delta)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)
