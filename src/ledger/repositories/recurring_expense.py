"""Recurring expense repository."""
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.models.recurring_expense import RecurringExpense
from ledger.repositories.base import BaseRepository


class RecurringExpenseRepository(BaseRepository[RecurringExpense]):
    """Repository for RecurringExpense model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, RecurringExpense)

    async def get_active(self) -> list[RecurringExpense]:
        result = await self.db.execute(
            select(RecurringExpense)
            .where(RecurringExpense.is_active == True)
            .order_by(RecurringExpense.next_due_date)
        )
        return list(result.scalars().all())

    async def get_due(self, now: datetime) -> list[RecurringExpense]:
        """Active items whose next due date is at or before ``now``."""
        result = await self.db.execute(
            select(RecurringExpense)
            .where(RecurringExpense.is_active == True, RecurringExpense.next_due_date <= now)
            .order_by(RecurringExpense.next_due_date)
        )
        return list(result.scalars().all())

    async def get_upcoming(self, start: datetime, end: datetime) -> list[RecurringExpense]:
        """Active items due in ``[start, end]``."""
        result = await self.db.execute(
            select(RecurringExpense)
            .where(
                RecurringExpense.is_active == True,
                RecurringExpense.next_due_date >= start,
                RecurringExpense.next_due_date <= end,
            )
            .order_by(RecurringExpense.next_due_date)
        )
        return list(result.scalars().all())
