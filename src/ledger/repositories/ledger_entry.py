"""Ledger entry repository: listings and aggregate queries.

Entries are written only by the reconciler; this repository does not touch
account balances or goal progress.
"""
from datetime import datetime
from typing import Iterable

from sqlalchemy import case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.models.account import Account
from ledger.models.category import Category
from ledger.models.enums import TransactionType
from ledger.models.ledger_entry import LedgerEntry
from ledger.repositories.base import BaseRepository

# +amount for income, -amount for expense
SIGNED_AMOUNT = case(
    (LedgerEntry.type == TransactionType.INCOME, LedgerEntry.amount),
    else_=-LedgerEntry.amount,
)


class LedgerEntryRepository(BaseRepository[LedgerEntry]):
    """Repository for LedgerEntry model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, LedgerEntry)

    async def _list(self, *criteria, limit: int | None = None) -> list[LedgerEntry]:
        q = (
            select(LedgerEntry)
            .where(*criteria)
            .order_by(LedgerEntry.txn_date.desc(), LedgerEntry.created_at.desc())
        )
        if limit is not None:
            q = q.limit(limit)
        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def get_for_account(self, account_id: str) -> list[LedgerEntry]:
        return await self._list(LedgerEntry.account_id == account_id)

    async def get_for_category(self, category_id: str) -> list[LedgerEntry]:
        return await self._list(LedgerEntry.category_id == category_id)

    async def get_for_goal(self, goal_id: str) -> list[LedgerEntry]:
        return await self._list(LedgerEntry.goal_id == goal_id)

    async def get_for_recurring(self, recurring_id: str) -> list[LedgerEntry]:
        return await self._list(LedgerEntry.recurring_id == recurring_id)

    async def get_in_range(self, start: datetime, end: datetime) -> list[LedgerEntry]:
        """Entries with ``start <= txn_date < end``, newest first."""
        return await self._list(LedgerEntry.txn_date >= start, LedgerEntry.txn_date < end)

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(LedgerEntry))
        return int(result.scalar() or 0)

    async def sum_signed_for_account(self, account_id: str) -> int:
        """Sum of signed effects of every entry on the account."""
        result = await self.db.execute(
            select(func.coalesce(func.sum(SIGNED_AMOUNT), 0)).where(
                LedgerEntry.account_id == account_id
            )
        )
        return int(result.scalar() or 0)

    async def total_by_type(
        self,
        type: TransactionType,
        start: datetime,
        end: datetime,
        exclude_category_ids: Iterable[str] = (),
    ) -> int:
        """Total amount of one type in ``[start, end)``.

        Entries without a category are always counted.
        """
        q = select(func.coalesce(func.sum(LedgerEntry.amount), 0)).where(
            LedgerEntry.type == type,
            LedgerEntry.txn_date >= start,
            LedgerEntry.txn_date < end,
        )
        excluded = list(exclude_category_ids)
        if excluded:
            q = q.where(
                or_(LedgerEntry.category_id.is_(None), LedgerEntry.category_id.notin_(excluded))
            )
        result = await self.db.execute(q)
        return int(result.scalar() or 0)

    async def total_for_category(
        self,
        category_id: str,
        start: datetime,
        end: datetime,
        type: TransactionType = TransactionType.EXPENSE,
    ) -> int:
        result = await self.db.execute(
            select(func.coalesce(func.sum(LedgerEntry.amount), 0)).where(
                LedgerEntry.category_id == category_id,
                LedgerEntry.type == type,
                LedgerEntry.txn_date >= start,
                LedgerEntry.txn_date < end,
            )
        )
        return int(result.scalar() or 0)

    async def spend_by_category(
        self,
        start: datetime,
        end: datetime,
        type: TransactionType = TransactionType.EXPENSE,
    ) -> list[tuple[str | None, str | None, int]]:
        """Per-category totals in ``[start, end)``, largest first.

        Returns:
            (category_id, category_name, total) tuples. The name is None when
            the entry has no category or the category was deleted.
        """
        total = func.sum(LedgerEntry.amount).label("total")
        result = await self.db.execute(
            select(LedgerEntry.category_id, Category.name, total)
            .outerjoin(Category, Category.id == LedgerEntry.category_id)
            .where(
                LedgerEntry.type == type,
                LedgerEntry.txn_date >= start,
                LedgerEntry.txn_date < end,
            )
            .group_by(LedgerEntry.category_id, Category.name)
            .order_by(total.desc())
        )
        return [(row[0], row[1], int(row[2] or 0)) for row in result.all()]

    async def get_recent_with_labels(
        self, limit: int = 10
    ) -> list[tuple[LedgerEntry, str | None, str | None]]:
        """Most recent entries with their category and account names.

        Outer joins, so entries pointing at deleted rows come back with None
        labels instead of disappearing.
        """
        result = await self.db.execute(
            select(LedgerEntry, Category.name, Account.name)
            .outerjoin(Category, Category.id == LedgerEntry.category_id)
            .outerjoin(Account, Account.id == LedgerEntry.account_id)
            .order_by(LedgerEntry.txn_date.desc(), LedgerEntry.created_at.desc())
            .limit(limit)
        )
        return [(row[0], row[1], row[2]) for row in result.all()]
