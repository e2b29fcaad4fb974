"""Account repository with atomic balance adjustments."""
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.models.account import Account
from ledger.repositories.base import BaseRepository

# Default account first, then by name; creation order breaks ties.
_LISTING_ORDER = (Account.is_default.desc(), Account.name, Account.created_at, Account.id)


class AccountRepository(BaseRepository[Account]):
    """Repository for Account model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Account)

    async def get_all_ordered(self) -> list[Account]:
        """All accounts, default first, then by name."""
        result = await self.db.execute(select(Account).order_by(*_LISTING_ORDER))
        return list(result.scalars().all())

    async def get_linked(self) -> list[Account]:
        """Accounts linked to SMS senders, in the same order as ``get_all_ordered``."""
        result = await self.db.execute(
            select(Account)
            .where(Account.is_linked == True)
            .order_by(*_LISTING_ORDER)
        )
        return list(result.scalars().all())

    async def get_balance(self, account_id: str) -> int | None:
        """Current stored balance (minor units), read straight from the row."""
        result = await self.db.execute(select(Account.balance).where(Account.id == account_id))
        return result.scalar_one_or_none()

    async def apply_delta(self, account_id: str, delta: int) -> int:
        """Atomically add ``delta`` to the account balance.

        Issued as a single ``UPDATE ... SET balance = balance + :delta`` so
        concurrent adjustments cannot lose updates. Account objects already
        loaded in the session are not refreshed; use ``get_balance``.

        Returns:
            Number of rows updated (0 when the account does not exist)
        """
        result = await self.db.execute(
            update(Account)
            .where(Account.id == account_id)
            .values(balance=Account.balance + delta)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    async def set_balance(self, account_id: str, balance: int) -> int:
        """Overwrite the stored balance. Repair-only."""
        result = await self.db.execute(
            update(Account)
            .where(Account.id == account_id)
            .values(balance=balance)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    async def get_total_balance(self) -> int:
        result = await self.db.execute(select(func.sum(Account.balance)))
        total = result.scalar_one_or_none()
        return int(total) if total else 0
