"""Recurring expenses and income (rent, subscriptions, salary).

``process_due`` is meant to be called periodically (on start-up, from a
daily job). Each due item is handled in its own transaction: the generated
ledger entry and the advanced due date commit together, and one failing
item does not stop the others.
"""

import logging
from datetime import datetime, timedelta

from ledger.config import Settings, settings as default_settings
from ledger.core.exceptions import LedgerError, NotFoundError
from ledger.core.money import from_minor, to_minor
from ledger.db.session import Database
from ledger.models.base import utcnow
from ledger.models.recurring_expense import RecurringExpense
from ledger.repositories.recurring_expense import RecurringExpenseRepository
from ledger.schemas.base import parse
from ledger.schemas.catalog import RecurringCreate
from ledger.services.periods import next_occurrence
from ledger.services.reconciler import BalanceReconciler

logger = logging.getLogger(__name__)


class RecurringService:
    """Schedules recurring items and books them when they fall due."""

    def __init__(
        self,
        db: Database,
        reconciler: BalanceReconciler,
        settings: Settings | None = None,
    ):
        self.db = db
        self.reconciler = reconciler
        self.settings = settings or default_settings
        self.minor_unit = self.settings.currency_minor_unit

    async def create(self, data: RecurringCreate | dict) -> RecurringExpense:
        """Schedule a recurring item. The first occurrence is due on its start date."""
        item_in = parse(RecurringCreate, data, self.minor_unit)
        values = item_in.model_dump(exclude={"amount"})
        async with self.db.transaction() as session:
            item = await RecurringExpenseRepository(session).create(
                RecurringExpense(
                    **values,
                    amount=to_minor(item_in.amount, self.minor_unit),
                    next_due_date=item_in.start_date,
                )
            )
        logger.info("Recurring item scheduled", extra={"recurring_id": item.id})
        return item

    async def list_active(self) -> list[RecurringExpense]:
        async with self.db.session() as session:
            return await RecurringExpenseRepository(session).get_active()

    async def set_active(self, recurring_id: str, active: bool) -> RecurringExpense:
        async with self.db.transaction() as session:
            item = await RecurringExpenseRepository(session).update(
                recurring_id, {"is_active": active}
            )
        if item is None:
            raise NotFoundError("NF_007", {"recurring_id": recurring_id})
        return item

    async def delete(self, recurring_id: str) -> None:
        """Delete the schedule. Entries it already generated are kept."""
        async with self.db.transaction() as session:
            if not await RecurringExpenseRepository(session).delete(recurring_id):
                raise NotFoundError("NF_007", {"recurring_id": recurring_id})

    async def process_due(self, now: datetime | None = None) -> int:
        """Book every active item due at or before ``now``.

        Items with ``auto_add`` get a ledger entry dated on their due date.
        Every due item then moves to its next due date, or is deactivated
        once that date is past its end date. An overdue item advances by one
        period per call.

        Returns:
            Number of items processed
        """
        now = now or utcnow()
        async with self.db.session() as session:
            due_ids = [item.id for item in await RecurringExpenseRepository(session).get_due(now)]

        processed = 0
        for recurring_id in due_ids:
            try:
                if await self._process_one(recurring_id, now):
                    processed += 1
            except LedgerError as e:
                logger.warning(
                    "Recurring item not processed",
                    extra={"recurring_id": recurring_id, "error_code": e.error_code},
                )

        if processed:
            logger.info("Processed due recurring items", extra={"processed_count": processed})
        return processed

    async def _process_one(self, recurring_id: str, now: datetime) -> bool:
        scope = self.reconciler.write_scope("process_recurring", recurring_id=recurring_id)
        async with scope as session:
            repo = RecurringExpenseRepository(session)
            item = await repo.get_by_id(recurring_id)
            # Re-check under the write lock; another task may have got here first.
            if item is None or not item.is_active or item.next_due_date > now:
                return False

            if item.auto_add:
                await self.reconciler.create_entry_in(
                    session,
                    {
                        "amount": from_minor(item.amount, self.minor_unit),
                        "type": item.type,
                        "category_id": item.category_id,
                        "account_id": item.account_id,
                        "txn_date": item.next_due_date,
                        "note": f"{item.name} (Recurring)",
                        "recurring_id": item.id,
                    },
                )

            next_due = next_occurrence(item.next_due_date, item.frequency)
            if item.end_date is not None and next_due > item.end_date:
                item.is_active = False
            else:
                item.next_due_date = next_due
            item.last_processed_date = now
            await session.flush()
        return True

    async def due_soon(self, now: datetime | None = None, days: int | None = None) -> list[RecurringExpense]:
        """Active items falling due within ``days`` (reminder window)."""
        now = now or utcnow()
        if days is None:
            days = self.settings.recurring_reminder_days
        async with self.db.session() as session:
            return await RecurringExpenseRepository(session).get_upcoming(
                now, now + timedelta(days=days)
            )
