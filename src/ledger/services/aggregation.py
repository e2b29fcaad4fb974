"""Read-side aggregates: totals, category breakdowns, budgets and goals.

Everything is recomputed from the ledger on every call; nothing here is
cached or written. Entries pointing at deleted categories or accounts are
reported under placeholder labels rather than dropped.
"""

import logging
from datetime import datetime
from decimal import Decimal

from ledger.config import Settings, settings as default_settings
from ledger.core.defaults import ADJUSTMENT_CATEGORY_ID
from ledger.core.money import from_minor
from ledger.db.session import Database
from ledger.models.base import utcnow
from ledger.models.enums import Period, TransactionType
from ledger.repositories.account import AccountRepository
from ledger.repositories.budget import BudgetRepository
from ledger.repositories.category import CategoryRepository
from ledger.repositories.ledger_entry import LedgerEntryRepository
from ledger.repositories.savings_goal import SavingsGoalRepository
from ledger.schemas.ledger import EntryView
from ledger.schemas.views import (
    AccountBalance,
    BudgetStatus,
    CategorySpend,
    GoalProgress,
    MonthlyTotals,
    RecentEntry,
)
from ledger.services.periods import month_range, period_range

logger = logging.getLogger(__name__)


class AggregationViews:
    """Query service for dashboards, notifications and exports."""

    def __init__(self, db: Database, settings: Settings | None = None):
        self.db = db
        self.settings = settings or default_settings
        self.minor_unit = self.settings.currency_minor_unit

    async def monthly_totals(self, year: int, month: int) -> MonthlyTotals:
        """Income and expense for a calendar month.

        Balance adjustments are booked as income in the ``adjustment``
        category and are left out of the income total.
        """
        start, end = month_range(year, month)
        async with self.db.session() as session:
            entries = LedgerEntryRepository(session)
            income = await entries.total_by_type(
                TransactionType.INCOME, start, end, exclude_category_ids=[ADJUSTMENT_CATEGORY_ID]
            )
            expense = await entries.total_by_type(TransactionType.EXPENSE, start, end)
        return MonthlyTotals(
            year=year,
            month=month,
            income=from_minor(income, self.minor_unit),
            expense=from_minor(expense, self.minor_unit),
        )

    async def today_spend(self, today: datetime | None = None) -> Decimal:
        start, end = period_range(Period.DAILY, today or utcnow())
        async with self.db.session() as session:
            total = await LedgerEntryRepository(session).total_by_type(
                TransactionType.EXPENSE, start, end
            )
        return from_minor(total, self.minor_unit)

    async def category_spend(
        self,
        start: datetime,
        end: datetime,
        type: TransactionType = TransactionType.EXPENSE,
    ) -> list[CategorySpend]:
        """Totals per category in ``[start, end)``, largest first."""
        async with self.db.session() as session:
            rows = await LedgerEntryRepository(session).spend_by_category(start, end, type)

        grand_total = sum(total for _, _, total in rows)
        return [
            CategorySpend(
                category_id=category_id,
                category_name=name or self.settings.uncategorized_label,
                amount=from_minor(total, self.minor_unit),
                percentage=(total / grand_total * 100) if grand_total else 0.0,
            )
            for category_id, name, total in rows
        ]

    async def recent_entries(self, limit: int = 10) -> list[RecentEntry]:
        async with self.db.session() as session:
            rows = await LedgerEntryRepository(session).get_recent_with_labels(limit)
        return [
            RecentEntry(
                id=entry.id,
                amount=from_minor(entry.amount, self.minor_unit),
                type=entry.type,
                txn_date=entry.txn_date,
                note=entry.note,
                category_id=entry.category_id,
                category_name=category_name or self.settings.uncategorized_label,
                account_id=entry.account_id,
                account_name=account_name or self.settings.unknown_label,
            )
            for entry, category_name, account_name in rows
        ]

    async def entries_for_account(self, account_id: str) -> list[EntryView]:
        async with self.db.session() as session:
            entries = await LedgerEntryRepository(session).get_for_account(account_id)
        return [EntryView.from_entry(e, self.minor_unit) for e in entries]

    async def entries_for_category(self, category_id: str) -> list[EntryView]:
        async with self.db.session() as session:
            entries = await LedgerEntryRepository(session).get_for_category(category_id)
        return [EntryView.from_entry(e, self.minor_unit) for e in entries]

    async def entries_for_goal(self, goal_id: str) -> list[EntryView]:
        async with self.db.session() as session:
            entries = await LedgerEntryRepository(session).get_for_goal(goal_id)
        return [EntryView.from_entry(e, self.minor_unit) for e in entries]

    async def entries_for_recurring(self, recurring_id: str) -> list[EntryView]:
        async with self.db.session() as session:
            entries = await LedgerEntryRepository(session).get_for_recurring(recurring_id)
        return [EntryView.from_entry(e, self.minor_unit) for e in entries]

    async def entries_between(self, start: datetime, end: datetime) -> list[EntryView]:
        """Entries in ``[start, end)``, newest first (export collaborator)."""
        async with self.db.session() as session:
            entries = await LedgerEntryRepository(session).get_in_range(start, end)
        return [EntryView.from_entry(e, self.minor_unit) for e in entries]

    async def total_balance(self) -> Decimal:
        async with self.db.session() as session:
            total = await AccountRepository(session).get_total_balance()
        return from_minor(total, self.minor_unit)

    async def account_balances(self) -> list[AccountBalance]:
        async with self.db.session() as session:
            accounts = await AccountRepository(session).get_all_ordered()
        return [
            AccountBalance(
                account_id=a.id,
                name=a.name,
                type=a.type,
                balance=from_minor(a.balance, self.minor_unit),
            )
            for a in accounts
        ]

    async def budgets_with_spending(self, today: datetime | None = None) -> list[BudgetStatus]:
        """Active budgets with what has been spent in their current window."""
        today = today or utcnow()
        statuses = []
        async with self.db.session() as session:
            names = await CategoryRepository(session).get_name_map()
            entries = LedgerEntryRepository(session)
            for budget in await BudgetRepository(session).get_active():
                start, end = period_range(budget.period, today)
                spent = await entries.total_for_category(budget.category_id, start, end)
                statuses.append(
                    BudgetStatus(
                        budget_id=budget.id,
                        category_id=budget.category_id,
                        category_name=names.get(
                            budget.category_id, self.settings.uncategorized_label
                        ),
                        period=budget.period,
                        period_start=start,
                        period_end=end,
                        amount=from_minor(budget.amount, self.minor_unit),
                        spent=from_minor(spent, self.minor_unit),
                        alert_threshold=budget.alert_threshold,
                    )
                )
        return statuses

    async def budgets_over_threshold(self, today: datetime | None = None) -> list[BudgetStatus]:
        """Budgets whose spending has reached their alert threshold."""
        over = [b for b in await self.budgets_with_spending(today) if b.is_over_threshold]
        if over:
            logger.info("Budgets over alert threshold", extra={"budgets_count": len(over)})
        return over

    async def goal_progress(self) -> list[GoalProgress]:
        async with self.db.session() as session:
            goals = await SavingsGoalRepository(session).get_all_ordered()
        return [
            GoalProgress(
                goal_id=g.id,
                name=g.name,
                target_amount=from_minor(g.target_amount, self.minor_unit),
                saved_amount=from_minor(g.saved_amount, self.minor_unit),
                target_date=g.target_date,
            )
            for g in goals
        ]

