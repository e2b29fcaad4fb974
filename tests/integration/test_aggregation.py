"""Integration tests for read-side aggregates."""
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from ledger.services.aggregation import AggregationViews

OCT_15 = datetime(2026, 10, 15, 12, 0, tzinfo=timezone.utc)


def in_october(day: int, hour: int = 10) -> datetime:
    return datetime(2026, 10, day, hour, tzinfo=timezone.utc)


@pytest.fixture
async def october(reconciler, account_a):
    """A small month of activity on one account."""
    entries = [
        {"amount": "50000", "type": "INCOME", "category_id": "salary", "txn_date": in_october(1)},
        {"amount": "750", "type": "INCOME", "category_id": "adjustment", "txn_date": in_october(2)},
        {"amount": "300", "category_id": "food", "txn_date": in_october(3)},
        {"amount": "700", "category_id": "food", "txn_date": in_october(15, 9)},
        {"amount": "1000", "category_id": "bills", "txn_date": in_october(15, 11)},
        {"amount": "999", "category_id": "food", "txn_date": datetime(2026, 9, 30, 23, tzinfo=timezone.utc)},
    ]
    for data in entries:
        await reconciler.create_entry({**data, "account_id": account_a.id})


class TestTotals:
    async def test_monthly_totals_exclude_adjustments(self, views: AggregationViews, october):
        totals = await views.monthly_totals(2026, 10)

        assert totals.income == Decimal("50000.00")
        assert totals.expense == Decimal("2000.00")
        assert totals.net == Decimal("48000.00")

    async def test_today_spend(self, views, october):
        assert await views.today_spend(OCT_15) == Decimal("1700.00")

    async def test_empty_month(self, views):
        totals = await views.monthly_totals(2025, 2)
        assert totals.income == Decimal("0") and totals.expense == Decimal("0")

    async def test_total_balance(self, views, october, account_b):
        # 1000 + 50000 + 750 - 2000 - 999 on A, 1000 on B
        assert await views.total_balance() == Decimal("49751.00")

    async def test_account_balances(self, views, october, account_b):
        balances = {b.account_id: b.balance for b in await views.account_balances()}
        assert balances == {"acct-a": Decimal("48751.00"), "acct-b": Decimal("1000.00")}


class TestCategorySpend:
    async def test_breakdown_largest_first(self, views, october):
        spend = await views.category_spend(in_october(1, 0), in_october(31, 23))

        assert {(s.category_id, s.amount) for s in spend} == {
            ("bills", Decimal("1000.00")),
            ("food", Decimal("1000.00")),
        }
        assert sum(s.percentage for s in spend) == pytest.approx(100.0)
        assert {s.category_name for s in spend} == {"Food & Dining", "Bills & Utilities"}

    async def test_orphaned_category_label(self, views, reconciler, catalog):
        await catalog.create_category({"id": "pets", "name": "Pets"})
        await reconciler.create_entry({"amount": "40", "category_id": "pets", "txn_date": in_october(5)})
        await reconciler.create_entry({"amount": "60", "txn_date": in_october(5)})
        await catalog.delete_category("pets")

        spend = await views.category_spend(in_october(1, 0), in_october(31, 23))

        labels = {s.category_id: s.category_name for s in spend}
        assert labels == {"pets": "Uncategorized", None: "Uncategorized"}


class TestRecentEntries:
    async def test_labels_and_order(self, views, october):
        recent = await views.recent_entries(limit=3)

        assert [r.amount for r in recent] == [
            Decimal("1000.00"),
            Decimal("700.00"),
            Decimal("300.00"),
        ]
        assert recent[0].category_name == "Bills & Utilities"
        assert recent[0].account_name == "HDFC Savings"

    async def test_deleted_account_shows_unknown(self, views, reconciler, catalog, account_b):
        await reconciler.create_entry({"amount": "10", "account_id": account_b.id, "category_id": "food"})
        await catalog.delete_account(account_b.id)

        [recent] = await views.recent_entries()

        assert recent.account_id == "acct-b"
        assert recent.account_name == "Unknown"
        assert recent.category_name == "Food & Dining"


class TestListings:
    async def test_entries_for_account_and_category(self, views, october):
        assert len(await views.entries_for_account("acct-a")) == 6
        food = await views.entries_for_category("food")
        assert [e.amount for e in food] == [Decimal("700.00"), Decimal("300.00"), Decimal("999.00")]

    async def test_entries_for_goal(self, views, reconciler, account_a, goal):
        await reconciler.contribute(goal.id, "100", account_id=account_a.id)

        [entry] = await views.entries_for_goal(goal.id)

        assert entry.category_id == "goals"
        assert entry.note == "Contribution to Goa trip"

    async def test_entries_between_is_half_open(self, views, october):
        entries = await views.entries_between(in_october(1, 10), in_october(3, 10))
        assert [e.amount for e in entries] == [Decimal("750.00"), Decimal("50000.00")]


class TestBudgets:
    async def test_budget_spending_and_threshold(self, views, catalog, october):
        await catalog.create_budget({"category_id": "food", "amount": "1200"})
        await catalog.create_budget({"category_id": "bills", "amount": "5000", "alert_threshold": 0.5})

        statuses = {s.category_id: s for s in await views.budgets_with_spending(OCT_15)}

        food = statuses["food"]
        assert food.spent == Decimal("1000.00")
        assert food.remaining == Decimal("200.00")
        assert food.alert_threshold == 0.8
        assert food.is_over_threshold and not food.is_over_budget
        assert statuses["bills"].percentage == pytest.approx(20.0)

        over = await views.budgets_over_threshold(OCT_15)
        assert [b.category_id for b in over] == ["food"]

    async def test_daily_budget_window(self, views, catalog, october):
        await catalog.create_budget({"category_id": "food", "amount": "500", "period": "DAILY"})

        [status] = await views.budgets_with_spending(OCT_15)

        assert status.spent == Decimal("700.00")
        assert status.is_over_budget

    async def test_inactive_budgets_ignored(self, views, catalog):
        budget = await catalog.create_budget({"category_id": "food", "amount": "500"})
        await catalog.update_budget(budget.id, {"is_active": False})

        assert await views.budgets_with_spending(OCT_15) == []


class TestGoalProgress:
    async def test_progress(self, views, reconciler, goal):
        await reconciler.contribute(goal.id, "1250")

        [progress] = await views.goal_progress()

        assert progress.saved_amount == Decimal("1250.00")
        assert progress.remaining == Decimal("3750.00")
        assert progress.percentage == pytest.approx(25.0)
        assert not progress.is_completed

    async def test_completed_when_target_reached(self, views, reconciler, goal):
        await reconciler.contribute(goal.id, "5000")

        [progress] = await views.goal_progress()

        assert progress.is_completed
        assert progress.remaining == Decimal("0")
