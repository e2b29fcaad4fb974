"""Integration tests for recurring item processing."""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from ledger.core.exceptions import NotFoundError


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class TestProcessDue:
    async def test_auto_add_books_entry_and_advances(self, recurring, views, balance, account_a):
        rent = await recurring.create(
            {
                "name": "Rent",
                "amount": "400",
                "category_id": "bills",
                "account_id": account_a.id,
                "frequency": "MONTHLY",
                "start_date": utc(2026, 1, 31),
                "auto_add": True,
            }
        )

        assert await recurring.process_due(utc(2026, 2, 1)) == 1

        [entry] = await views.entries_for_recurring(rent.id)
        assert entry.note == "Rent (Recurring)"
        assert entry.amount == Decimal("400.00")
        assert entry.txn_date == utc(2026, 1, 31)
        assert await balance(account_a.id) == 60000

        [item] = await recurring.list_active()
        assert item.next_due_date == utc(2026, 2, 28)
        assert item.last_processed_date == utc(2026, 2, 1)

    async def test_not_due_yet(self, recurring):
        await recurring.create({"name": "Gym", "amount": "50", "start_date": utc(2026, 3, 1)})

        assert await recurring.process_due(utc(2026, 2, 27)) == 0

    async def test_reminder_only_items_create_no_entry(self, recurring, views):
        item = await recurring.create(
            {"name": "Insurance", "amount": "900", "frequency": "YEARLY", "start_date": utc(2026, 1, 1)}
        )

        assert await recurring.process_due(utc(2026, 1, 1)) == 1

        assert await views.entries_for_recurring(item.id) == []
        [active] = await recurring.list_active()
        assert active.next_due_date == utc(2027, 1, 1)

    async def test_deactivated_after_end_date(self, recurring):
        await recurring.create(
            {
                "name": "Course",
                "amount": "100",
                "frequency": "WEEKLY",
                "start_date": utc(2026, 1, 1),
                "end_date": utc(2026, 1, 5),
                "auto_add": True,
            }
        )

        assert await recurring.process_due(utc(2026, 1, 2)) == 1
        assert await recurring.list_active() == []

    async def test_overdue_item_advances_one_period_per_call(self, recurring):
        await recurring.create(
            {"name": "Paper", "amount": "5", "frequency": "DAILY", "start_date": utc(2026, 1, 1), "auto_add": True}
        )

        now = utc(2026, 1, 3, 12)
        assert await recurring.process_due(now) == 1
        assert await recurring.process_due(now) == 1
        assert await recurring.process_due(now) == 1
        assert await recurring.process_due(now) == 0

    async def test_failing_item_does_not_block_others(self, recurring, catalog, account_a):
        await recurring.create(
            {
                "name": "Old card fee",
                "amount": "10",
                "account_id": "closed-account",
                "start_date": utc(2026, 1, 1),
                "auto_add": True,
            }
        )
        await recurring.create(
            {"name": "Phone", "amount": "20", "account_id": account_a.id, "start_date": utc(2026, 1, 1), "auto_add": True}
        )

        assert await recurring.process_due(utc(2026, 1, 2)) == 1

    async def test_database_error_on_one_item_does_not_block_others(self, recurring, monkeypatch, account_a):
        broken = await recurring.create(
            {"name": "Broken", "amount": "10", "account_id": account_a.id, "start_date": utc(2026, 1, 1), "auto_add": True}
        )
        await recurring.create(
            {"name": "Phone", "amount": "20", "account_id": account_a.id, "start_date": utc(2026, 1, 1), "auto_add": True}
        )
        create_entry_in = recurring.reconciler.create_entry_in

        async def failing_for_broken(session, data):
            if data["recurring_id"] == broken.id:
                raise OperationalError("INSERT INTO ledger_entries", {}, Exception("disk I/O error"))
            return await create_entry_in(session, data)

        monkeypatch.setattr(recurring.reconciler, "create_entry_in", failing_for_broken)

        assert await recurring.process_due(utc(2026, 1, 2)) == 1
        due = {item.name: item.next_due_date for item in await recurring.list_active()}
        assert due == {"Broken": utc(2026, 1, 1), "Phone": utc(2026, 2, 1)}


class TestDueSoon:
    async def test_window(self, recurring):
        now = utc(2026, 5, 10, 8)
        await recurring.create({"name": "Netflix", "amount": "199", "start_date": now + timedelta(days=1)})
        await recurring.create({"name": "Rent", "amount": "400", "start_date": now + timedelta(days=5)})

        assert [i.name for i in await recurring.due_soon(now)] == ["Netflix"]
        assert [i.name for i in await recurring.due_soon(now, days=7)] == ["Netflix", "Rent"]

    async def test_paused_items_are_not_reminded(self, recurring):
        now = utc(2026, 5, 10)
        item = await recurring.create({"name": "Netflix", "amount": "199", "start_date": now})
        await recurring.set_active(item.id, False)

        assert await recurring.due_soon(now) == []


async def test_delete_missing(recurring):
    with pytest.raises(NotFoundError) as exc_info:
        await recurring.delete("nope")
    assert exc_info.value.error_code == "NF_007"
