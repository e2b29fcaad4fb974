"""Integration tests for the database scopes."""
from ledger.repositories.account import AccountRepository
from ledger.repositories.ledger_entry import LedgerEntryRepository


async def test_rows_stay_readable_after_read_scope(database, reconciler, account_a):
    entry = await reconciler.create_entry({"amount": "25", "account_id": account_a.id, "note": "tea"})

    async with database.session() as session:
        account = await AccountRepository(session).get_by_id(account_a.id)
        [loaded] = await LedgerEntryRepository(session).get_for_account(account_a.id)

    assert account.name == "HDFC Savings"
    assert account.balance == 97500
    assert loaded.id == entry.id
    assert loaded.note == "tea"


async def test_read_scope_commits_nothing(database, account_a):
    async with database.session() as session:
        await AccountRepository(session).apply_delta(account_a.id, 500)

    async with database.session() as session:
        assert await AccountRepository(session).get_balance(account_a.id) == 100000
