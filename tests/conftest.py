import pytest

from ledger.config import get_settings
from ledger.db.session import Database
from ledger.services.aggregation import AggregationViews
from ledger.services.catalog import CatalogService
from ledger.services.ingestion import IngestionService
from ledger.services.reconciler import BalanceReconciler
from ledger.services.recurring import RecurringService


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite file.

    A file (not ``:memory:``) so every pooled connection sees the same data.
    """
    return get_settings(
        app_env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}",
    )


@pytest.fixture
async def database(settings):
    db = Database.from_settings(settings)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def catalog(database, settings) -> CatalogService:
    service = CatalogService(database, settings)
    await service.seed_defaults()
    return service


@pytest.fixture
def reconciler(database, settings) -> BalanceReconciler:
    return BalanceReconciler(database, settings)


@pytest.fixture
def views(database, settings) -> AggregationViews:
    return AggregationViews(database, settings)


@pytest.fixture
def recurring(database, reconciler, settings) -> RecurringService:
    return RecurringService(database, reconciler, settings)


@pytest.fixture
def ingestion(database, reconciler, settings) -> IngestionService:
    return IngestionService(database, reconciler, settings)


@pytest.fixture
async def account_a(catalog):
    return await catalog.create_account(
        {"id": "acct-a", "name": "HDFC Savings", "type": "BANK", "opening_balance": "1000"}
    )


@pytest.fixture
async def account_b(catalog):
    return await catalog.create_account(
        {"id": "acct-b", "name": "Wallet", "type": "WALLET", "opening_balance": "1000"}
    )


@pytest.fixture
async def goal(catalog):
    return await catalog.create_goal({"id": "goal-trip", "name": "Goa trip", "target_amount": "5000"})


@pytest.fixture
def balance(catalog):
    """Stored balance of an account, in minor units."""

    async def _balance(account_id: str) -> int:
        return (await catalog.get_account(account_id)).balance

    return _balance
