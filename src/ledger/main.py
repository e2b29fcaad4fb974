"""Application wiring.

``open_ledger`` is the entry point for embedding the engine: it configures
logging, opens the store, creates missing tables, seeds the default
categories and hands back every service bound to one ``Database``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from ledger.config import Settings, settings as default_settings
from ledger.core.logger import setup_logging
from ledger.db.session import Database
from ledger.services.aggregation import AggregationViews
from ledger.services.catalog import CatalogService
from ledger.services.ingestion import IngestionService
from ledger.services.reconciler import BalanceReconciler
from ledger.services.recurring import RecurringService

logger = logging.getLogger(__name__)


class Ledger:
    """All services sharing one database handle."""

    def __init__(self, db: Database, settings: Settings):
        self.db = db
        self.settings = settings
        self.reconciler = BalanceReconciler(db, settings)
        self.views = AggregationViews(db, settings)
        self.catalog = CatalogService(db, settings)
        self.recurring = RecurringService(db, self.reconciler, settings)
        self.ingestion = IngestionService(db, self.reconciler, settings)

    async def start(self) -> None:
        await self.db.create_all()
        await self.catalog.seed_defaults()
        logger.info("Ledger ready", extra={"app_env": self.settings.app_env})

    async def close(self) -> None:
        await self.db.dispose()


async def create_ledger(settings: Settings | None = None, configure_logging: bool = True) -> Ledger:
    settings = settings or default_settings
    if configure_logging:
        setup_logging(settings.log_level, settings.log_file)
    ledger = Ledger(Database.from_settings(settings), settings)
    await ledger.start()
    return ledger


@asynccontextmanager
async def open_ledger(
    settings: Settings | None = None, configure_logging: bool = True
) -> AsyncIterator[Ledger]:
    ledger = await create_ledger(settings, configure_logging)
    try:
        yield ledger
    finally:
        await ledger.close()
