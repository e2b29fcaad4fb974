import logging

from ledger.main import open_ledger


async def test_open_ledger_wires_everything(settings):
    async with open_ledger(settings, configure_logging=False) as ledger:
        categories = await ledger.catalog.list_categories()
        account = await ledger.catalog.create_account({"name": "Cash", "type": "CASH", "opening_balance": "100"})
        await ledger.ingestion.ingest({"sender": "PAYTM", "merchant_name": "Cafe", "amount": "40"})
        await ledger.reconciler.create_entry({"amount": "40", "account_id": account.id, "category_id": "food"})

        assert len(categories) == 19
        assert await ledger.views.total_balance() == 60


async def test_reopening_keeps_data(settings):
    async with open_ledger(settings, configure_logging=False) as ledger:
        await ledger.catalog.create_goal({"name": "Bike", "target_amount": "90000"})

    async with open_ledger(settings, configure_logging=False) as ledger:
        assert [g.name for g in await ledger.catalog.list_goals()] == ["Bike"]
        assert len(await ledger.catalog.list_categories()) == 19


async def test_logging_is_configured(settings, tmp_path):
    log_file = tmp_path / "logs" / "ledger.log"
    configured = settings.model_copy(update={"log_file": str(log_file), "log_level": "DEBUG"})

    async with open_ledger(configured):
        pass

    logger = logging.getLogger("ledger")
    assert logger.level == logging.DEBUG
    assert "Ledger ready" in log_file.read_text()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
