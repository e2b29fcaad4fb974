"""Turn inbound bank events into ledger entries.

An event has already been parsed from the SMS (amount, merchant, UPI id,
last digits of the account). Ingestion decides the direction of the money,
which linked account it belongs to and which category it falls in, then
records it through the reconciler.
"""

import logging
from typing import Iterable

from ledger.categorization.categorizer import Categorizer
from ledger.categorization.keywords import KeywordClassifier
from ledger.config import Settings, settings as default_settings
from ledger.db.session import Database
from ledger.models.account import Account
from ledger.models.enums import TransactionType
from ledger.repositories.account import AccountRepository
from ledger.repositories.categorization_rule import CategorizationRuleRepository
from ledger.repositories.category import CategoryRepository
from ledger.schemas.base import parse
from ledger.schemas.events import InboundEvent
from ledger.schemas.ledger import EntryView
from ledger.services.reconciler import BalanceReconciler

logger = logging.getLogger(__name__)

DEBIT_KEYWORDS = (
    "debited", "debit", "spent", "paid", "purchase", "payment",
    "withdrawn", "transfer to", "sent", "deducted", "charged",
)

CREDIT_KEYWORDS = (
    "credited", "credit", "received", "deposited", "refund",
    "transfer from", "cashback", "added",
)

# Minimum score for an automatic account match: the account number alone,
# or sender id plus bank code.
MIN_ACCOUNT_SCORE = 50


def detect_transaction_type(raw_text: str | None) -> TransactionType:
    """Income only when the text has credit wording and no debit wording."""
    lowered = (raw_text or "").lower()
    has_debit = any(word in lowered for word in DEBIT_KEYWORDS)
    has_credit = any(word in lowered for word in CREDIT_KEYWORDS)
    if has_credit and not has_debit:
        return TransactionType.INCOME
    return TransactionType.EXPENSE


def match_account(accounts: Iterable[Account], sender: str, account_hint: str | None) -> Account | None:
    """Best-scoring linked account, or None when nothing scores high enough."""
    best, best_score = None, 0
    for account in accounts:
        score = account.match_score(sender, account_hint)
        if score > best_score:
            best, best_score = account, score
    return best if best_score >= MIN_ACCOUNT_SCORE else None


class IngestionService:
    """Records inbound events as categorized ledger entries."""

    def __init__(
        self,
        db: Database,
        reconciler: BalanceReconciler,
        settings: Settings | None = None,
        keywords: KeywordClassifier | None = None,
    ):
        self.db = db
        self.reconciler = reconciler
        self.settings = settings or default_settings
        self.minor_unit = self.settings.currency_minor_unit
        self.keywords = keywords or KeywordClassifier()

    async def ingest(self, event: InboundEvent | dict) -> EntryView:
        """Categorize an event and record it.

        The rule snapshot is reloaded for every event so rule edits apply
        immediately.
        """
        event = parse(InboundEvent, event, self.minor_unit)
        txn_type = event.transaction_type or detect_transaction_type(event.raw_text)

        async with self.db.session() as session:
            accounts = await AccountRepository(session).get_linked()
            rule_store = await CategorizationRuleRepository(session).load_rule_store()
            account = match_account(accounts, event.sender, event.account_hint)

            category_id = Categorizer(rule_store, self.keywords).categorize(
                merchant_name=event.merchant_name,
                upi_id=event.upi_id,
                sender=event.sender,
                raw_text=event.raw_text,
            )
            if category_id is not None and not await CategoryRepository(session).exists(category_id):
                logger.debug("Detected category is not in the catalog", extra={"category_id": category_id})
                category_id = None

        entry = await self.reconciler.create_entry(
            {
                "amount": event.amount,
                "type": txn_type,
                "category_id": category_id,
                "account_id": account.id if account else None,
                "txn_date": event.timestamp,
                "note": event.merchant_name or event.upi_id or event.sender,
            }
        )
        logger.info(
            "Inbound event recorded",
            extra={
                "entry_id": entry.id,
                "category_id": category_id,
                "account_matched": account is not None,
            },
        )
        return entry
