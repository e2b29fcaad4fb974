"""Resolve a category for an incoming transaction.

Priority:
1. User-defined rules, checked against UPI id (most specific), then merchant
   name, then sender (least specific, e.g. a bank shortcode)
2. Built-in keyword table on the merchant name, or the sender if there is
   no merchant name

No match is a normal outcome and yields None.
"""

from __future__ import annotations

import logging

from ledger.categorization.keywords import KeywordClassifier
from ledger.categorization.rules import RuleStore

logger = logging.getLogger(__name__)


def _present(text: str | None) -> str | None:
    if text is None or not text.strip():
        return None
    return text


class Categorizer:
    """Rule cascade over a RuleStore snapshot and a KeywordClassifier."""

    def __init__(self, rule_store: RuleStore | None = None, keywords: KeywordClassifier | None = None):
        self.rule_store = rule_store or RuleStore()
        self.keywords = keywords or KeywordClassifier()

    def categorize(
        self,
        merchant_name: str | None = None,
        upi_id: str | None = None,
        sender: str | None = None,
        raw_text: str | None = None,
    ) -> str | None:
        """Return a category id for the transaction, or None.

        Args:
            merchant_name: Merchant string parsed from the message
            upi_id: UPI handle (e.g. "swiggy@icici")
            sender: SMS sender id / bank shortcode
            raw_text: Full message body. Not used for matching; accepted so
                callers can pass the whole event through.
        """
        merchant_name = _present(merchant_name)
        upi_id = _present(upi_id)
        sender = _present(sender)

        for text in (upi_id, merchant_name, sender):
            if text is None:
                continue
            rule = self.rule_store.find_rule_for_text(text)
            if rule is not None:
                logger.debug(
                    "Matched categorization rule",
                    extra={"rule_id": rule.id, "category_id": rule.category_id},
                )
                return rule.category_id

        fallback_text = merchant_name or sender
        if fallback_text is None:
            return None
        return self.keywords.classify(fallback_text)
