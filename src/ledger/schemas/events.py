"""Inbound transaction events (already parsed from SMS/notifications)."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from ledger.models.base import utcnow
from ledger.models.enums import TransactionType
from ledger.schemas.base import check_amount


class InboundEvent(BaseModel):
    """A bank message reduced to the fields the ledger needs.

    ``transaction_type`` is derived from ``raw_text`` when omitted.
    ``account_hint`` is the last digits of the account/card quoted in the
    message, used to pick a linked account.
    """

    sender: str = Field(..., description="SMS sender id, e.g. 'VM-HDFCBK'")
    raw_text: str = ""
    merchant_name: str | None = None
    upi_id: str | None = None
    amount: Decimal
    timestamp: datetime = Field(default_factory=utcnow)
    transaction_type: TransactionType | None = None
    account_hint: str | None = None

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: Decimal, info: ValidationInfo) -> Decimal:
        return check_amount(v, info)
