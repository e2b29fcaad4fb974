"""Ledger entry input and output schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from ledger.core.money import from_minor
from ledger.models.base import utcnow
from ledger.models.enums import TransactionType
from ledger.schemas.base import check_amount


class EntryCreate(BaseModel):
    """New ledger entry. Amount is always positive; the type carries the sign."""

    id: str | None = Field(None, description="Caller-supplied id (generated when omitted)")
    amount: Decimal = Field(..., description="Amount in major units, e.g. 249.50")
    type: TransactionType = TransactionType.EXPENSE
    category_id: str | None = None
    account_id: str | None = None
    txn_date: datetime = Field(default_factory=utcnow)
    note: str | None = None
    recurring_id: str | None = None
    goal_id: str | None = None
    debt_id: str | None = None

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: Decimal, info: ValidationInfo) -> Decimal:
        return check_amount(v, info)


class EntryUpdate(BaseModel):
    """Partial update. Only fields that are explicitly set are applied."""

    amount: Decimal | None = None
    type: TransactionType | None = None
    category_id: str | None = None
    account_id: str | None = None
    txn_date: datetime | None = None
    note: str | None = None
    recurring_id: str | None = None
    goal_id: str | None = None
    debt_id: str | None = None

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: Decimal | None, info: ValidationInfo) -> Decimal | None:
        return check_amount(v, info)


class EntryView(BaseModel):
    """Ledger entry as returned to callers, amounts in major units."""

    id: str
    amount: Decimal
    type: TransactionType
    category_id: str | None
    account_id: str | None
    txn_date: datetime
    note: str | None
    recurring_id: str | None = None
    goal_id: str | None = None
    debt_id: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entry(cls, entry, minor_unit: int | None = None) -> "EntryView":
        view = cls.model_validate(entry)
        return view.model_copy(update={"amount": from_minor(entry.amount, minor_unit)})
