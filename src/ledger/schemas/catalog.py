"""Input schemas for categories, rules, accounts, budgets, goals and recurring items."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from ledger.models.enums import AccountType, CategoryType, Period, TransactionType
from ledger.schemas.base import check_amount, not_blank


class CategoryCreate(BaseModel):
    id: str | None = None
    name: str
    type: CategoryType = CategoryType.EXPENSE
    color: str = "#9CA3AF"
    icon: str = "MoreHoriz"

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return not_blank(v, "name")


class CategoryUpdate(BaseModel):
    name: str | None = None
    color: str | None = None
    icon: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str | None:
        return not_blank(v, "name")


class RuleCreate(BaseModel):
    """Categorization rule. Matching is case-insensitive substring containment."""

    match_text: str
    category_id: str
    priority: int = Field(100, description="Lower values are checked first")

    @field_validator("match_text")
    @classmethod
    def match_text_not_blank(cls, v: str) -> str:
        return not_blank(v, "match_text")


class RuleUpdate(BaseModel):
    match_text: str | None = None
    category_id: str | None = None
    priority: int | None = None

    @field_validator("match_text")
    @classmethod
    def match_text_not_blank(cls, v: str | None) -> str | None:
        return not_blank(v, "match_text")


class AccountCreate(BaseModel):
    """New account. The opening balance may be negative (e.g. a card in debt)."""

    id: str | None = None
    name: str
    type: AccountType = AccountType.BANK
    opening_balance: Decimal = Decimal("0")
    icon: str = "AccountBalance"
    color: str = "#3B82F6"
    is_default: bool = False
    bank_code: str | None = None
    account_number: str | None = Field(None, max_length=8, description="Last digits only")
    linked_sender_ids: list[str] = Field(default_factory=list)
    is_linked: bool = False

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return not_blank(v, "name")


class AccountUpdate(BaseModel):
    """Account edits. The balance is never set directly."""

    name: str | None = None
    type: AccountType | None = None
    icon: str | None = None
    color: str | None = None
    is_default: bool | None = None
    bank_code: str | None = None
    account_number: str | None = Field(None, max_length=8)
    linked_sender_ids: list[str] | None = None
    is_linked: bool | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str | None:
        return not_blank(v, "name")


class BudgetCreate(BaseModel):
    category_id: str
    amount: Decimal
    period: Period = Period.MONTHLY
    alert_threshold: float | None = Field(None, ge=0.0, le=1.0)

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: Decimal, info: ValidationInfo) -> Decimal:
        return check_amount(v, info)


class BudgetUpdate(BaseModel):
    amount: Decimal | None = None
    period: Period | None = None
    alert_threshold: float | None = Field(None, ge=0.0, le=1.0)
    is_active: bool | None = None

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: Decimal | None, info: ValidationInfo) -> Decimal | None:
        return check_amount(v, info)


class GoalCreate(BaseModel):
    id: str | None = None
    name: str
    target_amount: Decimal
    icon: str = "Savings"
    color: str = "#22C55E"
    target_date: datetime | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return not_blank(v, "name")

    @field_validator("target_amount")
    @classmethod
    def target_positive(cls, v: Decimal, info: ValidationInfo) -> Decimal:
        return check_amount(v, info)


class GoalUpdate(BaseModel):
    """Goal edits. saved_amount moves only through contribute/withdraw."""

    name: str | None = None
    target_amount: Decimal | None = None
    icon: str | None = None
    color: str | None = None
    target_date: datetime | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str | None:
        return not_blank(v, "name")

    @field_validator("target_amount")
    @classmethod
    def target_positive(cls, v: Decimal | None, info: ValidationInfo) -> Decimal | None:
        return check_amount(v, info)


class RecurringCreate(BaseModel):
    name: str
    amount: Decimal
    type: TransactionType = TransactionType.EXPENSE
    category_id: str | None = None
    account_id: str | None = None
    frequency: Period = Period.MONTHLY
    start_date: datetime
    end_date: datetime | None = None
    note: str | None = None
    auto_add: bool = False
    reminder_days_before: int = Field(1, ge=0)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return not_blank(v, "name")

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: Decimal, info: ValidationInfo) -> Decimal:
        return check_amount(v, info)
