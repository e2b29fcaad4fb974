"""Read-side view models. All amounts are in major units."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from ledger.models.enums import AccountType, Period, TransactionType


class MonthlyTotals(BaseModel):
    year: int
    month: int
    income: Decimal
    expense: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


class CategorySpend(BaseModel):
    category_id: str | None
    category_name: str
    amount: Decimal
    percentage: float = Field(description="Share of the period total, 0-100")


class RecentEntry(BaseModel):
    id: str
    amount: Decimal
    type: TransactionType
    txn_date: datetime
    note: str | None
    category_id: str | None
    category_name: str
    account_id: str | None
    account_name: str


class AccountBalance(BaseModel):
    account_id: str
    name: str
    type: AccountType
    balance: Decimal


class BalanceRepair(BaseModel):
    """Outcome of recomputing an account balance from its entries."""

    account_id: str
    stored: Decimal
    recomputed: Decimal
    correction: Decimal


class BudgetStatus(BaseModel):
    budget_id: str
    category_id: str
    category_name: str
    period: Period
    period_start: datetime
    period_end: datetime
    amount: Decimal
    spent: Decimal
    alert_threshold: float

    @property
    def remaining(self) -> Decimal:
        return self.amount - self.spent

    @property
    def percentage(self) -> float:
        if self.amount <= 0:
            return 0.0
        return float(self.spent / self.amount * 100)

    @property
    def is_over_threshold(self) -> bool:
        return self.spent >= self.amount * Decimal(str(self.alert_threshold))

    @property
    def is_over_budget(self) -> bool:
        return self.spent > self.amount


class GoalProgress(BaseModel):
    goal_id: str
    name: str
    target_amount: Decimal
    saved_amount: Decimal
    target_date: datetime | None = None

    @property
    def remaining(self) -> Decimal:
        return max(self.target_amount - self.saved_amount, Decimal("0"))

    @property
    def percentage(self) -> float:
        return min(float(self.saved_amount / self.target_amount * 100), 100.0)

    @property
    def is_completed(self) -> bool:
        return self.saved_amount >= self.target_amount


class GoalAdjustment(BaseModel):
    """Result of a contribution or withdrawal.

    ``applied`` can be less than ``requested`` for withdrawals: the amount
    taken out is clamped to what the goal holds.
    """

    goal_id: str
    requested: Decimal
    applied: Decimal
    saved_amount: Decimal
    entry_id: str | None = None

    @property
    def clamped(self) -> bool:
        return self.applied < self.requested
