"""Recurring expense/income template (rent, subscriptions, salary)."""
from datetime import datetime

from sqlalchemy import BigInteger, Boolean, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ledger.models.base import BaseModel, UTCDateTime
from ledger.models.enums import Period, TransactionType


class RecurringExpense(BaseModel):
    """Schedule that produces ledger entries when due."""

    __tablename__ = "recurring_expenses"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    type: Mapped[TransactionType] = mapped_column(
        Enum(TransactionType, native_enum=False, length=16), nullable=False
    )
    category_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    account_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    frequency: Mapped[Period] = mapped_column(
        Enum(Period, native_enum=False, length=16), nullable=False
    )
    start_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    next_due_date: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, index=True
    )
    last_processed_date: Mapped[datetime | None] = mapped_column(
        UTCDateTime, nullable=True
    )
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    auto_add: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    reminder_days_before: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    def __repr__(self) -> str:
        return f"<RecurringExpense(id={self.id}, name={self.name}, next_due={self.next_due_date})>"
