"""Ledger entry model: a single recorded money movement."""
from datetime import datetime

from sqlalchemy import BigInteger, Enum, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ledger.models.base import BaseModel, UTCDateTime
from ledger.models.enums import TransactionType


class LedgerEntry(BaseModel):
    """Expense or income entry.

    ``category_id`` and ``account_id`` are soft references: the referenced row
    may be deleted later without touching history. An entry without an
    account affects no balance. Entries are only mutated through the
    reconciler, which applies each entry's balance effect exactly once.
    """

    __tablename__ = "transactions"

    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    type: Mapped[TransactionType] = mapped_column(
        Enum(TransactionType, native_enum=False, length=16), nullable=False
    )
    category_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    account_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    txn_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    recurring_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    goal_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    debt_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)

    __table_args__ = (
        Index("ix_transactions_txn_date", "txn_date"),
        Index("ix_transactions_type_txn_date", "type", "txn_date"),
    )

    @property
    def signed_amount(self) -> int:
        """Balance delta this entry contributes: +amount income, -amount expense."""
        return self.amount if self.type == TransactionType.INCOME else -self.amount

    @property
    def goal_amount(self) -> int:
        """Saved-amount delta for a goal-linked entry (0 when not linked).

        Money leaving an account into a goal is an expense; taking it back
        out of the goal is income.
        """
        if not self.goal_id:
            return 0
        return self.amount if self.type == TransactionType.EXPENSE else -self.amount

    def __repr__(self) -> str:
        return f"<LedgerEntry(id={self.id}, type={self.type}, amount={self.amount})>"
