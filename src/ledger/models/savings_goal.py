"""Savings goal model (vacation, emergency fund, gadget, ...)."""
from datetime import datetime

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger.models.base import BaseModel, UTCDateTime


class SavingsGoal(BaseModel):
    """Savings goal. ``saved_amount`` never goes below zero."""

    __tablename__ = "savings_goals"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    target_amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    saved_amount: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    icon: Mapped[str] = mapped_column(String(64), nullable=False, default="Savings")
    color: Mapped[str] = mapped_column(String(16), nullable=False, default="#22C55E")
    target_date: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    @property
    def is_completed(self) -> bool:
        return self.saved_amount >= self.target_amount

    @property
    def remaining(self) -> int:
        return max(self.target_amount - self.saved_amount, 0)

    def __repr__(self) -> str:
        return (
            f"<SavingsGoal(id={self.id}, name={self.name}, "
            f"saved={self.saved_amount}/{self.target_amount})>"
        )
