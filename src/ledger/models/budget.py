"""Budget model: a spending limit for a category over a period."""
from sqlalchemy import BigInteger, Boolean, Enum, Float, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger.models.base import BaseModel
from ledger.models.enums import Period


class Budget(BaseModel):
    """Category budget. Spent and percentage are computed on read, never stored."""

    __tablename__ = "budgets"

    category_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    period: Mapped[Period] = mapped_column(
        Enum(Period, native_enum=False, length=16), nullable=False, default=Period.MONTHLY
    )
    alert_threshold: Mapped[float] = mapped_column(Float, nullable=False, default=0.8)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Budget(id={self.id}, category_id={self.category_id}, amount={self.amount})>"
